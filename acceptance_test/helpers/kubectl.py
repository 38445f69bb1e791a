"""Runs kubectl in its own process group and tears the whole group down.

The OIDC credential plugin is spawned by kubectl as a child process and keeps
a local HTTP server open until the browser finishes the login. Terminating
only kubectl would leave the plugin behind, so kubectl is started as a
session leader and every exit path signals the group rather than the pid.
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal

from .config import AcceptanceConfig

logger = logging.getLogger(__name__)


class KubectlError(Exception):
    """kubectl could not be started or exited non-zero."""

    def __init__(self, message: str, returncode: int | None = None):
        super().__init__(message)
        self.returncode = returncode


class KubectlTimeoutError(KubectlError):
    """kubectl did not finish within its time budget."""


class ProcessGroupSupervisor:
    """Supervises a single kubectl run.

    ``signals_sent`` counts termination attempts and ``signal_errors`` keeps
    any failure to deliver them, so the caller can fail the test without the
    cleanup itself raising.
    """

    def __init__(self, config: AcceptanceConfig):
        self._command = list(config.kubectl_command)
        self._env = {**os.environ, **config.extra_env, "KUBECONFIG": config.kubeconfig}
        self._cwd = config.workdir
        self._timeout = config.kubectl_timeout
        self._kill_grace = config.kill_grace
        self._process: asyncio.subprocess.Process | None = None
        self.signals_sent = 0
        self.signal_errors: list[OSError] = []

    @property
    def pid(self) -> int | None:
        return self._process.pid if self._process else None

    @property
    def returncode(self) -> int | None:
        return self._process.returncode if self._process else None

    async def run(self) -> int:
        """Run the command to completion and return its exit code (always 0)."""
        logger.info("running %s", " ".join(self._command))
        try:
            self._process = await asyncio.create_subprocess_exec(
                *self._command,
                env=self._env,
                cwd=self._cwd,
                start_new_session=True,
            )
        except OSError as e:
            raise KubectlError(f"could not run a command: {e}") from e

        try:
            async with asyncio.timeout(self._timeout):
                returncode = await self._process.wait()
        except TimeoutError:
            raise KubectlTimeoutError(
                f"could not run a command: {self._command[0]} did not finish "
                f"within {self._timeout}s"
            ) from None
        finally:
            await self._terminate_group()

        if returncode != 0:
            raise KubectlError(
                f"could not run a command: exit status {returncode}",
                returncode=returncode,
            )
        return returncode

    async def _terminate_group(self) -> None:
        process = self._process
        if process.returncode is not None:
            logger.info("process terminated with exit code %d", process.returncode)
            return

        # session leader: pgid == pid
        logger.info("sending SIGTERM to process group %d", process.pid)
        self.signals_sent += 1
        try:
            os.killpg(process.pid, signal.SIGTERM)
        except OSError as e:
            logger.error("could not send a signal: %s", e)
            self.signal_errors.append(e)
            return

        try:
            await asyncio.wait_for(process.wait(), self._kill_grace)
        except TimeoutError:
            logger.error(
                "process group %d did not exit within %ss of SIGTERM",
                process.pid,
                self._kill_grace,
            )
        else:
            logger.info("process terminated with exit code %d", process.returncode)
