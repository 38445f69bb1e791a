"""Runs kubectl and the Dex browser login side by side."""

from __future__ import annotations

import asyncio
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from playwright.async_api import Browser

from .config import AcceptanceConfig
from .kubectl import ProcessGroupSupervisor
from .web_client import log_in_to_dex

logger = logging.getLogger(__name__)


@dataclass
class LoginFlowResult:
    body: str
    returncode: int
    signal_errors: list[OSError] = field(default_factory=list)


def reset_token_cache(path: Path) -> None:
    """Remove the credential plugin's token cache so the next run has to log in."""
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        return
    logger.info("removed token cache %s", path)


async def run_login_flow(
    config: AcceptanceConfig, browser: Browser, name: str = "dex"
) -> LoginFlowResult:
    """Run kubectl and the browser login concurrently.

    The first task to fail cancels the other; its exception is raised as is.
    """
    supervisor = ProcessGroupSupervisor(config)
    try:
        async with asyncio.TaskGroup() as tg:
            kubectl = tg.create_task(supervisor.run(), name="kubectl")
            login = tg.create_task(log_in_to_dex(browser, config, name=name), name="browser")
    except ExceptionGroup as eg:
        raise eg.exceptions[0]
    return LoginFlowResult(
        body=login.result(),
        returncode=kubectl.result(),
        signal_errors=supervisor.signal_errors,
    )
