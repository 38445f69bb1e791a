"""Acceptance test configuration from environment variables."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from . import constants

ACCEPTANCE_DIR = Path(__file__).resolve().parent.parent


@dataclass
class AcceptanceConfig:
    kubectl_command: list[str]
    kubeconfig_paths: list[str]
    login_url: str
    workdir: Path = ACCEPTANCE_DIR
    token_cache_dir: str = constants.TOKEN_CACHE_DIR
    username: str = constants.DEX_USERNAME
    password: str = constants.DEX_PASSWORD
    kubectl_timeout: float = constants.KUBECTL_TIMEOUT
    browser_timeout: float = constants.BROWSER_TIMEOUT
    settle_delay: float = constants.BROWSER_SETTLE_DELAY
    kill_grace: float = constants.KILL_GRACE
    headless: bool = True
    screenshot_dir: Path | None = None
    extra_env: dict[str, str] = field(default_factory=dict)

    @property
    def kubeconfig(self) -> str:
        """Value of KUBECONFIG passed to kubectl."""
        return os.pathsep.join(self.kubeconfig_paths)

    @property
    def token_cache_path(self) -> Path:
        return self.workdir / self.token_cache_dir

    @property
    def cluster_kubeconfig_present(self) -> bool:
        """True when every kubeconfig file exists (the cluster one is generated by setup)."""
        return all((self.workdir / p).exists() for p in self.kubeconfig_paths)

    @classmethod
    def from_env(cls) -> "AcceptanceConfig":
        kubectl = os.environ.get("KUBECTL", constants.KUBECTL)
        kubeconfig_str = os.environ.get(
            "KUBECONFIG_PATHS", os.pathsep.join(constants.KUBECONFIG_PATHS)
        )
        kubeconfig_paths = [
            p.strip() for p in kubeconfig_str.split(os.pathsep) if p.strip()
        ]
        screenshot_dir = os.environ.get("SCREENSHOT_DIR")
        return cls(
            kubectl_command=[kubectl, *constants.KUBECTL_ARGS],
            kubeconfig_paths=kubeconfig_paths,
            login_url=os.environ.get("LOGIN_URL", constants.LOGIN_URL),
            username=os.environ.get("DEX_USERNAME", constants.DEX_USERNAME),
            password=os.environ.get("DEX_PASSWORD", constants.DEX_PASSWORD),
            kubectl_timeout=float(
                os.environ.get("KUBECTL_TIMEOUT", constants.KUBECTL_TIMEOUT)
            ),
            browser_timeout=float(
                os.environ.get("BROWSER_TIMEOUT", constants.BROWSER_TIMEOUT)
            ),
            settle_delay=float(
                os.environ.get("BROWSER_SETTLE_DELAY", constants.BROWSER_SETTLE_DELAY)
            ),
            kill_grace=float(os.environ.get("KILL_GRACE", constants.KILL_GRACE)),
            headless=os.environ.get("HEADLESS", "1").lower() not in ("0", "false", "no"),
            screenshot_dir=Path(screenshot_dir) if screenshot_dir else None,
        )
