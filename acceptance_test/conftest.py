"""Root conftest.py - session-scoped fixtures."""

import pytest

from helpers.config import AcceptanceConfig


@pytest.fixture(scope="session")
def config() -> AcceptanceConfig:
    return AcceptanceConfig.from_env()
