"""Test-level fixtures for the browser, the mock Dex server and local processes."""

import dataclasses
import re
import threading

import pytest
import pytest_asyncio
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright
from werkzeug.serving import make_server

from helpers.config import AcceptanceConfig


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Attach the failure screenshot taken by the login flow to the HTML report."""
    outcome = yield
    rep = outcome.get_result()

    if rep.when == "call" and rep.failed:
        screenshot_dir = AcceptanceConfig.from_env().screenshot_dir
        if screenshot_dir is None:
            return
        name = re.sub(r"[^A-Za-z0-9_.-]", "_", item.name)
        screenshot = screenshot_dir / f"{name}.png"
        if screenshot.exists():
            html_plugin = item.config.pluginmanager.getplugin("html")
            if html_plugin:
                extra = getattr(rep, "extra", [])
                extra.append(html_plugin.extras.image(str(screenshot)))
                rep.extra = extra


@pytest_asyncio.fixture
async def browser(config: AcceptanceConfig):
    """Headless Chromium, one per test so it lives on the test's event loop."""
    async with async_playwright() as p:
        try:
            browser = await p.chromium.launch(headless=config.headless)
        except PlaywrightError as e:
            pytest.skip(f"chromium is not available: {e}")
        yield browser
        await browser.close()


@pytest.fixture(scope="session")
def mock_dex_url():
    """Mock Dex login pages served from a background thread."""
    from mock_dex.server import app

    server = make_server("127.0.0.1", 0, app, threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_port}"
    server.shutdown()
    thread.join(timeout=5)


@pytest.fixture
def local_config(config: AcceptanceConfig, tmp_path) -> AcceptanceConfig:
    """Config with short budgets for tests that do not need a cluster."""
    return dataclasses.replace(
        config,
        workdir=tmp_path,
        kubectl_timeout=10.0,
        browser_timeout=10.0,
        settle_delay=0.0,
        kill_grace=5.0,
        screenshot_dir=None,
        extra_env={},
    )
