"""Playwright browser wrapper that logs in to Dex."""

from __future__ import annotations

import asyncio
import logging
import re

from playwright.async_api import Browser, BrowserContext, ConsoleMessage, Frame, Page
from playwright.async_api import Error as PlaywrightError

from . import constants
from .config import AcceptanceConfig

logger = logging.getLogger(__name__)


class BrowserLoginError(Exception):
    """A browser step failed or the login did not finish in time."""


class DexWebClient:
    """Wraps a Playwright BrowserContext for one pass through the Dex login.

    Each client has its own isolated browser context, so no cookie from a
    previous Dex session can skip the login form.
    """

    def __init__(self, browser: Browser, config: AcceptanceConfig, name: str = "dex"):
        self._browser = browser
        self._config = config
        self.name = name
        self.context: BrowserContext | None = None
        self.page: Page | None = None

    async def start(self) -> "DexWebClient":
        self.context = await self._browser.new_context(ignore_https_errors=True)
        self.context.set_default_timeout(self._config.browser_timeout * 1000)
        self.page = await self.context.new_page()
        self.page.on("console", self._on_console)
        self.page.on("framenavigated", self._on_navigated)
        return self

    def _on_console(self, message: ConsoleMessage) -> None:
        logger.debug("[%s] console.%s: %s", self.name, message.type, message.text)

    def _on_navigated(self, frame: Frame) -> None:
        if frame.parent_frame is None:
            logger.debug("[%s] navigated to %s", self.name, frame.url)

    def log_location(self) -> None:
        logger.info("location: %s", self.page.url)

    async def log_in(self) -> str:
        """Walk the login and approval pages and return the final page text."""
        page = self.page
        await page.goto(self._config.login_url)
        # {issuer}/dex/auth/local
        await page.locator(constants.LOGIN_FIELD).wait_for(state="visible")
        self.log_location()
        await page.locator(constants.LOGIN_FIELD).fill(self._config.username)
        await page.locator(constants.PASSWORD_FIELD).fill(self._config.password)
        await page.locator(constants.SUBMIT_LOGIN_BUTTON).click()
        # {issuer}/dex/approval
        grant = page.locator(constants.GRANT_ACCESS_BUTTON)
        await grant.wait_for(state="visible")
        self.log_location()
        approval_url = page.url
        await grant.click()
        # back on the credential plugin
        await page.wait_for_url(lambda url: url != approval_url)
        await page.wait_for_load_state("load")
        await page.locator(constants.BODY).wait_for(state="attached")
        self.log_location()
        return await page.locator(constants.BODY).inner_text()

    async def screenshot(self, name: str) -> None:
        """Save a full-page screenshot when a screenshot directory is configured."""
        screenshot_dir = self._config.screenshot_dir
        if screenshot_dir is None or self.page is None:
            return
        screenshot_dir.mkdir(parents=True, exist_ok=True)
        path = screenshot_dir / f"{re.sub(r'[^A-Za-z0-9_.-]', '_', name)}.png"
        try:
            await self.page.screenshot(path=str(path), full_page=True, timeout=5000)
        except PlaywrightError as e:
            logger.warning("could not take a screenshot: %s", e)
        else:
            logger.info("screenshot saved to %s", path)

    async def close(self) -> None:
        if self.context:
            await self.context.close()
            self.context = None
            self.page = None

    async def __aenter__(self) -> "DexWebClient":
        return await self.start()

    async def __aexit__(self, *args) -> None:
        await self.close()


async def log_in_to_dex(
    browser: Browser, config: AcceptanceConfig, name: str = "dex"
) -> str:
    """Log in to Dex once the credential plugin has had time to start.

    Returns the visible text of the page the plugin serves after the
    redirect. A body that is not the expected one is returned as is; only
    step failures and the time budget raise.
    """
    await asyncio.sleep(config.settle_delay)

    client = DexWebClient(browser, config, name=name)
    try:
        # the budget covers opening the context as well as the login steps
        async with asyncio.timeout(config.browser_timeout):
            await client.start()
            return await client.log_in()
    except (PlaywrightError, TimeoutError) as e:
        await client.screenshot(client.name)
        raise BrowserLoginError(f"could not run the browser test: {e!r}") from e
    finally:
        await client.close()
