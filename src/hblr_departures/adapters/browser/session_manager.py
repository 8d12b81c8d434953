"""Playwright browser session shared by all scrapes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from hblr_departures.domain.contracts.browser_session import BrowserSessionProtocol
from hblr_departures.domain.errors import BrowserLaunchError, SessionNotStartedError

if TYPE_CHECKING:
    from playwright.async_api import Browser, Page, Playwright

logger = logging.getLogger(__name__)

# Sandboxing is handled by the container; Chromium's own sandbox cannot start there.
LAUNCH_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
)


class BrowserSessionManager(BrowserSessionProtocol):
    """Launches Chromium once and opens an isolated page for every scrape."""

    def __init__(self, headless: bool = True, user_agent: str | None = None) -> None:
        """Initialize the session manager.

        Args:
            headless: Run Chromium without a window.
            user_agent: User agent for every page; Playwright's default if None.
        """
        self.headless = headless
        self.user_agent = user_agent
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    @property
    def is_started(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def start(self) -> None:
        """Launch the browser.

        Raises:
            BrowserLaunchError: Chromium could not be started.
        """
        if self.is_started:
            logger.warning("Browser session already started")
            return

        logger.info("Initializing headless browser...")
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless, args=list(LAUNCH_ARGS)
            )
        except Exception as e:
            logger.error(f"Failed to initialize browser: {e}")
            await self._stop_playwright()
            raise BrowserLaunchError(f"Failed to launch browser: {e}") from e
        logger.info("Browser initialized successfully")

    async def acquire(self) -> Page:
        """Open a page in a fresh browser context.

        Each page gets its own context so cookies and storage never carry over
        from a previous scrape.
        """
        if self._browser is None:
            raise SessionNotStartedError("Browser session has not been started")

        context = await self._browser.new_context(user_agent=self.user_agent)
        try:
            return await context.new_page()
        except Exception:
            await context.close()
            raise

    async def release(self, page: Page) -> None:
        """Close a page and its context. Close failures are logged, not raised."""
        context = page.context
        try:
            await page.close()
            await context.close()
        except PlaywrightError as e:
            logger.warning(f"Failed to close page cleanly: {e}")

    async def shutdown(self) -> None:
        """Close the browser and stop Playwright."""
        if self._browser is not None:
            try:
                await self._browser.close()
            except PlaywrightError as e:
                logger.warning(f"Error while closing browser: {e}")
            self._browser = None
            logger.info("Browser closed")
        await self._stop_playwright()

    async def _stop_playwright(self) -> None:
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"Error while stopping Playwright: {e}")
            self._playwright = None
