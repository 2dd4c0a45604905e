import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from ..errors import NavigationError, SessionStartFailure

logger = logging.getLogger(__name__)

# The service runs as an unprivileged container user with no sandbox and no GPU
CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--single-process",
    "--no-zygote",
]


class BrowserSession:
    """Owns the single headless Chromium shared by every request.

    Created once at bootstrap, started before the server accepts traffic and
    stopped on shutdown. Each fetch gets its own page (and browser context)
    through ``new_page()``; pages are never pooled or reused.
    """

    def __init__(self, headless: bool = True, max_pages: int = 0):
        """
        Args:
            headless: Launch Chromium without a window
            max_pages: Upper bound on concurrently open pages; 0 means unbounded
        """
        self.headless = headless
        self.max_pages = max_pages
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._gate = asyncio.Semaphore(max_pages) if max_pages > 0 else None

    @property
    def is_connected(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def start(self) -> None:
        """Launch the browser. Raises SessionStartFailure if it cannot start."""
        if self._browser is not None:
            return
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless, args=CHROMIUM_ARGS
            )
        except Exception as e:
            logger.error(f"Error starting browser: {e}")
            await self._shutdown_driver()
            raise SessionStartFailure(str(e)) from e
        logger.info("Playwright browser started.")

    async def stop(self) -> None:
        """Close the browser and the Playwright driver. Safe to call twice."""
        if self._browser is not None:
            try:
                await self._browser.close()
            except PlaywrightError as e:
                logger.warning(f"Error closing browser: {e}")
            self._browser = None
            logger.info("Playwright browser closed.")
        await self._shutdown_driver()

    async def _shutdown_driver(self) -> None:
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    @asynccontextmanager
    async def new_page(self) -> AsyncIterator[Page]:
        """Yield a fresh page, closing it (and its context) on every exit path."""
        if self._gate is not None:
            async with self._gate:
                async with self._open_page() as page:
                    yield page
        else:
            async with self._open_page() as page:
                yield page

    @asynccontextmanager
    async def _open_page(self) -> AsyncIterator[Page]:
        if self._browser is None:
            raise NavigationError("about:blank", "browser session is not running")
        try:
            page = await self._browser.new_page()
        except PlaywrightError as e:
            logger.error(f"Could not open a new page: {e}")
            raise NavigationError("about:blank", str(e)) from e
        try:
            yield page
        finally:
            try:
                await page.close()
            except PlaywrightError as e:
                logger.warning(f"Error closing page: {e}")
