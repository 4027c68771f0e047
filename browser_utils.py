"""
Browser utilities: shared headless browser and the rendered-page extractor
"""
import asyncio
import random
import logging
from contextlib import asynccontextmanager
from typing import Optional

from playwright.async_api import async_playwright

from config import config
from exceptions import RenderError
from extraction import SNAPSHOT_SCRIPT, RenderedDocument, extract_page_data
from models import RawPageData

logger = logging.getLogger(__name__)


class BrowserManager:
    """Owns one lazily launched browser shared by every page render"""

    def __init__(self, scraper_config=None):
        self.config = scraper_config or config
        self.playwright = None
        self.browser = None
        self._lock = asyncio.Lock()

    async def get_browser(self):
        """Return the shared browser, launching it on first use"""
        async with self._lock:
            if self.browser is not None and self.browser.is_connected():
                return self.browser

            if self.playwright is not None:
                # Browser went away; drop the stale driver before relaunching
                await self._stop()

            self.playwright = await async_playwright().start()
            try:
                self.browser = await self.playwright.chromium.launch(
                    headless=self.config.headless,
                    args=[
                        '--no-sandbox',
                        '--disable-setuid-sandbox',
                        '--disable-dev-shm-usage',
                        '--disable-gpu',
                        '--disable-blink-features=AutomationControlled',
                    ]
                )
            except Exception:
                await self._stop()
                raise

            logger.info("Headless browser launched")
            return self.browser

    @asynccontextmanager
    async def open_page(self):
        """Open a fresh browser context and page, closing the context on exit"""
        browser = await self.get_browser()
        context = await browser.new_context(
            user_agent=random.choice(self.config.user_agents),
            viewport={'width': 1920, 'height': 1080},
            locale='en-US',
        )
        try:
            page = await context.new_page()
            yield page
        finally:
            try:
                await context.close()
            except Exception as e:
                logger.warning(f"Error closing browser context: {e}")

    async def _stop(self):
        browser, playwright = self.browser, self.playwright
        self.browser = None
        self.playwright = None
        try:
            if browser is not None:
                await browser.close()
        finally:
            if playwright is not None:
                await playwright.stop()

    async def shutdown(self):
        """Close the shared browser and playwright driver"""
        async with self._lock:
            if self.browser is None and self.playwright is None:
                return
            try:
                await self._stop()
                logger.info("Headless browser closed")
            except Exception as e:
                logger.error(f"Error closing browser: {e}")


class PageRenderer:
    """Loads a URL in the shared browser and extracts its metadata"""

    def __init__(self, browser_manager: BrowserManager = None, scraper_config=None):
        self.config = scraper_config or config
        self.browser_manager = browser_manager or get_browser_manager()

    async def render_page(self, url: str) -> RawPageData:
        """Render url and return its raw page data, raising RenderError on any failure"""
        try:
            async with self.browser_manager.open_page() as page:
                await page.goto(url, wait_until="networkidle", timeout=self.config.render_timeout * 1000)
                snapshot = await page.evaluate(SNAPSHOT_SCRIPT)
            page_data = extract_page_data(RenderedDocument(snapshot), self.config.content_excerpt_length)
        except Exception as e:
            raise RenderError(f"Failed to render {url}: {e}") from e

        logger.info(f"Rendered {url}")
        return page_data


_browser_manager: Optional[BrowserManager] = None


def get_browser_manager() -> BrowserManager:
    """Process-wide browser manager, created on first call"""
    global _browser_manager
    if _browser_manager is None:
        _browser_manager = BrowserManager()
    return _browser_manager


async def shutdown_browser():
    """Release the process-wide browser if one was started"""
    global _browser_manager
    if _browser_manager is not None:
        await _browser_manager.shutdown()
        _browser_manager = None
