"""
Static fallback extractor: plain HTTP fetch plus a non-executing DOM parse
"""
import asyncio
import random
import logging

import aiohttp

from config import config
from exceptions import StaticFetchError
from extraction import SoupDocument, extract_page_data
from models import RawPageData

logger = logging.getLogger(__name__)


class StaticPageFetcher:
    """Fetches raw HTML over HTTP and extracts metadata without running scripts"""

    def __init__(self, scraper_config=None):
        self.config = scraper_config or config

    def _headers(self) -> dict:
        return {
            'User-Agent': random.choice(self.config.user_agents),
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.5',
        }

    async def fetch_html(self, url: str) -> str:
        """GET url and return its body, raising StaticFetchError on any failure"""
        timeout = aiohttp.ClientTimeout(total=self.config.static_timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout, headers=self._headers()) as session:
                async with session.get(url) as response:
                    if not 200 <= response.status < 300:
                        raise StaticFetchError(
                            f"Failed to fetch and analyze URL: HTTP {response.status}: {response.reason}"
                        )
                    return await response.text(errors="replace")
        except asyncio.TimeoutError as e:
            raise StaticFetchError(
                f"Failed to fetch and analyze URL: timed out after {self.config.static_timeout}s"
            ) from e
        except aiohttp.ClientError as e:
            raise StaticFetchError(f"Failed to fetch and analyze URL: {e}") from e

    async def fetch_page(self, url: str) -> RawPageData:
        """Fetch url and return its raw page data"""
        html = await self.fetch_html(url)
        page_data = extract_page_data(SoupDocument.from_html(html), self.config.content_excerpt_length)
        logger.info(f"Fetched {url} without rendering")
        return page_data
