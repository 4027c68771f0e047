"""
Metadata normalization pipeline - the entry point for analyzing a URL
"""
import logging
from urllib.parse import ParseResult

from config import config, METADATA_DEFAULTS, OPEN_GRAPH_TYPES
from exceptions import RenderError, AnalysisError
from models import RawPageData, OpenGraphTags, TwitterTags, UrlAnalysisResult
from utils import parse_url, canonicalize_url, first_non_empty
from browser_utils import PageRenderer
from http_analyzer import StaticPageFetcher
from ai_service import SuggestionEngine

logger = logging.getLogger(__name__)


def build_open_graph_tags(page_data: RawPageData, parsed_url: ParseResult) -> OpenGraphTags:
    """Resolve every OpenGraph field through its fallback chain"""
    og = page_data.open_graph_tags
    raw_type = (og.get("og:type") or "").strip()

    return OpenGraphTags(
        title=first_non_empty(og.get("og:title"), page_data.title, METADATA_DEFAULTS["title"]),
        description=first_non_empty(
            og.get("og:description"), page_data.description, METADATA_DEFAULTS["description"]
        ),
        image=first_non_empty(og.get("og:image"), METADATA_DEFAULTS["image"]),
        url=first_non_empty(og.get("og:url"), canonicalize_url(parsed_url)),
        type=raw_type if raw_type in OPEN_GRAPH_TYPES else METADATA_DEFAULTS["type"],
        site_name=first_non_empty(og.get("og:site_name"), parsed_url.hostname),
        locale=first_non_empty(og.get("og:locale"), METADATA_DEFAULTS["locale"]),
        image_alt=first_non_empty(og.get("og:image:alt"), METADATA_DEFAULTS["image_alt"]),
    )


def twitter_handle_for(parsed_url: ParseResult) -> str:
    hostname = parsed_url.hostname or ""
    if hostname.startswith("www."):
        hostname = hostname[4:]
    return f"@{hostname}"


def build_twitter_tags(page_data: RawPageData, open_graph: OpenGraphTags,
                       parsed_url: ParseResult) -> TwitterTags:
    """Resolve Twitter Card fields, falling back to the resolved OpenGraph values"""
    tw = page_data.twitter_tags
    return TwitterTags(
        card=first_non_empty(tw.get("twitter:card"), METADATA_DEFAULTS["twitter_card"]),
        title=first_non_empty(tw.get("twitter:title"), open_graph.title),
        description=first_non_empty(tw.get("twitter:description"), open_graph.description),
        image=first_non_empty(tw.get("twitter:image"), open_graph.image),
        site=first_non_empty(tw.get("twitter:site"), twitter_handle_for(parsed_url)),
    )


class UrlAnalyzer:
    """Extracts, normalizes and annotates the social metadata of a URL"""

    def __init__(self, renderer=None, static_fetcher=None, suggestion_engine=None,
                 metrics_collector=None, scraper_config=None):
        self.config = scraper_config or config
        self.renderer = renderer or PageRenderer(scraper_config=self.config)
        self.static_fetcher = static_fetcher or StaticPageFetcher(scraper_config=self.config)
        self.suggestion_engine = suggestion_engine or SuggestionEngine(scraper_config=self.config)
        self.metrics_collector = metrics_collector

    async def extract(self, url: str) -> RawPageData:
        """Render the page, falling back to a static fetch when rendering fails"""
        try:
            return await self.renderer.render_page(url)
        except RenderError as e:
            if self.metrics_collector:
                self.metrics_collector.record_render_fallback()
            logger.warning(f"Browser rendering failed, falling back to HTTP analyzer: {e}")

        try:
            return await self.static_fetcher.fetch_page(url)
        except Exception as e:
            logger.error(f"URL analysis error for {url}: {e}")
            raise AnalysisError(f"Failed to analyze URL: {e}") from e

    async def analyze_url(self, url: str) -> UrlAnalysisResult:
        """Analyze url and return the assembled result

        Raises InvalidUrlError before any network call when url is malformed,
        and AnalysisError when neither extraction strategy succeeds.
        """
        parsed_url = parse_url(url)
        url = url.strip()
        logger.info(f"Analyzing URL: {url}")

        page_data = await self.extract(url)

        open_graph = build_open_graph_tags(page_data, parsed_url)
        twitter = build_twitter_tags(page_data, open_graph, parsed_url)

        # The model reasons about what the page actually has, not the defaults
        suggestions = await self.suggestion_engine.analyze_seo_tags(
            url=url,
            title=page_data.title,
            description=page_data.description,
            content=page_data.content,
            open_graph_tags=dict(page_data.open_graph_tags),
            twitter_tags=dict(page_data.twitter_tags),
        )

        return UrlAnalysisResult(
            url=url,
            title=first_non_empty(page_data.title, METADATA_DEFAULTS["title"]),
            description=first_non_empty(page_data.description, METADATA_DEFAULTS["description"]),
            open_graph_tags=open_graph,
            twitter_tags=twitter,
            json_ld=list(page_data.json_ld),
            ai_suggestions=list(suggestions),
        )
