"""
Pytest configuration and shared fixtures
"""
import pytest
import os
import tempfile

# Add project root to path
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from config import MetaTagConfig
from database import DatabaseManager
from exceptions import RenderError, StaticFetchError
from extraction import SoupDocument, extract_page_data
from models import AISuggestion, OpenGraphTags, TwitterTags, UrlAnalysisResult


@pytest.fixture
def temp_db():
    """Create a temporary database for testing"""
    with tempfile.NamedTemporaryFile(suffix='.db', delete=False) as f:
        db_path = f.name

    yield db_path

    # Cleanup
    try:
        os.unlink(db_path)
    except OSError:
        pass


@pytest.fixture
def test_config(temp_db, tmp_path):
    """Test configuration with temporary database"""
    config = MetaTagConfig()
    config.db_path = temp_db
    config.log_dir = str(tmp_path / "logs")
    config.render_timeout = 5
    config.static_timeout = 2
    return config


@pytest.fixture
def db_manager(temp_db):
    """Database manager with temporary database"""
    return DatabaseManager(temp_db)


FULL_PAGE_HTML = """
<html>
    <head>
        <title>  Example Article  </title>
        <meta name="description" content="An example page for testing">
        <meta property="og:title" content="OG Example">
        <meta property="og:description" content="OG description">
        <meta property="og:image" content="https://example.com/og.png">
        <meta property="og:type" content="article">
        <meta property="og:empty" content="">
        <meta name="twitter:card" content="summary">
        <meta name="twitter:site" content="@example">
        <script type="application/ld+json">{"@type": "Article", "name": "First"}</script>
        <script type="application/ld+json">{ this is not json }</script>
        <script type="application/ld+json">[{"@type": "Organization"}]</script>
        <style>body { color: red; }</style>
    </head>
    <body>
        <h1>Main Heading</h1>
        <script>var hidden = "not visible";</script>
        <!-- a comment -->
        <p>Visible   paragraph
        text.</p>
    </body>
</html>
"""

OG_TITLE_ONLY_HTML = """
<html><head><meta property="og:title" content="Hello"></head><body></body></html>
"""


@pytest.fixture
def full_page_html():
    return FULL_PAGE_HTML


@pytest.fixture
def og_title_only_html():
    return OG_TITLE_ONLY_HTML


class FakeGenerator:
    """Generative model stand-in returning a fixed reply"""

    def __init__(self, reply='{"suggestions": []}', error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.reply


class FakeRenderer:
    """Renderer stand-in that extracts from fixed HTML or fails"""

    def __init__(self, html=None):
        self.html = html
        self.calls = []

    async def render_page(self, url):
        self.calls.append(url)
        if self.html is None:
            raise RenderError("browser unavailable")
        return extract_page_data(SoupDocument.from_html(self.html))


class FakeFetcher:
    """Static fetcher stand-in"""

    def __init__(self, html=None):
        self.html = html
        self.calls = []

    async def fetch_page(self, url):
        self.calls.append(url)
        if self.html is None:
            raise StaticFetchError("Failed to fetch and analyze URL: HTTP 404: Not Found")
        return extract_page_data(SoupDocument.from_html(self.html))


@pytest.fixture
def fake_generator():
    return FakeGenerator(
        '{"suggestions": [{"type": "optimization", "level": "warning", "message": "Title is short"}]}'
    )


@pytest.fixture
def sample_analysis_result():
    """Sample analysis result for storage tests"""
    open_graph = OpenGraphTags(
        title="Test Page",
        description="Test description",
        image="https://example.com/image.png",
        url="https://example.com/",
        type="website",
        site_name="example.com",
        locale="en_US",
        image_alt="Preview image",
    )
    return UrlAnalysisResult(
        url="https://example.com",
        title="Test Page",
        description="Test description",
        open_graph_tags=open_graph,
        twitter_tags=TwitterTags(
            card="summary_large_image",
            title="Test Page",
            description="Test description",
            image="https://example.com/image.png",
            site="@example.com",
        ),
        json_ld=[{"@type": "WebSite", "name": "Example"}],
        ai_suggestions=[
            AISuggestion(type="optimization", level="warning", message="Title too short",
                         suggestion="Use 50-60 characters"),
            AISuggestion(type="improvement", level="success", message="Image present"),
        ],
    )
