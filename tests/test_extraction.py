"""
Tests for the shared extraction rules and both document accessors
"""
import pytest

from extraction import SoupDocument, RenderedDocument, extract_page_data


class TestSoupExtraction:
    """Extraction from parsed-only HTML"""

    def test_title_and_description(self, full_page_html):
        data = extract_page_data(SoupDocument.from_html(full_page_html))

        assert data.title == "Example Article"
        assert data.description == "An example page for testing"

    def test_open_graph_tags_keep_raw_keys(self, full_page_html):
        data = extract_page_data(SoupDocument.from_html(full_page_html))

        assert data.open_graph_tags == {
            "og:title": "OG Example",
            "og:description": "OG description",
            "og:image": "https://example.com/og.png",
            "og:type": "article",
        }

    def test_empty_content_meta_is_absent(self, full_page_html):
        data = extract_page_data(SoupDocument.from_html(full_page_html))

        assert "og:empty" not in data.open_graph_tags
        assert None not in data.open_graph_tags.values()

    def test_twitter_tags(self, full_page_html):
        data = extract_page_data(SoupDocument.from_html(full_page_html))

        assert data.twitter_tags == {"twitter:card": "summary", "twitter:site": "@example"}

    def test_malformed_json_ld_block_is_skipped(self, full_page_html):
        data = extract_page_data(SoupDocument.from_html(full_page_html))

        assert data.json_ld == [
            {"@type": "Article", "name": "First"},
            [{"@type": "Organization"}],
        ]

    def test_content_excludes_scripts_styles_and_comments(self, full_page_html):
        data = extract_page_data(SoupDocument.from_html(full_page_html))

        assert data.content == "Main Heading Visible paragraph text."

    def test_content_is_truncated(self):
        html = "<html><body><p>" + "a" * 6000 + "</p></body></html>"

        data = extract_page_data(SoupDocument.from_html(html))

        assert len(data.content) == 5000

    def test_custom_excerpt_length(self):
        html = "<html><body><p>abcdefghij</p></body></html>"

        data = extract_page_data(SoupDocument.from_html(html), excerpt_length=4)

        assert data.content == "abcd"

    def test_empty_document(self):
        data = extract_page_data(SoupDocument.from_html(""))

        assert data.title == ""
        assert data.description == ""
        assert data.content == ""
        assert data.open_graph_tags == {}
        assert data.twitter_tags == {}
        assert data.json_ld == []

    def test_later_duplicate_tag_wins(self):
        html = """
        <head>
            <meta property="og:title" content="First">
            <meta property="og:title" content="Second">
        </head>
        """

        data = extract_page_data(SoupDocument.from_html(html))

        assert data.open_graph_tags["og:title"] == "Second"

    def test_twitter_tags_only_read_from_name_attribute(self):
        html = '<head><meta property="twitter:card" content="summary"></head>'

        data = extract_page_data(SoupDocument.from_html(html))

        assert data.twitter_tags == {}


class TestRenderedExtraction:
    """Extraction from a browser DOM snapshot"""

    @pytest.fixture
    def snapshot(self):
        return {
            "title": "Rendered Title",
            "metas": [
                {"name": "description", "property": None, "content": "Rendered description"},
                {"name": None, "property": "og:title", "content": "Injected OG"},
                {"name": None, "property": "og:image", "content": None},
                {"name": "twitter:title", "property": None, "content": "Injected TW"},
                {"name": "viewport", "property": None, "content": "width=device-width"},
            ],
            "jsonLd": ['{"@type": "Product"}', "{broken", '{"@type": "Offer"}'],
            "text": "Hydrated\n\n  content",
        }

    def test_rendered_snapshot(self, snapshot):
        data = extract_page_data(RenderedDocument(snapshot))

        assert data.title == "Rendered Title"
        assert data.description == "Rendered description"
        assert data.open_graph_tags == {"og:title": "Injected OG"}
        assert data.twitter_tags == {"twitter:title": "Injected TW"}
        assert data.json_ld == [{"@type": "Product"}, {"@type": "Offer"}]
        assert data.content == "Hydrated content"

    def test_missing_snapshot_fields(self):
        data = extract_page_data(RenderedDocument({}))

        assert data.title == ""
        assert data.open_graph_tags == {}
        assert data.json_ld == []

    def test_same_rules_as_static_path(self, full_page_html):
        soup_doc = SoupDocument.from_html(full_page_html)
        snapshot = {
            "title": soup_doc.title(),
            "metas": soup_doc.meta_tags(),
            "jsonLd": soup_doc.json_ld_scripts(),
            "text": soup_doc.body_text(),
        }

        assert extract_page_data(RenderedDocument(snapshot)) == extract_page_data(soup_doc)


DEEP_JSON = "[" * 100000 + "]" * 100000


class TestHostileInput:
    """Extraction keeps going when a block is pathological"""

    def test_deeply_nested_json_ld_block_is_skipped(self):
        html = (
            '<head><script type="application/ld+json">{"@type": "WebSite"}</script>'
            '<script type="application/ld+json">' + DEEP_JSON + '</script></head>'
        )

        data = extract_page_data(SoupDocument.from_html(html))

        assert data.json_ld == [{"@type": "WebSite"}]

    def test_deeply_nested_block_in_snapshot_is_skipped(self):
        data = extract_page_data(RenderedDocument({"jsonLd": [DEEP_JSON, '{"@type": "Offer"}']}))

        assert data.json_ld == [{"@type": "Offer"}]


class TestVisibleText:
    """Static text matches what a browser reports as innerText"""

    @pytest.mark.parametrize("html,expected", [
        ("<body><p><b>Hel</b>lo</p></body>", "Hello"),
        ("<body><p>One</p><p>Two</p></body>", "One Two"),
        ("<body><div>Lead<p>Inner</p>Tail</div></body>", "Lead Inner Tail"),
        ("<body>Line<br>Break</body>", "Line Break"),
        ("<body><a href='/'>Home</a><span>Page</span></body>", "HomePage"),
        ("<body>Hel<!-- note -->lo</body>", "Hello"),
        ("<table><tr><td>A</td><td>B</td></tr></table>", "A B"),
    ])
    def test_block_and_inline_boundaries(self, html, expected):
        data = extract_page_data(SoupDocument.from_html(html))

        assert data.content == expected

    def test_matches_rendered_inner_text(self):
        html = "<body><h1>Title <em>here</em></h1><p>Some <b>bold</b>text.</p></body>"
        inner_text = "Title here\n\nSome boldtext."

        static = extract_page_data(SoupDocument.from_html(html))
        rendered = extract_page_data(RenderedDocument({"text": inner_text}))

        assert static.content == rendered.content
