"""
Tests for tag markup generation and tag validation
"""
import json
import pytest

from exceptions import InvalidInputError
from tag_generator import escape_html, generate_tags, validate_tags


def json_ld_of(markup):
    start = markup.index('<script type="application/ld+json">\n') + len('<script type="application/ld+json">\n')
    end = markup.rindex("\n</script>")
    return json.loads(markup[start:end])


class TestEscapeHtml:
    """Tests for attribute escaping"""

    def test_escapes_all_special_characters(self):
        assert escape_html("""Tom & "Jerry" <b>'s</b>""") == \
            "Tom &amp; &quot;Jerry&quot; &lt;b&gt;&#39;s&lt;/b&gt;"

    def test_ampersand_escaped_first(self):
        assert escape_html("&lt;") == "&amp;lt;"

    def test_plain_text_untouched(self):
        assert escape_html("Hello world") == "Hello world"


class TestGenerateTags:
    """Tests for markup generation"""

    def test_full_markup(self):
        markup = generate_tags(
            title="My Post",
            description="A post",
            url="https://example.com/post",
            type="article",
            image="https://example.com/img.png",
            site_name="Example",
        )

        assert markup.startswith("<!-- OpenGraph Meta Tags -->\n")
        assert '<meta property="og:title" content="My Post" />' in markup
        assert '<meta property="og:image" content="https://example.com/img.png" />' in markup
        assert '<meta property="og:site_name" content="Example" />' in markup
        assert '<meta property="og:type" content="article" />' in markup
        assert '<meta name="twitter:card" content="summary_large_image" />' in markup
        assert '<meta name="twitter:image" content="https://example.com/img.png" />' in markup
        assert markup.index("OpenGraph") < markup.index("Twitter Card") < markup.index("JSON-LD")

    def test_article_schema(self):
        markup = generate_tags("T", "D", "https://example.com", "article", site_name="Pub")

        schema = json_ld_of(markup)

        assert schema == {
            "@context": "https://schema.org",
            "@type": "Article",
            "name": "T",
            "description": "D",
            "url": "https://example.com",
            "publisher": {"@type": "Organization", "name": "Pub"},
        }

    @pytest.mark.parametrize("page_type", ["website", "product", "video"])
    def test_non_article_schema_is_website(self, page_type):
        schema = json_ld_of(generate_tags("T", "D", "https://example.com", page_type))

        assert schema["@type"] == "WebSite"

    def test_optional_fields_omitted(self):
        markup = generate_tags("T", "D", "https://example.com", "website")

        assert "og:image" not in markup
        assert "twitter:image" not in markup
        assert "og:site_name" not in markup
        assert "image" not in json_ld_of(markup)

    def test_attribute_values_are_escaped(self):
        markup = generate_tags('Say "hi" & <run>', "It's", "https://example.com/?a=1&b=2", "website")

        assert '<meta property="og:title" content="Say &quot;hi&quot; &amp; &lt;run&gt;" />' in markup
        assert '<meta name="twitter:description" content="It&#39;s" />' in markup
        assert '<meta property="og:url" content="https://example.com/?a=1&amp;b=2" />' in markup

    def test_script_close_cannot_escape_json_ld(self):
        markup = generate_tags("</script><script>alert(1)</script>", "D", "https://example.com", "website")

        assert markup.count("</script>") == 1
        assert json_ld_of(markup)["name"] == "</script><script>alert(1)</script>"

    def test_deterministic(self):
        args = ("T", "D", "https://example.com", "article", "https://example.com/i.png", "S")

        assert generate_tags(*args) == generate_tags(*args)

    @pytest.mark.parametrize("field", ["title", "description", "url", "type"])
    def test_missing_required_field(self, field):
        fields = {"title": "T", "description": "D", "url": "https://example.com", "type": "website"}
        fields[field] = "  "

        with pytest.raises(InvalidInputError) as exc_info:
            generate_tags(**fields)

        assert field in str(exc_info.value)


class TestValidateTags:
    """Tests for the completeness check"""

    def test_optimal_tags(self):
        result = validate_tags({
            "title": "A" * 45,
            "description": "B" * 140,
            "image": "https://example.com/a.png",
            "url": "https://example.com",
        })

        assert result["title"] == {"present": True, "length": 45, "optimal": True}
        assert result["description"] == {"present": True, "length": 140, "optimal": True}
        assert result["image"] == {"present": True, "valid": True}
        assert result["url"] == {"present": True, "valid": True}

    def test_empty_tags(self):
        result = validate_tags({})

        assert result["title"] == {"present": False, "length": 0, "optimal": False}
        assert result["description"]["present"] is False
        assert result["image"] == {"present": False, "valid": False}
        assert result["url"] == {"present": False, "valid": False}

    def test_lengths_outside_range(self):
        result = validate_tags({"title": "Short", "description": "C" * 200})

        assert result["title"]["optimal"] is False
        assert result["description"]["optimal"] is False

    def test_non_http_values_are_invalid(self):
        result = validate_tags({"image": "/relative.png", "url": "ftp://example.com", "title": 5})

        assert result["image"]["valid"] is False
        assert result["url"]["valid"] is False
        assert result["title"]["present"] is False
