"""
Tag generation for hand-authored pages, plus a quick completeness check
"""
import json
import re
from typing import Any, Dict, Optional

from config import METADATA_DEFAULTS
from exceptions import InvalidInputError
from utils import validate_url

_HTTP_URL_RE = re.compile(r"^https?://")


def escape_html(text: str) -> str:
    """Escape a value for use inside a double-quoted HTML attribute"""
    return (
        text.replace("&", "&amp;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def _meta(attribute: str, key: str, value: str) -> str:
    return f'<meta {attribute}="{key}" content="{escape_html(value)}" />\n'


def generate_tags(title: str, description: str, url: str, type: str,
                  image: Optional[str] = None, site_name: Optional[str] = None) -> str:
    """Render OpenGraph, Twitter Card and JSON-LD markup for the given page fields"""
    missing = [
        name for name, value in (("title", title), ("description", description), ("url", url), ("type", type))
        if not isinstance(value, str) or not value.strip()
    ]
    if missing:
        raise InvalidInputError(f"Missing required fields: {', '.join(missing)}")

    html = "<!-- OpenGraph Meta Tags -->\n"
    html += _meta("property", "og:title", title)
    html += _meta("property", "og:description", description)
    if image:
        html += _meta("property", "og:image", image)
    html += _meta("property", "og:url", url)
    html += _meta("property", "og:type", type)
    if site_name:
        html += _meta("property", "og:site_name", site_name)

    html += "\n<!-- Twitter Card Meta Tags -->\n"
    html += _meta("name", "twitter:card", METADATA_DEFAULTS["twitter_card"])
    html += _meta("name", "twitter:title", title)
    html += _meta("name", "twitter:description", description)
    if image:
        html += _meta("name", "twitter:image", image)

    schema = {
        "@context": "https://schema.org",
        "@type": "Article" if type == "article" else "WebSite",
        "name": title,
        "description": description,
        "url": url,
    }
    if image:
        schema["image"] = image
    if site_name:
        schema["publisher"] = {"@type": "Organization", "name": site_name}

    # "</" would end the script element early
    schema_json = json.dumps(schema, indent=2, ensure_ascii=False).replace("</", "<\\/")

    html += "\n<!-- JSON-LD Schema -->\n"
    html += '<script type="application/ld+json">\n'
    html += schema_json
    html += "\n</script>"
    return html


def validate_tags(tags: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Presence, length and format checks for a set of title/description/image/url tags"""
    tags = tags or {}

    def text(key: str) -> str:
        value = tags.get(key)
        return value if isinstance(value, str) else ""

    title = text("title")
    description = text("description")
    image = text("image")
    url = text("url")

    return {
        "title": {
            "present": bool(title),
            "length": len(title),
            "optimal": 30 <= len(title) <= 60,
        },
        "description": {
            "present": bool(description),
            "length": len(description),
            "optimal": 120 <= len(description) <= 160,
        },
        "image": {
            "present": bool(image),
            "valid": bool(_HTTP_URL_RE.match(image)),
        },
        "url": {
            "present": bool(url),
            "valid": bool(_HTTP_URL_RE.match(url)) and validate_url(url),
        },
    }
