"""
Metadata extraction shared by the rendered and the static page paths

Both paths hand extract_page_data a document accessor; the query rules
(title, description, og:* and twitter:* metas, JSON-LD blocks, visible text)
live here once.
"""
import json
import logging
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup
from bs4.element import PreformattedString, Tag

from models import RawPageData
from utils import clean_text, truncate_text
from config import config

logger = logging.getLogger(__name__)

NON_TEXT_TAGS = {"script", "style", "noscript", "template"}
BLOCK_TAGS = {
    "address", "article", "aside", "blockquote", "body", "dd", "details", "div", "dl", "dt",
    "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4", "h5", "h6",
    "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section", "summary", "table",
    "td", "th", "tr", "ul",
}

# Evaluated inside the loaded page; returns raw nodes for extract_page_data
SNAPSHOT_SCRIPT = """
() => {
    const titleEl = document.querySelector('title');
    return {
        title: titleEl ? (titleEl.textContent || '') : '',
        metas: Array.from(document.querySelectorAll('meta')).map(meta => ({
            name: meta.getAttribute('name'),
            property: meta.getAttribute('property'),
            content: meta.getAttribute('content'),
        })),
        jsonLd: Array.from(
            document.querySelectorAll('script[type="application/ld+json"]')
        ).map(script => script.textContent || ''),
        text: document.body ? (document.body.innerText || '') : '',
    };
}
"""


class PageDocument:
    """Read-only view of a page DOM used by extract_page_data"""

    def title(self) -> str:
        raise NotImplementedError

    def meta_tags(self) -> List[Dict[str, Optional[str]]]:
        """Every <meta> element as {'name', 'property', 'content'}, document order"""
        raise NotImplementedError

    def json_ld_scripts(self) -> List[str]:
        raise NotImplementedError

    def body_text(self) -> str:
        raise NotImplementedError


def _block_of(string, root):
    for parent in string.parents:
        if parent is root or parent.name in BLOCK_TAGS:
            return parent
    return root


class SoupDocument(PageDocument):
    """Parsed-only DOM backed by BeautifulSoup; no script execution"""

    def __init__(self, soup: BeautifulSoup):
        self.soup = soup

    @classmethod
    def from_html(cls, html: str) -> "SoupDocument":
        return cls(BeautifulSoup(html, 'html.parser'))

    def title(self) -> str:
        title = self.soup.find('title')
        return title.get_text() if title else ""

    def meta_tags(self) -> List[Dict[str, Optional[str]]]:
        return [
            {
                'name': meta.get('name'),
                'property': meta.get('property'),
                'content': meta.get('content'),
            }
            for meta in self.soup.find_all('meta')
        ]

    def json_ld_scripts(self) -> List[str]:
        return [
            script.string or ""
            for script in self.soup.find_all('script', attrs={'type': 'application/ld+json'})
        ]

    def body_text(self) -> str:
        """Visible text; inline markup joins directly, block boundaries become newlines"""
        root = self.soup.body or self.soup
        chunks = []
        current_block = None
        for node in root.descendants:
            if isinstance(node, Tag):
                if node.name == 'br':
                    chunks.append('\n')
                continue
            if isinstance(node, PreformattedString):
                continue
            if any(parent.name in NON_TEXT_TAGS for parent in node.parents):
                continue
            block = _block_of(node, root)
            if current_block is not None and block is not current_block:
                chunks.append('\n')
            current_block = block
            chunks.append(str(node))
        return ''.join(chunks)


class RenderedDocument(PageDocument):
    """Snapshot of a DOM taken inside a headless browser by SNAPSHOT_SCRIPT"""

    def __init__(self, snapshot: Dict[str, Any]):
        self.snapshot = snapshot or {}

    def title(self) -> str:
        return self.snapshot.get('title') or ""

    def meta_tags(self) -> List[Dict[str, Optional[str]]]:
        return [meta for meta in self.snapshot.get('metas') or [] if isinstance(meta, dict)]

    def json_ld_scripts(self) -> List[str]:
        return [block for block in self.snapshot.get('jsonLd') or [] if isinstance(block, str)]

    def body_text(self) -> str:
        return self.snapshot.get('text') or ""


def _collect_prefixed(metas: List[Dict[str, Optional[str]]], attribute: str, prefix: str) -> Dict[str, str]:
    tags = {}
    for meta in metas:
        key = meta.get(attribute)
        content = meta.get('content')
        if isinstance(key, str) and key.startswith(prefix) and isinstance(content, str) and content:
            tags[key] = content
    return tags


def _parse_json_ld(blocks: List[str]) -> List[Any]:
    parsed = []
    for index, block in enumerate(blocks):
        try:
            parsed.append(json.loads(block))
        except (ValueError, RecursionError):
            logger.debug(f"Skipping malformed JSON-LD block #{index}")
    return parsed


def extract_page_data(document: PageDocument, excerpt_length: int = None) -> RawPageData:
    """Apply the extraction rules to a document and return the raw page data"""
    excerpt_length = excerpt_length or config.content_excerpt_length
    metas = document.meta_tags()

    description = ""
    for meta in metas:
        if meta.get('name') == 'description':
            description = meta.get('content') or ""
            break

    return RawPageData(
        title=(document.title() or "").strip(),
        description=description.strip(),
        content=truncate_text(clean_text(document.body_text()), excerpt_length),
        open_graph_tags=_collect_prefixed(metas, 'property', 'og:'),
        twitter_tags=_collect_prefixed(metas, 'name', 'twitter:'),
        json_ld=_parse_json_ld(document.json_ld_scripts()),
    )
