"""
Utility functions for URL handling and text cleanup
"""
from typing import Optional
from urllib.parse import urlparse, urlunparse, ParseResult

from exceptions import InvalidUrlError

_DEFAULT_PORTS = {"http": 80, "https": 443}


def parse_url(url: str) -> ParseResult:
    """Parse an http(s) URL, raising InvalidUrlError when it is malformed"""
    if not isinstance(url, str) or not url.strip():
        raise InvalidUrlError("URL must be a non-empty string")

    try:
        parsed = urlparse(url.strip())
        # Accessing .port validates the port component
        parsed.port
    except ValueError as e:
        raise InvalidUrlError(f"Invalid URL: {url}") from e

    if parsed.scheme.lower() not in _DEFAULT_PORTS or not parsed.hostname:
        raise InvalidUrlError(f"Invalid URL: {url}")
    return parsed


def validate_url(url: str) -> bool:
    """Validate if a URL is properly formatted"""
    try:
        parse_url(url)
        return True
    except InvalidUrlError:
        return False


def canonicalize_url(parsed: ParseResult) -> str:
    """Serialize a parsed URL with lower-cased scheme and host, no default port and a non-empty path"""
    scheme = parsed.scheme.lower()
    host = parsed.hostname or ""
    if ":" in host:
        host = f"[{host}]"

    netloc = host
    if parsed.port is not None and parsed.port != _DEFAULT_PORTS.get(scheme):
        netloc = f"{host}:{parsed.port}"
    if parsed.username:
        userinfo = parsed.username
        if parsed.password:
            userinfo = f"{userinfo}:{parsed.password}"
        netloc = f"{userinfo}@{netloc}"

    return urlunparse((scheme, netloc, parsed.path or "/", parsed.params, parsed.query, parsed.fragment))


def normalize_domain(url: str) -> str:
    """Extract and normalize domain from URL"""
    try:
        domain = (urlparse(url).hostname or "").lower()
        # Remove www prefix
        if domain.startswith('www.'):
            domain = domain[4:]
        return domain
    except ValueError:
        return ""


def clean_text(text: str) -> str:
    """Collapse runs of whitespace into single spaces"""
    if not text:
        return ""
    return ' '.join(text.split())


def truncate_text(text: str, limit: int, marker: str = "") -> str:
    """Cut text down to limit characters, appending marker only when something was cut"""
    if len(text) <= limit:
        return text
    return text[:limit] + marker


def first_non_empty(*values: Optional[str]) -> str:
    """Return the first value that is not blank, stripped"""
    for value in values:
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""
