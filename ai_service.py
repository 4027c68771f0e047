"""
AI suggestion engine for page metadata

The Anthropic API key must be available as ANTHROPIC_API_KEY, either in the
environment or in a .env file (loaded by config via python-dotenv).

Model replies are untrusted text. parse_suggestions runs an ordered chain of
parse attempts and always ends with a usable list.
"""
import os
import re
import json
import logging
from typing import Any, Dict, List, Optional

from anthropic import AsyncAnthropic, APIError

from config import config
from exceptions import SuggestionEngineError
from models import AISuggestion
from utils import first_non_empty, truncate_text

logger = logging.getLogger(__name__)

SUGGESTION_TYPES = ("optimization", "improvement")
SUGGESTION_LEVELS = ("success", "warning", "error")

UNEXPECTED_FORMAT_MESSAGE = "AI analysis completed but response format was unexpected"
AI_FAILURE_MESSAGE = "Failed to analyze content with AI. Please try again."
PLAIN_TEXT_LIMIT = 200

SYSTEM_MESSAGE = """You are an expert SEO and social media optimization analyst.
Give actionable, specific recommendations for webpage metadata and social previews.
Reply with raw JSON only, without markdown fences or commentary."""

SUGGESTION_TEMPLATE = """Analyze the following webpage data for SEO and social media optimization:

URL: {url}
Title: {title}
Description: {description}
OpenGraph Tags: {open_graph_tags}
Twitter Tags: {twitter_tags}
Content Preview: {content}

Reply in JSON with exactly this structure:
{{
  "suggestions": [
    {{
      "type": "optimization" | "improvement",
      "level": "success" | "warning" | "error",
      "message": "description of the issue or success",
      "suggestion": "specific improvement recommendation (optional)"
    }}
  ]
}}

Focus on:
- Title length and optimization (50-60 characters ideal)
- Description length and engagement (150-160 characters ideal)
- OpenGraph image presence and dimensions
- Twitter card completeness
- Content relevance and structure
- Missing essential tags"""

IMPROVEMENT_TEMPLATE = """Based on the following webpage data, suggest an improved SEO-optimized title and description:

URL: {url}
Current Title: {title}
Current Description: {description}
Content Type: {type}
Content Preview: {content}

Reply in JSON with exactly this structure:
{{
  "improvedTitle": "SEO-optimized title (50-60 characters)",
  "improvedDescription": "Engaging meta description (150-160 characters)",
  "suggestedKeywords": ["keyword1", "keyword2", "keyword3"]
}}

Make the title compelling and include relevant keywords.
Make the description engaging with a call-to-action."""

_NOT_JSON = object()
_FENCE_RE = re.compile(r"```[A-Za-z0-9_-]*")
_SUGGESTIONS_KEY_RE = re.compile(r'"suggestions"\s*:\s*\[')


def build_suggestion_prompt(url: str, title: str, description: str, content: str,
                            open_graph_tags: Dict[str, str], twitter_tags: Dict[str, str],
                            content_limit: int = None) -> str:
    """Prompt asking the model for suggestions about the tags actually found on the page"""
    content_limit = content_limit or config.prompt_content_length
    return SUGGESTION_TEMPLATE.format(
        url=url,
        title=title or "Missing",
        description=description or "Missing",
        open_graph_tags=json.dumps(open_graph_tags or {}, ensure_ascii=False),
        twitter_tags=json.dumps(twitter_tags or {}, ensure_ascii=False),
        content=(content or "")[:content_limit],
    )


def build_improvement_prompt(url: str, title: Optional[str], description: Optional[str],
                             content: str, type: str, content_limit: int = None) -> str:
    content_limit = content_limit or config.improve_content_length
    return IMPROVEMENT_TEMPLATE.format(
        url=url,
        title=title or "Missing",
        description=description or "Missing",
        type=type or "website",
        content=(content or "")[:content_limit],
    )


def strip_code_fences(text: str) -> str:
    """Remove markdown code-fence markers such as ```json and ```"""
    return _FENCE_RE.sub("", text or "").strip()


def _load_json(text: str) -> Any:
    try:
        return json.loads(text)
    except (TypeError, ValueError, RecursionError):
        return _NOT_JSON


def _coerce_suggestion(entry: Any) -> Optional[AISuggestion]:
    if not isinstance(entry, dict):
        return None
    if entry.get("type") not in SUGGESTION_TYPES or entry.get("level") not in SUGGESTION_LEVELS:
        return None
    message = entry.get("message")
    if not isinstance(message, str) or not message.strip():
        return None
    return AISuggestion(
        type=entry["type"],
        level=entry["level"],
        message=message.strip(),
        suggestion=first_non_empty(entry.get("suggestion")) or None,
    )


def _suggestions_from_list(items: Any) -> Optional[List[AISuggestion]]:
    if not isinstance(items, list):
        return None
    if not items:
        return []
    suggestions = [s for s in (_coerce_suggestion(item) for item in items) if s is not None]
    return suggestions or None


def _coerce_analysis_entry(entry: Any) -> Optional[AISuggestion]:
    if isinstance(entry, str):
        entry = {"message": entry}
    if not isinstance(entry, dict):
        return None

    message = first_non_empty(entry.get("message"), entry.get("text"), entry.get("suggestion"))
    if not message:
        return None
    suggestion = first_non_empty(entry.get("suggestion"))

    return AISuggestion(
        type=entry.get("type") if entry.get("type") in SUGGESTION_TYPES else "optimization",
        level=entry.get("level") if entry.get("level") in SUGGESTION_LEVELS else "warning",
        message=message,
        suggestion=suggestion if suggestion and suggestion != message else None,
    )


def try_strict_json(text: str) -> Optional[List[AISuggestion]]:
    """Whole reply is JSON carrying a well-formed suggestions array"""
    data = _load_json(text)
    if not isinstance(data, dict):
        return None
    return _suggestions_from_list(data.get("suggestions"))


def try_analysis_shape(text: str) -> Optional[List[AISuggestion]]:
    """Whole reply is JSON carrying a loosely shaped analysis array"""
    data = _load_json(text)
    if not isinstance(data, dict) or not isinstance(data.get("analysis"), list):
        return None
    entries = data["analysis"]
    if not entries:
        return []
    suggestions = [s for s in (_coerce_analysis_entry(entry) for entry in entries) if s is not None]
    return suggestions or None


def try_bare_string(text: str) -> Optional[List[AISuggestion]]:
    """Whole reply is a JSON string"""
    data = _load_json(text)
    if not isinstance(data, str) or not data.strip():
        return None
    return [AISuggestion(type="optimization", level="success", message=data.strip())]


def try_fenced_fragment(text: str) -> Optional[List[AISuggestion]]:
    """Reply is not JSON; look for a suggestions array inside the fence-stripped text"""
    if _load_json(text) is not _NOT_JSON:
        return None
    cleaned = strip_code_fences(text)
    match = _SUGGESTIONS_KEY_RE.search(cleaned)
    if not match:
        return None
    try:
        items, _ = json.JSONDecoder().raw_decode(cleaned, match.end() - 1)
    except (ValueError, RecursionError):
        return None
    return _suggestions_from_list(items)


def try_plain_text(text: str) -> Optional[List[AISuggestion]]:
    """Reply is not JSON; pass the cleaned prose through as a single suggestion"""
    if _load_json(text) is not _NOT_JSON:
        return None
    cleaned = strip_code_fences(text)
    if not cleaned:
        return None
    return [AISuggestion(
        type="optimization",
        level="success",
        message=truncate_text(cleaned, PLAIN_TEXT_LIMIT, "..."),
    )]


PARSE_ATTEMPTS = (
    try_strict_json,
    try_analysis_shape,
    try_bare_string,
    try_fenced_fragment,
    try_plain_text,
)


def parse_suggestions(text: Optional[str]) -> List[AISuggestion]:
    """Turn a raw model reply into suggestions; never raises"""
    text = text or ""
    for attempt in PARSE_ATTEMPTS:
        suggestions = attempt(text)
        if suggestions is not None:
            logger.debug(f"Parsed AI reply with {attempt.__name__}")
            return suggestions

    logger.warning("AI reply did not match any known format")
    return [AISuggestion(type="optimization", level="warning", message=UNEXPECTED_FORMAT_MESSAGE)]


def parse_improvements(text: Optional[str]) -> Dict[str, Any]:
    """Keep only the known, correctly typed fields of an improvement reply"""
    data = _load_json(strip_code_fences(text or ""))
    if not isinstance(data, dict):
        return {}

    result = {}
    for key in ("improvedTitle", "improvedDescription"):
        value = first_non_empty(data.get(key))
        if value:
            result[key] = value

    keywords = data.get("suggestedKeywords")
    if isinstance(keywords, list):
        keywords = [k.strip() for k in keywords if isinstance(k, str) and k.strip()]
        if keywords:
            result["suggestedKeywords"] = keywords
    return result


def _extract_response_text(response: object) -> str:
    content = ""
    for block in getattr(response, "content", []) or []:
        text = getattr(block, "text", None)
        if text:
            content += text
    return content.strip()


class AnthropicGenerator:
    """Sends a prompt to Claude and returns the raw reply text"""

    def __init__(self, api_key: str = None, scraper_config=None):
        self.config = scraper_config or config
        self.api_key = api_key if api_key is not None else os.getenv("ANTHROPIC_API_KEY")
        self._client = None

    def _get_client(self) -> AsyncAnthropic:
        if not self.api_key:
            raise SuggestionEngineError("ANTHROPIC_API_KEY not found in environment")
        if self._client is None:
            self._client = AsyncAnthropic(api_key=self.api_key, timeout=self.config.ai_timeout)
        return self._client

    async def generate(self, prompt: str) -> str:
        client = self._get_client()
        try:
            response = await client.messages.create(
                model=self.config.ai_model,
                max_tokens=self.config.ai_max_tokens,
                temperature=self.config.ai_temperature,
                system=SYSTEM_MESSAGE,
                messages=[{"role": "user", "content": prompt}],
            )
        except APIError as e:
            raise SuggestionEngineError(f"Claude request failed: {e}") from e

        if getattr(response, "stop_reason", None) == "max_tokens":
            logger.warning(f"Claude output hit max_tokens for model={self.config.ai_model}")
        return _extract_response_text(response)


class SuggestionEngine:
    """Asks the generative model about a page and parses what comes back"""

    def __init__(self, generator=None, scraper_config=None):
        self.config = scraper_config or config
        self.generator = generator or AnthropicGenerator(scraper_config=self.config)

    async def analyze_seo_tags(self, url: str, title: str, description: str, content: str,
                               open_graph_tags: Dict[str, str],
                               twitter_tags: Dict[str, str]) -> List[AISuggestion]:
        """Suggestions for the raw tags of a page; failures become one error-level entry"""
        prompt = build_suggestion_prompt(
            url, title, description, content, open_graph_tags, twitter_tags,
            content_limit=self.config.prompt_content_length,
        )
        try:
            reply = await self.generator.generate(prompt)
        except Exception as e:
            logger.error(f"AI analysis error for {url}: {e}")
            return [AISuggestion(type="optimization", level="error", message=AI_FAILURE_MESSAGE)]

        suggestions = parse_suggestions(reply)
        logger.info(f"AI analysis produced {len(suggestions)} suggestions for {url}")
        return suggestions

    async def generate_improved_tags(self, url: str, title: Optional[str], description: Optional[str],
                                     content: str, type: str) -> Dict[str, Any]:
        """Improved title, description and keywords; empty dict on any failure"""
        prompt = build_improvement_prompt(
            url, title, description, content, type,
            content_limit=self.config.improve_content_length,
        )
        try:
            reply = await self.generator.generate(prompt)
        except Exception as e:
            logger.error(f"AI content generation error for {url}: {e}")
            return {}
        return parse_improvements(reply)
