"""
Configuration file for the metadata analyzer
"""
import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()

# Fallback values for every normalized metadata field
METADATA_DEFAULTS = {
    "title": "Untitled",
    "description": "No description available.",
    "image": "https://example.com/default.jpg",
    "type": "website",
    "locale": "en_US",
    "image_alt": "Preview image",
    "twitter_card": "summary_large_image",
}

OPEN_GRAPH_TYPES = ("website", "article", "product", "profile")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off"}


@dataclass
class MetaTagConfig:
    """Configuration settings for the metadata analyzer"""

    # Database settings
    db_path: str = "metatag_data.db"

    # Browser settings
    headless: bool = True
    render_timeout: int = 30

    # Static fallback
    static_timeout: int = 10

    # Extraction bounds
    content_excerpt_length: int = 5000
    prompt_content_length: int = 1000
    improve_content_length: int = 1500

    # Analyses younger than this are served from the store
    analysis_cache_seconds: int = 3600

    # AI suggestion engine
    ai_model: str = "claude-3-5-sonnet-latest"
    ai_max_tokens: int = 1500
    ai_timeout: float = 30.0
    ai_temperature: float = 0.2

    # User agents for rotation
    user_agents: List[str] = field(default_factory=lambda: [
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ])

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(levelname)s - %(message)s"
    log_dir: str = "logs"

    @classmethod
    def from_env(cls) -> "MetaTagConfig":
        """Build a configuration, letting environment variables override defaults"""
        defaults = cls()
        return cls(
            db_path=os.getenv("METATAG_DB_PATH", defaults.db_path),
            headless=_env_bool("METATAG_HEADLESS", defaults.headless),
            render_timeout=int(os.getenv("METATAG_RENDER_TIMEOUT", defaults.render_timeout)),
            static_timeout=int(os.getenv("METATAG_STATIC_TIMEOUT", defaults.static_timeout)),
            analysis_cache_seconds=int(os.getenv("METATAG_CACHE_SECONDS", defaults.analysis_cache_seconds)),
            ai_model=os.getenv("CLAUDE_MODEL", "").strip() or defaults.ai_model,
            ai_max_tokens=int(os.getenv("CLAUDE_MAX_TOKENS", defaults.ai_max_tokens)),
            ai_timeout=float(os.getenv("CLAUDE_TIMEOUT", defaults.ai_timeout)),
            log_level=os.getenv("METATAG_LOG_LEVEL", defaults.log_level).upper(),
            log_dir=os.getenv("METATAG_LOG_DIR", defaults.log_dir),
        )

# Default configuration instance
config = MetaTagConfig.from_env()
