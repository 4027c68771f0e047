"""
Logging setup and in-process metrics for the metadata analyzer
"""
import logging
import os
from dataclasses import dataclass, asdict
from datetime import datetime
from threading import Lock
from typing import Any, Dict, List

from config import config


def setup_logging(log_level: str = None, log_dir: str = None):
    """Configure console and file logging on the root logger"""
    log_level = (log_level or config.log_level).upper()
    log_dir = log_dir or config.log_dir

    # Create logs directory if it doesn't exist
    if not os.path.exists(log_dir):
        os.makedirs(log_dir)

    # Create formatters
    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    simple_formatter = logging.Formatter(config.log_format)

    # Root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level, logging.INFO))

    # Clear existing handlers
    root_logger.handlers.clear()

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(simple_formatter)
    root_logger.addHandler(console_handler)

    # File handler for all logs
    file_handler = logging.FileHandler(
        os.path.join(log_dir, 'metatag.log'),
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(detailed_formatter)
    root_logger.addHandler(file_handler)

    # Error log handler
    error_handler = logging.FileHandler(
        os.path.join(log_dir, 'errors.log'),
        encoding='utf-8'
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(detailed_formatter)
    root_logger.addHandler(error_handler)

    return root_logger


@dataclass
class AnalysisMetrics:
    """Snapshot of analysis counters"""
    timestamp: str
    analyses: int
    cache_hits: int
    cache_misses: int
    failures: int
    render_fallbacks: int
    tags_generated: int
    avg_response_time: float
    cache_hit_rate: float


class MetricsCollector:
    """Collects application metrics in memory"""

    def __init__(self):
        self.metrics_lock = Lock()
        self.analyses = 0
        self.cache_hits = 0
        self.cache_misses = 0
        self.failures = 0
        self.render_fallbacks = 0
        self.tags_generated = 0
        self.response_times: List[float] = []

    def record_analysis(self, response_time: float):
        """Record a completed analysis"""
        with self.metrics_lock:
            self.analyses += 1
            self.response_times.append(response_time)
            # Keep the window bounded
            if len(self.response_times) > 1000:
                self.response_times = self.response_times[-1000:]

    def record_failure(self):
        with self.metrics_lock:
            self.failures += 1

    def record_render_fallback(self):
        with self.metrics_lock:
            self.render_fallbacks += 1

    def record_cache_hit(self):
        with self.metrics_lock:
            self.cache_hits += 1

    def record_cache_miss(self):
        with self.metrics_lock:
            self.cache_misses += 1

    def record_tags_generated(self):
        with self.metrics_lock:
            self.tags_generated += 1

    def snapshot(self) -> AnalysisMetrics:
        with self.metrics_lock:
            lookups = self.cache_hits + self.cache_misses
            return AnalysisMetrics(
                timestamp=datetime.now().isoformat(),
                analyses=self.analyses,
                cache_hits=self.cache_hits,
                cache_misses=self.cache_misses,
                failures=self.failures,
                render_fallbacks=self.render_fallbacks,
                tags_generated=self.tags_generated,
                avg_response_time=(
                    sum(self.response_times) / len(self.response_times) if self.response_times else 0.0
                ),
                cache_hit_rate=(self.cache_hits / lookups * 100) if lookups else 0.0,
            )

    def get_metrics(self) -> Dict[str, Any]:
        """Current metrics as a plain dict"""
        return asdict(self.snapshot())
