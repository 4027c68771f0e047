"""
Main application for the metadata analyzer - orchestrates all components
"""
import argparse
import json
import time
import logging
from typing import Any, Dict, List, Optional

from config import config
from database import DatabaseManager
from exceptions import MetaTagError
from models import UrlAnalysis, GeneratedTags
from monitoring import MetricsCollector, setup_logging
from url_analyzer import UrlAnalyzer
from ai_service import SuggestionEngine
from browser_utils import shutdown_browser
from tag_generator import generate_tags, validate_tags

logger = logging.getLogger(__name__)


class MetaTagApp:
    """Main metadata analyzer application"""

    def __init__(self, db_manager: DatabaseManager = None, analyzer: UrlAnalyzer = None,
                 suggestion_engine: SuggestionEngine = None, scraper_config=None,
                 configure_logging: bool = True):
        self.config = scraper_config or config
        if configure_logging:
            setup_logging(self.config.log_level, self.config.log_dir)

        self.metrics_collector = MetricsCollector()
        self.db_manager = db_manager or DatabaseManager(self.config.db_path)
        self.suggestion_engine = suggestion_engine or SuggestionEngine(scraper_config=self.config)
        self.analyzer = analyzer or UrlAnalyzer(
            suggestion_engine=self.suggestion_engine,
            metrics_collector=self.metrics_collector,
            scraper_config=self.config,
        )

        logger.info("Metadata analyzer application initialized")

    async def analyze_url(self, url: str) -> UrlAnalysis:
        """Analyze a URL, serving a stored analysis while it is still fresh"""
        if isinstance(url, str):
            url = url.strip()
        cached = self.db_manager.get_cached_url_analysis(url, self.config.analysis_cache_seconds)
        if cached:
            self.metrics_collector.record_cache_hit()
            logger.info(f"Using cached analysis for {url}")
            return cached
        self.metrics_collector.record_cache_miss()

        start_time = time.time()
        try:
            result = await self.analyzer.analyze_url(url)
        except MetaTagError:
            self.metrics_collector.record_failure()
            raise

        analysis = self.db_manager.create_url_analysis(result)
        response_time = time.time() - start_time
        self.metrics_collector.record_analysis(response_time)
        logger.info(f"Successfully analyzed {url} in {response_time:.2f}s")
        return analysis

    def generate_tags(self, title: str, description: str, url: str, type: str,
                      image: Optional[str] = None, site_name: Optional[str] = None) -> GeneratedTags:
        """Render tag markup for hand-authored fields and store the request"""
        generated_code = generate_tags(
            title=title, description=description, url=url, type=type,
            image=image, site_name=site_name,
        )
        tags = self.db_manager.create_generated_tags(
            title=title, description=description, url=url, type=type,
            generated_code=generated_code, image=image, site_name=site_name,
        )
        self.metrics_collector.record_tags_generated()
        return tags

    async def improve_tags(self, url: str, content: str, type: str,
                           title: Optional[str] = None, description: Optional[str] = None) -> Dict[str, Any]:
        """Ask the AI for a better title, description and keywords"""
        return await self.suggestion_engine.generate_improved_tags(
            url=url, title=title, description=description, content=content, type=type,
        )

    def get_recent_tags(self, limit: int = 10) -> List[GeneratedTags]:
        return self.db_manager.get_recent_generated_tags(limit)

    def validate_tags(self, tags: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        return validate_tags(tags)

    def get_system_status(self) -> Dict[str, Any]:
        """Get application status with current metrics"""
        metrics = self.metrics_collector.get_metrics()
        return {
            "status": "healthy",
            "timestamp": metrics["timestamp"],
            "metrics": metrics,
        }

    def cleanup_old_data(self, days_to_keep: int = 30):
        """Clean up old data"""
        logger.info(f"Cleaning up data older than {days_to_keep} days")
        self.db_manager.cleanup_old_data(days_to_keep)

    async def shutdown(self):
        """Gracefully shutdown the application"""
        logger.info("Shutting down metadata analyzer application")
        await shutdown_browser()
        logger.info("Application shutdown completed")


def create_cli():
    """Create command line interface"""
    parser = argparse.ArgumentParser(description="Metadata analyzer - OpenGraph, Twitter Card and JSON-LD tools")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Analyze URL command
    analyze_parser = subparsers.add_parser("analyze", help="Analyze the social metadata of a URL")
    analyze_parser.add_argument("url", help="URL to analyze")

    # Generate tags command
    generate_parser = subparsers.add_parser("generate", help="Generate meta tags for a page")
    generate_parser.add_argument("--title", required=True)
    generate_parser.add_argument("--description", required=True)
    generate_parser.add_argument("--url", required=True)
    generate_parser.add_argument("--type", default="website",
                                 choices=["website", "article", "product", "video"])
    generate_parser.add_argument("--image")
    generate_parser.add_argument("--site-name")

    # Improve command
    improve_parser = subparsers.add_parser("improve", help="Suggest an improved title and description")
    improve_parser.add_argument("url", help="Page URL")
    improve_parser.add_argument("--content", required=True, help="Page text content")
    improve_parser.add_argument("--type", default="website")
    improve_parser.add_argument("--title")
    improve_parser.add_argument("--description")

    # Server command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=8000)

    # Cleanup command
    cleanup_parser = subparsers.add_parser("cleanup", help="Clean up old data")
    cleanup_parser.add_argument("--days", type=int, default=30, help="Days of data to keep")

    return parser


async def run_cli(args) -> int:
    """Run one CLI command; returns the process exit code"""
    app = MetaTagApp()

    try:
        if args.command == "analyze":
            analysis = await app.analyze_url(args.url)
            print(json.dumps(analysis.to_dict(), indent=2, ensure_ascii=False))

        elif args.command == "generate":
            tags = app.generate_tags(
                title=args.title, description=args.description, url=args.url,
                type=args.type, image=args.image, site_name=args.site_name,
            )
            print(tags.generated_code)

        elif args.command == "improve":
            improvements = await app.improve_tags(
                url=args.url, content=args.content, type=args.type,
                title=args.title, description=args.description,
            )
            print(json.dumps(improvements, indent=2, ensure_ascii=False))

        elif args.command == "cleanup":
            app.cleanup_old_data(args.days)
            print(f"Cleaned up data older than {args.days} days")

        return 0

    except MetaTagError as e:
        logger.error(f"Application error: {e}")
        print(f"Error: {e}")
        return 1
    finally:
        await app.shutdown()
