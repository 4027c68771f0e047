"""
Database utilities for the metadata analyzer
"""
import sqlite3
import json
import logging
from typing import Optional, List
from datetime import datetime, timedelta

from models import UrlAnalysis, UrlAnalysisResult, GeneratedTags

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Manages SQLite storage of analyses and generated tags"""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.setup_database()

    def setup_database(self):
        """Initialize SQLite database with complete schema"""
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        # URL analyses table
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS url_analyses (
                id INTEGER PRIMARY KEY,
                url TEXT NOT NULL,
                result TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
        ''')
        cursor.execute('''
            CREATE INDEX IF NOT EXISTS idx_url_analyses_url
            ON url_analyses (url, created_at)
        ''')

        # Generated tags table
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS generated_tags (
                id INTEGER PRIMARY KEY,
                title TEXT NOT NULL,
                description TEXT NOT NULL,
                image TEXT,
                url TEXT NOT NULL,
                site_name TEXT,
                type TEXT NOT NULL,
                generated_code TEXT,
                created_at TEXT NOT NULL
            )
        ''')

        conn.commit()
        conn.close()
        logger.info("Database schema initialized successfully")

    def _row_to_analysis(self, row) -> UrlAnalysis:
        return UrlAnalysis(
            id=row[0],
            created_at=row[3],
            result=UrlAnalysisResult.from_dict(json.loads(row[2])),
        )

    def create_url_analysis(self, result: UrlAnalysisResult, created_at: str = None) -> UrlAnalysis:
        """Store an analysis result and return it with its id and timestamp"""
        created_at = created_at or datetime.now().isoformat()
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        try:
            cursor.execute('''
                INSERT INTO url_analyses (url, result, created_at)
                VALUES (?, ?, ?)
            ''', (result.url, json.dumps(result.to_dict()), created_at))
            conn.commit()
            analysis_id = cursor.lastrowid
            logger.info(f"Saved analysis for: {result.url}")
        finally:
            conn.close()

        return UrlAnalysis(id=analysis_id, created_at=created_at, result=result)

    def get_url_analysis(self, analysis_id: int) -> Optional[UrlAnalysis]:
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT * FROM url_analyses WHERE id = ?", (analysis_id,))
            row = cursor.fetchone()
            return self._row_to_analysis(row) if row else None
        finally:
            conn.close()

    def get_url_analysis_by_url(self, url: str) -> Optional[UrlAnalysis]:
        """Most recent stored analysis for a URL"""
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        try:
            cursor.execute(
                "SELECT * FROM url_analyses WHERE url = ? ORDER BY created_at DESC, id DESC LIMIT 1",
                (url,)
            )
            row = cursor.fetchone()
            return self._row_to_analysis(row) if row else None
        finally:
            conn.close()

    def get_cached_url_analysis(self, url: str, max_age_seconds: int = 3600) -> Optional[UrlAnalysis]:
        """Retrieve the stored analysis for a URL if it is still fresh"""
        analysis = self.get_url_analysis_by_url(url)
        if analysis is None:
            return None

        try:
            age = datetime.now() - datetime.fromisoformat(analysis.created_at)
        except ValueError:
            return None
        if age < timedelta(seconds=max_age_seconds):
            return analysis
        return None

    def create_generated_tags(self, title: str, description: str, url: str, type: str,
                              generated_code: str, image: str = None, site_name: str = None) -> GeneratedTags:
        """Save a tag-generation request with its rendered markup"""
        created_at = datetime.now().isoformat()
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        try:
            cursor.execute('''
                INSERT INTO generated_tags
                (title, description, image, url, site_name, type, generated_code, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ''', (title, description, image or None, url, site_name or None, type, generated_code, created_at))
            conn.commit()
            tags_id = cursor.lastrowid
            logger.info(f"Saved generated tags for: {url}")
        finally:
            conn.close()

        return GeneratedTags(
            id=tags_id,
            title=title,
            description=description,
            url=url,
            type=type,
            image=image or None,
            site_name=site_name or None,
            generated_code=generated_code,
            created_at=created_at,
        )

    def get_recent_generated_tags(self, limit: int = 10) -> List[GeneratedTags]:
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        try:
            cursor.execute('''
                SELECT id, title, description, url, type, image, site_name, generated_code, created_at
                FROM generated_tags
                ORDER BY created_at DESC, id DESC
                LIMIT ?
            ''', (limit,))
            return [GeneratedTags(*row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def cleanup_old_data(self, days_to_keep: int = 30):
        """Remove old data from the database"""
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        try:
            cutoff_date = (datetime.now() - timedelta(days=days_to_keep)).isoformat()

            for table in ('url_analyses', 'generated_tags'):
                cursor.execute(f"DELETE FROM {table} WHERE created_at < ?", (cutoff_date,))

            conn.commit()
            logger.info(f"Cleaned up data older than {days_to_keep} days")
        finally:
            conn.close()
