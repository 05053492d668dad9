#!/usr/bin/env python3
"""
Trending content importer
Pulls TMDb weekly trending movies / TV shows and upserts them, slug included,
into the catalog the sitemaps are generated from
"""
from __future__ import annotations

import logging
import sqlite3
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from tvshowup.db import connect
from tvshowup.config import database_path
from tvshowup.slugs import generate_slug
from tvshowup.tmdb import TMDbClient


CONTENT_TYPES = ("movie", "tv", "both")
DEFAULT_PAGES = 5
DEFAULT_PAGE_DELAY = 0.3


class TrendingImportService:
    """
    Imports trending titles page by page with a fixed pause between pages
    """

    def __init__(self, config: dict, client: Optional[TMDbClient] = None,
                 conn: Optional[sqlite3.Connection] = None):
        self.config = config
        self.logger = logging.getLogger('etl.TrendingImportService')

        api_config = config.get('api', {})
        self.client = client or TMDbClient(timeout=api_config.get('timeout', 20))

        import_config = config.get('import', {})
        self.page_delay = float(import_config.get('page_delay', DEFAULT_PAGE_DELAY))
        self.default_pages = int(import_config.get('pages', DEFAULT_PAGES))
        self.default_content_type = import_config.get('content_type', 'both')

        self._conn = conn

    def _get_db_connection(self) -> sqlite3.Connection:
        """A new connection per run; scheduled runs land on different worker threads"""
        enable_wal = self.config.get('database', {}).get('enable_wal', True)
        db_path = database_path(self.config)
        self.logger.info(f"Database path: {db_path}")
        return connect(db_path, enable_wal=enable_wal)

    def _upsert_movie(self, conn: sqlite3.Connection, movie: dict, now: str):
        """Insert or update a trending movie"""
        conn.execute(
            """
            INSERT INTO movies (
                id, title, original_title, overview, release_date, poster_path,
                backdrop_path, vote_average, vote_count, popularity, adult,
                original_language, video, slug, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                title = excluded.title,
                original_title = excluded.original_title,
                overview = excluded.overview,
                release_date = excluded.release_date,
                poster_path = excluded.poster_path,
                backdrop_path = excluded.backdrop_path,
                vote_average = excluded.vote_average,
                vote_count = excluded.vote_count,
                popularity = excluded.popularity,
                adult = excluded.adult,
                original_language = excluded.original_language,
                video = excluded.video,
                slug = excluded.slug,
                updated_at = excluded.updated_at
            """,
            (
                movie['id'],
                movie.get('title') or movie.get('original_title') or 'Untitled',
                movie.get('original_title'),
                movie.get('overview'),
                movie.get('release_date') or None,
                movie.get('poster_path'),
                movie.get('backdrop_path'),
                float(movie.get('vote_average') or 0),
                int(movie.get('vote_count') or 0),
                float(movie.get('popularity') or 0),
                bool(movie.get('adult')),
                movie.get('original_language'),
                bool(movie.get('video')),
                generate_slug(movie['id'], movie.get('original_title') or movie.get('title')),
                now,
            )
        )

    def _upsert_show(self, conn: sqlite3.Connection, show: dict, now: str):
        """Insert or update a trending TV show"""
        origin_country = show.get('origin_country')
        if isinstance(origin_country, list):
            origin_country = ",".join(origin_country) or None

        conn.execute(
            """
            INSERT INTO tv_shows (
                id, name, original_name, overview, first_air_date, poster_path,
                backdrop_path, vote_average, vote_count, popularity, adult,
                original_language, origin_country, slug, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                name = excluded.name,
                original_name = excluded.original_name,
                overview = excluded.overview,
                first_air_date = excluded.first_air_date,
                poster_path = excluded.poster_path,
                backdrop_path = excluded.backdrop_path,
                vote_average = excluded.vote_average,
                vote_count = excluded.vote_count,
                popularity = excluded.popularity,
                adult = excluded.adult,
                original_language = excluded.original_language,
                origin_country = excluded.origin_country,
                slug = excluded.slug,
                updated_at = excluded.updated_at
            """,
            (
                show['id'],
                show.get('name') or show.get('original_name') or 'Untitled',
                show.get('original_name'),
                show.get('overview'),
                show.get('first_air_date') or None,
                show.get('poster_path'),
                show.get('backdrop_path'),
                float(show.get('vote_average') or 0),
                int(show.get('vote_count') or 0),
                float(show.get('popularity') or 0),
                bool(show.get('adult')),
                show.get('original_language'),
                origin_country,
                generate_slug(show['id'], show.get('original_name') or show.get('name')),
                now,
            )
        )

    def _import_kind(self, conn: sqlite3.Connection, media_type: str, pages: int) -> Dict[str, int]:
        upsert = self._upsert_movie if media_type == 'movie' else self._upsert_show
        label = 'movies' if media_type == 'movie' else 'TV shows'
        result = {'imported': 0, 'errors': 0}

        self.logger.info(f"Fetching trending {label}...")
        for page in range(1, pages + 1):
            try:
                data = self.client.trending(media_type, 'week', page)
            except Exception as e:
                self.logger.error(f"Error fetching {label} page {page}: {e}")
                data = {}

            now = datetime.now(timezone.utc).isoformat(timespec='seconds')
            for item in data.get('results') or []:
                try:
                    with conn:
                        upsert(conn, item, now)
                    result['imported'] += 1
                except (sqlite3.Error, KeyError, TypeError, ValueError) as e:
                    self.logger.error(f"Error importing {media_type} {item.get('id')}: {e}")
                    result['errors'] += 1

            if page < pages and self.page_delay > 0:
                time.sleep(self.page_delay)

        return result

    def run(self, content_type: Optional[str] = None, pages: Optional[int] = None) -> Dict[str, Any]:
        """Import trending movies and/or TV shows; returns per-kind counters"""
        content_type = content_type or self.default_content_type
        if content_type not in CONTENT_TYPES:
            raise ValueError(f"content_type must be one of {', '.join(CONTENT_TYPES)}")
        pages = self.default_pages if pages is None else int(pages)
        if pages < 1:
            raise ValueError("pages must be at least 1")

        start_time = time.time()
        self.logger.info(f"Importing trending content (type: {content_type}, pages: {pages})")

        # An injected connection (request-scoped) belongs to the caller
        conn = self._conn if self._conn is not None else self._get_db_connection()
        results = {
            'movies': {'imported': 0, 'errors': 0},
            'tv_shows': {'imported': 0, 'errors': 0},
        }
        try:
            if content_type in ('movie', 'both'):
                results['movies'] = self._import_kind(conn, 'movie', pages)
            if content_type in ('tv', 'both'):
                results['tv_shows'] = self._import_kind(conn, 'tv', pages)
        finally:
            if conn is not self._conn:
                conn.close()

        self.logger.info(f"Import completed in {time.time() - start_time:.2f}s: {results}")
        return results
