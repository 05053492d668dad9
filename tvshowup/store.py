from __future__ import annotations

import sqlite3
from typing import List

from .models import ContentRecord, movie_row_to_record, show_row_to_record


MOVIE_COLUMNS = (
    "id, slug, title, original_title, popularity, vote_average, release_date, "
    "updated_at, poster_path, backdrop_path"
)
SHOW_COLUMNS = (
    "id, slug, name, original_name, popularity, vote_average, first_air_date, "
    "in_production, updated_at, poster_path, backdrop_path"
)


class SQLiteContentStore:
    """
    Read-only view of the local catalog used by the sitemap assemblers.

    Any object exposing ``top_movies(limit)`` and ``top_tv_shows(limit)`` can
    stand in for this class.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def _top(self, table: str, columns: str, limit: int) -> List[sqlite3.Row]:
        return self.conn.execute(
            f"""
            SELECT {columns}
            FROM {table}
            WHERE slug IS NOT NULL AND slug != ''
            ORDER BY popularity DESC
            LIMIT ?
            """,
            (limit,),
        ).fetchall()

    def top_movies(self, limit: int) -> List[ContentRecord]:
        return [movie_row_to_record(row) for row in self._top("movies", MOVIE_COLUMNS, limit)]

    def top_tv_shows(self, limit: int) -> List[ContentRecord]:
        return [show_row_to_record(row) for row in self._top("tv_shows", SHOW_COLUMNS, limit)]
