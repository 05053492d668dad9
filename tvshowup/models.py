from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence

from dateutil.parser import isoparse

MOVIES_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS movies (
    id INTEGER PRIMARY KEY,
    title TEXT NOT NULL,
    original_title TEXT,
    overview TEXT DEFAULT '',
    release_date TEXT,
    poster_path TEXT,
    backdrop_path TEXT,
    vote_average REAL DEFAULT 0.0,
    vote_count INTEGER DEFAULT 0,
    popularity REAL DEFAULT 0.0,
    adult INTEGER DEFAULT 0,
    video INTEGER DEFAULT 0,
    original_language TEXT,
    slug TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""

TV_SHOWS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS tv_shows (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    original_name TEXT,
    overview TEXT DEFAULT '',
    first_air_date TEXT,
    in_production INTEGER DEFAULT 0,
    poster_path TEXT,
    backdrop_path TEXT,
    vote_average REAL DEFAULT 0.0,
    vote_count INTEGER DEFAULT 0,
    popularity REAL DEFAULT 0.0,
    adult INTEGER DEFAULT 0,
    original_language TEXT,
    origin_country TEXT,
    slug TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""

INDEX_SQL: Sequence[str] = (
    "CREATE INDEX IF NOT EXISTS ix_movies_popularity ON movies (popularity);",
    "CREATE INDEX IF NOT EXISTS ix_tv_shows_popularity ON tv_shows (popularity);",
)


def init_db(conn: sqlite3.Connection) -> None:
    """Create tables and indexes if they do not yet exist."""
    conn.execute(MOVIES_TABLE_SQL)
    conn.execute(TV_SHOWS_TABLE_SQL)
    for stmt in INDEX_SQL:
        conn.execute(stmt)
    conn.commit()


@dataclass
class ContentRecord:
    """A movie or TV show as the sitemap sees it."""

    id: int
    media_type: str
    title: str
    original_title: Optional[str] = None
    slug: Optional[str] = None
    popularity: float = 0.0
    vote_average: float = 0.0
    primary_date: Optional[date] = None
    updated_at: Optional[datetime] = None
    in_production: bool = False
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None

    @property
    def display_title(self) -> str:
        return self.title or self.original_title or ""


@dataclass
class PersonRecord:
    id: int
    name: str
    profile_path: Optional[str] = None
    popularity: float = 0.0
    known_for_department: Optional[str] = None


def to_float(value: Any) -> float:
    """Numeric coercion where anything unusable counts as zero."""
    try:
        return float(value or 0.0)
    except (TypeError, ValueError):
        return 0.0


def parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return isoparse(str(value).strip())
    except (ValueError, OverflowError):
        return None


def parse_date(value: Any) -> Optional[date]:
    parsed = parse_datetime(value)
    return parsed.date() if parsed else None


def movie_row_to_record(row: Mapping[str, Any]) -> ContentRecord:
    """Convert a sqlite3.Row from movies into a ContentRecord."""
    data = dict(row)
    return ContentRecord(
        id=int(data["id"]),
        media_type="movie",
        title=data.get("title") or "",
        original_title=data.get("original_title"),
        slug=data.get("slug"),
        popularity=to_float(data.get("popularity")),
        vote_average=to_float(data.get("vote_average")),
        primary_date=parse_date(data.get("release_date")),
        updated_at=parse_datetime(data.get("updated_at")),
        poster_path=data.get("poster_path"),
        backdrop_path=data.get("backdrop_path"),
    )


def show_row_to_record(row: Mapping[str, Any]) -> ContentRecord:
    """Convert a sqlite3.Row from tv_shows into a ContentRecord."""
    data = dict(row)
    return ContentRecord(
        id=int(data["id"]),
        media_type="tv",
        title=data.get("name") or "",
        original_title=data.get("original_name"),
        slug=data.get("slug"),
        popularity=to_float(data.get("popularity")),
        vote_average=to_float(data.get("vote_average")),
        primary_date=parse_date(data.get("first_air_date")),
        updated_at=parse_datetime(data.get("updated_at")),
        in_production=bool(data.get("in_production")),
        poster_path=data.get("poster_path"),
        backdrop_path=data.get("backdrop_path"),
    )


def person_from_api(item: Mapping[str, Any]) -> PersonRecord:
    """Convert one TMDb /person/popular result."""
    return PersonRecord(
        id=int(item["id"]),
        name=item.get("name") or "",
        profile_path=item.get("profile_path"),
        popularity=to_float(item.get("popularity")),
        known_for_department=item.get("known_for_department"),
    )
