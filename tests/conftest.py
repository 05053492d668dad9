from __future__ import annotations

from datetime import date

import pytest

from tvshowup import create_app
from tvshowup.config import SitemapConfig
from tvshowup.db import connect

TODAY = date(2026, 10, 19)
NINE_LANGUAGES = ("en", "tr", "de", "fr", "es", "it", "pt", "ja", "ko")


def insert_movie(conn, movie_id, title, slug, popularity=10.0, vote_average=5.0,
                 release_date="2020-01-01", updated_at="2026-10-01T08:30:00",
                 poster_path=None, backdrop_path=None, original_title=None):
    conn.execute(
        """
        INSERT INTO movies (id, title, original_title, slug, popularity, vote_average,
                            release_date, updated_at, poster_path, backdrop_path)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (movie_id, title, original_title or title, slug, popularity, vote_average,
         release_date, updated_at, poster_path, backdrop_path),
    )
    conn.commit()


def insert_show(conn, show_id, name, slug, popularity=10.0, vote_average=5.0,
                first_air_date="2015-01-01", in_production=False,
                updated_at="2026-10-01T08:30:00", poster_path=None, backdrop_path=None):
    conn.execute(
        """
        INSERT INTO tv_shows (id, name, original_name, slug, popularity, vote_average,
                              first_air_date, in_production, updated_at, poster_path, backdrop_path)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (show_id, name, name, slug, popularity, vote_average, first_air_date,
         int(in_production), updated_at, poster_path, backdrop_path),
    )
    conn.commit()


class FakePeopleClient:
    """Stands in for TMDbClient.popular_people; pages are 1-based."""

    def __init__(self, pages=None, fail_on=None, error=None):
        self.pages = pages or []
        self.fail_on = fail_on
        self.error = error
        self.calls = []

    def popular_people(self, page=1):
        self.calls.append(page)
        if self.error is not None and page == self.fail_on:
            raise self.error
        results = self.pages[page - 1] if page <= len(self.pages) else []
        return {"page": page, "results": results}


def person(person_id, name, profile_path="/p.jpg", department="Acting"):
    return {
        "id": person_id,
        "name": name,
        "profile_path": profile_path,
        "popularity": 12.5,
        "known_for_department": department,
    }


@pytest.fixture
def sitemap_config():
    return SitemapConfig(base_url="https://example.test", languages=NINE_LANGUAGES)


@pytest.fixture
def settings_file(tmp_path):
    path = tmp_path / "tvshowup.yaml"
    path.write_text(
        "site:\n"
        "  base_url: https://example.test\n"
        f"  languages: [{', '.join(NINE_LANGUAGES)}]\n"
        "import:\n"
        "  page_delay: 0\n"
        "logging:\n"
        "  level: WARNING\n"
    )
    return path


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "catalog.db")


@pytest.fixture
def conn(db_path):
    conn = connect(db_path)
    yield conn
    conn.close()


@pytest.fixture
def app(settings_file, db_path, monkeypatch):
    monkeypatch.delenv("SITE_BASE_URL", raising=False)
    monkeypatch.delenv("DATABASE_PATH", raising=False)
    return create_app(
        {"TESTING": True, "DATABASE_PATH": db_path, "TMDB_API_KEY": "test-key"},
        config_path=str(settings_file),
    )


@pytest.fixture
def client(app):
    return app.test_client()
