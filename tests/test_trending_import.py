import logging

import pytest
import requests

from etl.trending_import import TrendingImportService


class PagedTrendingClient:
    def __init__(self, movies=None, shows=None, fail_pages=()):
        self.movies = movies or {}
        self.shows = shows or {}
        self.fail_pages = fail_pages
        self.calls = []

    def trending(self, media_type, window="week", page=1):
        self.calls.append((media_type, window, page))
        if page in self.fail_pages:
            raise requests.HTTPError(f"429 Too Many Requests (page {page})")
        source = self.movies if media_type == "movie" else self.shows
        return {"page": page, "results": source.get(page, [])}


def service(conn, client, **import_config):
    config = {"import": {"page_delay": 0, **import_config}}
    return TrendingImportService(config, client=client, conn=conn)


def test_movies_upserted_with_slug(conn):
    client = PagedTrendingClient(movies={1: [
        {"id": 11, "title": "Star Wars", "original_title": "Star Wars", "popularity": 80.5,
         "vote_average": 8.2, "vote_count": 20000, "release_date": "1977-05-25"},
        {"id": 12, "title": "Amélie", "original_title": "Le Fabuleux Destin d'Amélie Poulain",
         "release_date": ""},
    ]})

    results = service(conn, client).run("movie", pages=1)

    assert results == {"movies": {"imported": 2, "errors": 0}, "tv_shows": {"imported": 0, "errors": 0}}
    rows = {row["id"]: row for row in conn.execute("SELECT * FROM movies")}
    assert rows[11]["slug"] == "11-star-wars"
    assert rows[12]["slug"] == "12-le-fabuleux-destin-damlie-poulain"
    assert rows[12]["release_date"] is None
    assert rows[11]["updated_at"]
    assert client.calls == [("movie", "week", 1)]


def test_reimport_updates_in_place(conn):
    first = PagedTrendingClient(movies={1: [{"id": 5, "title": "Old", "popularity": 1}]})
    second = PagedTrendingClient(movies={1: [{"id": 5, "title": "Old", "popularity": 99}]})

    service(conn, first).run("movie", pages=1)
    service(conn, second).run("movie", pages=1)

    rows = conn.execute("SELECT popularity FROM movies WHERE id = 5").fetchall()
    assert len(rows) == 1
    assert rows[0]["popularity"] == 99


def test_tv_shows_imported(conn):
    client = PagedTrendingClient(shows={
        1: [{"id": 1399, "name": "Game of Thrones", "original_name": "Game of Thrones",
             "first_air_date": "2011-04-17", "origin_country": ["US"]}],
        2: [{"id": 1400, "name": "Seinfeld"}],
    })

    results = service(conn, client).run("tv", pages=2)

    assert results["tv_shows"] == {"imported": 2, "errors": 0}
    row = conn.execute("SELECT * FROM tv_shows WHERE id = 1399").fetchone()
    assert row["slug"] == "1399-game-of-thrones"
    assert row["origin_country"] == "US"


def test_bad_items_are_counted_not_fatal(conn, caplog):
    client = PagedTrendingClient(movies={1: [{"title": "No id"}, {"id": 3, "title": "Fine"}]})

    with caplog.at_level(logging.ERROR, logger="etl.TrendingImportService"):
        results = service(conn, client).run("movie", pages=1)

    assert results["movies"] == {"imported": 1, "errors": 1}
    assert "Error importing movie" in caplog.text


def test_failed_page_is_skipped(conn, caplog):
    client = PagedTrendingClient(
        movies={2: [{"id": 8, "title": "Page Two"}]},
        fail_pages=(1,),
    )

    with caplog.at_level(logging.ERROR, logger="etl.TrendingImportService"):
        results = service(conn, client).run("movie", pages=2)

    assert results["movies"]["imported"] == 1
    assert "Error fetching movies page 1" in caplog.text


def test_fixed_delay_between_pages(conn, monkeypatch):
    sleeps = []
    monkeypatch.setattr("etl.trending_import.time.sleep", sleeps.append)

    service(conn, PagedTrendingClient(), page_delay=0.3).run("both", pages=3)

    assert sleeps == [0.3, 0.3, 0.3, 0.3]


def test_defaults_come_from_config(conn):
    client = PagedTrendingClient()
    service(conn, client, content_type="tv", pages=2).run()
    assert client.calls == [("tv", "week", 1), ("tv", "week", 2)]


@pytest.mark.parametrize("kwargs", [{"content_type": "anime"}, {"pages": 0}])
def test_invalid_arguments(conn, kwargs):
    with pytest.raises(ValueError):
        service(conn, PagedTrendingClient()).run(**kwargs)
