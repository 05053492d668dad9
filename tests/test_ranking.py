from datetime import date

import pytest

from conftest import TODAY
from tvshowup.ranking import (
    STATIC_PAGES,
    calculate_changefreq,
    calculate_priority,
    record_changefreq,
    record_priority,
)
from tvshowup.models import ContentRecord


def test_priority_steps_follow_popularity():
    scores = [calculate_priority(p, 0, None, TODAY) for p in (150, 60, 25, 15, 5)]
    assert scores == [0.9, 0.85, 0.75, 0.65, 0.6]
    assert scores == sorted(scores, reverse=True)


def test_priority_thresholds_are_exclusive():
    assert calculate_priority(100, 0, None, TODAY) == 0.85
    assert calculate_priority(10, 0, None, TODAY) == 0.6


@pytest.mark.parametrize("popularity", [0, 0.5, 11, 21, 51, 101, 10_000, None, "abc"])
@pytest.mark.parametrize("rating", [0, 7.9, 8.0, 10, None])
@pytest.mark.parametrize("released", [None, "2026-09-19", "1999-01-01", "not-a-date"])
def test_priority_always_within_bounds(popularity, rating, released):
    assert 0.5 <= calculate_priority(popularity, rating, released, TODAY) <= 1.0


def test_rating_and_recency_bonuses_cap_at_one():
    one_month_ago = date(2026, 9, 19)
    assert calculate_priority(150, 8.5, one_month_ago, TODAY) == 1.0
    assert calculate_priority(25, 8.5, one_month_ago, TODAY) == pytest.approx(0.85)
    assert calculate_priority(5, 8.5, one_month_ago, TODAY) == pytest.approx(0.7)


def test_recency_cutoff_is_strict():
    assert calculate_priority(5, 0, date(2026, 4, 19), TODAY) == 0.6
    assert calculate_priority(5, 0, date(2026, 4, 20), TODAY) == pytest.approx(0.65)


def test_priority_accepts_string_values():
    assert calculate_priority("150.2", "8.1", "2026-10-01", TODAY) == 1.0


def test_unparseable_date_skips_bonus():
    assert calculate_priority(5, 0, "someday", TODAY) == 0.6


def test_in_production_dominates_recency():
    five_years_ago = date(2021, 10, 19)
    assert calculate_changefreq(five_years_ago, in_production=True, today=TODAY) == "weekly"


def test_changefreq_by_release_date():
    assert calculate_changefreq(date(2026, 6, 19), today=TODAY) == "monthly"
    assert calculate_changefreq(date(2026, 9, 19), today=TODAY) == "weekly"
    assert calculate_changefreq(None, today=TODAY) == "monthly"


def test_record_helpers_use_record_fields():
    show = ContentRecord(
        id=1,
        media_type="tv",
        title="Show",
        popularity=60,
        vote_average=9.1,
        primary_date=date(2010, 1, 1),
        in_production=True,
    )
    assert record_priority(show, TODAY) == pytest.approx(0.9)
    assert record_changefreq(show, TODAY) == "weekly"


def test_static_page_table():
    table = {page.path: (page.changefreq, page.priority) for page in STATIC_PAGES}
    assert table == {
        "/": ("daily", 1.0),
        "/search": ("daily", 0.8),
        "/discover-lists": ("weekly", 0.7),
        "/about": ("monthly", 0.5),
        "/privacy": ("yearly", 0.3),
        "/terms": ("yearly", 0.3),
        "/contact": ("monthly", 0.4),
    }
