"""
Sitemap priority and change-frequency heuristics.

Both functions are pure: ``today`` defaults to the current UTC date but can be
pinned so results are reproducible.
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, List, NamedTuple, Optional

from dateutil.relativedelta import relativedelta

from .models import ContentRecord, parse_date, to_float

MIN_PRIORITY = 0.5
MAX_PRIORITY = 1.0

# (exclusive popularity threshold, base priority), checked top-down
POPULARITY_STEPS = (
    (100, 0.9),
    (50, 0.85),
    (20, 0.75),
    (10, 0.65),
)
DEFAULT_BASE_PRIORITY = 0.6
HIGH_RATING = 8.0
BONUS = 0.05
RECENT_PRIORITY_MONTHS = 6
RECENT_CHANGEFREQ_MONTHS = 3


class StaticPage(NamedTuple):
    path: str
    changefreq: str
    priority: float


STATIC_PAGES: List[StaticPage] = [
    StaticPage("/", "daily", 1.0),
    StaticPage("/search", "daily", 0.8),
    StaticPage("/discover-lists", "weekly", 0.7),
    StaticPage("/about", "monthly", 0.5),
    StaticPage("/privacy", "yearly", 0.3),
    StaticPage("/terms", "yearly", 0.3),
    StaticPage("/contact", "monthly", 0.4),
]


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _is_recent(primary_date: Any, months: int, today: Optional[date]) -> bool:
    released = parse_date(primary_date)
    if released is None:
        return False
    cutoff = (today or utc_today()) - relativedelta(months=months)
    return released > cutoff


def calculate_priority(
    popularity: Any,
    vote_average: Any,
    primary_date: Any = None,
    today: Optional[date] = None,
) -> float:
    """Map popularity, rating and recency onto a sitemap priority in [0.5, 1.0]."""
    popularity = to_float(popularity)
    vote_average = to_float(vote_average)

    priority = DEFAULT_BASE_PRIORITY
    for threshold, base in POPULARITY_STEPS:
        if popularity > threshold:
            priority = base
            break

    if vote_average >= HIGH_RATING:
        priority += BONUS

    if _is_recent(primary_date, RECENT_PRIORITY_MONTHS, today):
        priority += BONUS

    return min(MAX_PRIORITY, max(MIN_PRIORITY, priority))


def calculate_changefreq(
    primary_date: Any = None,
    in_production: bool = False,
    today: Optional[date] = None,
) -> str:
    if in_production:
        return "weekly"
    if _is_recent(primary_date, RECENT_CHANGEFREQ_MONTHS, today):
        return "weekly"
    return "monthly"


def record_priority(record: ContentRecord, today: Optional[date] = None) -> float:
    return calculate_priority(record.popularity, record.vote_average, record.primary_date, today)


def record_changefreq(record: ContentRecord, today: Optional[date] = None) -> str:
    return calculate_changefreq(record.primary_date, record.in_production, today)
