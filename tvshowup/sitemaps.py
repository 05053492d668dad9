"""
Sitemap assemblers for the static pages, movies, TV shows and people.

Each ``iter_*`` method is a generator of XML fragments so callers can either
join them (HTTP responses) or stream them to disk (``write_sitemap``).
"""
from __future__ import annotations

import logging
from datetime import date
from typing import IO, Any, Callable, Dict, Iterator, List, Optional

import requests

from .config import SitemapConfig
from .models import ContentRecord, PersonRecord, person_from_api
from .ranking import STATIC_PAGES, record_changefreq, record_priority, utc_today
from .sitemap_xml import (
    SitemapImage,
    SitemapUrl,
    build_alternates,
    iter_sitemap_index,
    iter_urlset,
)
from .slugs import person_slug

logger = logging.getLogger(__name__)

SITEMAP_TYPES = ("main", "movies", "tvshows", "people", "index")
INDEX_ENTRIES = ("main", "movies", "tvshows", "people")
PERSON_PRIORITY = 0.7
PERSON_CHANGEFREQ = "monthly"
DEFAULT_DEPARTMENT = "Actor"


def resolve_sitemap_type(raw: Optional[str]) -> str:
    """Exact, case-sensitive match; anything else (``MOVIES`` included) is the index."""
    return raw if raw in SITEMAP_TYPES else "index"


def sitemap_filename(kind: str) -> str:
    return "sitemap.xml" if kind == "index" else f"sitemap-{kind}.xml"


class SitemapGenerator:
    """
    Builds sitemap documents from a content store and a TMDb client.

    ``store`` needs ``top_movies(limit)`` / ``top_tv_shows(limit)``; ``tmdb``
    needs ``popular_people(page)``. Either may be omitted when the matching
    sitemap is never requested.
    """

    def __init__(self, config: SitemapConfig, store: Any = None, tmdb: Any = None,
                 today: Optional[date] = None):
        self.config = config
        self.store = store
        self.tmdb = tmdb
        self.today = today or utc_today()

    # ----- shared helpers -----
    def _localized(self, path: str, **fields) -> Iterator[SitemapUrl]:
        """One URL per language, all sharing the same alternate set."""
        alternates = build_alternates(self.config, path)
        for lang in self.config.languages:
            yield SitemapUrl(
                loc=f"{self.config.base_url}/{lang}{path}",
                alternates=alternates,
                **fields,
            )

    def _image_url(self, image_path: str) -> str:
        if image_path.startswith("http"):
            return image_path
        if not image_path.startswith("/"):
            image_path = f"/{image_path}"
        return f"{self.config.image_base}{image_path}"

    def _fetch(self, label: str, method: str) -> List[ContentRecord]:
        if self.store is None:
            raise RuntimeError(f"A content store is required to build the {label} sitemap")
        try:
            records = getattr(self.store, method)(self.config.records_per_sitemap)
        except Exception as e:
            logger.error(f"Error fetching {label}: {e}")
            raise
        return [record for record in records if record.slug]

    def _content_urls(self, records: List[ContentRecord], prefix: str,
                      images_for: Callable[[ContentRecord], List[SitemapImage]]) -> Iterator[SitemapUrl]:
        for record in records:
            lastmod = record.updated_at.date() if record.updated_at else self.today
            yield from self._localized(
                f"/{prefix}/{record.slug}",
                lastmod=lastmod,
                changefreq=record_changefreq(record, self.today),
                priority=record_priority(record, self.today),
                images=images_for(record),
            )

    # ----- images -----
    def _movie_images(self, movie: ContentRecord) -> List[SitemapImage]:
        images = []
        title = movie.display_title
        if movie.poster_path:
            year = f" ({movie.primary_date.year})" if movie.primary_date else ""
            images.append(SitemapImage(
                loc=self._image_url(movie.poster_path),
                title=title,
                caption=f"{title}{year} - Movie Poster",
            ))
        if movie.backdrop_path:
            images.append(SitemapImage(
                loc=self._image_url(movie.backdrop_path),
                title=title,
                caption=f"{title} - Movie Backdrop",
            ))
        return images

    def _show_images(self, show: ContentRecord) -> List[SitemapImage]:
        images = []
        title = show.display_title
        if show.poster_path:
            images.append(SitemapImage(
                loc=self._image_url(show.poster_path),
                title=title,
                caption=f"{title} - TV Show Poster",
            ))
        if show.backdrop_path:
            images.append(SitemapImage(
                loc=self._image_url(show.backdrop_path),
                title=title,
                caption=f"{title} - TV Show Backdrop",
            ))
        return images

    # ----- assemblers -----
    def iter_main(self) -> Iterator[str]:
        urls = (
            url
            for page in STATIC_PAGES
            for url in self._localized(
                page.path,
                lastmod=self.today,
                changefreq=page.changefreq,
                priority=page.priority,
            )
        )
        return iter_urlset(urls)

    def iter_movies(self) -> Iterator[str]:
        movies = self._fetch("movies", "top_movies")
        logger.info(f"Generating sitemap for {len(movies)} movies")
        return iter_urlset(self._content_urls(movies, "movie", self._movie_images), with_images=True)

    def iter_tv_shows(self) -> Iterator[str]:
        shows = self._fetch("TV shows", "top_tv_shows")
        logger.info(f"Generating sitemap for {len(shows)} TV shows")
        return iter_urlset(self._content_urls(shows, "tv_show", self._show_images), with_images=True)

    def fetch_people(self) -> List[PersonRecord]:
        """Page through TMDb popular people until empty, refused or full."""
        if self.tmdb is None:
            raise RuntimeError("A TMDb client is required to build the people sitemap")

        limit = min(self.config.people_max_records, self.config.records_per_sitemap)
        people: List[PersonRecord] = []
        for page in range(1, self.config.people_max_pages + 1):
            try:
                data = self.tmdb.popular_people(page)
            except requests.HTTPError as e:
                logger.error(f"Error fetching popular people page {page}: {e}")
                break
            except Exception as e:
                logger.error(f"Error generating person sitemap: {e}")
                raise

            results = data.get("results") or []
            if not results:
                break
            people.extend(person_from_api(item) for item in results if item.get("id") is not None)
            if len(people) >= limit:
                break

        return people[:limit]

    def _person_urls(self, people: List[PersonRecord]) -> Iterator[SitemapUrl]:
        for person in people:
            images = []
            if person.profile_path:
                images.append(SitemapImage(
                    loc=self._image_url(person.profile_path),
                    title=person.name,
                    caption=f"{person.name} - {person.known_for_department or DEFAULT_DEPARTMENT}",
                ))
            yield from self._localized(
                f"/person/{person_slug(person.id, person.name)}",
                lastmod=self.today,
                changefreq=PERSON_CHANGEFREQ,
                priority=PERSON_PRIORITY,
                images=images,
            )

    def iter_people(self) -> Iterator[str]:
        people = self.fetch_people()
        logger.info(f"Generating sitemap for {len(people)} people")
        return iter_urlset(self._person_urls(people), with_images=True)

    def iter_index(self) -> Iterator[str]:
        # Every entry is stamped with today, not the content's own freshness
        locations = [f"{self.config.base_url}/{sitemap_filename(kind)}" for kind in INDEX_ENTRIES]
        return iter_sitemap_index(locations, self.today)

    # ----- entry points -----
    def iter_sitemap(self, kind: str) -> Iterator[str]:
        builders: Dict[str, Callable[[], Iterator[str]]] = {
            "main": self.iter_main,
            "movies": self.iter_movies,
            "tvshows": self.iter_tv_shows,
            "people": self.iter_people,
            "index": self.iter_index,
        }
        return builders[resolve_sitemap_type(kind)]()

    def generate(self, kind: str) -> str:
        xml = "".join(self.iter_sitemap(kind))
        logger.info(f"Successfully generated {resolve_sitemap_type(kind)} sitemap ({len(xml)} characters)")
        return xml

    def write_sitemap(self, kind: str, out: IO[str]) -> int:
        """Stream a sitemap into ``out``; returns the number of characters written."""
        written = 0
        for fragment in self.iter_sitemap(kind):
            out.write(fragment)
            written += len(fragment)
        return written
