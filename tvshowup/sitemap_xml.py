"""
XML pieces of the sitemaps.org protocol (with the xhtml and image extensions).

Everything here returns plain strings; assembling a full document is the
caller's job so large sitemaps can be written fragment by fragment.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Iterator, List, Optional, Sequence
from xml.sax.saxutils import escape

from .config import SitemapConfig

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
XHTML_NS = "http://www.w3.org/1999/xhtml"
IMAGE_NS = "http://www.google.com/schemas/sitemap-image/1.1"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'
X_DEFAULT = "x-default"

CHANGEFREQ_VALUES = ("always", "hourly", "daily", "weekly", "monthly", "yearly", "never")

_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_xml(value: Optional[str]) -> str:
    if not value:
        return ""
    return escape(value, _ENTITIES)


@dataclass(frozen=True)
class Alternate:
    hreflang: str
    href: str


@dataclass(frozen=True)
class SitemapImage:
    loc: str
    title: Optional[str] = None
    caption: Optional[str] = None


@dataclass
class SitemapUrl:
    loc: str
    lastmod: Optional[date] = None
    changefreq: Optional[str] = None
    priority: Optional[float] = None
    alternates: List[Alternate] = field(default_factory=list)
    images: List[SitemapImage] = field(default_factory=list)

    def __post_init__(self):
        if self.changefreq is not None and self.changefreq not in CHANGEFREQ_VALUES:
            raise ValueError(f"Invalid changefreq: {self.changefreq!r}")


def build_alternates(config: SitemapConfig, path: str) -> List[Alternate]:
    """One link per supported language, then x-default on the English page."""
    alternates = [
        Alternate(hreflang=lang, href=f"{config.base_url}/{lang}{path}")
        for lang in config.languages
    ]
    alternates.append(
        Alternate(hreflang=X_DEFAULT, href=f"{config.base_url}/{config.default_language}{path}")
    )
    return alternates


def _lastmod(value: date) -> str:
    # datetime is a date subclass; only the calendar day goes out
    return value.isoformat()[:10]


def render_url(url: SitemapUrl) -> str:
    """Serialize one ``<url>`` entry."""
    parts = ["  <url>\n", f"    <loc>{escape_xml(url.loc)}</loc>\n"]

    if url.lastmod:
        parts.append(f"    <lastmod>{_lastmod(url.lastmod)}</lastmod>\n")

    if url.changefreq:
        parts.append(f"    <changefreq>{url.changefreq}</changefreq>\n")

    if url.priority is not None:
        parts.append(f"    <priority>{url.priority:.1f}</priority>\n")

    for alt in url.alternates:
        parts.append(
            f'    <xhtml:link rel="alternate" hreflang="{escape_xml(alt.hreflang)}" '
            f'href="{escape_xml(alt.href)}" />\n'
        )

    for img in url.images:
        parts.append("    <image:image>\n")
        parts.append(f"      <image:loc>{escape_xml(img.loc)}</image:loc>\n")
        if img.title:
            parts.append(f"      <image:title>{escape_xml(img.title)}</image:title>\n")
        if img.caption:
            parts.append(f"      <image:caption>{escape_xml(img.caption)}</image:caption>\n")
        parts.append("    </image:image>\n")

    parts.append("  </url>\n")
    return "".join(parts)


def urlset_open(with_images: bool = False) -> str:
    xml = XML_DECLARATION
    xml += f'<urlset xmlns="{SITEMAP_NS}"\n'
    if with_images:
        xml += f'        xmlns:xhtml="{XHTML_NS}"\n'
        xml += f'        xmlns:image="{IMAGE_NS}">\n'
    else:
        xml += f'        xmlns:xhtml="{XHTML_NS}">\n'
    return xml


URLSET_CLOSE = "</urlset>"


def iter_urlset(urls: Iterable[SitemapUrl], with_images: bool = False) -> Iterator[str]:
    yield urlset_open(with_images)
    for url in urls:
        yield render_url(url)
    yield URLSET_CLOSE


def iter_sitemap_index(locations: Sequence[str], lastmod: date) -> Iterator[str]:
    yield XML_DECLARATION
    yield f'<sitemapindex xmlns="{SITEMAP_NS}">\n'
    for loc in locations:
        yield "  <sitemap>\n"
        yield f"    <loc>{escape_xml(loc)}</loc>\n"
        yield f"    <lastmod>{_lastmod(lastmod)}</lastmod>\n"
        yield "  </sitemap>\n"
    yield "</sitemapindex>"
