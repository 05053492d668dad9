from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

import yaml
from dotenv import load_dotenv


DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "tvshowup.yaml"
DEFAULT_BASE_URL = "https://www.tvshowup.com"
DEFAULT_LANGUAGES: Tuple[str, ...] = ("en", "tr", "de", "fr", "es", "it", "pt", "ru", "ja", "ko", "zh")
DEFAULT_IMAGE_BASE = "https://image.tmdb.org/t/p/original"
MAX_URLS_PER_SITEMAP = 50000
PEOPLE_MAX_PAGES = 10
PEOPLE_MAX_RECORDS = 2000


@dataclass(frozen=True)
class SitemapConfig:
    """Site-wide values every sitemap assembler needs."""

    base_url: str = DEFAULT_BASE_URL
    languages: Tuple[str, ...] = DEFAULT_LANGUAGES
    image_base: str = DEFAULT_IMAGE_BASE
    max_urls: int = MAX_URLS_PER_SITEMAP
    people_max_pages: int = PEOPLE_MAX_PAGES
    people_max_records: int = PEOPLE_MAX_RECORDS
    default_language: str = "en"

    def __post_init__(self):
        if not self.base_url:
            raise ValueError("base_url is required")
        # Trailing slashes would double up when paths are appended
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        object.__setattr__(self, "image_base", self.image_base.rstrip("/"))
        languages = tuple(lang.strip() for lang in self.languages if lang and lang.strip())
        if not languages:
            raise ValueError("At least one supported language is required")
        if len(set(languages)) != len(languages):
            raise ValueError(f"Duplicate languages in {languages}")
        object.__setattr__(self, "languages", languages)
        for name in ("max_urls", "people_max_pages", "people_max_records"):
            if int(getattr(self, name)) <= 0:
                raise ValueError(f"{name} must be positive")

    @property
    def records_per_sitemap(self) -> int:
        """How many records fit in one document once every language is emitted."""
        return max(1, self.max_urls // len(self.languages))

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> "SitemapConfig":
        site = settings.get("site") or {}
        limits = settings.get("sitemap") or {}
        languages = site.get("languages") or DEFAULT_LANGUAGES
        if isinstance(languages, str):
            languages = languages.split(",")
        return cls(
            base_url=os.getenv("SITE_BASE_URL") or site.get("base_url") or DEFAULT_BASE_URL,
            languages=tuple(languages),
            image_base=site.get("image_base") or DEFAULT_IMAGE_BASE,
            max_urls=int(limits.get("max_urls", MAX_URLS_PER_SITEMAP)),
            people_max_pages=int(limits.get("people_max_pages", PEOPLE_MAX_PAGES)),
            people_max_records=int(limits.get("people_max_records", PEOPLE_MAX_RECORDS)),
        )


def load_settings(config_path: Optional[str | Path] = None) -> Dict[str, Any]:
    """Load YAML settings; a missing default file just means built-in defaults."""
    load_dotenv()

    explicit = config_path or os.getenv("TVSHOWUP_CONFIG")
    config_file = Path(explicit) if explicit else DEFAULT_CONFIG_PATH
    if not config_file.exists():
        if explicit:
            raise FileNotFoundError(f"Configuration file not found: {config_file}")
        return {}

    with open(config_file, "r") as f:
        settings = yaml.safe_load(f) or {}

    if not isinstance(settings, dict):
        raise ValueError(f"Configuration file {config_file} must contain a mapping")
    return settings


def database_path(settings: Dict[str, Any]) -> str:
    db_path = os.getenv("DATABASE_PATH") or (settings.get("database") or {}).get("path", "tvshowup.db")
    if db_path != ":memory:" and not os.path.isabs(db_path):
        db_path = str(Path(__file__).parent.parent / db_path)
    return db_path


def setup_logging(settings: Dict[str, Any], names: Iterable[str] = ("tvshowup", "etl")) -> None:
    """Attach file + console handlers to the project loggers."""
    log_config = settings.get("logging") or {}
    log_level = getattr(logging, str(log_config.get("level", "INFO")).upper(), logging.INFO)

    loggers = [logging.getLogger(name) for name in names]
    for logger in loggers:
        logger.setLevel(log_level)
    # Repeated app factories (tests, reloads) must not stack handlers
    bare = [logger for logger in loggers if not logger.handlers]
    if not bare:
        return

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    log_file = log_config.get("file")
    if log_file:
        handlers.append(
            RotatingFileHandler(
                log_file,
                maxBytes=log_config.get("max_bytes", 10485760),
                backupCount=log_config.get("backup_count", 5),
            )
        )

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        for logger in bare:
            logger.addHandler(handler)
