from __future__ import annotations

import os
from typing import Any, Mapping, Optional

from flask import Flask

from .config import SitemapConfig, database_path, load_settings, setup_logging
from .db import close_db


def create_app(test_config: Optional[Mapping[str, Any]] = None, config_path: Optional[str] = None) -> Flask:
    """Application factory; ``test_config`` entries override the YAML settings."""
    settings = load_settings(config_path)
    setup_logging(settings)

    app = Flask(__name__)
    app.config.update(
        SETTINGS=settings,
        SITEMAP=SitemapConfig.from_settings(settings),
        DATABASE_PATH=database_path(settings),
        DATABASE_WAL=bool((settings.get("database") or {}).get("enable_wal", False)),
        TMDB_API_KEY=os.getenv("TMDB_API_KEY"),
        TMDB_TIMEOUT=(settings.get("api") or {}).get("timeout", 20),
    )
    if test_config:
        app.config.update(test_config)

    app.teardown_appcontext(close_db)

    from .routes import public, sitemaps

    app.register_blueprint(public.bp)
    app.register_blueprint(sitemaps.bp)
    return app
