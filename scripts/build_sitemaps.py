#!/usr/bin/env python3
"""
Write the sitemap index and every category sitemap to a directory.

Example:
    python scripts/build_sitemaps.py --out site/ --types main movies
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from tvshowup.config import SitemapConfig, database_path, load_settings, setup_logging
from tvshowup.db import connect
from tvshowup.sitemaps import SITEMAP_TYPES, SitemapGenerator, sitemap_filename
from tvshowup.store import SQLiteContentStore
from tvshowup.tmdb import TMDbClient

logger = logging.getLogger("tvshowup.build_sitemaps")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Generate sitemap XML files.")
    parser.add_argument("--config", default=None, help="YAML settings file (default: tvshowup.yaml).")
    parser.add_argument("--out", type=Path, default=Path("site"), help="Output directory.")
    parser.add_argument(
        "--types",
        nargs="+",
        choices=SITEMAP_TYPES,
        default=list(SITEMAP_TYPES),
        help="Sitemaps to write (default: all).",
    )
    args = parser.parse_args(argv)

    settings = load_settings(args.config)
    setup_logging(settings)

    # Fail before any file is touched when the key is missing
    tmdb = TMDbClient(timeout=(settings.get("api") or {}).get("timeout", 20))
    conn = connect(database_path(settings))
    generator = SitemapGenerator(
        SitemapConfig.from_settings(settings),
        store=SQLiteContentStore(conn),
        tmdb=tmdb,
    )

    args.out.mkdir(parents=True, exist_ok=True)
    try:
        for kind in args.types:
            target = args.out / sitemap_filename(kind)
            partial = target.with_suffix(".xml.tmp")
            try:
                with open(partial, "w", encoding="utf-8") as f:
                    written = generator.write_sitemap(kind, f)
            except Exception:
                logger.error(f"Failed to write {target}, removing {partial.name}")
                partial.unlink(missing_ok=True)
                raise
            os.replace(partial, target)
            logger.info(f"Wrote {target} ({written} characters)")
    finally:
        conn.close()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
