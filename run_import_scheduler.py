#!/usr/bin/env python3
"""
Standalone runner for the trending import

    python run_import_scheduler.py                      # keep importing on schedule
    python run_import_scheduler.py --run-once --pages 2 # one import, then exit
    python run_import_scheduler.py --validate-config
"""
from __future__ import annotations

import argparse
import json
import os
import signal
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from etl.scheduler import ImportScheduler
from etl.trending_import import CONTENT_TYPES, TrendingImportService
from tvshowup.config import SitemapConfig, load_settings


def describe(settings: dict) -> str:
    """One-screen summary of what the importer and sitemaps will use"""
    schedule = settings.get('schedule') or {}
    import_config = settings.get('import') or {}
    sitemap = SitemapConfig.from_settings(settings)

    when = f"cron {schedule['cron']}" if 'cron' in schedule else f"every {schedule.get('interval_hours', 24)} hours"
    return "\n".join([
        f"  Schedule:  {when}",
        f"  Import:    {import_config.get('content_type', 'both')}, "
        f"{import_config.get('pages', 5)} page(s), {import_config.get('page_delay', 0.3)}s between pages",
        f"  Site:      {sitemap.base_url}",
        f"  Languages: {', '.join(sitemap.languages)} "
        f"({sitemap.records_per_sitemap} records per sitemap)",
    ])


def run_once(settings: dict, content_type: str | None, pages: int | None) -> int:
    results = TrendingImportService(settings).run(content_type=content_type, pages=pages)
    print(json.dumps(results, indent=2))
    failed = sum(kind['errors'] for kind in results.values())
    return 1 if failed else 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="TMDb trending import scheduler")
    parser.add_argument('--config', default='tvshowup.yaml',
                        help='Path to configuration file (default: tvshowup.yaml)')
    parser.add_argument('--run-once', action='store_true',
                        help='Import once, print the counters and exit')
    parser.add_argument('--type', choices=CONTENT_TYPES, default=None,
                        help='Content type for --run-once (default: import.content_type)')
    parser.add_argument('--pages', type=int, default=None,
                        help='Trending pages for --run-once (default: import.pages)')
    parser.add_argument('--validate-config', action='store_true',
                        help='Validate configuration file and exit')
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
        summary = describe(settings)
    except (OSError, ValueError) as e:
        print(f"[ERROR] Configuration '{args.config}' is invalid: {e}")
        return 1

    if args.validate_config:
        print(f"[OK] Configuration file '{args.config}' is valid\n{summary}")
        return 0

    if not os.getenv('TMDB_API_KEY'):
        print("Error: TMDB_API_KEY not found in environment (.env or shell)")
        return 1

    if args.run_once:
        return run_once(settings, args.type, args.pages)

    scheduler = ImportScheduler(config=settings)

    def shutdown(signum, frame):
        print(f"\nReceived signal {signum}, stopping scheduler...")
        scheduler.stop()
        sys.exit(0)

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    scheduler.start()
    print(f"Trending import scheduler running ({args.config})\n{summary}")
    status = scheduler.get_status()
    if status['next_run_time']:
        print(f"Next run: {status['next_run_time']}")

    while True:
        time.sleep(60)


if __name__ == "__main__":
    sys.exit(main())
