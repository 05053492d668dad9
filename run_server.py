#!/usr/bin/env python3
"""
Serve the sitemap endpoints (and the import API) with Flask's built-in server.

    python run_server.py --config tvshowup.yaml --with-scheduler
"""
import argparse
import logging
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tvshowup import create_app

logger = logging.getLogger("tvshowup.server")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="tvshowup sitemap server")
    parser.add_argument("--config", default=None, help="YAML settings file (default: tvshowup.yaml)")
    parser.add_argument("--host", default=os.getenv("APP_HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.getenv("APP_PORT", "5000")))
    parser.add_argument(
        "--with-scheduler",
        action="store_true",
        help="Also run the trending import on its configured schedule",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    app = create_app(config_path=args.config)

    scheduler = None
    if args.with_scheduler:
        from etl.scheduler import ImportScheduler

        scheduler = ImportScheduler(config=app.config["SETTINGS"])
        scheduler.start()

    sitemap = app.config["SITEMAP"]
    logger.info(f"Serving sitemaps for {sitemap.base_url} on {args.host}:{args.port}")
    try:
        # A reloader would fork a second scheduler
        app.run(host=args.host, port=args.port, debug=False, use_reloader=False)
    finally:
        if scheduler is not None:
            scheduler.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
