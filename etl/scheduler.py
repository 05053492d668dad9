#!/usr/bin/env python3
"""
APScheduler wrapper that re-runs the trending import so the catalog, and
with it the movie and TV sitemaps, stays current
"""
from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Any, Dict, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from tvshowup.config import load_settings, setup_logging

from .trending_import import TrendingImportService

JOB_ID = 'trending_import'
DEFAULT_INTERVAL_HOURS = 24


def trigger_from_settings(schedule: Dict[str, Any]):
    """`schedule.cron` wins over `schedule.interval_hours`"""
    tz = schedule.get('timezone', 'UTC')
    cron = schedule.get('cron')
    if cron:
        return CronTrigger(
            day_of_week=cron.get('day_of_week', '*'),
            hour=cron.get('hour', 0),
            minute=cron.get('minute', 0),
            timezone=tz,
        )
    return IntervalTrigger(hours=schedule.get('interval_hours', DEFAULT_INTERVAL_HOURS), timezone=tz)


def run_status(results: Dict[str, Dict[str, int]]) -> str:
    """Success only when nothing failed; all-failed runs count as failures"""
    imported = sum(kind['imported'] for kind in results.values())
    errors = sum(kind['errors'] for kind in results.values())
    if not errors:
        return "Success"
    if not imported:
        return f"Failed: all {errors} items failed to import"
    return f"Partial: {imported} imported, {errors} failed"


class ImportScheduler:
    """
    Runs TrendingImportService on a cron or interval trigger and remembers
    how the last run went
    """

    def __init__(self, config_path: Optional[str] = None, config: Optional[dict] = None):
        self.config = config if config is not None else load_settings(config_path)
        self.schedule = self.config.setdefault('schedule', {})

        setup_logging(self.config)
        self.logger = logging.getLogger('etl.ImportScheduler')

        self.scheduler = BackgroundScheduler(timezone=self.schedule.get('timezone', 'UTC'))
        self.import_service: Optional[TrendingImportService] = None
        self.run_count = 0
        self.last_run_time: Optional[datetime] = None
        self.last_run_status = "Never run"
        self.last_results: Optional[Dict[str, Dict[str, int]]] = None

    def build_trigger(self):
        trigger = trigger_from_settings(self.schedule)
        self.logger.info(f"Trending import trigger: {trigger}")
        return trigger

    def run_import_job(self):
        """One import pass; failures are recorded, never raised into APScheduler"""
        self.run_count += 1
        started = time.time()
        self.logger.info(f"Trending import #{self.run_count} starting")

        try:
            if self.import_service is None:
                self.import_service = TrendingImportService(self.config)
            self.last_results = self.import_service.run()
        except Exception as e:
            self.last_run_status = f"Failed: {e}"
            self.logger.error(
                f"Trending import #{self.run_count} failed after {time.time() - started:.2f}s: {e}",
                exc_info=True,
            )
        else:
            self.last_run_status = run_status(self.last_results)
            log = self.logger.info if self.last_run_status == "Success" else self.logger.warning
            log(
                f"Trending import #{self.run_count} finished in {time.time() - started:.2f}s "
                f"({self.last_run_status}): {self.last_results}"
            )
        finally:
            self.last_run_time = datetime.now()

    def start(self):
        self.scheduler.add_job(
            self.run_import_job,
            trigger=self.build_trigger(),
            id=JOB_ID,
            name='TMDb trending import',
            replace_existing=True,
        )
        self.scheduler.start()
        self.logger.info("Import scheduler started")

        if self.schedule.get('run_on_startup', False):
            self.run_import_job()

    def stop(self):
        if self.scheduler.running:
            self.scheduler.shutdown()
        self.logger.info("Import scheduler stopped")

    def get_status(self) -> dict:
        job = self.scheduler.get_job(JOB_ID)
        next_run = getattr(job, 'next_run_time', None) if job else None
        return {
            'running': self.scheduler.running,
            'total_runs': self.run_count,
            'last_run_time': self.last_run_time.isoformat() if self.last_run_time else None,
            'last_run_status': self.last_run_status,
            'last_results': self.last_results,
            'next_run_time': next_run.isoformat() if next_run else None,
        }
