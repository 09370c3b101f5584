"""Hourly trigger for the ingestion cycle."""
from __future__ import annotations

import structlog
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from .ingestion.sync import SyncService

logger = structlog.get_logger()

SYNC_JOB_ID = "hourly_weather_sync"


def run_scheduled_sync(service: SyncService) -> None:
    """Scheduler job body: failures are logged, never raised."""
    logger.info("scheduled_sync_started")
    try:
        result = service.sync()
    except Exception as e:
        logger.exception("scheduled_sync_failed", error=str(e))
        return
    logger.info("scheduled_sync_finished", written=result.written, skipped=result.skipped)


def build_scheduler(service: SyncService, minute: int = 0) -> BackgroundScheduler:
    scheduler = BackgroundScheduler(timezone="UTC")
    scheduler.add_job(
        run_scheduled_sync,
        CronTrigger(minute=minute, timezone="UTC"),
        args=[service],
        id=SYNC_JOB_ID,
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    return scheduler
