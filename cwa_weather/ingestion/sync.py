"""Ingestion cycle: fetch the trailing window from CWA and upsert it."""
from __future__ import annotations

import argparse
import datetime as dt
from dataclasses import dataclass
from typing import Optional, Tuple

import structlog

from ..config import AppSettings
from ..logging import init_logging
from .client import CwaClient
from .records import build_records
from .storage import WeatherStore, build_store
from .writer import write_observations

logger = structlog.get_logger()


@dataclass
class SyncResult:
    locations: int = 0
    built: int = 0
    written: int = 0
    failed_chunks: int = 0
    skipped: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.skipped is None and self.failed_chunks == 0


def observation_window(
    now: Optional[dt.datetime] = None,
    utc_offset_hours: int = 8,
    lookback_days: int = 30,
) -> Tuple[dt.datetime, dt.datetime]:
    """Return ``(time_from, time_to)`` in the station-local offset.

    ``time_to`` is ``now`` shifted to UTC+``utc_offset_hours``; ``time_from``
    is ``lookback_days`` earlier.
    """
    now = now or dt.datetime.now(dt.timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=dt.timezone.utc)
    time_to = now.astimezone(dt.timezone(dt.timedelta(hours=utc_offset_hours)))
    time_from = time_to - dt.timedelta(days=lookback_days)
    return time_from, time_to


def client_from_settings(settings: AppSettings) -> CwaClient:
    return CwaClient(
        api_token=settings.cwa_api_token,
        base_url=settings.cwa_api_url,
        timeout_connect=settings.http_timeout_connect,
        timeout_read=settings.http_timeout_read,
        max_retries=settings.http_max_retries,
        backoff_factor=settings.http_backoff_factor,
    )


class SyncService:
    def __init__(
        self,
        settings: AppSettings,
        store: Optional[WeatherStore],
        client: Optional[CwaClient] = None,
    ) -> None:
        self.settings = settings
        self.store = store
        self.client = client if client is not None else client_from_settings(settings)

    def sync(self, now: Optional[dt.datetime] = None) -> SyncResult:
        """Run one ingestion cycle.

        A missing store or credential is reported as a skipped result.
        `UpstreamFetchError` from the fetch step propagates to the caller;
        per-chunk write failures are absorbed into ``failed_chunks``.
        """
        if self.store is None:
            logger.error("sync_skipped", reason="store_unavailable")
            return SyncResult(skipped="store_unavailable")
        if not self.client.api_token:
            logger.error("sync_skipped", reason="missing_credential")
            return SyncResult(skipped="missing_credential")

        time_from, time_to = observation_window(
            now, self.settings.utc_offset_hours, self.settings.lookback_days
        )
        logger.info("sync_fetch", time_from=time_from.isoformat(), time_to=time_to.isoformat())
        payload = self.client.fetch_observations(time_from, time_to)

        locations = (payload.get("records") or {}).get("location") or []
        observations = build_records(payload)
        result = SyncResult(locations=len(locations), built=len(observations))
        if not observations:
            logger.warning("sync_no_rows", locations=result.locations)
            return result

        written = write_observations(self.store, observations, self.settings.chunk_size)
        result.written = written.written
        result.failed_chunks = written.failed_chunks
        logger.info(
            "sync_completed",
            locations=result.locations,
            built=result.built,
            written=result.written,
            failed_chunks=result.failed_chunks,
        )
        return result


def run_sync_once(settings: Optional[AppSettings] = None) -> SyncResult:
    settings = settings or AppSettings()
    return SyncService(settings, build_store(settings)).sync()


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Fetch the trailing CWA observation window and upsert it")
    p.add_argument("--db-url", default="", help="SQLAlchemy URL overriding APP_DATABASE_URL")
    p.add_argument("--lookback-days", type=int, default=None, help="Override the 30-day window")
    return p.parse_args()


def main() -> None:
    args = _parse_args()
    settings = AppSettings()
    if args.db_url:
        settings.database_url = args.db_url
    if args.lookback_days is not None:
        settings.lookback_days = args.lookback_days
    init_logging(settings.log_level)

    result = run_sync_once(settings)
    if result.skipped:
        print(f"Sync skipped: {result.skipped}")
        return
    print(f"Inserted {result.written} of {result.built} hourly records from {result.locations} stations.")


if __name__ == "__main__":
    main()
