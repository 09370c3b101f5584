"""Exception types shared by the ingestion pipeline and the API layer."""
from __future__ import annotations


class WeatherSyncError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(WeatherSyncError):
    """The store or the upstream credential was never configured."""


class UpstreamFetchError(WeatherSyncError):
    """The CWA endpoint could not be reached or returned an unusable response."""


class WriteChunkError(WeatherSyncError):
    """A single upsert chunk was rejected by the store."""

    def __init__(self, message: str, rows: int = 0) -> None:
        super().__init__(message)
        self.rows = rows
