"""Ingestion subpackage.

Fetches CWA station observations, normalizes them into canonical rows and
upserts them into the weather store.
"""

from .client import CwaClient
from .normalize import Condition, classify_condition, parse_value, parse_wind_dir
from .records import CanonicalObservation, build_records, build_station_records
from .storage import SqlWeatherStore, WeatherStore
from .sync import SyncResult, SyncService
from .writer import WriteResult, write_observations

__all__ = [
    "CwaClient",
    "Condition",
    "classify_condition",
    "parse_value",
    "parse_wind_dir",
    "CanonicalObservation",
    "build_records",
    "build_station_records",
    "SqlWeatherStore",
    "WeatherStore",
    "SyncResult",
    "SyncService",
    "WriteResult",
    "write_observations",
]
