from __future__ import annotations

from typing import List, Optional

import structlog

from ..ingestion.storage import WeatherStore, require_store
from ..schemas.weather import WeatherRecord

logger = structlog.get_logger()

DEFAULT_QUERY_LIMIT = 720


class WeatherQueryService:
    """Read side of the weather store, newest rows first."""

    def __init__(self, store: Optional[WeatherStore], limit: int = DEFAULT_QUERY_LIMIT) -> None:
        self.store = store
        self.limit = limit

    def query(self, station_id: Optional[str] = None) -> List[WeatherRecord]:
        store = require_store(self.store)
        filters = {"station_id": station_id} if station_id else {}
        rows = store.select(filters, order_by="date", descending=True, limit=self.limit)
        logger.debug("weather_query", station_id=station_id, rows=len(rows))
        return [WeatherRecord.model_validate(row) for row in rows]
