from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

import structlog
from sqlalchemy import create_engine, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import AppSettings
from ..errors import ConfigurationError, WriteChunkError
from .models import COLUMNS, WeatherData, create_tables

logger = structlog.get_logger()

CONFLICT_KEYS = ("station_id", "date")

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class WeatherStore(Protocol):
    """Storage capability used by the sync and query paths.

    Implementations must treat ``upsert`` as insert-or-overwrite on
    ``conflict_keys`` and raise ``WriteChunkError`` when a batch is rejected.
    """

    def upsert(self, rows: Sequence[Mapping[str, Any]], conflict_keys: Sequence[str]) -> int:
        """Insert or overwrite ``rows``; return the number of rows written."""
        ...

    def select(
        self,
        filters: Mapping[str, Any],
        order_by: str,
        descending: bool,
        limit: int,
    ) -> List[Dict[str, Any]]:
        """Return rows matching all equality ``filters`` as plain dicts."""
        ...


class SqlWeatherStore:
    """`WeatherStore` backed by the ``weather_data`` table.

    PostgreSQL and SQLite use a native ``INSERT .. ON CONFLICT DO UPDATE``.
    Other dialects fall back to a per-row merge inside one transaction.
    """

    def __init__(self, engine) -> None:
        self.engine = engine

    @classmethod
    def from_url(cls, url: str) -> "SqlWeatherStore":
        engine = create_engine(url, future=True)
        create_tables(engine)
        return cls(engine)

    def upsert(self, rows: Sequence[Mapping[str, Any]], conflict_keys: Sequence[str] = CONFLICT_KEYS) -> int:
        if not rows:
            return 0
        payload = [{col: row.get(col) for col in COLUMNS} for row in rows]
        try:
            with Session(self.engine) as session:
                insert = _DIALECT_INSERTS.get(self.engine.dialect.name)
                if insert is not None:
                    stmt = insert(WeatherData).values(payload)
                    stmt = stmt.on_conflict_do_update(
                        index_elements=list(conflict_keys),
                        set_={col: stmt.excluded[col] for col in COLUMNS if col not in conflict_keys},
                    )
                    session.execute(stmt)
                else:
                    for item in payload:
                        session.merge(WeatherData(**item))
                session.commit()
        except SQLAlchemyError as e:
            raise WriteChunkError(f"upsert of {len(payload)} rows failed: {e}", rows=len(payload)) from e
        return len(payload)

    def select(
        self,
        filters: Mapping[str, Any],
        order_by: str = "date",
        descending: bool = True,
        limit: int = 720,
    ) -> List[Dict[str, Any]]:
        order_col = getattr(WeatherData, order_by)
        stmt = select(WeatherData)
        for col, value in filters.items():
            stmt = stmt.where(getattr(WeatherData, col) == value)
        stmt = stmt.order_by(order_col.desc() if descending else order_col.asc()).limit(limit)

        with Session(self.engine) as session:
            rows = session.execute(stmt).scalars().all()
            return [{col: getattr(r, col) for col in COLUMNS} for r in rows]


def build_store(settings: AppSettings) -> Optional[WeatherStore]:
    """Factory: SQL store when a database URL is configured, otherwise None."""
    if not settings.store_configured:
        logger.warning("store_not_configured", hint="set APP_DATABASE_URL")
        return None
    store = SqlWeatherStore.from_url(settings.database_url)
    logger.info("store_init", dialect=store.engine.dialect.name)
    return store


def require_store(store: Optional[WeatherStore]) -> WeatherStore:
    if store is None:
        raise ConfigurationError("weather store not initialized")
    return store
