from __future__ import annotations

import argparse
from typing import Iterable, List, Optional, Tuple

import pandas as pd
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session

from cwa_weather.ingestion.models import WeatherData, create_tables


def _parse_str_list(csv: str) -> Optional[List[str]]:
    items = [x.strip() for x in (csv or "").split(",") if x.strip()]
    return items or None


def fetch_db_stats(db_url: str, station_ids: Optional[Iterable[str]] = None) -> Tuple[int, pd.DataFrame]:
    """Return total row count and per-station stats (rows, first/last hour, null temperatures)."""
    engine = create_engine(db_url, future=True)
    create_tables(engine)

    with Session(engine) as session:
        total_stmt = select(func.count()).select_from(WeatherData)
        stats_stmt = select(
            WeatherData.station_id.label("station_id"),
            func.count().label("rows"),
            func.min(WeatherData.date).label("first_date"),
            func.max(WeatherData.date).label("last_date"),
            (func.count() - func.count(WeatherData.avg_temp)).label("null_temp"),
        ).select_from(WeatherData)

        if station_ids is not None:
            cond = WeatherData.station_id.in_(list(station_ids))
            total_stmt = total_stmt.where(cond)
            stats_stmt = stats_stmt.where(cond)
        stats_stmt = stats_stmt.group_by(WeatherData.station_id).order_by(WeatherData.station_id)

        total = int(session.execute(total_stmt).scalar_one())
        rows = session.execute(stats_stmt).all()
    engine.dispose()

    df = pd.DataFrame(rows, columns=["station_id", "rows", "first_date", "last_date", "null_temp"])
    return total, df


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Verify weather_data coverage (row counts and date ranges)")
    p.add_argument("--db-url", required=True, help="SQLAlchemy URL, e.g., sqlite:///weather.db")
    p.add_argument(
        "--station-ids",
        default="",
        help="Optional comma-separated station IDs to inspect (default: all)",
    )
    return p.parse_args()


def main() -> None:
    args = _parse_args()
    ids = _parse_str_list(args.station_ids)

    total, stats = fetch_db_stats(args.db_url, ids)

    print(f"Total observations: {total}")
    if stats.empty:
        print("No observations found.")
        return

    with pd.option_context("display.max_rows", None, "display.width", 120):
        print(stats.to_string(index=False))


if __name__ == "__main__":
    main()
