from __future__ import annotations

from typing import Optional

from sqlalchemy import Float, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for ingestion models."""


class WeatherData(Base):
    """Hourly canonical observation stored per CWA station.

    Composite primary key: (station_id, date)
    ``date`` holds the upstream ISO timestamp string (``+08:00`` offset).
    Units:
    - temperatures: Celsius
    - precipitation: millimeters
    - humidity: percent (0-100)
    - wind_speed: meters per second
    - wind_dir: degrees (0-360)
    - pressure: hectopascals
    - sunshine: hours
    """

    __tablename__ = "weather_data"

    station_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    date: Mapped[str] = mapped_column(String(32), primary_key=True)

    avg_temp: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    min_temp: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    max_temp: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    precipitation: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    humidity: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    wind_speed: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    wind_dir: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    pressure: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    sunshine: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    condition: Mapped[str] = mapped_column(String(16), nullable=False)


COLUMNS = [c.name for c in WeatherData.__table__.columns]


def create_tables(engine) -> None:
    """Create all ingestion tables if they do not exist.

    Parameters
    ----------
    engine : sqlalchemy.Engine
        SQLAlchemy engine for the target database.
    """
    Base.metadata.create_all(bind=engine)
