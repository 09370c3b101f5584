from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..ingestion.normalize import Condition


class WeatherRecord(BaseModel):
    """One stored observation as exposed to the dashboard.

    Built from ``weather_data`` rows by field name; serialized with the
    dashboard's names. ``wind_dir`` keeps its storage name because the
    dashboard reads it that way.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "date": "2026-02-23T02:00:00+08:00",
                    "avgTemp": 21.3,
                    "minTemp": 21.3,
                    "maxTemp": 21.3,
                    "precipitation": 12.5,
                    "humidity": 95.0,
                    "windSpeed": 3.2,
                    "wind_dir": 90.0,
                    "pressure": 1012.4,
                    "sunshine": 0.0,
                    "condition": "Stormy",
                }
            ]
        },
    )

    date: str
    avg_temp: Optional[float] = Field(default=None, alias="avgTemp")
    min_temp: Optional[float] = Field(default=None, alias="minTemp")
    max_temp: Optional[float] = Field(default=None, alias="maxTemp")
    precipitation: Optional[float] = None
    humidity: Optional[float] = None
    wind_speed: Optional[float] = Field(default=None, alias="windSpeed")
    wind_dir: Optional[float] = None
    pressure: Optional[float] = None
    sunshine: Optional[float] = None
    condition: Condition


class SyncResponse(BaseModel):
    message: str
    locations: int = Field(ge=0)
    built: int = Field(ge=0)
    written: int = Field(ge=0)
    failed_chunks: int = Field(ge=0)
    skipped: Optional[str] = None
