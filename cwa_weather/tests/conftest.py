from typing import Any, Dict, List

import pytest

from cwa_weather.ingestion.storage import SqlWeatherStore


def _make_hour(date: str, **elements: Any) -> Dict[str, Any]:
    return {"DateTime": date, "weatherElements": dict(elements)}


def _make_location(station_id: str, hours: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "station": {"StationID": station_id, "StationName": f"station-{station_id}"},
        "stationObsTimes": {"stationObsTime": hours},
    }


def _make_payload(locations: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"success": "true", "records": {"location": locations}}


@pytest.fixture
def make_hour():
    return _make_hour


@pytest.fixture
def make_location():
    return _make_location


@pytest.fixture
def make_payload():
    return _make_payload


@pytest.fixture
def cwa_payload() -> Dict[str, Any]:
    return _make_payload(
        [
            _make_location(
                "C0A520",
                [
                    _make_hour(
                        "2026-02-23T01:00:00+08:00",
                        RelativeHumidity="85",
                        Precipitation="0.0",
                        WindSpeed="2.1",
                        WindDirection="北,N",
                        AirPressure="1013.2",
                        AirTemperature="18.4",
                        SunshineDuration="0.0",
                    ),
                    _make_hour(
                        "2026-02-23T02:00:00+08:00",
                        RelativeHumidity="95",
                        Precipitation="12.5",
                        WindSpeed="4.0",
                        WindDirection="東,E",
                        AirPressure="1012.4",
                        AirTemperature="21.3",
                        SunshineDuration="-99",
                    ),
                ],
            ),
            _make_location(
                "466920",
                [
                    _make_hour(
                        "2026-02-23T01:00:00+08:00",
                        RelativeHumidity="60",
                        Precipitation="0.5",
                        WindSpeed="1.2",
                        WindDirection="X,X",
                        AirPressure="1015.0",
                        AirTemperature="-999",
                        SunshineDuration="0.6",
                    ),
                ],
            ),
        ]
    )


@pytest.fixture
def sqlite_store(tmp_path):
    # Temporary sqlite file avoids in-memory connection scoping issues across threads
    store = SqlWeatherStore.from_url(f"sqlite:///{tmp_path / 'weather.db'}")
    yield store
    store.engine.dispose()
