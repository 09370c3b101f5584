from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import structlog

from .normalize import Condition, classify_condition, parse_value, parse_wind_dir

logger = structlog.get_logger()


@dataclass(frozen=True)
class CanonicalObservation:
    """One normalized reading for a single station-hour.

    ``(station_id, date)`` is the identity; ``date`` is the upstream ISO
    timestamp including its ``+08:00`` offset. CWA reports a single hourly
    temperature, so ``avg_temp``, ``min_temp`` and ``max_temp`` carry the same
    value.
    """

    station_id: str
    date: str
    avg_temp: Optional[float]
    min_temp: Optional[float]
    max_temp: Optional[float]
    precipitation: Optional[float]
    humidity: Optional[float]
    wind_speed: Optional[float]
    wind_dir: Optional[float]
    pressure: Optional[float]
    sunshine: Optional[float]
    condition: Condition

    def to_row(self) -> Dict[str, Any]:
        row = asdict(self)
        row["condition"] = self.condition.value
        return row


def station_id_of(block: Mapping[str, Any]) -> Optional[str]:
    station = block.get("station")
    station_id = station.get("StationID") if isinstance(station, dict) else None
    station_id = station_id or block.get("stationId")
    return str(station_id) if station_id else None


def _build_observation(station_id: str, obs_time: str, elements: Mapping[str, Any]) -> CanonicalObservation:
    humidity = parse_value(elements.get("RelativeHumidity"))
    precipitation = parse_value(elements.get("Precipitation"))
    temp = parse_value(elements.get("AirTemperature"))

    return CanonicalObservation(
        station_id=station_id,
        date=obs_time,
        avg_temp=temp,
        min_temp=temp,
        max_temp=temp,
        precipitation=precipitation,
        humidity=humidity,
        wind_speed=parse_value(elements.get("WindSpeed")),
        wind_dir=parse_wind_dir(elements.get("WindDirection")),
        pressure=parse_value(elements.get("AirPressure")),
        sunshine=parse_value(elements.get("SunshineDuration")),
        condition=classify_condition(precipitation, humidity),
    )


def build_station_records(block: Mapping[str, Any], station_id: str) -> List[CanonicalObservation]:
    """Build canonical rows for one station block, preserving hour order.

    Hours without a ``DateTime`` or without a ``weatherElements`` mapping are
    skipped.
    """
    obs_times = (block.get("stationObsTimes") or {}).get("stationObsTime") or []

    out: List[CanonicalObservation] = []
    for hour in obs_times:
        if not isinstance(hour, dict):
            continue
        obs_time = hour.get("DateTime")
        if not obs_time:
            continue
        elements = hour.get("weatherElements")
        if not isinstance(elements, dict):
            continue
        out.append(_build_observation(station_id, str(obs_time), elements))
    return out


def build_records(payload: Mapping[str, Any]) -> List[CanonicalObservation]:
    """Build canonical rows for every location in a CWA response.

    Rows are ordered by location as returned, then by hour within a location.
    """
    locations = (payload.get("records") or {}).get("location") or []

    out: List[CanonicalObservation] = []
    for block in locations:
        if not isinstance(block, dict):
            continue
        station_id = station_id_of(block)
        if not station_id:
            logger.warning("location_without_station_id", keys=sorted(block.keys()))
            continue
        out.extend(build_station_records(block, station_id))
    return out


def dedupe_observations(observations: Sequence[CanonicalObservation]) -> List[CanonicalObservation]:
    """Collapse repeated ``(station_id, date)`` keys.

    The last occurrence wins; each key keeps the position it was first seen at.
    """
    latest: Dict[Tuple[str, str], CanonicalObservation] = {}
    for obs in observations:
        latest[(obs.station_id, obs.date)] = obs
    return list(latest.values())
