"""Field-level decoding for CWA station observations.

CWA reports every element as a string (occasionally a bare number) and uses
large negative placeholders such as ``-99`` or ``-999`` for "no reading".
Decoders here map those to ``None`` rather than a number so that charts and
averages are not dragged towards the sentinel.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Dict, Optional, Union

RawValue = Union[str, int, float, None]

SENTINEL_FLOOR = -90.0
CALM_WIND_LABEL = "X,X"

# (Chinese, English) compass labels clockwise from North in 22.5 degree steps
_COMPASS_POINTS = [
    ("北", "N"),
    ("北北東", "NNE"),
    ("東北", "NE"),
    ("東北東", "ENE"),
    ("東", "E"),
    ("東南東", "ESE"),
    ("東南", "SE"),
    ("南南東", "SSE"),
    ("南", "S"),
    ("南南西", "SSW"),
    ("西南", "SW"),
    ("西南西", "WSW"),
    ("西", "W"),
    ("西北西", "WNW"),
    ("西北", "NW"),
    ("北北西", "NNW"),
]


def _build_wind_dir_map() -> Dict[str, float]:
    mapping: Dict[str, float] = {}
    for i, (zh, en) in enumerate(_COMPASS_POINTS):
        degrees = i * 22.5
        mapping[f"{zh},{en}"] = degrees
        mapping[en] = degrees
    return mapping


WIND_DIR_MAP: Dict[str, float] = _build_wind_dir_map()


class Condition(str, Enum):
    SUNNY = "Sunny"
    RAINY = "Rainy"
    CLOUDY = "Cloudy"
    STORMY = "Stormy"


STORMY_PRECIP_MM = 10.0
CLOUDY_HUMIDITY_PCT = 80.0


def parse_value(value: RawValue) -> Optional[float]:
    """Decode a raw numeric field.

    Returns ``None`` for absent input, unparseable strings, NaN or infinity, and anything
    below ``SENTINEL_FLOOR``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            num = float(value.strip())
        except ValueError:
            return None
    else:
        try:
            num = float(value)
        except (TypeError, ValueError):
            return None
    if not math.isfinite(num) or num < SENTINEL_FLOOR:
        return None
    return num


def parse_wind_dir(value: RawValue) -> Optional[float]:
    """Decode a wind direction given as a compass label or in degrees."""
    if isinstance(value, str):
        label = value.strip()
        if label == CALM_WIND_LABEL:
            return None
        if label in WIND_DIR_MAP:
            return WIND_DIR_MAP[label]
    return parse_value(value)


def classify_condition(precipitation: Optional[float], humidity: Optional[float]) -> Condition:
    if precipitation is not None and precipitation > STORMY_PRECIP_MM:
        return Condition.STORMY
    if precipitation is not None and precipitation > 0:
        return Condition.RAINY
    if humidity is not None and humidity > CLOUDY_HUMIDITY_PCT:
        return Condition.CLOUDY
    return Condition.SUNNY
