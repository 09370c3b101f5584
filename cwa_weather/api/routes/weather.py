from typing import List, Optional

import structlog
from fastapi import APIRouter, HTTPException, Query, Request

from ...schemas.weather import WeatherRecord

router = APIRouter()
logger = structlog.get_logger()


@router.get(
    "/weather",
    response_model=List[WeatherRecord],
    summary="Stored hourly observations, newest first",
    responses={500: {"description": "Store unavailable or query failed"}},
)
def get_weather(
    request: Request,
    station_id: Optional[str] = Query(None, alias="stationId", description="CWA station ID; omit for all stations"),
) -> List[WeatherRecord]:
    service = request.app.state.query_service
    try:
        return service.query(station_id)
    except Exception as e:
        logger.exception("weather_query_failed", station_id=station_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch weather data")
