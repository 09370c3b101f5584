import structlog
from fastapi import APIRouter, HTTPException, Request

from ...schemas.weather import SyncResponse

router = APIRouter()
logger = structlog.get_logger()


@router.post(
    "/sync",
    response_model=SyncResponse,
    summary="Run one ingestion cycle",
    responses={
        200: {
            "description": "Cycle finished",
            "content": {
                "application/json": {
                    "example": {
                        "message": "Sync complete",
                        "locations": 12,
                        "built": 8640,
                        "written": 8640,
                        "failed_chunks": 0,
                        "skipped": None,
                    }
                }
            },
        },
        500: {"description": "Upstream fetch failed"},
    },
)
def sync(request: Request) -> SyncResponse:
    service = request.app.state.sync_service
    try:
        result = service.sync()
    except Exception as e:
        logger.exception("manual_sync_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to sync weather data")

    return SyncResponse(
        message="Sync complete",
        locations=result.locations,
        built=result.built,
        written=result.written,
        failed_chunks=result.failed_chunks,
        skipped=result.skipped,
    )
