from typing import Optional

import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from ..config import AppSettings
from ..ingestion.client import CwaClient
from ..ingestion.storage import WeatherStore, build_store
from ..ingestion.sync import SyncService
from ..logging import init_logging
from ..scheduler import build_scheduler
from ..services.weather_service import WeatherQueryService
from .middleware import RequestIDMiddleware, generic_exception_handler, http_exception_handler
from .routes import health, sync, weather


def create_app(
    settings: Optional[AppSettings] = None,
    store: Optional[WeatherStore] = None,
    client: Optional[CwaClient] = None,
) -> FastAPI:
    settings = settings or AppSettings()
    logger = init_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        scheduler = None
        if settings.scheduler_enabled:
            scheduler = build_scheduler(app.state.sync_service, minute=settings.sync_cron_minute)
            scheduler.start()
            logger.info("scheduler_started", minute=settings.sync_cron_minute)
        yield
        if scheduler is not None:
            scheduler.shutdown(wait=False)
            logger.info("scheduler_stopped")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "health", "description": "Service health and uptime"},
            {"name": "weather", "description": "Stored hourly station observations"},
            {"name": "sync", "description": "Trigger CWA ingestion"},
        ],
    )

    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.add_middleware(RequestIDMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(weather.router, prefix="/api", tags=["weather"])
    app.include_router(sync.router, prefix="/api", tags=["sync"])

    app.state.settings = settings
    app.state.start_time = time.time()
    # Services are wired here, not in lifespan, so TestClient without a context manager still works
    app.state.store = store if store is not None else build_store(settings)
    app.state.sync_service = SyncService(settings, app.state.store, client)
    app.state.query_service = WeatherQueryService(app.state.store, limit=settings.query_limit)

    return app


if __name__ == "__main__":
    import uvicorn

    s = AppSettings()
    uvicorn.run(create_app(s), host=s.host, port=s.port)
