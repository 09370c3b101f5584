from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    app_name: str = "CWA Weather Sync"
    app_version: str = "0.1.0"
    app_env: str = "development"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3001

    # Upstream CWA open-data endpoint (hourly station observations)
    cwa_api_url: str = "https://opendata.cwa.gov.tw/api/v1/rest/datastore/C-B0024-001"
    cwa_api_token: Optional[str] = None
    http_timeout_connect: float = 5.0
    http_timeout_read: float = 30.0
    http_max_retries: int = 3
    http_backoff_factor: float = 0.5

    # Store
    database_url: Optional[str] = None

    # Pipeline
    lookback_days: int = 30
    utc_offset_hours: int = 8
    chunk_size: int = 1000
    query_limit: int = 720

    # Scheduler
    scheduler_enabled: bool = True
    sync_cron_minute: int = 0

    # .env support and prefix for clarity
    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def store_configured(self) -> bool:
        url = (self.database_url or "").strip()
        return bool(url) and "YOUR_" not in url
