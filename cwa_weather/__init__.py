"""CWA hourly weather ingestion service.

Subpackages:
- ingestion: upstream client, field normalization, record building, storage and sync.
- services: read-side services backing the HTTP API.
- schemas: pydantic response models.
- api: FastAPI application and routes.
"""

__all__ = [
    "ingestion",
    "services",
    "schemas",
    "api",
]
