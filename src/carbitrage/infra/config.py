from __future__ import annotations

import os
from enum import Enum


class CatalogBackend(str, Enum):
    POSTGRES = "postgres"
    MEMORY = "memory"


def catalog_backend() -> CatalogBackend:
    """Which listing store serves requests; 'memory' serves the bundled sample data."""
    raw = os.getenv("CATALOG_BACKEND", CatalogBackend.POSTGRES.value).strip().lower()

    try:
        return CatalogBackend(raw)
    except ValueError:
        allowed = ", ".join(backend.value for backend in CatalogBackend)
        raise RuntimeError(f"CATALOG_BACKEND must be one of: {allowed} (got {raw!r})") from None


def log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
