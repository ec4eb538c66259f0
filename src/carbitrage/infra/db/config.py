from __future__ import annotations

import os

DEFAULT_POOL_SIZE = 10
DEFAULT_MAX_OVERFLOW = 20


def database_url() -> str:
    url = os.getenv("DATABASE_URL")

    if not url:
        raise RuntimeError("DATABASE_URL environment variable is not set")

    # SQLAlchemy 2.x rejects the bare 'postgres://' scheme some hosts hand out
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg://", 1)
    elif url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)

    return url


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None


def pool_size() -> int:
    return _int_env("DB_POOL_SIZE", DEFAULT_POOL_SIZE)


def max_overflow() -> int:
    return _int_env("DB_MAX_OVERFLOW", DEFAULT_MAX_OVERFLOW)
