"""
Environment-backed settings.

Values are read on every call so tests (and process managers that re-exec with
a new environment) always see the current environment.
"""

from __future__ import annotations

import os

PRODUCTION_ORIGINS = (
    "https://lizdek.world",
    "https://www.lizdek.world",
    "https://api.lizdek.world",
)
DEV_ORIGINS = (
    "http://localhost:5173",
    "http://localhost:3000",
)


def env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def app_env() -> str:
    return env_str("APP_ENV", "development").lower()


def is_production() -> bool:
    return app_env() == "production"


def app_version() -> str:
    return env_str("APP_VERSION", "1.0.0")


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if raw:
        return [origin.strip() for origin in raw.split(",") if origin.strip()]
    return list(PRODUCTION_ORIGINS if is_production() else DEV_ORIGINS)


def log_level() -> str:
    return env_str("LOG_LEVEL", "INFO").upper()


def log_file() -> str | None:
    return os.environ.get("LOG_FILE", "").strip() or None
