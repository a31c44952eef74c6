"""
Environment-driven settings.

Every value is read lazily so tests can monkeypatch the environment.
Malformed numbers fall back to the default instead of failing startup.
"""

from __future__ import annotations

import os

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5500",
)


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def app_env() -> str:
    return _env_str("APP_ENV", "production").lower()


def is_development() -> bool:
    return app_env() == "development"


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()


def db_pool_min_size() -> int:
    return max(0, _env_int("DB_POOL_MIN", 1))


def db_pool_max_size() -> int:
    return max(1, _env_int("DB_POOL_MAX", 10))


def db_acquire_timeout_s() -> float:
    return _env_float("DB_ACQUIRE_TIMEOUT", 60.0)


def db_command_timeout_s() -> float:
    return _env_float("DB_COMMAND_TIMEOUT", 60.0)


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def frontend_dir() -> str | None:
    raw = os.environ.get("FRONTEND_DIR", "").strip()
    if not raw or not os.path.isdir(raw):
        return None
    return raw


def server_host() -> str:
    return _env_str("HOST", "127.0.0.1")


def server_port() -> int:
    return _env_int("PORT", 3000)
