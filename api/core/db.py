"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Every helper checks a connection out of the pool for exactly one statement
and hands it back when the statement finishes or fails.
"""

from __future__ import annotations

import logging
import os
from typing import Any
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

import asyncpg

from core import settings

logger = logging.getLogger(__name__)

_pool: asyncpg.Pool | None = None


class DatabaseUnavailableError(RuntimeError):
    pass


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def _url_from_parts() -> str:
    host = os.environ.get("DB_HOST", "").strip() or "localhost"
    port = os.environ.get("DB_PORT", "").strip() or "5432"
    user = os.environ.get("DB_USER", "").strip() or "postgres"
    password = os.environ.get("DB_PASSWORD", "")
    name = os.environ.get("DB_NAME", "").strip() or "charityevents_db"

    credentials = quote(user, safe="")
    if password:
        credentials += ":" + quote(password, safe="")
    return f"postgresql://{credentials}@{host}:{port}/{name}"


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        return _url_from_parts()
    return _sanitize_database_url(url)


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=min(settings.db_pool_min_size(), settings.db_pool_max_size()),
        max_size=settings.db_pool_max_size(),
        command_timeout=settings.db_command_timeout_s(),
    )
    logger.info(
        "db_pool_ready min_size=%s max_size=%s",
        _pool.get_min_size(),
        _pool.get_max_size(),
    )


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None
    logger.info("db_pool_closed")


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise DatabaseUnavailableError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    async with pool().acquire(timeout=settings.db_acquire_timeout_s()) as conn:
        row = await conn.fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    # Waits up to DB_ACQUIRE_TIMEOUT when every pooled connection is busy.
    async with pool().acquire(timeout=settings.db_acquire_timeout_s()) as conn:
        rows = await conn.fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]
