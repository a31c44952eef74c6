"""
API error taxonomy and the JSON envelope for failures.

Every failure response has the shape:
    {"success": false, "error": <stable reason>, "message": <human text>}

Feature code raises `ApiError` for validation/not-found cases and wraps
repository calls in `data_access(...)` so infrastructure failures become
a generic 500 instead of leaking a stack trace.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import asyncpg
from fastapi import Request, status
from fastapi.responses import JSONResponse

from core import db, settings

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong!"

# Failures that mean "the database could not answer", as opposed to bugs.
DATA_ACCESS_ERRORS: tuple[type[BaseException], ...] = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    db.DatabaseUnavailableError,
    asyncio.TimeoutError,
    OSError,
)


class ApiError(Exception):
    def __init__(self, status_code: int, error: str, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error = error
        self.message = message


def error_body(error: str, message: str, **extra: Any) -> dict[str, Any]:
    return {"success": False, "error": error, "message": message, **extra}


def public_message(exc: BaseException) -> str:
    """
    Underlying error text in development, a fixed message otherwise.
    """
    if settings.is_development():
        return str(exc) or exc.__class__.__name__
    return GENERIC_ERROR_MESSAGE


@contextmanager
def data_access(error: str) -> Iterator[None]:
    try:
        yield
    except DATA_ACCESS_ERRORS as exc:
        logger.exception("data_access_failed error=%r", error)
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, error, public_message(exc)) from exc


async def api_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.error, exc.message),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal Server Error", public_message(exc)),
    )
