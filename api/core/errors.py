"""
Error taxonomy and the single HTTP error-mapping boundary.

Feature code raises `ApiError(kind, message)`; `install_error_handlers()`
turns that (and a few library exceptions) into `{"error": ...}` responses.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Awaitable, Callable

import asyncpg
from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core import config

logger = logging.getLogger(__name__)


class ErrorKind(enum.Enum):
    VALIDATION = status.HTTP_400_BAD_REQUEST
    UNAUTHORIZED = status.HTTP_401_UNAUTHORIZED
    FORBIDDEN = status.HTTP_403_FORBIDDEN
    NOT_FOUND = status.HTTP_404_NOT_FOUND
    CONFLICT = status.HTTP_409_CONFLICT
    TOO_MANY_REQUESTS = status.HTTP_429_TOO_MANY_REQUESTS
    INTERNAL = status.HTTP_500_INTERNAL_SERVER_ERROR

    @property
    def status_code(self) -> int:
        return int(self.value)


class ApiError(Exception):
    def __init__(self, kind: ErrorKind, message: str, extra: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.extra = dict(extra or {})

    @classmethod
    def validation(cls, message: str) -> "ApiError":
        return cls(ErrorKind.VALIDATION, message)

    @classmethod
    def unauthorized(cls, message: str) -> "ApiError":
        return cls(ErrorKind.UNAUTHORIZED, message)

    @classmethod
    def forbidden(cls, message: str) -> "ApiError":
        return cls(ErrorKind.FORBIDDEN, message)

    @classmethod
    def not_found(cls, message: str) -> "ApiError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def conflict(cls, message: str) -> "ApiError":
        return cls(ErrorKind.CONFLICT, message)

    @classmethod
    def too_many_requests(cls, message: str, **extra: Any) -> "ApiError":
        return cls(ErrorKind.TOO_MANY_REQUESTS, message, extra)


def _client_host(request: Request) -> str | None:
    return request.client.host if request.client else None


def _log_unexpected(request: Request, exc: BaseException) -> None:
    logger.error(
        "unhandled_error method=%s url=%s client=%s error=%s",
        request.method,
        request.url,
        _client_host(request),
        exc,
        exc_info=exc,
    )


def _internal_error_response(exc: BaseException) -> JSONResponse:
    body: dict[str, str] = {"error": "Internal server error"}
    if not config.is_production():
        body["details"] = str(exc)
    return JSONResponse(status_code=ErrorKind.INTERNAL.status_code, content=body)


async def _api_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.kind.status_code, content={"error": exc.message, **exc.extra})


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query")]
    msg = str(first.get("msg") or "Invalid value")
    return f"{'.'.join(loc)}: {msg}" if loc else msg


async def _request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": _first_validation_message(exc)},
    )


async def _unique_violation_handler(request: Request, exc: asyncpg.UniqueViolationError) -> JSONResponse:
    # Concurrent writers can slip past the pre-checks; the constraint is the final word.
    logger.warning(
        "unique_violation method=%s url=%s constraint=%s",
        request.method,
        request.url,
        getattr(exc, "constraint_name", None),
    )
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"error": "A release with this title or URL title already exists"},
    )


async def _http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND and detail == "Not Found":
        detail = "Route not found"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": detail},
        headers=getattr(exc, "headers", None),
    )


async def catch_unhandled_errors(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """
    Turn unexpected exceptions into the 500 body inside the middleware stack.

    Registered innermost, so the response still passes through CORS and the
    access log on its way out.
    """
    try:
        return await call_next(request)
    except Exception as exc:
        _log_unexpected(request, exc)
        return _internal_error_response(exc)


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    _log_unexpected(request, exc)
    return _internal_error_response(exc)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(asyncpg.UniqueViolationError, _unique_violation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
