"""
Brute-force protection for the auth endpoints.

Each client IP gets 5 failed attempts per 15 minutes across /login and
/verify; successful requests are not counted. Off in test and development.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Request
from limits import RateLimitItemPerMinute
from limits.storage import MemoryStorage
from limits.strategies import FixedWindowRateLimiter

from core import config
from core.errors import ApiError

logger = logging.getLogger(__name__)

MAX_FAILED_ATTEMPTS = 5
WINDOW_MINUTES = 15
UNTHROTTLED_ENVS = {"test", "development"}

_failed_attempts = RateLimitItemPerMinute(MAX_FAILED_ATTEMPTS, WINDOW_MINUTES, namespace="auth")
_storage = MemoryStorage()
_limiter = FixedWindowRateLimiter(_storage)


def enabled() -> bool:
    return config.app_env() not in UNTHROTTLED_ENVS


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def reset() -> None:
    _storage.reset()


@asynccontextmanager
async def guard(request: Request) -> AsyncIterator[None]:
    """
    Refuse the request once the client is out of attempts; otherwise run the
    body and count it if it fails with an `ApiError`.
    """
    if not enabled():
        yield
        return

    key = client_key(request)
    if not _limiter.test(_failed_attempts, key):
        logger.warning("auth_throttled client=%s path=%s", key, request.url.path)
        raise ApiError.too_many_requests(
            "Too many authentication attempts, please try again later.",
            retryAfter=f"{WINDOW_MINUTES} minutes",
        )

    try:
        yield
    except ApiError:
        _limiter.hit(_failed_attempts, key)
        raise
