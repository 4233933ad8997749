"""
Auth dependencies for protected FastAPI routes.

`get_current_user` yields the request's `AuthContext`; `require_admin` builds on
it, so admin routes only need to depend on the latter.
"""

from __future__ import annotations

from fastapi import Depends, Header

from core.errors import ApiError

from . import schemas, service

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: str | None) -> str:
    raw = authorization or ""
    if not raw.startswith(BEARER_PREFIX):
        raise ApiError.unauthorized("Access token required")

    token = raw[len(BEARER_PREFIX):].strip()
    if not token:
        raise ApiError.unauthorized("Access token required")
    return token


async def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    return extract_bearer_token(authorization)


async def get_current_user(access_token: str = Depends(get_bearer_token)) -> schemas.AuthContext:
    return await service.get_user_from_access_token(access_token)


async def require_admin(
    current_user: schemas.AuthContext = Depends(get_current_user),
) -> schemas.AuthContext:
    if not current_user.is_admin:
        raise ApiError.forbidden("Admin access required")
    return current_user
