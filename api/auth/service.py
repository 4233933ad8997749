"""
Auth business logic.
"""

from __future__ import annotations

import logging

from starlette.concurrency import run_in_threadpool

from core.errors import ApiError

from . import repository, schemas, security

logger = logging.getLogger(__name__)

MAX_USERNAME_LENGTH = 50
MIN_PASSWORD_LENGTH = 6

_TOKEN_ERROR_MESSAGES = {
    security.TokenErrorKind.EXPIRED: "Token expired",
    security.TokenErrorKind.INVALID_SIGNATURE: "Invalid token",
    security.TokenErrorKind.MALFORMED: "Invalid token",
}


def _to_auth_context(user_row: dict) -> schemas.AuthContext:
    return schemas.AuthContext(
        id=int(user_row["id"]),
        username=str(user_row["username"]),
        role=str(user_row["role"]),
    )


def _validate_login(payload: schemas.LoginRequest) -> tuple[str, str]:
    username = payload.username
    password = payload.password

    if not username or not username.strip():
        raise ApiError.validation("Username is required and must be a non-empty string")
    if not password or not password.strip():
        raise ApiError.validation("Password is required and must be a non-empty string")
    if len(username) > MAX_USERNAME_LENGTH:
        raise ApiError.validation(f"Username must be {MAX_USERNAME_LENGTH} characters or less")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ApiError.validation(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    return username, password


async def login(payload: schemas.LoginRequest) -> schemas.LoginResponse:
    username, password = _validate_login(payload)

    user_row = await repository.get_user_by_username(username)
    # Unknown user and wrong password share one message.
    if user_row is None:
        logger.info("login_failed reason=unknown_user")
        raise ApiError.unauthorized("Invalid credentials")

    # bcrypt is CPU-bound; keep it off the event loop.
    password_hash = str(user_row.get("password_hash") or "")
    if not await run_in_threadpool(security.verify_password, password, password_hash):
        logger.info("login_failed reason=bad_password user_id=%s", user_row["id"])
        raise ApiError.unauthorized("Invalid credentials")

    user = _to_auth_context(user_row)
    token = security.build_access_token(user_id=user.id, username=user.username, role=user.role)
    logger.info("login_succeeded user_id=%s role=%s", user.id, user.role)
    return schemas.LoginResponse(token=token, user=user)


async def get_user_from_access_token(access_token: str) -> schemas.AuthContext:
    try:
        claims = security.decode_access_token(access_token)
    except security.TokenError as exc:
        raise ApiError.unauthorized(_TOKEN_ERROR_MESSAGES[exc.kind]) from exc

    # Always re-read: deleting the user is how access gets revoked.
    user_row = await repository.get_user_by_id(claims.id)
    if user_row is None:
        raise ApiError.unauthorized("User not found")
    return _to_auth_context(user_row)
