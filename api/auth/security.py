"""
Auth security helpers: password hashing and access tokens.
"""

from __future__ import annotations

import enum
import os
import time
from dataclasses import dataclass
from typing import Any

import bcrypt
import jwt

from core import config


class AuthSecurityError(RuntimeError):
    pass


class TokenErrorKind(enum.Enum):
    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED = "expired"
    MALFORMED = "malformed"


class TokenError(AuthSecurityError):
    def __init__(self, kind: TokenErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


@dataclass(frozen=True)
class TokenClaims:
    id: int
    username: str
    role: str
    issued_at: int
    expires_at: int


def jwt_secret() -> str:
    secret = os.environ.get("JWT_SECRET", "").strip()
    if not secret:
        raise AuthSecurityError("JWT_SECRET is not set.")
    return secret


def require_jwt_secret() -> None:
    """
    Fail fast at startup when the signing secret is missing.
    """
    jwt_secret()


def jwt_algorithm() -> str:
    return config.env_str("JWT_ALG", "HS256")


def access_token_expire_hours() -> int:
    return config.env_int("ACCESS_TOKEN_EXPIRE_HOURS", 24)


def bcrypt_rounds() -> int:
    return config.env_int("BCRYPT_ROUNDS", 12)


def now_epoch_s() -> int:
    return int(time.time())


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt(rounds=bcrypt_rounds())).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def build_access_token(*, user_id: int, username: str, role: str, issued_at: int | None = None) -> str:
    iat = now_epoch_s() if issued_at is None else issued_at
    expires_at = iat + (access_token_expire_hours() * 3600)

    payload = {
        "sub": str(user_id),
        "id": user_id,
        "username": username,
        "role": role,
        "iat": iat,
        "exp": expires_at,
    }
    return jwt.encode(payload, jwt_secret(), algorithm=jwt_algorithm())


def _claims_from_payload(payload: dict[str, Any]) -> TokenClaims:
    user_id = payload.get("id")
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise TokenError(TokenErrorKind.MALFORMED, "Token subject is missing.")
    return TokenClaims(
        id=user_id,
        username=str(payload.get("username") or ""),
        role=str(payload.get("role") or ""),
        issued_at=int(payload["iat"]),
        expires_at=int(payload["exp"]),
    )


def decode_access_token(token: str) -> TokenClaims:
    raw = (token or "").strip()
    if not raw:
        raise TokenError(TokenErrorKind.MALFORMED, "Access token is empty.")

    try:
        payload = jwt.decode(
            raw,
            jwt_secret(),
            algorithms=[jwt_algorithm()],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenError(TokenErrorKind.EXPIRED, "Access token has expired.") from exc
    # InvalidSignatureError subclasses DecodeError, so it has to come first.
    except jwt.InvalidSignatureError as exc:
        raise TokenError(TokenErrorKind.INVALID_SIGNATURE, "Access token signature is invalid.") from exc
    except jwt.InvalidTokenError as exc:
        raise TokenError(TokenErrorKind.MALFORMED, "Access token is malformed.") from exc

    return _claims_from_payload(payload)
