"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class LoginRequest(BaseModel):
    # Presence and length are checked in the service so each rule gets its own message.
    username: str | None = None
    password: str | None = None


class AuthContext(BaseModel):
    """
    The authenticated identity for one request, as re-read from storage.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class LoginResponse(BaseModel):
    token: str
    user: AuthContext


class VerifyResponse(BaseModel):
    user: AuthContext
