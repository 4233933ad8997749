"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Header, Request

from . import dependencies, schemas, service, throttle

router = APIRouter(prefix="/api/auth")


@router.post("/login", response_model=schemas.LoginResponse)
async def login(payload: schemas.LoginRequest, request: Request) -> schemas.LoginResponse:
    async with throttle.guard(request):
        return await service.login(payload)


@router.get("/verify", response_model=schemas.VerifyResponse)
async def verify(
    request: Request,
    authorization: str | None = Header(default=None),
) -> schemas.VerifyResponse:
    # Token checks run inside the guard so bad tokens count as failed attempts.
    async with throttle.guard(request):
        access_token = dependencies.extract_bearer_token(authorization)
        current_user = await service.get_user_from_access_token(access_token)
    return schemas.VerifyResponse(user=current_user)
