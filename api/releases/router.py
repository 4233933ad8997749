"""
Release API endpoints.

`router` serves /api/releases; `edit_router` serves the slug-addressed update
under /api/edit/releases.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth import dependencies as auth_dependencies
from auth.schemas import AuthContext
from core.validation import RowId

from . import schemas, service

router = APIRouter(prefix="/api/releases")
edit_router = APIRouter(prefix="/api/edit/releases")


@router.get("")
async def list_releases() -> list[dict]:
    return await service.list_releases()


@router.get("/{url_title}")
async def get_release(url_title: str) -> dict:
    return await service.get_release(url_title)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_release(
    payload: schemas.ReleaseWriteRequest,
    _: AuthContext = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.create_release(payload)


@router.delete("/{release_id}")
async def delete_release(
    release_id: RowId,
    _: AuthContext = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.delete_release(release_id)


@edit_router.put("/{url_title}")
async def update_release(
    url_title: str,
    payload: schemas.ReleaseWriteRequest,
    _: AuthContext = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.update_release(url_title, payload)
