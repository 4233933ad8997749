"""
Show API endpoints. Reads are public; writes require an admin.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth import dependencies as auth_dependencies
from auth.schemas import AuthContext
from core.validation import RowId

from . import schemas, service

router = APIRouter(prefix="/api/shows")


@router.get("")
async def list_shows() -> list[dict]:
    return await service.list_shows()


@router.get("/upcoming")
async def upcoming_shows() -> dict:
    return await service.upcoming_shows()


@router.get("/{show_id}")
async def get_show(show_id: RowId) -> dict:
    return await service.get_show(show_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_show(
    payload: schemas.ShowWriteRequest,
    _: AuthContext = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.create_show(payload)


@router.put("/{show_id}")
async def update_show(
    show_id: RowId,
    payload: schemas.ShowWriteRequest,
    _: AuthContext = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.update_show(show_id, payload)


@router.delete("/{show_id}")
async def delete_show(
    show_id: RowId,
    _: AuthContext = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.delete_show(show_id)
