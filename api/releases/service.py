"""
Release business logic.

Writes of a release and its links happen on one pooled connection inside one
transaction:

1. validate the payload (no storage access yet)
2. pre-check existence/uniqueness (no transaction yet)
3. write the release row, then replace its links, validating each link as it
   is written; any failure rolls the whole transaction back
4. re-read the release and links so the response reflects what was stored
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any

import asyncpg

from core import db, validation
from core.errors import ApiError

from . import repository, schemas

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 200
MAX_LINK_URL_LENGTH = 500
URL_TITLE_PATTERN = re.compile(r"^[a-z0-9-]+$")
PLATFORMS = tuple(platform.value for platform in schemas.Platform)


@dataclass(frozen=True)
class ReleaseFields:
    title: str
    url_title: str
    soundcloud_url: str
    collaborators: str | None
    release_date: date


def _validate_release(payload: schemas.ReleaseWriteRequest) -> ReleaseFields:
    title = payload.title
    url_title = payload.url_title
    soundcloud_url = payload.soundcloud_url

    if validation.is_blank(title):
        raise ApiError.validation("Title is required and must be a non-empty string")
    if validation.is_blank(url_title):
        raise ApiError.validation("URL title is required and must be a non-empty string")
    if validation.is_blank(soundcloud_url) or "soundcloud.com" not in soundcloud_url:
        raise ApiError.validation("SoundCloud URL is required and must be a valid SoundCloud URL")

    release_date = validation.parse_iso_date(payload.release_date)
    if release_date is None:
        raise ApiError.validation("Release date is required and must be a valid date")

    if len(title) > MAX_TITLE_LENGTH:
        raise ApiError.validation(f"Title must be {MAX_TITLE_LENGTH} characters or less")
    if not URL_TITLE_PATTERN.match(url_title):
        raise ApiError.validation("URL title must contain only lowercase letters, numbers, and hyphens")

    return ReleaseFields(
        title=title,
        url_title=url_title,
        soundcloud_url=soundcloud_url.strip(),
        collaborators=validation.optional_text(payload.collaborators),
        release_date=release_date,
    )


def _validate_link(link: Any) -> tuple[str, str]:
    if not isinstance(link, dict) or not link.get("platform") or not link.get("url"):
        raise ApiError.validation("Each link must have both platform and url properties")

    platform = link["platform"]
    if platform not in PLATFORMS:
        raise ApiError.validation(f"Invalid platform: {platform}. Must be one of: {', '.join(PLATFORMS)}")

    url = link["url"]
    if not isinstance(url, str) or not url.strip():
        raise ApiError.validation("Link URL must be a non-empty string")
    if len(url) > MAX_LINK_URL_LENGTH:
        raise ApiError.validation(f"Link URL must be {MAX_LINK_URL_LENGTH} characters or less")

    return platform, url


async def _write_links(conn: asyncpg.Connection, release_id: int, links: list[Any]) -> int:
    written = 0
    for link in links:
        platform, url = _validate_link(link)
        await repository.insert_release_link(conn, release_id=release_id, platform=platform, url=url)
        written += 1
    return written


async def _load_release(release_id: int, *, conn: asyncpg.Connection) -> dict:
    row = await repository.get_release_by_id(release_id, conn=conn)
    if row is None:
        raise ApiError.not_found("Release not found")
    links = await repository.list_release_links(release_id, conn=conn)
    return {**row, "links": links}


async def list_releases() -> list[dict]:
    return await repository.list_releases()


async def get_release(url_title: str) -> dict:
    async with db.connection() as conn:
        row = await repository.get_release_by_url_title(url_title, conn=conn)
        if row is None:
            raise ApiError.not_found("Release not found")
        links = await repository.list_release_links(int(row["id"]), conn=conn)
    return {**row, "links": links}


async def create_release(payload: schemas.ReleaseWriteRequest) -> dict:
    fields = _validate_release(payload)

    async with db.connection() as conn:
        if await repository.find_release_id_by_title(fields.title, conn=conn) is not None:
            raise ApiError.conflict("A release with this title already exists")
        if await repository.find_release_id_by_url_title(fields.url_title, conn=conn) is not None:
            raise ApiError.conflict("A release with this URL title already exists")

        link_count = 0
        async with conn.transaction():
            release_id = await repository.insert_release(conn, **asdict(fields))
            if payload.links is not None:
                link_count = await _write_links(conn, release_id, payload.links)

        release = await _load_release(release_id, conn=conn)

    logger.info(
        "release_created release_id=%s url_title=%s links=%s",
        release_id,
        fields.url_title,
        link_count,
    )
    return release


async def update_release(url_title: str, payload: schemas.ReleaseWriteRequest) -> dict:
    fields = _validate_release(payload)

    async with db.connection() as conn:
        existing = await repository.get_release_by_url_title(url_title, conn=conn)
        if existing is None:
            raise ApiError.not_found("Release not found")
        release_id = int(existing["id"])

        title_owner = await repository.find_release_id_by_title(fields.title, conn=conn)
        if title_owner is not None and title_owner != release_id:
            raise ApiError.conflict("A release with this title already exists")
        slug_owner = await repository.find_release_id_by_url_title(fields.url_title, conn=conn)
        if slug_owner is not None and slug_owner != release_id:
            raise ApiError.conflict("A release with this URL title already exists")

        link_count = None
        async with conn.transaction():
            await repository.update_release(conn, release_id, **asdict(fields))
            if payload.links is not None:
                await repository.delete_release_links(conn, release_id)
                link_count = await _write_links(conn, release_id, payload.links)

        release = await _load_release(release_id, conn=conn)

    logger.info(
        "release_updated release_id=%s url_title=%s links_replaced=%s",
        release_id,
        fields.url_title,
        link_count,
    )
    return release


async def delete_release(release_id: int) -> dict:
    if await repository.get_release_by_id(release_id) is None:
        raise ApiError.not_found("Release not found")
    if not await repository.delete_release(release_id):
        raise ApiError.not_found("Release not found")
    logger.info("release_deleted release_id=%s", release_id)
    return {"message": "Release deleted successfully"}
