"""
Release persistence (raw SQL).

Functions that take `conn` as their first positional argument are write steps
that must run inside the caller's transaction. Read helpers take an optional
`conn` so a write path can re-read on the connection it already holds.
"""

from __future__ import annotations

from datetime import date

import asyncpg

from core import db

_RELEASE_COLUMNS = "id, title, url_title, soundcloud_url, collaborators, release_date"
_LINK_COLUMNS = "id, release_id, platform, url"


async def list_releases() -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT {_RELEASE_COLUMNS}
        FROM releases
        ORDER BY release_date DESC, id DESC
        """
    )


async def get_release_by_url_title(url_title: str, *, conn: asyncpg.Connection | None = None) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_RELEASE_COLUMNS}
        FROM releases
        WHERE url_title = $1
        """,
        url_title,
        conn=conn,
    )


async def get_release_by_id(release_id: int, *, conn: asyncpg.Connection | None = None) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_RELEASE_COLUMNS}
        FROM releases
        WHERE id = $1
        """,
        release_id,
        conn=conn,
    )


async def find_release_id_by_title(title: str, *, conn: asyncpg.Connection | None = None) -> int | None:
    row = await db.fetch_one(
        """
        SELECT id
        FROM releases
        WHERE title = $1
        """,
        title,
        conn=conn,
    )
    return int(row["id"]) if row is not None else None


async def find_release_id_by_url_title(url_title: str, *, conn: asyncpg.Connection | None = None) -> int | None:
    row = await db.fetch_one(
        """
        SELECT id
        FROM releases
        WHERE url_title = $1
        """,
        url_title,
        conn=conn,
    )
    return int(row["id"]) if row is not None else None


async def list_release_links(release_id: int, *, conn: asyncpg.Connection | None = None) -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT {_LINK_COLUMNS}
        FROM release_links
        WHERE release_id = $1
        ORDER BY id ASC
        """,
        release_id,
        conn=conn,
    )


async def insert_release(
    conn: asyncpg.Connection,
    *,
    title: str,
    url_title: str,
    soundcloud_url: str,
    collaborators: str | None,
    release_date: date,
) -> int:
    row = await db.fetch_one(
        """
        INSERT INTO releases (title, url_title, soundcloud_url, collaborators, release_date)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING id
        """,
        title,
        url_title,
        soundcloud_url,
        collaborators,
        release_date,
        conn=conn,
    )
    if row is None or "id" not in row:
        raise RuntimeError("Failed to insert release.")
    return int(row["id"])


async def update_release(
    conn: asyncpg.Connection,
    release_id: int,
    *,
    title: str,
    url_title: str,
    soundcloud_url: str,
    collaborators: str | None,
    release_date: date,
) -> None:
    await db.execute(
        """
        UPDATE releases
        SET title = $2,
            url_title = $3,
            soundcloud_url = $4,
            collaborators = $5,
            release_date = $6
        WHERE id = $1
        """,
        release_id,
        title,
        url_title,
        soundcloud_url,
        collaborators,
        release_date,
        conn=conn,
    )


async def delete_release_links(conn: asyncpg.Connection, release_id: int) -> None:
    await db.execute(
        """
        DELETE FROM release_links
        WHERE release_id = $1
        """,
        release_id,
        conn=conn,
    )


async def insert_release_link(conn: asyncpg.Connection, *, release_id: int, platform: str, url: str) -> None:
    await db.execute(
        """
        INSERT INTO release_links (release_id, platform, url)
        VALUES ($1, $2, $3)
        """,
        release_id,
        platform,
        url,
        conn=conn,
    )


async def delete_release(release_id: int) -> bool:
    """
    Delete a release; its links go with it via ON DELETE CASCADE.
    """
    row = await db.fetch_one(
        """
        DELETE FROM releases
        WHERE id = $1
        RETURNING id
        """,
        release_id,
    )
    return row is not None
