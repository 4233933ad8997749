"""
Auth persistence helpers.
"""

from __future__ import annotations

from core import db


async def get_user_by_username(username: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, username, password_hash, role
        FROM users
        WHERE username = $1
        """,
        username,
    )


async def get_user_by_id(user_id: int) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, username, role
        FROM users
        WHERE id = $1
        """,
        user_id,
    )
