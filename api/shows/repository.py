"""
Shows persistence (raw SQL).
"""

from __future__ import annotations

from datetime import date

from core import db

_SHOW_COLUMNS = "id, venue, city, state_province, country, ticket_link, show_date"


async def list_shows() -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT {_SHOW_COLUMNS}
        FROM shows
        ORDER BY show_date ASC, id ASC
        """
    )


async def list_shows_from(start_date: date) -> list[dict]:
    """
    Shows on or after `start_date`, soonest first.
    """
    return await db.fetch_all(
        f"""
        SELECT {_SHOW_COLUMNS}
        FROM shows
        WHERE show_date >= $1
        ORDER BY show_date ASC, id ASC
        """,
        start_date,
    )


async def get_show(show_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_SHOW_COLUMNS}
        FROM shows
        WHERE id = $1
        """,
        show_id,
    )


async def create_show(
    *,
    venue: str,
    city: str,
    state_province: str,
    country: str,
    ticket_link: str | None,
    show_date: date,
) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO shows (venue, city, state_province, country, ticket_link, show_date)
        VALUES ($1, $2, $3, $4, $5, $6)
        RETURNING {_SHOW_COLUMNS}
        """,
        venue,
        city,
        state_province,
        country,
        ticket_link,
        show_date,
    )
    if row is None:
        raise RuntimeError("Failed to insert show.")
    return row


async def update_show(
    show_id: int,
    *,
    venue: str,
    city: str,
    state_province: str,
    country: str,
    ticket_link: str | None,
    show_date: date,
) -> dict | None:
    return await db.fetch_one(
        f"""
        UPDATE shows
        SET venue = $2,
            city = $3,
            state_province = $4,
            country = $5,
            ticket_link = $6,
            show_date = $7
        WHERE id = $1
        RETURNING {_SHOW_COLUMNS}
        """,
        show_id,
        venue,
        city,
        state_province,
        country,
        ticket_link,
        show_date,
    )


async def delete_show(show_id: int) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM shows
        WHERE id = $1
        RETURNING id
        """,
        show_id,
    )
    return row is not None
