"""
Show business logic: validation, not-found handling and the upcoming view.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any

from core import validation
from core.errors import ApiError

from . import repository, schemas

logger = logging.getLogger(__name__)

MAX_VENUE_LENGTH = 200
MAX_PLACE_LENGTH = 100
MAX_TICKET_LINK_LENGTH = 500


def today() -> date:
    return datetime.now(timezone.utc).date()


def _validate_show(payload: schemas.ShowWriteRequest) -> dict[str, Any]:
    required = (payload.venue, payload.city, payload.state_province, payload.country, payload.show_date)
    if any(validation.is_blank(value) for value in required):
        raise ApiError.validation("Venue, city, state/province, country, and show date are required")

    venue = payload.venue.strip()
    city = payload.city.strip()
    state_province = payload.state_province.strip()
    country = payload.country.strip()

    if len(venue) > MAX_VENUE_LENGTH:
        raise ApiError.validation(f"Venue must be {MAX_VENUE_LENGTH} characters or less")
    for label, value in (("City", city), ("State/province", state_province), ("Country", country)):
        if len(value) > MAX_PLACE_LENGTH:
            raise ApiError.validation(f"{label} must be {MAX_PLACE_LENGTH} characters or less")

    ticket_link = validation.optional_text(payload.ticket_link)
    if ticket_link is not None and len(ticket_link) > MAX_TICKET_LINK_LENGTH:
        raise ApiError.validation(f"Ticket link must be {MAX_TICKET_LINK_LENGTH} characters or less")

    show_date = validation.parse_iso_date(payload.show_date)
    if show_date is None:
        raise ApiError.validation("Show date must be a valid date")

    return {
        "venue": venue,
        "city": city,
        "state_province": state_province,
        "country": country,
        "ticket_link": ticket_link,
        "show_date": show_date,
    }


async def list_shows() -> list[dict]:
    return await repository.list_shows()


async def upcoming_shows() -> dict:
    shows = await repository.list_shows_from(today())
    return {
        "shows": shows,
        "count": len(shows),
        "hasUpcomingShows": len(shows) > 0,
    }


async def get_show(show_id: int) -> dict:
    row = await repository.get_show(show_id)
    if row is None:
        raise ApiError.not_found("Show not found")
    return row


async def create_show(payload: schemas.ShowWriteRequest) -> dict:
    fields = _validate_show(payload)
    row = await repository.create_show(**fields)
    logger.info("show_created show_id=%s show_date=%s", row["id"], row["show_date"])
    return row


async def update_show(show_id: int, payload: schemas.ShowWriteRequest) -> dict:
    fields = _validate_show(payload)
    if await repository.get_show(show_id) is None:
        raise ApiError.not_found("Show not found")

    row = await repository.update_show(show_id, **fields)
    if row is None:
        # Deleted between the existence check and the update.
        raise ApiError.not_found("Show not found")
    logger.info("show_updated show_id=%s", show_id)
    return row


async def delete_show(show_id: int) -> dict:
    if await repository.get_show(show_id) is None:
        raise ApiError.not_found("Show not found")
    if not await repository.delete_show(show_id):
        raise ApiError.not_found("Show not found")
    logger.info("show_deleted show_id=%s", show_id)
    return {"message": "Show deleted successfully"}
