"""
Pydantic schemas for show endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel


class ShowWriteRequest(BaseModel):
    venue: str | None = None
    city: str | None = None
    state_province: str | None = None
    country: str | None = None
    ticket_link: str | None = None
    show_date: str | None = None
