"""
Small input-checking helpers shared by the write endpoints.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated

from fastapi import Path

# Ids are bigserial; anything outside that range can never match a row.
MAX_ROW_ID = 2**63 - 1

RowId = Annotated[int, Path(ge=1, le=MAX_ROW_ID)]


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def parse_iso_date(value: str | None) -> date | None:
    """
    Parse "YYYY-MM-DD" (or a full ISO timestamp) into a date; None if unparseable.
    """
    raw = (value or "").strip()
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def optional_text(value: str | None) -> str | None:
    """
    Empty strings are stored as NULL.
    """
    if value is None:
        return None
    value = value.strip()
    return value or None
