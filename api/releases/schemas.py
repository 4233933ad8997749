"""
Pydantic schemas for release endpoints.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel


class Platform(str, enum.Enum):
    SPOTIFY = "spotify"
    SOUNDCLOUD = "soundcloud"
    APPLE_MUSIC = "apple_music"
    YOUTUBE = "youtube"
    FREE_DOWNLOAD = "free_download"


class ReleaseWriteRequest(BaseModel):
    title: str | None = None
    url_title: str | None = None
    soundcloud_url: str | None = None
    collaborators: str | None = None
    release_date: str | None = None
    # Items stay loosely typed: each link is checked inside the write
    # transaction so one bad link rolls back the whole release.
    links: list[Any] | None = None
