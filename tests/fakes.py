"""
In-memory stand-in for the storage layer.

`FakeStore` implements the repository functions of every feature with the same
signatures, plus `connection()` with transaction snapshots so rollbacks are
observable, and counters for connections borrowed/returned.
"""

from __future__ import annotations

import copy
from contextlib import asynccontextmanager
from datetime import date
from typing import Any, AsyncIterator

import asyncpg

from auth import security


class FakeConnection:
    def __init__(self, store: "FakeStore") -> None:
        self.store = store

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        snapshot = self.store.snapshot()
        try:
            yield
        except BaseException:
            self.store.restore(snapshot)
            self.store.rollbacks += 1
            raise
        self.store.commits += 1


class FakeStore:
    def __init__(self) -> None:
        self.users: dict[int, dict[str, Any]] = {}
        self.shows: dict[int, dict[str, Any]] = {}
        self.releases: dict[int, dict[str, Any]] = {}
        self.links: dict[int, dict[str, Any]] = {}
        self._next_id = 1
        self.acquired = 0
        self.released = 0
        self.commits = 0
        self.rollbacks = 0

    def _new_id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    def snapshot(self) -> tuple:
        return copy.deepcopy((self.users, self.shows, self.releases, self.links, self._next_id))

    def restore(self, snapshot: tuple) -> None:
        self.users, self.shows, self.releases, self.links, self._next_id = copy.deepcopy(snapshot)

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[FakeConnection]:
        self.acquired += 1
        try:
            yield FakeConnection(self)
        finally:
            self.released += 1

    async def ping(self) -> None:
        return None

    # seeding helpers

    def add_user(self, *, username: str, password: str, role: str = "admin") -> dict[str, Any]:
        user = {
            "id": self._new_id(),
            "username": username,
            "password_hash": security.hash_password(password),
            "role": role,
        }
        self.users[user["id"]] = user
        return dict(user)

    def add_show(self, **fields: Any) -> dict[str, Any]:
        row = {"id": self._new_id(), "ticket_link": None, **fields}
        self.shows[row["id"]] = row
        return dict(row)

    def add_release(self, *, links: tuple = (), **fields: Any) -> dict[str, Any]:
        row = {"id": self._new_id(), "collaborators": None, **fields}
        self.releases[row["id"]] = row
        for platform, url in links:
            link_id = self._new_id()
            self.links[link_id] = {"id": link_id, "release_id": row["id"], "platform": platform, "url": url}
        return dict(row)

    def links_for(self, release_id: int) -> list[dict[str, Any]]:
        return [dict(link) for link in sorted(self.links.values(), key=lambda l: l["id"]) if link["release_id"] == release_id]

    # auth.repository

    async def get_user_by_username(self, username: str) -> dict | None:
        for user in self.users.values():
            if user["username"] == username:
                return dict(user)
        return None

    async def get_user_by_id(self, user_id: int) -> dict | None:
        user = self.users.get(user_id)
        if user is None:
            return None
        return {"id": user["id"], "username": user["username"], "role": user["role"]}

    # shows.repository

    async def list_shows(self) -> list[dict]:
        return [dict(row) for row in sorted(self.shows.values(), key=lambda r: (r["show_date"], r["id"]))]

    async def list_shows_from(self, start_date: date) -> list[dict]:
        return [row for row in await self.list_shows() if row["show_date"] >= start_date]

    async def get_show(self, show_id: int) -> dict | None:
        row = self.shows.get(show_id)
        return dict(row) if row is not None else None

    async def create_show(self, **fields: Any) -> dict:
        return self.add_show(**fields)

    async def update_show(self, show_id: int, **fields: Any) -> dict | None:
        row = self.shows.get(show_id)
        if row is None:
            return None
        row.update(fields)
        return dict(row)

    async def delete_show(self, show_id: int) -> bool:
        return self.shows.pop(show_id, None) is not None

    # releases.repository

    async def list_releases(self) -> list[dict]:
        return [
            dict(row)
            for row in sorted(self.releases.values(), key=lambda r: (r["release_date"], r["id"]), reverse=True)
        ]

    async def get_release_by_url_title(self, url_title: str, *, conn: Any = None) -> dict | None:
        for row in self.releases.values():
            if row["url_title"] == url_title:
                return dict(row)
        return None

    async def get_release_by_id(self, release_id: int, *, conn: Any = None) -> dict | None:
        row = self.releases.get(release_id)
        return dict(row) if row is not None else None

    async def find_release_id_by_title(self, title: str, *, conn: Any = None) -> int | None:
        for row in self.releases.values():
            if row["title"] == title:
                return row["id"]
        return None

    async def find_release_id_by_url_title(self, url_title: str, *, conn: Any = None) -> int | None:
        row = await self.get_release_by_url_title(url_title)
        return row["id"] if row is not None else None

    async def list_release_links(self, release_id: int, *, conn: Any = None) -> list[dict]:
        return self.links_for(release_id)

    def _check_unique(self, fields: dict[str, Any], *, exclude_id: int | None = None) -> None:
        for row in self.releases.values():
            if row["id"] == exclude_id:
                continue
            if row["title"] == fields["title"] or row["url_title"] == fields["url_title"]:
                raise asyncpg.UniqueViolationError("duplicate key value violates unique constraint")

    async def insert_release(self, conn: FakeConnection, **fields: Any) -> int:
        self._check_unique(fields)
        return self.add_release(**fields)["id"]

    async def update_release(self, conn: FakeConnection, release_id: int, **fields: Any) -> None:
        self._check_unique(fields, exclude_id=release_id)
        self.releases[release_id].update(fields)

    async def delete_release_links(self, conn: FakeConnection, release_id: int) -> None:
        for link_id in [l["id"] for l in self.links.values() if l["release_id"] == release_id]:
            del self.links[link_id]

    async def insert_release_link(self, conn: FakeConnection, *, release_id: int, platform: str, url: str) -> None:
        link_id = self._new_id()
        self.links[link_id] = {"id": link_id, "release_id": release_id, "platform": platform, "url": url}

    async def delete_release(self, release_id: int) -> bool:
        if self.releases.pop(release_id, None) is None:
            return False
        await self.delete_release_links(None, release_id)
        return True


def bearer(user: dict[str, Any], **token_kwargs: Any) -> dict[str, str]:
    token = security.build_access_token(
        user_id=user["id"],
        username=user["username"],
        role=user["role"],
        **token_kwargs,
    )
    return {"Authorization": f"Bearer {token}"}
