"""
Repositories (SQL-only)
=======================
- Pure CRUD and selects; every call runs in a worker thread behind the
  shared lock.
"""

from __future__ import annotations

import asyncio
import json
import sqlite3
import time
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from .db import transaction


@dataclass(slots=True)
class Profile:
    """Stored state for one chat user."""

    actor_id: str
    banned: bool = False
    tier: int = 0
    tags: list[str] = field(default_factory=list)
    created_ts: float = 0.0
    last_interaction_ts: float | None = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Profile":
        return cls(
            actor_id=row["actor_id"],
            banned=bool(row["banned"]),
            tier=int(row["tier"]),
            tags=list(json.loads(row["tags"] or "[]")),
            created_ts=float(row["created_ts"]),
            last_interaction_ts=row["last_interaction_ts"],
        )


class ProfilesRepo:
    """Async CRUD helpers for the ``profiles`` table."""

    def __init__(self, conn: sqlite3.Connection, lock: asyncio.Lock):
        self.conn = conn
        self._lock = lock

    def _ensure(self, actor_id: str) -> None:
        self.conn.execute(
            "INSERT OR IGNORE INTO profiles(actor_id, created_ts) VALUES(?, ?)",
            (actor_id, time.time()),
        )

    def _fetch(self, actor_id: str) -> Optional[Profile]:
        row = self.conn.execute(
            "SELECT * FROM profiles WHERE actor_id=?", (actor_id,)
        ).fetchone()
        return Profile.from_row(row) if row else None

    async def get(self, actor_id: str) -> Optional[Profile]:
        async with self._lock:
            return await asyncio.to_thread(self._fetch, actor_id)

    async def get_or_create(self, actor_id: str) -> Profile:
        def _run() -> Profile:
            with transaction(self.conn):
                self._ensure(actor_id)
            return self._fetch(actor_id)

        async with self._lock:
            return await asyncio.to_thread(_run)

    async def record_interaction(self, actor_id: str) -> None:
        sql = "UPDATE profiles SET last_interaction_ts=? WHERE actor_id=?"

        def _run() -> None:
            with transaction(self.conn):
                self.conn.execute(sql, (time.time(), actor_id))

        async with self._lock:
            await asyncio.to_thread(_run)

    async def set_banned(
        self, actor_id: str, banned: bool, tier: Optional[int] = None
    ) -> None:
        """Set the ban flag, and the tier too when given, in one transaction."""

        def _run() -> None:
            with transaction(self.conn):
                self._ensure(actor_id)
                self.conn.execute(
                    "UPDATE profiles SET banned=? WHERE actor_id=?",
                    (int(banned), actor_id),
                )
                if tier is not None:
                    self.conn.execute(
                        "UPDATE profiles SET tier=? WHERE actor_id=?", (tier, actor_id)
                    )

        async with self._lock:
            await asyncio.to_thread(_run)

    async def set_tier(self, actor_id: str, tier: int) -> None:
        def _run() -> None:
            with transaction(self.conn):
                self._ensure(actor_id)
                self.conn.execute(
                    "UPDATE profiles SET tier=? WHERE actor_id=?", (tier, actor_id)
                )

        async with self._lock:
            await asyncio.to_thread(_run)

    async def update_tags(
        self,
        actor_id: str,
        add: Iterable[str] = (),
        remove: Iterable[str] = (),
    ) -> list[str]:
        """Add and/or remove tags (set semantics, insertion order kept)."""

        add, remove = list(add), set(remove)

        def _run() -> list[str]:
            with transaction(self.conn):
                self._ensure(actor_id)
                row = self.conn.execute(
                    "SELECT tags FROM profiles WHERE actor_id=?", (actor_id,)
                ).fetchone()
                tags = list(json.loads(row["tags"] or "[]"))
                for tag in add:
                    if tag not in tags:
                        tags.append(tag)
                tags = [t for t in tags if t not in remove]
                self.conn.execute(
                    "UPDATE profiles SET tags=? WHERE actor_id=?",
                    (json.dumps(tags), actor_id),
                )
            return tags

        async with self._lock:
            return await asyncio.to_thread(_run)

    async def list_actor_ids(self, include_banned: bool = False) -> list[str]:
        sql = "SELECT actor_id FROM profiles"
        if not include_banned:
            sql += " WHERE banned=0"
        sql += " ORDER BY rowid"

        def _query() -> list[str]:
            return [r["actor_id"] for r in self.conn.execute(sql).fetchall()]

        async with self._lock:
            return await asyncio.to_thread(_query)


class KeysRepo:
    """Async helpers for the ``keys`` stock table."""

    def __init__(self, conn: sqlite3.Connection, lock: asyncio.Lock):
        self.conn = conn
        self._lock = lock

    async def add_keys(self, app_id: int, codes: Sequence[str], added_by: str) -> int:
        """Insert ``codes`` for ``app_id``; duplicates are skipped. Returns rows added."""

        sql = """
            INSERT OR IGNORE INTO keys(app_id, code, added_by, added_ts)
            VALUES (?, ?, ?, ?)
        """
        now = time.time()

        def _run() -> int:
            with transaction(self.conn):
                before = self.conn.total_changes
                self.conn.executemany(
                    sql, [(app_id, code, added_by, now) for code in codes]
                )
                return self.conn.total_changes - before

        async with self._lock:
            return await asyncio.to_thread(_run)

    async def stock(self) -> list[tuple[int, int]]:
        """Return ``(app_id, unredeemed_count)`` pairs ordered by app id."""

        sql = """
            SELECT app_id, COUNT(*) AS left_count FROM keys
            WHERE redeemed_by IS NULL
            GROUP BY app_id ORDER BY app_id
        """

        def _query() -> list[tuple[int, int]]:
            return [
                (int(r["app_id"]), int(r["left_count"]))
                for r in self.conn.execute(sql).fetchall()
            ]

        async with self._lock:
            return await asyncio.to_thread(_query)

    async def redeem(self, app_id: int, actor_id: str) -> Optional[str]:
        """Claim one unredeemed key for ``app_id``; ``None`` when out of stock."""

        def _run() -> Optional[str]:
            with transaction(self.conn):
                row = self.conn.execute(
                    """
                    SELECT id, code FROM keys
                    WHERE app_id=? AND redeemed_by IS NULL
                    ORDER BY id LIMIT 1
                    """,
                    (app_id,),
                ).fetchone()
                if row is None:
                    return None
                self.conn.execute(
                    "UPDATE keys SET redeemed_by=?, redeemed_ts=? WHERE id=?",
                    (actor_id, time.time(), row["id"]),
                )
                return row["code"]

        async with self._lock:
            return await asyncio.to_thread(_run)
