"""
Public façade for the profile/key store
======================================

Open once at startup and share::

    from keybot.memory import Store

    store = Store.open("data/keybot.db")
    profile = await store.get_or_create_profile("1234")
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3

from . import db as _db
from .repositories import KeysRepo, Profile, ProfilesRepo

logger = logging.getLogger(__name__)

__all__ = ["KeysRepo", "Profile", "ProfilesRepo", "Store"]


class Store:
    """Single sqlite connection plus the repositories sharing its lock."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self._lock = asyncio.Lock()
        self.profiles = ProfilesRepo(conn, self._lock)
        self.keys = KeysRepo(conn, self._lock)

    @classmethod
    def open(cls, path: str) -> "Store":
        """Connect to ``path`` (``":memory:"`` for tests) and apply the schema."""

        conn = _db.connect(path)
        _db.migrate(conn)
        logger.info("Opened store at %s", path)
        return cls(conn)

    # --- ProfileStore protocol used by the dispatcher ------------------- #

    async def get_or_create_profile(self, actor_id: str) -> Profile:
        return await self.profiles.get_or_create(actor_id)

    async def record_interaction(self, actor_id: str) -> None:
        await self.profiles.record_interaction(actor_id)

    def close(self) -> None:
        try:
            _db.wal_checkpoint_truncate(self.conn)
        except sqlite3.Error:
            logger.warning("WAL checkpoint failed on close", exc_info=True)
        self.conn.close()
