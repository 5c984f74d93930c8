"""
Store connection helpers
========================

``connect`` opens the keybot database with WAL journaling; ``migrate`` applies
the bundled ``schema.sql``, which is safe to run on every start.
"""

from __future__ import annotations

import logging
import pathlib
import sqlite3
from contextlib import contextmanager
from importlib import resources
from typing import Iterator

logger = logging.getLogger(__name__)

IN_MEMORY = ":memory:"

_PRAGMAS = (
    "journal_mode=WAL",
    "synchronous=NORMAL",
    "foreign_keys=ON",
    "busy_timeout=3000",
)


def connect(path: str) -> sqlite3.Connection:
    """Open ``path`` (creating its directory) with autocommit and ``Row`` rows."""
    if path != IN_MEMORY:
        pathlib.Path(path).parent.mkdir(parents=True, exist_ok=True)

    # Autocommit mode: writes that must land together go through `transaction`.
    conn = sqlite3.connect(path, isolation_level=None, check_same_thread=False)
    for pragma in _PRAGMAS:
        conn.execute(f"PRAGMA {pragma};")
    conn.row_factory = sqlite3.Row

    logger.debug("Opened store at %s", path)
    return conn


def migrate(conn: sqlite3.Connection) -> None:
    sql = resources.files(__package__).joinpath("schema.sql").read_text(encoding="utf-8")
    conn.executescript(sql)


def wal_checkpoint_truncate(conn: sqlite3.Connection) -> None:
    """Fold the WAL back into the main file; called on shutdown."""
    conn.execute("PRAGMA wal_checkpoint(TRUNCATE);")


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """
    Run the enclosed statements as one transaction.

    ``with conn:`` does not open a transaction on an autocommit connection,
    so this issues ``BEGIN`` itself and rolls back when the block raises.
    """
    conn.execute("BEGIN IMMEDIATE;")
    try:
        yield conn
    except BaseException:
        conn.execute("ROLLBACK;")
        raise
    conn.execute("COMMIT;")
