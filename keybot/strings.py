"""
Localized string table
======================

Strings live in a TOML file grouped by table, e.g. ``keybot/data/en.toml``::

    [dispatch]
    banned = "You are banned."

    [tier]
    description = "Set a user's tier (0-{0})"

Keys are dotted paths (``"tier.description"``). Positional markers ``{0}``,
``{1}`` ... are filled from the arguments passed to :meth:`Strings.resolve`.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE_FILE = Path(__file__).resolve().parent / "data" / "en.toml"


def _flatten(table: Dict[str, Any], prefix: str = "") -> Dict[str, str]:
    flat: Dict[str, str] = {}
    for key, value in table.items():
        path = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, f"{path}."))
        else:
            flat[path] = str(value)
    return flat


class Strings:
    """Read-only lookup of localized templates."""

    def __init__(self, table: Dict[str, Any] | None = None) -> None:
        self._table = _flatten(table or {})

    @classmethod
    def load(cls, path: str | Path | None = None) -> "Strings":
        """Load a TOML string table (the bundled English table by default)."""

        target = Path(path) if path else DEFAULT_LANGUAGE_FILE
        with target.open("rb") as handle:
            table = tomllib.load(handle)
        strings = cls(table)
        logger.info("Loaded %d string(s) from %s", len(strings), target)
        return strings

    def resolve(self, key: str, *args: Any) -> str:
        """
        Return the template for ``key`` with positional ``args`` substituted.

        :raises KeyError: if ``key`` is not in the table.
        """

        try:
            template = self._table[key]
        except KeyError:
            raise KeyError(f"Unknown string key '{key}'") from None
        return template.format(*args) if args else template

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def __len__(self) -> int:
        return len(self._table)


__all__ = ["DEFAULT_LANGUAGE_FILE", "Strings"]
