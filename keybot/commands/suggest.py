"""Fuzzy "did you mean" matching for unresolved command names."""

from __future__ import annotations

import difflib
from typing import Iterable

DEFAULT_THRESHOLD = 0.6


def score(query: str, candidate: str) -> float:
    """
    Return a similarity score in ``[0, 1]`` for ``query`` against ``candidate``.

    Exact matches score 1.0, prefixes score above substrings, and anything
    else falls back to :class:`difflib.SequenceMatcher` (capped below the
    substring band).
    """

    if not query or not candidate:
        return 0.0
    if query == candidate:
        return 1.0

    coverage = min(len(query) / len(candidate), 1.0)
    if candidate.startswith(query):
        return 0.9 + 0.1 * coverage
    if query in candidate:
        return 0.8 + 0.1 * coverage

    ratio = difflib.SequenceMatcher(None, query, candidate).ratio()
    return min(ratio, 0.79)


def rank(query: str, candidates: Iterable[str]) -> list[tuple[str, float]]:
    """Score every candidate and sort best-first (stable on ties)."""

    scored = [(name, score(query, name)) for name in candidates]
    scored.sort(key=lambda item: item[1], reverse=True)
    return scored


def suggest(
    query: str,
    candidates: Iterable[str],
    threshold: float = DEFAULT_THRESHOLD,
) -> list[str]:
    """Return the candidates scoring strictly above ``threshold``, best first."""

    return [name for name, value in rank(query, candidates) if value > threshold]


def format_suggestions(names: Iterable[str], delimiter: str, header: str) -> str:
    """Render the "did you mean" chat message for ``names``."""

    lines = [header]
    lines.extend(f"✔ {delimiter}{name}" for name in names)
    return "\n".join(lines)


__all__ = ["DEFAULT_THRESHOLD", "format_suggestions", "rank", "score", "suggest"]
