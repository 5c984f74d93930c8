"""Outbound chat delivery over Discord direct messages."""

from __future__ import annotations

import logging

import discord

logger = logging.getLogger(__name__)

# Discord rejects messages longer than this
MESSAGE_LIMIT = 2000


def chunk_text(text: str, limit: int = MESSAGE_LIMIT) -> list[str]:
    """Split ``text`` into pieces of at most ``limit`` chars, preferring line breaks."""

    if len(text) <= limit:
        return [text]

    chunks: list[str] = []
    current = ""
    for line in text.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


class DiscordMessenger:
    """Send DMs to users by id. Failures are logged, never raised."""

    def __init__(self, client: discord.Client) -> None:
        self.client = client

    async def _resolve_user(self, actor_id: str) -> discord.abc.Messageable | None:
        try:
            uid = int(actor_id)
        except ValueError:
            logger.warning("Cannot message non-numeric actor id %r", actor_id)
            return None

        user = self.client.get_user(uid)
        if user is not None:
            return user
        try:
            return await self.client.fetch_user(uid)
        except discord.HTTPException as exc:
            logger.warning("Could not resolve user %s: %s", actor_id, exc)
            return None

    async def send(self, actor_id: str, text: str) -> None:
        if not text:
            return
        user = await self._resolve_user(actor_id)
        if user is None:
            return

        try:
            for chunk in chunk_text(text):
                await user.send(chunk)
        except discord.HTTPException as exc:
            logger.warning("Failed to message %s: %s", actor_id, exc)
