"""Entry point from the transport: one raw chat line in, one routing decision out."""

from __future__ import annotations

import logging
import re
from typing import NamedTuple

from .router import CommandRouter
from .types import ProfileStore, RouteOutcome

logger = logging.getLogger(__name__)

_SPLIT_RE = re.compile(r"[ ,]+")


class Invocation(NamedTuple):
    """A chat line split into command name and argument tokens."""

    identifier: str
    tokens: list[str]
    is_command: bool


def split_message(text: str, delimiter: str) -> Invocation:
    """
    Split ``text`` on runs of spaces/commas.

    In command form (``text`` starts with ``delimiter``) the delimiter is
    stripped from the first token; free text keeps its first token as typed.
    """

    is_command = bool(delimiter) and text.startswith(delimiter)
    parts = [part for part in _SPLIT_RE.split(text) if part]
    if not parts:
        return Invocation(identifier="", tokens=[], is_command=is_command)

    head, tokens = parts[0], parts[1:]
    if is_command:
        head = head[len(delimiter):]
    return Invocation(identifier=head, tokens=tokens, is_command=is_command)


class Dispatcher:
    """Gate each message on the sender's profile, then route or suggest."""

    def __init__(self, router: CommandRouter, profiles: ProfileStore) -> None:
        self.router = router
        self.profiles = profiles
        self._banned_notice = router.strings.resolve("dispatch.banned")

    async def on_message(self, actor_id: str, raw_text: str) -> RouteOutcome | None:
        """
        Handle one inbound chat line from ``actor_id``.

        Returns the routing outcome, or ``None`` when the message was dropped
        (empty text or banned sender).
        """

        invocation = split_message(raw_text or "", self.router.settings.delimiter)
        if not invocation.identifier and not invocation.is_command:
            return None

        profile = await self.profiles.get_or_create_profile(actor_id)
        if profile.banned:
            logger.debug("Rejected message from banned actor %s", actor_id)
            await self.router.messenger.send(actor_id, self._banned_notice)
            return None

        await self.profiles.record_interaction(actor_id)

        identifier = invocation.identifier.lower()
        if invocation.is_command:
            return await self.router.route(identifier, actor_id, invocation.tokens)
        return await self.router.suggest(identifier, actor_id)


__all__ = ["Dispatcher", "Invocation", "split_message"]
