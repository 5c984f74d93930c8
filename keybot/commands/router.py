"""Resolve, authorize, validate and dispatch a single command invocation."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from . import suggest as suggester
from .registry import CommandRegistry
from .schema import parse
from .types import (
    CommandContext,
    DispatchSettings,
    Messenger,
    RouteOutcome,
    StringTable,
)

logger = logging.getLogger(__name__)

HELP_IDENTIFIER = "help"


class CommandRouter:
    """
    Table-driven router over an immutable :class:`CommandRegistry`.

    Rejection texts are resolved from the string table once, at construction.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        settings: DispatchSettings,
        messenger: Messenger,
        strings: StringTable,
        store: Any = None,
    ) -> None:
        if HELP_IDENTIFIER in registry:
            raise ValueError(f"Registry may not define '{HELP_IDENTIFIER}'")

        self.registry = registry
        self.settings = settings
        self.messenger = messenger
        self.strings = strings
        self.store = store

        self._invalid_usage = strings.resolve("dispatch.invalid_usage")
        self._admin_only = strings.resolve("dispatch.admin_only")
        self._suggest_header = strings.resolve("dispatch.suggest_header")

    async def route(
        self, identifier: str, actor_id: str, tokens: Sequence[str]
    ) -> RouteOutcome:
        """
        Dispatch ``identifier`` for ``actor_id``.

        :param identifier: Lower-cased command name (delimiter already stripped).
        :param actor_id: Sender identity.
        :param tokens: Raw argument tokens.
        :returns: What happened, for logging and tests.
        """

        is_admin = self.settings.is_admin(actor_id)

        if identifier == HELP_IDENTIFIER:
            text = (
                self.registry.admin_help_text if is_admin else self.registry.help_text
            )
            await self.messenger.send(actor_id, text)
            return RouteOutcome.HELP

        spec = self.registry.get(identifier)
        if spec is None:
            return await self.suggest(identifier, actor_id)

        logger.debug(
            "%s -> %s%s %s", actor_id, self.settings.delimiter, identifier, " ".join(tokens)
        )

        args = parse(spec.schema, tokens)
        if args is None:
            logger.debug("%s -> Invalid Usage", actor_id)
            await self.messenger.send(actor_id, self._invalid_usage)
            return RouteOutcome.INVALID_USAGE

        if spec.admin and not is_admin:
            logger.debug("%s -> Admin-only command '%s' refused", actor_id, identifier)
            await self.messenger.send(actor_id, self._admin_only)
            return RouteOutcome.ADMIN_ONLY

        ctx = CommandContext(
            actor_id=actor_id,
            tokens=list(tokens),
            args=args,
            is_admin=is_admin,
            messenger=self.messenger,
            strings=self.strings,
            settings=self.settings,
            registry=self.registry,
            store=self.store,
        )
        await spec.handler(ctx)
        return RouteOutcome.DISPATCHED

    async def suggest(self, identifier: str, actor_id: str) -> RouteOutcome:
        """Send a "did you mean" message, or nothing when no candidate is close."""

        matches = suggester.suggest(
            identifier, self.registry.identifiers, self.settings.suggest_threshold
        )
        if not matches:
            return RouteOutcome.UNRESOLVED

        text = suggester.format_suggestions(
            matches, self.settings.delimiter, self._suggest_header
        )
        await self.messenger.send(actor_id, text)
        return RouteOutcome.SUGGESTED


__all__ = ["CommandRouter", "HELP_IDENTIFIER"]
