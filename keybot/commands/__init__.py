"""
Auto-discovery & registry for chat commands.

Any module inside ``commands/handlers`` that defines::

    from keybot.commands.registry import command

    @command("mycommand", schema=[...])
    async def mycommand(ctx): ...

is picked up automatically at import-time. :func:`create_dispatcher` builds
the immutable registry from every registration and wires the router and
dispatcher around it.

NOTE: If adding a new command, ensure:
1. Its identifier is unique, lower-case, and not ``help``.
2. Its description key (``<identifier>.description``) exists in the string table.
3. It is placed in this package's ``handlers`` directory.
"""

from __future__ import annotations

import logging
from importlib import import_module
from pathlib import Path
from pkgutil import iter_modules
from typing import Any

from .dispatcher import Dispatcher, Invocation, split_message
from .errors import RegistrationError, SchemaError
from .registry import CommandRegistry, CommandSpec, build_registry, command, registrations
from .router import CommandRouter
from .types import CommandContext, DispatchSettings, Messenger, RouteOutcome, StringTable

logger = logging.getLogger(__name__)


def create_dispatcher(
    settings: DispatchSettings,
    messenger: Messenger,
    strings: StringTable,
    store: Any,
) -> Dispatcher:
    """Build the registry once and return the message entry point."""

    registry = build_registry(strings, settings)
    router = CommandRouter(registry, settings, messenger, strings, store=store)
    return Dispatcher(router, store)


_HANDLERS_IMPORTED = False


def _import_handlers() -> None:
    """Import every handler module exactly once."""

    global _HANDLERS_IMPORTED
    if _HANDLERS_IMPORTED:
        return

    pkg_path = Path(__file__).resolve().parent / "handlers"
    for _, modname, _ in iter_modules([str(pkg_path)]):
        if modname.startswith("_"):
            continue
        import_module(f"{__name__}.handlers.{modname}")

    _HANDLERS_IMPORTED = True


_import_handlers()


__all__ = [
    "CommandContext",
    "CommandRegistry",
    "CommandRouter",
    "CommandSpec",
    "DispatchSettings",
    "Dispatcher",
    "Invocation",
    "RegistrationError",
    "RouteOutcome",
    "SchemaError",
    "build_registry",
    "command",
    "create_dispatcher",
    "registrations",
    "split_message",
]
