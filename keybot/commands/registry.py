"""
Command registry
================

Handler modules declare commands with the :func:`command` decorator::

    from keybot.commands.registry import command
    from keybot.commands.schema import ArgType, required

    @command("unban", admin=True, schema=[required(ArgType.TEXT)])
    async def unban(ctx): ...

Registrations are collected at import time. :func:`build_registry` turns them
into an immutable :class:`CommandRegistry`, resolving each description from
the string table and rendering both help documents once.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Iterator, NamedTuple, Sequence

from .errors import RegistrationError
from .schema import Schema, Slot, check_schema, render_usage
from .types import DispatchSettings, Handler, StringTable

logger = logging.getLogger(__name__)

RESERVED_IDENTIFIERS = frozenset({"help"})

_IDENTIFIER_RE = re.compile(r"[^\s,]+")


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """Static description of one invokable command."""

    identifier: str
    handler: Handler
    schema: Schema = ()
    admin: bool = False
    description: str = ""

    def help_line(self, delimiter: str) -> str:
        """Return ``"<delim><identifier> <shape> -> <description>"``."""

        usage = render_usage(self.schema)
        head = f"{delimiter}{self.identifier}"
        if usage:
            head = f"{head} {usage}"
        return f"{head} -> {self.description}"


class Registration(NamedTuple):
    """A command declared by a handler module, before descriptions are resolved."""

    identifier: str
    handler: Handler
    schema: Schema
    admin: bool
    description_key: str
    description_args: tuple[Any, ...]


_REGISTRATIONS: list[Registration] = []


def command(
    identifier: str,
    *,
    schema: Sequence[Slot] = (),
    admin: bool = False,
    description: str | None = None,
    description_args: Sequence[Any] = (),
):
    """
    Decorator registering an async handler function as a command.

    :param identifier: Lower-case command name.
    :param schema: Argument slots (see :mod:`keybot.commands.schema`).
    :param admin: Restrict execution to the admin allow-list.
    :param description: String-table key for the help description
        (defaults to ``"<identifier>.description"``).
    :param description_args: Positional substitutions for the description.
    """

    checked = check_schema(schema)

    def decorator(func: Handler) -> Handler:
        _REGISTRATIONS.append(
            Registration(
                identifier=identifier,
                handler=func,
                schema=checked,
                admin=admin,
                description_key=description or f"{identifier}.description",
                description_args=tuple(description_args),
            )
        )
        return func

    return decorator


def registrations() -> list[Registration]:
    """Return a copy of the collected registrations in declaration order."""

    return list(_REGISTRATIONS)


class CommandRegistry:
    """Immutable, ordered set of :class:`CommandSpec` plus cached help text."""

    def __init__(self, specs: Iterable[CommandSpec], delimiter: str = "!") -> None:
        ordered: list[CommandSpec] = []
        by_id: dict[str, CommandSpec] = {}

        for spec in specs:
            ident = spec.identifier
            if not _IDENTIFIER_RE.fullmatch(ident) or ident != ident.lower():
                raise RegistrationError(
                    f"Invalid command identifier {ident!r}: must be a non-empty "
                    "lower-case token without spaces or commas"
                )
            if ident in RESERVED_IDENTIFIERS:
                raise RegistrationError(f"Command identifier '{ident}' is reserved")
            if ident in by_id:
                raise RegistrationError(f"Command '{ident}' registered more than once")
            check_schema(spec.schema)
            by_id[ident] = spec
            ordered.append(spec)

        self._specs = tuple(ordered)
        self._by_id = MappingProxyType(by_id)
        self.delimiter = delimiter

        standard = [s.help_line(delimiter) for s in self._specs if not s.admin]
        privileged = [s.help_line(delimiter) for s in self._specs if s.admin]
        self._help_text = "\n".join(standard)
        self._admin_help_text = "\n".join(privileged)

    @property
    def help_text(self) -> str:
        """Help document listing only non-privileged commands."""
        return self._help_text

    @property
    def admin_help_text(self) -> str:
        """Help document listing only privileged commands."""
        return self._admin_help_text

    @property
    def identifiers(self) -> tuple[str, ...]:
        return tuple(spec.identifier for spec in self._specs)

    def get(self, identifier: str) -> CommandSpec | None:
        return self._by_id.get(identifier)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._by_id

    def __iter__(self) -> Iterator[CommandSpec]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)


def build_registry(
    strings: StringTable,
    settings: DispatchSettings,
    entries: Iterable[Registration] | None = None,
) -> CommandRegistry:
    """
    Build the registry from ``entries`` (defaults to every decorated handler).

    :raises RegistrationError: on duplicate or reserved identifiers.
    :raises KeyError: when a description key is missing from ``strings``.
    """

    source = registrations() if entries is None else list(entries)
    logger.debug("Registering %d command(s)", len(source))

    specs = [
        CommandSpec(
            identifier=entry.identifier,
            handler=entry.handler,
            schema=entry.schema,
            admin=entry.admin,
            description=strings.resolve(entry.description_key, *entry.description_args),
        )
        for entry in source
    ]
    registry = CommandRegistry(specs, delimiter=settings.delimiter)

    logger.info(
        "Registered %d command(s) (%d admin-only)",
        len(registry),
        sum(1 for spec in registry if spec.admin),
    )
    return registry


__all__ = [
    "CommandRegistry",
    "CommandSpec",
    "RESERVED_IDENTIFIERS",
    "Registration",
    "build_registry",
    "command",
    "registrations",
]
