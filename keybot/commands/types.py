"""Shared types for the command engine and its collaborators."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Protocol

if TYPE_CHECKING:
    from keybot.commands.registry import CommandRegistry


@dataclass(frozen=True, slots=True)
class DispatchSettings:
    """Static configuration consumed by the registry, router and dispatcher."""

    delimiter: str = "!"
    admin_ids: frozenset[str] = field(default_factory=frozenset)
    suggest_threshold: float = 0.6

    def is_admin(self, actor_id: str) -> bool:
        return str(actor_id) in self.admin_ids


class Messenger(Protocol):
    """Outbound chat capability. Delivery failures are not surfaced."""

    async def send(self, actor_id: str, text: str) -> None:
        ...


class StringTable(Protocol):
    def resolve(self, key: str, *args: Any) -> str:
        ...


class Profile(Protocol):
    actor_id: str
    banned: bool


class ProfileStore(Protocol):
    async def get_or_create_profile(self, actor_id: str) -> Profile:
        ...

    async def record_interaction(self, actor_id: str) -> None:
        ...


@dataclass(slots=True)
class CommandContext:
    """Everything a handler receives when its command is dispatched."""

    actor_id: str
    tokens: list[str]
    # Typed values from the schema walk, one per slot
    args: list[Any]
    is_admin: bool
    messenger: Messenger
    strings: StringTable
    settings: DispatchSettings
    registry: "CommandRegistry | None" = None
    # Persistence store (``keybot.memory.Store`` in production)
    store: Any = None

    async def reply(self, text: str) -> None:
        """Send ``text`` back to the invoking actor."""

        await self.messenger.send(self.actor_id, text)


Handler = Callable[[CommandContext], Awaitable[None]]


class RouteOutcome(str, Enum):
    HELP = "help"
    INVALID_USAGE = "invalid_usage"
    ADMIN_ONLY = "admin_only"
    DISPATCHED = "dispatched"
    SUGGESTED = "suggested"
    UNRESOLVED = "unresolved"


__all__ = [
    "CommandContext",
    "DispatchSettings",
    "Handler",
    "Messenger",
    "Profile",
    "ProfileStore",
    "RouteOutcome",
    "StringTable",
]
