"""
Argument schemas
================

A schema is an ordered tuple of :class:`Slot` objects. Each slot is a
required scalar, an optional scalar, or a variadic tail, typed as integer or
text::

    from keybot.commands.schema import required, optional, variadic, ArgType

    schema = (required(ArgType.TEXT), optional(ArgType.INTEGER))

Only the last slot may be variadic. Tokens past the end of a schema without a
variadic tail are ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from .errors import SchemaError

# Largest integer a double holds without losing precision (2**53 - 1).
MAX_EXACT_INT = 9007199254740991

_INT_RE = re.compile(r"[+-]?[0-9]+")
_MAX_INT_DIGITS = len(str(MAX_EXACT_INT))

VARIADIC_MARKER = "[arg1, arg2, ...]"


class ArgType(str, Enum):
    INTEGER = "integer"
    TEXT = "text"


class SlotKind(str, Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    VARIADIC = "variadic"


@dataclass(frozen=True, slots=True)
class Slot:
    """One position in a command's argument schema."""

    kind: SlotKind
    type: ArgType
    name: str | None = None

    def render(self) -> str:
        """Return the help-text shape for this slot."""

        if self.kind is SlotKind.VARIADIC:
            return VARIADIC_MARKER
        if self.kind is SlotKind.OPTIONAL:
            return f"<{self.type.value}?>"
        return f"<{self.type.value}>"


Schema = tuple[Slot, ...]


def required(arg_type: ArgType, name: str | None = None) -> Slot:
    return Slot(SlotKind.REQUIRED, arg_type, name)


def optional(arg_type: ArgType, name: str | None = None) -> Slot:
    return Slot(SlotKind.OPTIONAL, arg_type, name)


def variadic(arg_type: ArgType, name: str | None = None) -> Slot:
    return Slot(SlotKind.VARIADIC, arg_type, name)


def check_schema(slots: Sequence[Slot]) -> Schema:
    """
    Return ``slots`` as an immutable schema.

    :raises SchemaError: if a slot follows a variadic tail.
    """

    schema = tuple(slots)
    for idx, slot in enumerate(schema):
        if not isinstance(slot, Slot):
            raise SchemaError(f"Schema position {idx} is not a Slot: {slot!r}")
        if slot.kind is SlotKind.VARIADIC and idx != len(schema) - 1:
            raise SchemaError(
                f"Variadic slot at position {idx} must be the last slot "
                f"(schema has {len(schema)} slots)"
            )
    return schema


def render_usage(schema: Sequence[Slot]) -> str:
    """Render ``schema`` as the argument shape shown in help text."""

    return " ".join(slot.render() for slot in schema)


def _coerce(arg_type: ArgType, token: str) -> tuple[bool, Any]:
    """Check one token against ``arg_type`` and return ``(ok, value)``."""

    if arg_type is ArgType.INTEGER:
        if not _INT_RE.fullmatch(token):
            return False, None
        # Too many digits to be in range; int() also refuses very long strings.
        if len(token.lstrip("+-").lstrip("0")) > _MAX_INT_DIGITS:
            return False, None
        value = int(token, 10)
        if abs(value) > MAX_EXACT_INT:
            return False, None
        return True, value

    # Text: anything non-empty
    return bool(token), token


def parse(schema: Sequence[Slot], tokens: Sequence[str]) -> list[Any] | None:
    """
    Walk ``schema`` against ``tokens`` and return the typed values.

    The result holds one entry per slot: the converted value for scalar
    slots, ``None`` for an absent optional slot, and a list for a variadic
    tail (possibly empty). Returns ``None`` when validation fails.
    """

    values: list[Any] = []
    for idx, slot in enumerate(schema):
        if slot.kind is SlotKind.VARIADIC:
            tail = []
            for token in tokens[idx:]:
                ok, value = _coerce(slot.type, token)
                if not ok:
                    return None
                tail.append(value)
            values.append(tail)
            return values

        if idx >= len(tokens):
            if slot.kind is SlotKind.REQUIRED:
                return None
            values.append(None)
            continue

        ok, value = _coerce(slot.type, tokens[idx])
        if not ok:
            return None
        values.append(value)

    return values


def validate(schema: Sequence[Slot], tokens: Sequence[str]) -> bool:
    """Return ``True`` when ``tokens`` satisfy ``schema``."""

    return parse(schema, tokens) is not None


__all__ = [
    "ArgType",
    "MAX_EXACT_INT",
    "Schema",
    "Slot",
    "SlotKind",
    "VARIADIC_MARKER",
    "check_schema",
    "optional",
    "parse",
    "render_usage",
    "required",
    "validate",
    "variadic",
]
