"""Exceptions raised while assembling the command registry."""

from __future__ import annotations


class RegistrationError(ValueError):
    """Raised when a command cannot be registered (duplicate or reserved name)."""

    pass


class SchemaError(RegistrationError):
    """Raised when an argument schema is malformed."""

    pass


__all__ = ["RegistrationError", "SchemaError"]
