"""Exception types raised by the query engine.

Driver exceptions are never wrapped; only the categories below originate in
`dbhelper` itself.
"""

from __future__ import annotations

from typing import Any


class DBHelperError(Exception):
    """Base class for every engine error."""


class ConfigurationError(DBHelperError):
    """Missing connection string, named connection, or driver factory."""


class InvalidArgument(DBHelperError, ValueError):
    """Argument outside its accepted range (e.g. negative skip)."""


class InvalidTemplate(DBHelperError, ValueError):
    """Command template references a slot with no argument."""


class UnsupportedDriver(DBHelperError):
    """Driver cannot render an index-bearing parameter placeholder."""


class ConversionError(DBHelperError, TypeError):
    """Value is not representable in the requested target type."""

    def __init__(self, value: Any, target_type: Any, reason: str | None = None):
        self.value = value
        self.source_type = type(value)
        self.target_type = target_type
        target_name = getattr(target_type, "__name__", repr(target_type))
        message = (
            f"Cannot convert value {value!r} of type {self.source_type.__name__} "
            f"to {target_name}."
        )
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)


class DuplicateKey(DBHelperError, KeyError):
    """Dictionary materialization produced the same key twice."""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Duplicate key {self.key!r} in dictionary result."
