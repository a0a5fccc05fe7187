"""Shared core types and aliases used across commands, flows, and ports."""

from __future__ import annotations

from typing import Any, Dict, Optional, TypeVar

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")

NamedParams = Dict[str, Any]


class _DBNullType:
    """Singleton marking an absent value (SQL ``NULL``)."""

    _instance: Optional[_DBNullType] = None

    def __new__(cls) -> _DBNullType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DBNull"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "DBNull"


DBNull = _DBNullType()


def is_null(value: Any) -> bool:
    """Return True for `None` and the `DBNull` sentinel."""

    return value is None or value is DBNull


class RawLiteral:
    """Text spliced verbatim into command text instead of being bound."""

    __slots__ = ("value",)

    def __init__(self, value: str):
        if not isinstance(value, str):
            raise TypeError(f"RawLiteral expects str, got {type(value).__name__}.")
        self.value = value

    def __repr__(self) -> str:
        return f"RawLiteral({self.value!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, RawLiteral) and other.value == self.value

    def __hash__(self) -> int:
        return hash((RawLiteral, self.value))


class SizedInt(int):
    """Integer target with fixed bounds; conversion fails outside them."""

    min_value: int = 0
    max_value: int = 0


class Byte(SizedInt):
    min_value = 0
    max_value = 255


class Int16(SizedInt):
    min_value = -(2**15)
    max_value = 2**15 - 1


class Int32(SizedInt):
    min_value = -(2**31)
    max_value = 2**31 - 1


class Int64(SizedInt):
    min_value = -(2**63)
    max_value = 2**63 - 1
