"""Generic cell value conversion into requested Python target types."""

from __future__ import annotations

import math
import types
import uuid
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Dict, Union, get_args, get_origin

from .errors import ConversionError
from .types import SizedInt, is_null

_TRUE_TEXT = frozenset({"true", "1", "yes", "y", "t", "on"})
_FALSE_TEXT = frozenset({"false", "0", "no", "n", "f", "off"})
_BYTES_TYPES = (bytes, bytearray, memoryview)


def zero_value(target: Any) -> Any:
    """Return the value a `NULL` cell converts to for `target`."""

    if target is Any or target is object:
        return None
    if _is_optional(target):
        return None
    if isinstance(target, type):
        if issubclass(target, Enum):
            return _zero_enum_member(target)
        if issubclass(target, bool):
            return False
        if issubclass(target, int):
            return target(0)
        if target in (float, str, bytes, Decimal):
            return target()
    return None


def convert(value: Any, target: Any) -> Any:
    """Convert one raw cell value to `target`.

    Args:
        value: Value read from the driver; `None` and `DBNull` mean `NULL`.
        target: Requested Python type, `Optional[...]` of it, or `Any`.

    Returns:
        The converted value.

    Raises:
        ConversionError: If the value is not representable in `target`.
    """

    if is_null(value):
        return zero_value(target)
    if target is Any or target is object:
        return value

    base = _unwrap_optional(target)
    if not isinstance(base, type) or get_origin(base) is not None:
        raise ConversionError(value, target, "Unsupported target type.")
    if type(value) is base:
        return value

    handler = _handler_for(base)
    if handler is None:
        raise ConversionError(value, target, "Unsupported target type.")
    try:
        return handler(value, base)
    except ConversionError:
        raise
    except (ValueError, TypeError, ArithmeticError, InvalidOperation) as exc:
        raise ConversionError(value, target) from exc


def converter_for(target: Any) -> Callable[[Any], Any]:
    """Return a one-argument converter bound to `target`."""

    def _convert(value: Any) -> Any:
        return convert(value, target)

    return _convert


def _handler_for(base: type) -> Callable[[Any, type], Any] | None:
    if issubclass(base, Enum):
        return _to_enum
    if issubclass(base, bool):
        return _to_bool
    if issubclass(base, int):
        return _to_int
    # datetime is a date subclass, so it must be checked first.
    for kind in (datetime, date, time):
        if issubclass(base, kind):
            return _TEMPORAL_HANDLERS[kind]
    for kind, handler in _SIMPLE_HANDLERS.items():
        if issubclass(base, kind):
            return handler
    return None


def _to_int(value: Any, target: type) -> int:
    if isinstance(value, bool):
        result = int(value)
    elif isinstance(value, int):
        result = value
    elif isinstance(value, (float, Decimal)):
        if isinstance(value, float) and not math.isfinite(value):
            raise ConversionError(value, target, "Value is not finite.")
        if value != int(value):
            raise ConversionError(value, target, "Value is not integral.")
        result = int(value)
    elif isinstance(value, str):
        result = int(value.strip())
    else:
        raise ConversionError(value, target)

    if issubclass(target, SizedInt):
        if not target.min_value <= result <= target.max_value:
            raise ConversionError(
                value,
                target,
                f"Value is outside [{target.min_value}, {target.max_value}].",
            )
    if type(result) is target:
        return result
    return target(result)


def _to_float(value: Any, target: type) -> float:
    if isinstance(value, (int, float, Decimal)):
        try:
            result = float(value)
        except OverflowError as exc:
            raise ConversionError(value, target, "Value overflows float.") from exc
        if math.isinf(result) and not (isinstance(value, float) and math.isinf(value)):
            raise ConversionError(value, target, "Value overflows float.")
        if isinstance(value, int) and not isinstance(value, bool) and int(result) != value:
            raise ConversionError(value, target, "Value is not exactly representable.")
        return target(result)
    if isinstance(value, str):
        return target(value.strip())
    raise ConversionError(value, target)


def _to_decimal(value: Any, target: type) -> Decimal:
    if isinstance(value, float):
        return target(str(value))
    if isinstance(value, (int, Decimal)):
        return target(value)
    if isinstance(value, str):
        return target(value.strip())
    raise ConversionError(value, target)


def _to_bool(value: Any, target: type) -> bool:
    if isinstance(value, (int, float, Decimal)):
        if not _is_finite(value):
            raise ConversionError(value, target, "Value is not finite.")
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_TEXT:
            return True
        if lowered in _FALSE_TEXT:
            return False
    raise ConversionError(value, target)


def _to_str(value: Any, target: type) -> str:
    if isinstance(value, _BYTES_TYPES):
        try:
            return target(bytes(value).decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise ConversionError(value, target, "Bytes are not valid UTF-8.") from exc
    if isinstance(value, Enum):
        return target(value.value)
    return target(value)


def _to_bytes(value: Any, target: type) -> bytes:
    if isinstance(value, _BYTES_TYPES):
        return target(value)
    if isinstance(value, str):
        return target(value.encode("utf-8"))
    raise ConversionError(value, target)


def _to_enum(value: Any, target: type[Enum]) -> Enum:
    if isinstance(value, target):
        return value
    try:
        return target(value)
    except ValueError:
        pass
    if isinstance(value, str):
        text = value.strip()
        try:
            return target[text]
        except KeyError:
            pass
        try:
            return target(int(text))
        except ValueError:
            pass
    raise ConversionError(value, target, f"No matching {target.__name__} member.")


def _to_datetime(value: Any, target: type) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return target(value.year, value.month, value.day)
    if isinstance(value, str):
        return target.fromisoformat(value.strip())
    raise ConversionError(value, target)


def _to_date(value: Any, target: type) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        return target.fromisoformat(value.strip())
    raise ConversionError(value, target)


def _to_time(value: Any, target: type) -> time:
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, str):
        return target.fromisoformat(value.strip())
    raise ConversionError(value, target)


def _to_uuid(value: Any, target: type) -> uuid.UUID:
    if isinstance(value, str):
        return target(value.strip())
    if isinstance(value, _BYTES_TYPES):
        return target(bytes=bytes(value))
    raise ConversionError(value, target)


_SIMPLE_HANDLERS: Dict[type, Callable[[Any, type], Any]] = {
    float: _to_float,
    Decimal: _to_decimal,
    str: _to_str,
    bytes: _to_bytes,
    uuid.UUID: _to_uuid,
}

_TEMPORAL_HANDLERS: Dict[type, Callable[[Any, type], Any]] = {
    datetime: _to_datetime,
    date: _to_date,
    time: _to_time,
}


def _is_finite(value: Any) -> bool:
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, Decimal):
        return value.is_finite()
    return True


def _zero_enum_member(enum_type: type[Enum]) -> Enum | None:
    for member in enum_type:
        if member.value == 0 and not isinstance(member.value, bool):
            return member
    return None


def _is_optional(annotation: Any) -> bool:
    return _unwrap_optional(annotation) is not annotation


def _unwrap_optional(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is None:
        return annotation

    if origin not in {Union, types.UnionType}:
        return annotation

    all_args = get_args(annotation)
    args = [arg for arg in all_args if arg is not type(None)]
    if len(args) == 1 and len(all_args) == 2:
        return args[0]
    return annotation
