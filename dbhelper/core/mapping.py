"""Row-to-object mapping through precomputed binding plans.

A target type is described once (`member_table`), and for every cursor shape
a plan pairing column positions with members is built once (`binding_plan`).
Rows only read values through the plan.
"""

from __future__ import annotations

import builtins
import inspect
import sys
from dataclasses import MISSING, dataclass, fields, is_dataclass
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Any, ClassVar, Dict, Generic, Tuple, Type, get_origin, get_type_hints

from .converters import convert, zero_value
from .records import Record
from .types import T

_SCALAR_TYPES = frozenset({int, float, bool, str, bytes, Decimal})


@dataclass(frozen=True)
class MemberBinding:
    """One member of a target type that rows may populate."""

    name: str
    annotation: Any
    required: bool = False


@dataclass(frozen=True)
class ColumnBinding:
    """Pairs one cursor column with the member it populates."""

    ordinal: int
    column: str
    member: MemberBinding


@dataclass(frozen=True)
class BindingPlan:
    """Resolved column-to-member bindings for one target and cursor shape."""

    target: type
    columns: Tuple[str, ...]
    bindings: Tuple[ColumnBinding, ...]
    missing_required: Tuple[MemberBinding, ...]


@lru_cache(maxsize=None)
def member_table(target: type) -> Dict[str, MemberBinding]:
    """Return the members of `target` keyed by lower-cased name."""

    hints = _type_hints(target)
    members: Dict[str, MemberBinding] = {}
    if is_dataclass(target):
        for item in fields(target):
            if not item.init:
                continue
            required = item.default is MISSING and item.default_factory is MISSING
            annotation = hints.get(item.name, item.type)
            members.setdefault(
                item.name.lower(), MemberBinding(item.name, annotation, required)
            )
        return members

    for name, annotation in hints.items():
        if name.startswith("_") or annotation is ClassVar or get_origin(annotation) is ClassVar:
            continue
        members.setdefault(name.lower(), MemberBinding(name, annotation))
    for name, default in _plain_attributes(target).items():
        members.setdefault(name.lower(), MemberBinding(name, _annotation_for(default)))
    return members


@lru_cache(maxsize=1024)
def binding_plan(target: type, columns: Tuple[str, ...]) -> BindingPlan:
    """Match `columns` to members of `target` case-insensitively.

    Columns with no member are ignored; when two columns match the same
    member the first one wins.
    """

    members = member_table(target)
    bound: Dict[str, ColumnBinding] = {}
    for ordinal, column in enumerate(columns):
        member = members.get(column.lower())
        if member is None or member.name in bound:
            continue
        bound[member.name] = ColumnBinding(ordinal, column, member)

    missing = tuple(
        member for member in members.values() if member.required and member.name not in bound
    )
    return BindingPlan(
        target=target,
        columns=columns,
        bindings=tuple(bound.values()),
        missing_required=missing,
    )


def map_row(record: Record, target: Type[T]) -> T:
    """Build one fresh `target` instance from `record`."""

    plan = binding_plan(target, record.columns)
    values = record.values
    if is_dataclass(target):
        kwargs = {
            binding.member.name: convert(values[binding.ordinal], binding.member.annotation)
            for binding in plan.bindings
        }
        for member in plan.missing_required:
            kwargs[member.name] = zero_value(member.annotation)
        return target(**kwargs)

    try:
        instance = target()
    except TypeError as exc:
        raise TypeError(
            f"{target.__name__} must be a dataclass or accept no constructor arguments."
        ) from exc
    for binding in plan.bindings:
        setattr(
            instance,
            binding.member.name,
            convert(values[binding.ordinal], binding.member.annotation),
        )
    return instance


class ObjectMapper(Generic[T]):
    """Callable row converter bound to one target type."""

    def __init__(self, target: Type[T]):
        if not isinstance(target, type):
            raise TypeError(f"Mapping target must be a class, got {target!r}.")
        self.target = target

    def __call__(self, record: Record) -> T:
        return map_row(record, self.target)

    def __repr__(self) -> str:
        return f"ObjectMapper({self.target.__name__})"


def _type_hints(target: type) -> Dict[str, Any]:
    try:
        return dict(get_type_hints(target))
    except Exception:
        pass

    # One unresolvable name (a local or TYPE_CHECKING-only type) must not
    # leave every other annotation as a string.
    merged: Dict[str, Any] = {}
    for klass in reversed(target.__mro__):
        module = sys.modules.get(klass.__module__)
        namespace = dict(vars(builtins))
        namespace.update(getattr(module, "__dict__", {}))
        for name, annotation in _own_annotations(klass).items():
            merged[name] = _resolve_annotation(annotation, namespace)
    return merged


def _resolve_annotation(annotation: Any, namespace: Dict[str, Any]) -> Any:
    if not isinstance(annotation, str):
        return annotation
    try:
        return eval(annotation, namespace)  # noqa: S307
    except Exception:
        if annotation.startswith(("ClassVar", "typing.ClassVar")):
            return ClassVar
        return Any


def _plain_attributes(target: type) -> Dict[str, Any]:
    """Public, unannotated data attributes declared on `target` or its bases."""

    found: Dict[str, Any] = {}
    for klass in reversed(target.__mro__):
        if klass is object:
            continue
        annotated = _own_annotations(klass)
        for name, value in vars(klass).items():
            if name.startswith("_") or name in annotated:
                continue
            if callable(value) or hasattr(value, "__get__"):
                continue
            found[name] = value
    return found


def _annotation_for(default: Any) -> Any:
    kind = type(default)
    if kind in _SCALAR_TYPES or isinstance(default, Enum):
        return kind
    return Any


def _own_annotations(klass: type) -> Dict[str, Any]:
    try:
        return dict(inspect.get_annotations(klass))
    except Exception:
        return {}
