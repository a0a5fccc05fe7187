"""Row and tabular result containers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union


class Record(Sequence[Any]):
    """One cursor row with ordinal and column-name access.

    Name lookup is exact first, then case-insensitive. All records produced by
    one cursor share the same `columns` tuple.
    """

    __slots__ = ("columns", "values", "_index")

    def __init__(
        self,
        columns: Tuple[str, ...],
        values: Sequence[Any],
        index: Optional[Dict[str, int]] = None,
    ):
        if len(columns) != len(values):
            raise ValueError(
                f"Row has {len(values)} values but cursor reports {len(columns)} columns."
            )
        self.columns = columns
        self.values = tuple(values)
        self._index = index if index is not None else column_index(columns)

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, key: Union[int, str, slice]) -> Any:  # type: ignore[override]
        if isinstance(key, str):
            return self.values[self.ordinal(key)]
        return self.values[key]

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{c}={v!r}" for c, v in zip(self.columns, self.values))
        return f"Record({pairs})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Record):
            return self.columns == other.columns and self.values == other.values
        if isinstance(other, tuple):
            return self.values == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def ordinal(self, name: str) -> int:
        """Return the column position for `name`."""

        try:
            return self._index[name]
        except KeyError:
            pass
        try:
            return self._index[name.lower()]
        except KeyError:
            raise KeyError(name) from None

    def get(self, name: str, default: Any = None) -> Any:
        try:
            return self[name]
        except KeyError:
            return default

    def keys(self) -> Tuple[str, ...]:
        return self.columns

    def as_dict(self) -> Dict[str, Any]:
        return dict(zip(self.columns, self.values))


def column_index(columns: Sequence[str]) -> Dict[str, int]:
    """Build the name lookup shared by records of one cursor.

    The first column wins when names collide.
    """

    index: Dict[str, int] = {}
    for position, name in enumerate(columns):
        index.setdefault(name, position)
    for position, name in enumerate(columns):
        index.setdefault(name.lower(), position)
    return index


@dataclass(frozen=True)
class DataColumn:
    """Column name and type code as reported by the driver."""

    name: str
    type_code: Any = None


@dataclass
class DataTable:
    """Materialized tabular result of one result set."""

    columns: Tuple[DataColumn, ...] = ()
    rows: List[Tuple[Any, ...]] = field(default_factory=list)

    @property
    def column_names(self) -> Tuple[str, ...]:
        return tuple(column.name for column in self.columns)

    def __len__(self) -> int:
        return len(self.rows)

    def records(self) -> List[Record]:
        """Return rows as `Record` objects."""

        names = self.column_names
        index = column_index(names)
        return [Record(names, row, index) for row in self.rows]


@dataclass
class DataTableSet:
    """All result sets produced by one command, in order."""

    tables: List[DataTable] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.tables)

    def __getitem__(self, position: int) -> DataTable:
        return self.tables[position]

    def __iter__(self) -> Iterator[DataTable]:
        return iter(self.tables)
