"""Blocking query helper."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Type

from .engine import CommandInput, QueryEngine
from .flows import run_blocking
from .readers import Reader
from .records import DataTable, DataTableSet, Record
from .types import K, T, V


class QueryHelper(QueryEngine):
    """Executes commands and materializes results with blocking driver calls.

    Every operation takes either a template followed by its positional
    arguments, or a prebuilt `Command`. When `connection` is given it is used
    as-is and left open; otherwise a connection is opened for the call and
    closed before it returns or raises.

    Example:
        >>> helper = QueryHelper(get_driver("sqlite3"), ":memory:")
        >>> helper.execute_scalar(int, "SELECT {0} + {1}", 1, 2)
        3
    """

    def execute_non_query(
        self, command: CommandInput, *args: Any, connection: Any = None
    ) -> int:
        """Execute a command and return the affected row count."""

        return run_blocking(self._non_query_flow(command, args, connection))

    def execute_scalar(
        self,
        target: Type[T],
        command: CommandInput,
        *args: Any,
        converter: Optional[Callable[[Any], T]] = None,
        connection: Any = None,
    ) -> T:
        """Execute a command and convert its single value to `target`."""

        return run_blocking(
            self._scalar_flow(target, command, args, converter, connection)
        )

    def execute_array(
        self,
        target: Type[T],
        command: CommandInput,
        *args: Any,
        converter: Optional[Callable[[Any], T]] = None,
        skip: int = 0,
        take: int = 0,
        connection: Any = None,
    ) -> List[T]:
        """Return the first column of every row in the page."""

        return run_blocking(
            self._array_flow(target, command, args, converter, skip, take, connection)
        )

    def execute_dictionary(
        self,
        key_type: Type[K],
        value_type: Type[V],
        command: CommandInput,
        *args: Any,
        key_converter: Optional[Callable[[Any], K]] = None,
        value_converter: Optional[Callable[[Any], V]] = None,
        skip: int = 0,
        take: int = 0,
        connection: Any = None,
    ) -> Dict[K, V]:
        """Map column 0 to column 1 for every row in the page.

        Raises:
            DuplicateKey: If two rows produce the same converted key.
        """

        return run_blocking(
            self._dictionary_flow(
                key_type,
                value_type,
                command,
                args,
                key_converter,
                value_converter,
                skip,
                take,
                connection,
            )
        )

    def execute_object(
        self,
        target: Optional[Type[T]],
        command: CommandInput,
        *args: Any,
        converter: Optional[Callable[[Record], T]] = None,
        connection: Any = None,
    ) -> Optional[T]:
        """Map the first row to `target`; None when there is no row."""

        return run_blocking(
            self._object_flow(target, command, args, converter, connection)
        )

    def execute_list(
        self,
        target: Optional[Type[T]],
        command: CommandInput,
        *args: Any,
        converter: Optional[Callable[[Record], T]] = None,
        skip: int = 0,
        take: int = 0,
        connection: Any = None,
    ) -> List[T]:
        """Map every row in the page to `target`, in cursor order."""

        return run_blocking(
            self._list_flow(target, command, args, converter, skip, take, connection)
        )

    def execute_table(
        self,
        command: CommandInput,
        *args: Any,
        skip: int = 0,
        take: int = 0,
        connection: Any = None,
    ) -> DataTable:
        return run_blocking(self._table_flow(command, args, skip, take, connection))

    def execute_table_set(
        self, command: CommandInput, *args: Any, connection: Any = None
    ) -> DataTableSet:
        return run_blocking(self._table_set_flow(command, args, connection))

    def execute_reader(
        self, command: CommandInput, *args: Any, connection: Any = None
    ) -> Reader:
        """Execute a command and return an open `Reader`.

        Without `connection`, the reader owns the connection it opened and
        closes it with the reader.
        """

        cursor, owned = run_blocking(self._reader_flow(command, args, connection))
        return Reader(self.driver, cursor, owned)
