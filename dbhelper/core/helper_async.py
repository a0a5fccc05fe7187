"""Suspendable query helper."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Type

from .engine import CommandInput, QueryEngine
from .flows import run_suspending
from .readers import AsyncReader
from .records import DataTable, DataTableSet, Record
from .types import K, T, V


class AsyncQueryHelper(QueryEngine):
    """Async twin of `QueryHelper`.

    Runs the same flows, awaiting the driver's `_async` operations at every
    connection, execution, and row-advance step.
    """

    async def execute_non_query(
        self, command: CommandInput, *args: Any, connection: Any = None
    ) -> int:
        return await run_suspending(self._non_query_flow(command, args, connection))

    async def execute_scalar(
        self,
        target: Type[T],
        command: CommandInput,
        *args: Any,
        converter: Optional[Callable[[Any], T]] = None,
        connection: Any = None,
    ) -> T:
        return await run_suspending(
            self._scalar_flow(target, command, args, converter, connection)
        )

    async def execute_array(
        self,
        target: Type[T],
        command: CommandInput,
        *args: Any,
        converter: Optional[Callable[[Any], T]] = None,
        skip: int = 0,
        take: int = 0,
        connection: Any = None,
    ) -> List[T]:
        return await run_suspending(
            self._array_flow(target, command, args, converter, skip, take, connection)
        )

    async def execute_dictionary(
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
        return await run_suspending(
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

    async def execute_object(
        self,
        target: Optional[Type[T]],
        command: CommandInput,
        *args: Any,
        converter: Optional[Callable[[Record], T]] = None,
        connection: Any = None,
    ) -> Optional[T]:
        return await run_suspending(
            self._object_flow(target, command, args, converter, connection)
        )

    async def execute_list(
        self,
        target: Optional[Type[T]],
        command: CommandInput,
        *args: Any,
        converter: Optional[Callable[[Record], T]] = None,
        skip: int = 0,
        take: int = 0,
        connection: Any = None,
    ) -> List[T]:
        return await run_suspending(
            self._list_flow(target, command, args, converter, skip, take, connection)
        )

    async def execute_table(
        self,
        command: CommandInput,
        *args: Any,
        skip: int = 0,
        take: int = 0,
        connection: Any = None,
    ) -> DataTable:
        return await run_suspending(self._table_flow(command, args, skip, take, connection))

    async def execute_table_set(
        self, command: CommandInput, *args: Any, connection: Any = None
    ) -> DataTableSet:
        return await run_suspending(self._table_set_flow(command, args, connection))

    async def execute_reader(
        self, command: CommandInput, *args: Any, connection: Any = None
    ) -> AsyncReader:
        """Execute a command and return an open `AsyncReader`."""

        cursor, owned = await run_suspending(self._reader_flow(command, args, connection))
        return AsyncReader(self.driver, cursor, owned)
