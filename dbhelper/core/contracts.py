"""Driver capability contract consumed by the query engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Protocol

from .records import DataTable, DataTableSet, Record

if TYPE_CHECKING:
    from .commands import Command


class PlaceholderRenderer(Protocol):
    """Renders the driver-native parameter marker for one index."""

    def render_placeholder(self, index: int) -> str: ...


class DriverPort(PlaceholderRenderer, Protocol):
    """Blocking and suspendable driver operations used by the engine.

    Every blocking method has an `_async` twin with the same arguments.
    Cursors returned by `execute_reader` are forward-only.
    """

    name: str

    def connect(self, connection_string: str) -> Any: ...

    def close(self, connection: Any) -> None: ...

    def execute_non_query(self, connection: Any, command: Command) -> int: ...

    def execute_scalar(self, connection: Any, command: Command) -> Any: ...

    def execute_reader(self, connection: Any, command: Command) -> Any: ...

    def read(self, cursor: Any) -> Optional[Record]: ...

    def close_reader(self, cursor: Any) -> None: ...

    def fill_table(
        self, connection: Any, command: Command, skip: int = 0, take: int = 0
    ) -> DataTable: ...

    def fill_table_set(self, connection: Any, command: Command) -> DataTableSet: ...

    async def connect_async(self, connection_string: str) -> Any: ...

    async def close_async(self, connection: Any) -> None: ...

    async def execute_non_query_async(self, connection: Any, command: Command) -> int: ...

    async def execute_scalar_async(self, connection: Any, command: Command) -> Any: ...

    async def execute_reader_async(self, connection: Any, command: Command) -> Any: ...

    async def read_async(self, cursor: Any) -> Optional[Record]: ...

    async def close_reader_async(self, cursor: Any) -> None: ...

    async def fill_table_async(
        self, connection: Any, command: Command, skip: int = 0, take: int = 0
    ) -> DataTable: ...

    async def fill_table_set_async(self, connection: Any, command: Command) -> DataTableSet: ...
