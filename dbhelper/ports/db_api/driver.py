"""Generic driver for PEP 249 (DB-API 2.0) connections.

The async twins accept connections whose `cursor()`, `execute()`,
`fetchone()`, `nextset()`, and `close()` return awaitables (aiosqlite,
psycopg `AsyncConnection`) as well as plain synchronous connections.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Dict, Optional, Tuple

import structlog

from ...core._async_utils import _close_sync, _maybe_await, _maybe_close
from ...core.commands import Command
from ...core.flows import run_blocking, run_suspending, walk
from ...core.records import DataColumn, DataTable, DataTableSet, Record, column_index
from .dialects import Dialect

logger = structlog.get_logger(__name__)


class DBAPICursor:
    """Cursor plus the column layout shared by every record it produces."""

    __slots__ = ("cursor", "columns", "type_codes", "index")

    def __init__(self, cursor: Any):
        self.cursor = cursor
        self.columns: Tuple[str, ...] = ()
        self.type_codes: Tuple[Any, ...] = ()
        self.index: Dict[str, int] = {}
        self.refresh()

    def refresh(self) -> None:
        """Re-read `cursor.description` (after `nextset()`)."""

        desc = getattr(self.cursor, "description", None) or ()
        self.columns = tuple(str(d[0]) for d in desc)
        self.type_codes = tuple(d[1] if len(d) > 1 else None for d in desc)
        self.index = column_index(self.columns)

    @property
    def has_result_set(self) -> bool:
        return bool(self.columns)

    def to_record(self, row: Any) -> Record:
        """Normalize a driver row into a `Record`.

        Supports mapping rows (dict cursors) and tuple/list/`sqlite3.Row`
        rows ordered like `cursor.description`.
        """

        if isinstance(row, Mapping):
            values = tuple(row[column] for column in self.columns)
        elif isinstance(row, (tuple, list)):
            values = tuple(row)
        else:
            try:
                values = tuple(row)
            except TypeError:
                raise TypeError(f"Unsupported row type: {type(row)}") from None
        return Record(self.columns, values, self.index)

    def table(self) -> DataTable:
        return DataTable(
            columns=tuple(
                DataColumn(name, type_code)
                for name, type_code in zip(self.columns, self.type_codes)
            )
        )


class DBAPIDriver:
    """`DriverPort` implementation over a DB-API `connect` callable.

    Args:
        connect: Callable taking the connection string and returning an open
            DB-API connection.
        dialect: Dialect rendering placeholders and binding parameters.
        connect_async: Optional callable returning an (awaitable) async
            connection; `connect` is used when omitted.
        name: Driver name used in logs.
    """

    def __init__(
        self,
        connect: Callable[[str], Any],
        dialect: Dialect,
        *,
        connect_async: Optional[Callable[[str], Any]] = None,
        name: Optional[str] = None,
    ):
        self._connect = connect
        self._connect_async = connect_async or connect
        self.dialect = dialect
        self.name = name or dialect.name

    def __repr__(self) -> str:
        return f"DBAPIDriver(name={self.name!r}, dialect={self.dialect!r})"

    def render_placeholder(self, index: int) -> str:
        return self.dialect.render_placeholder(index)

    # Blocking operations

    def connect(self, connection_string: str) -> Any:
        return self._connect(connection_string)

    def close(self, connection: Any) -> None:
        _close_sync(connection)

    def _execute(self, connection: Any, command: Command) -> Any:
        cur = connection.cursor()
        try:
            if command.parameters:
                cur.execute(command.text, self.dialect.bind(command.parameters))
            else:
                cur.execute(command.text)
        except BaseException:
            _close_sync(cur)
            raise
        logger.debug("command_executed", driver=self.name, parameters=len(command.parameters))
        return cur

    def execute_non_query(self, connection: Any, command: Command) -> int:
        cur = self._execute(connection, command)
        try:
            return _rowcount(cur)
        finally:
            _close_sync(cur)

    def execute_scalar(self, connection: Any, command: Command) -> Any:
        cur = self._execute(connection, command)
        try:
            return _first_value(cur.fetchone())
        finally:
            _close_sync(cur)

    def execute_reader(self, connection: Any, command: Command) -> DBAPICursor:
        return DBAPICursor(self._execute(connection, command))

    def read(self, cursor: DBAPICursor) -> Optional[Record]:
        row = cursor.cursor.fetchone()
        if row is None:
            return None
        return cursor.to_record(row)

    def close_reader(self, cursor: DBAPICursor) -> None:
        _close_sync(cursor.cursor)

    def fill_table(
        self, connection: Any, command: Command, skip: int = 0, take: int = 0
    ) -> DataTable:
        cursor = self.execute_reader(connection, command)
        try:
            result = cursor.table()
            run_blocking(walk(self, cursor, skip, take, _append_to(result)))
            return result
        finally:
            self.close_reader(cursor)

    def fill_table_set(self, connection: Any, command: Command) -> DataTableSet:
        cursor = self.execute_reader(connection, command)
        tables = DataTableSet()
        try:
            while True:
                if cursor.has_result_set:
                    result = cursor.table()
                    run_blocking(walk(self, cursor, 0, 0, _append_to(result)))
                    tables.tables.append(result)
                if not _advance(cursor.cursor.nextset if _has_nextset(cursor) else None):
                    break
                cursor.refresh()
            return tables
        finally:
            self.close_reader(cursor)

    # Suspendable operations

    async def connect_async(self, connection_string: str) -> Any:
        return await _maybe_await(self._connect_async(connection_string))

    async def close_async(self, connection: Any) -> None:
        await _maybe_close(connection)

    async def _execute_async(self, connection: Any, command: Command) -> Any:
        cur = await _maybe_await(connection.cursor())
        try:
            if command.parameters:
                await _maybe_await(
                    cur.execute(command.text, self.dialect.bind(command.parameters))
                )
            else:
                await _maybe_await(cur.execute(command.text))
        except BaseException:
            await _maybe_close(cur)
            raise
        logger.debug("command_executed", driver=self.name, parameters=len(command.parameters))
        return cur

    async def execute_non_query_async(self, connection: Any, command: Command) -> int:
        cur = await self._execute_async(connection, command)
        try:
            return _rowcount(cur)
        finally:
            await _maybe_close(cur)

    async def execute_scalar_async(self, connection: Any, command: Command) -> Any:
        cur = await self._execute_async(connection, command)
        try:
            return _first_value(await _maybe_await(cur.fetchone()))
        finally:
            await _maybe_close(cur)

    async def execute_reader_async(self, connection: Any, command: Command) -> DBAPICursor:
        return DBAPICursor(await self._execute_async(connection, command))

    async def read_async(self, cursor: DBAPICursor) -> Optional[Record]:
        row = await _maybe_await(cursor.cursor.fetchone())
        if row is None:
            return None
        return cursor.to_record(row)

    async def close_reader_async(self, cursor: DBAPICursor) -> None:
        await _maybe_close(cursor.cursor)

    async def fill_table_async(
        self, connection: Any, command: Command, skip: int = 0, take: int = 0
    ) -> DataTable:
        cursor = await self.execute_reader_async(connection, command)
        try:
            result = cursor.table()
            await run_suspending(walk(self, cursor, skip, take, _append_to(result)))
            return result
        finally:
            await self.close_reader_async(cursor)

    async def fill_table_set_async(self, connection: Any, command: Command) -> DataTableSet:
        cursor = await self.execute_reader_async(connection, command)
        tables = DataTableSet()
        try:
            while True:
                if cursor.has_result_set:
                    result = cursor.table()
                    await run_suspending(walk(self, cursor, 0, 0, _append_to(result)))
                    tables.tables.append(result)
                if not _has_nextset(cursor):
                    break
                try:
                    more = await _maybe_await(cursor.cursor.nextset())
                except Exception as exc:
                    if _is_not_supported(exc):
                        break
                    raise
                if not more:
                    break
                cursor.refresh()
            return tables
        finally:
            await self.close_reader_async(cursor)


def _append_to(table: DataTable) -> Callable[[Record], None]:
    def visit(record: Record) -> None:
        table.rows.append(record.values)

    return visit


def _rowcount(cursor: Any) -> int:
    count = getattr(cursor, "rowcount", -1)
    return count if isinstance(count, int) else -1


def _first_value(row: Any) -> Any:
    if row is None:
        return None
    if isinstance(row, Mapping):
        return next(iter(row.values()), None)
    return row[0] if len(row) else None


def _has_nextset(cursor: DBAPICursor) -> bool:
    return callable(getattr(cursor.cursor, "nextset", None))


def _advance(nextset: Optional[Callable[[], Any]]) -> bool:
    if nextset is None:
        return False
    try:
        return bool(nextset())
    except Exception as exc:
        if _is_not_supported(exc):
            return False
        raise


def _is_not_supported(exc: Exception) -> bool:
    # PEP 249 drivers signal a missing nextset() with their own NotSupportedError.
    return type(exc).__name__ == "NotSupportedError"
