"""Shared execution algorithms for the blocking and suspendable helpers.

Every operation is written once as a generator that yields `IOStep` objects
wherever the driver may block. `run_blocking` performs each step inline and
`run_suspending` awaits it; both send the step result back into the
generator and throw step failures into it, so `try`/`finally` blocks inside a
flow (closing readers and engine-owned connections) run on every exit path.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Any, Awaitable, Callable, Dict, Generator, List, Optional, Tuple

import structlog

from ._async_utils import _maybe_await
from .commands import Command
from .contracts import DriverPort
from .errors import DuplicateKey, InvalidArgument
from .records import DataTable, DataTableSet, Record
from .types import T

logger = structlog.get_logger(__name__)

Flow = Generator["IOStep", Any, T]
RowVisitor = Callable[[Record], None]


@dataclass(frozen=True)
class IOStep:
    """One driver call, runnable in either calling convention."""

    operation: str
    blocking: Callable[[], Any]
    suspending: Callable[[], Awaitable[Any]]


def io(driver: DriverPort, operation: str, *args: Any) -> IOStep:
    """Build the step calling `driver.<operation>` or its `_async` twin."""

    return IOStep(
        operation,
        partial(getattr(driver, operation), *args),
        partial(getattr(driver, f"{operation}_async"), *args),
    )


def run_blocking(flow: Flow[T]) -> T:
    """Drive `flow` to completion performing each step synchronously."""

    try:
        step = next(flow)
        while True:
            try:
                result = step.blocking()
            except BaseException as exc:
                step = flow.throw(exc)
            else:
                step = flow.send(result)
    except StopIteration as stop:
        return stop.value


async def run_suspending(flow: Flow[T]) -> T:
    """Drive `flow` to completion awaiting each step."""

    try:
        step = next(flow)
        while True:
            try:
                result = await _maybe_await(step.suspending())
            except BaseException as exc:
                step = flow.throw(exc)
            else:
                step = flow.send(result)
    except StopIteration as stop:
        return stop.value


def check_skip(skip: int) -> None:
    if skip < 0:
        raise InvalidArgument(f"skip must be zero or higher, got {skip}.")


def with_connection(
    driver: DriverPort,
    connection_string: str,
    connection: Any,
    operation: Callable[[Any], Flow[T]],
) -> Flow[T]:
    """Run `operation` on the caller's connection or on an engine-owned one.

    A caller-supplied connection is never closed. An engine-owned connection
    is closed on success, failure, and cancellation.
    """

    if connection is not None:
        return (yield from operation(connection))

    owned = yield io(driver, "connect", connection_string)
    logger.debug("connection_opened", driver=driver.name)
    try:
        return (yield from operation(owned))
    finally:
        yield io(driver, "close", owned)
        logger.debug("connection_closed", driver=driver.name)


def walk(
    driver: DriverPort,
    cursor: Any,
    skip: int,
    take: int,
    visit: RowVisitor,
) -> Flow[int]:
    """Skip `skip` rows, then visit up to `take` rows (all when `take <= 0`).

    Returns the number of visited rows. Exhaustion during the skip phase is
    not an error.
    """

    check_skip(skip)
    while skip > 0:
        record = yield io(driver, "read", cursor)
        if record is None:
            return 0
        skip -= 1

    visited = 0
    while take <= 0 or visited < take:
        record = yield io(driver, "read", cursor)
        if record is None:
            break
        visit(record)
        visited += 1
    return visited


def read_rows(
    driver: DriverPort,
    connection: Any,
    command: Command,
    skip: int,
    take: int,
    visit: RowVisitor,
) -> Flow[int]:
    """Execute `command` as a reader and walk it; the reader is always closed."""

    cursor = yield io(driver, "execute_reader", connection, command)
    try:
        return (yield from walk(driver, cursor, skip, take, visit))
    finally:
        yield io(driver, "close_reader", cursor)


def non_query(driver: DriverPort, connection: Any, command: Command) -> Flow[int]:
    return (yield io(driver, "execute_non_query", connection, command))


def scalar(
    driver: DriverPort,
    connection: Any,
    command: Command,
    converter: Callable[[Any], T],
) -> Flow[T]:
    value = yield io(driver, "execute_scalar", connection, command)
    return converter(value)


def array(
    driver: DriverPort,
    connection: Any,
    command: Command,
    converter: Callable[[Any], T],
    skip: int,
    take: int,
) -> Flow[List[T]]:
    items: List[T] = []

    def visit(record: Record) -> None:
        items.append(converter(record[0]))

    yield from read_rows(driver, connection, command, skip, take, visit)
    return items


def dictionary(
    driver: DriverPort,
    connection: Any,
    command: Command,
    key_converter: Callable[[Any], Any],
    value_converter: Callable[[Any], Any],
    skip: int,
    take: int,
) -> Flow[Dict[Any, Any]]:
    result: Dict[Any, Any] = {}

    def visit(record: Record) -> None:
        key = key_converter(record[0])
        if key in result:
            raise DuplicateKey(key)
        result[key] = value_converter(record[1])

    yield from read_rows(driver, connection, command, skip, take, visit)
    return result


def single(
    driver: DriverPort,
    connection: Any,
    command: Command,
    converter: Callable[[Record], T],
    default: Optional[T] = None,
) -> Flow[Optional[T]]:
    found: List[T] = []

    def visit(record: Record) -> None:
        found.append(converter(record))

    yield from read_rows(driver, connection, command, 0, 1, visit)
    return found[0] if found else default


def many(
    driver: DriverPort,
    connection: Any,
    command: Command,
    converter: Callable[[Record], T],
    skip: int,
    take: int,
) -> Flow[List[T]]:
    items: List[T] = []

    def visit(record: Record) -> None:
        items.append(converter(record))

    yield from read_rows(driver, connection, command, skip, take, visit)
    return items


def table(
    driver: DriverPort,
    connection: Any,
    command: Command,
    skip: int,
    take: int,
) -> Flow[DataTable]:
    return (yield io(driver, "fill_table", connection, command, skip, take))


def table_set(driver: DriverPort, connection: Any, command: Command) -> Flow[DataTableSet]:
    return (yield io(driver, "fill_table_set", connection, command))


def open_reader(
    driver: DriverPort,
    connection_string: str,
    connection: Any,
    command: Command,
) -> Flow[Tuple[Any, Any]]:
    """Execute `command` as a reader that outlives this flow.

    Returns `(cursor, owned_connection)`; `owned_connection` is None when the
    caller supplied the connection. An engine-owned connection is closed if
    execution fails.
    """

    if connection is not None:
        cursor = yield io(driver, "execute_reader", connection, command)
        return cursor, None

    owned = yield io(driver, "connect", connection_string)
    try:
        cursor = yield io(driver, "execute_reader", owned, command)
    except BaseException:
        yield io(driver, "close", owned)
        raise
    return cursor, owned


def close_reader(driver: DriverPort, cursor: Any, owned_connection: Any) -> Flow[None]:
    try:
        yield io(driver, "close_reader", cursor)
    finally:
        if owned_connection is not None:
            yield io(driver, "close", owned_connection)
