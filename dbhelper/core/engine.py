"""Shared state and flow construction behind the blocking and async helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence, Tuple, Type, Union

from . import flows
from .commands import Command, CommandBuilder, PlaceholderSyntaxCache
from .contracts import DriverPort
from .converters import converter_for, zero_value
from .errors import ConfigurationError
from .flows import Flow
from .mapping import ObjectMapper
from .records import DataTable, DataTableSet, Record
from .types import T

if TYPE_CHECKING:
    from ..config import Settings

CommandInput = Union[str, Command]


class QueryEngine:
    """Driver, connection string, and per-instance placeholder cache.

    Subclasses expose the operations in one calling convention by running the
    flows built here with `flows.run_blocking` or `flows.run_suspending`.
    """

    def __init__(self, driver: DriverPort, connection_string: str):
        """Create an engine bound to one driver and connection string.

        Args:
            driver: Driver implementing `DriverPort`.
            connection_string: Passed to `driver.connect` for engine-owned
                connections.

        Raises:
            ConfigurationError: If the driver is missing or the connection
                string is empty.
        """

        if driver is None:
            raise ConfigurationError("A driver instance is required.")
        if not connection_string or not str(connection_string).strip():
            raise ConfigurationError("The connection string cannot be empty.")
        self.driver = driver
        self.connection_string = connection_string
        self.placeholders = PlaceholderSyntaxCache(driver)
        self.command_builder = CommandBuilder(self.placeholders)

    @classmethod
    def from_config(cls, name: str, settings: Optional[Settings] = None):
        """Create an engine from a named connection in the settings."""

        from ..config import resolve_connection

        driver, connection_string = resolve_connection(name, settings)
        return cls(driver, connection_string)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(driver={getattr(self.driver, 'name', self.driver)!r})"

    # Extension points

    def create_command(self, template: str, *args: Any) -> Command:
        """Build a command from a `{i}` template and positional arguments."""

        return self.command_builder.build(template, args)

    def create_parameter_name(self, index: int) -> str:
        return self.placeholders.get(index)

    def get_type_converter(self, target: Any) -> Callable[[Any], Any]:
        return converter_for(target)

    def get_row_converter(self, target: Type[T]) -> Callable[[Record], T]:
        return ObjectMapper(target)

    def on_execute_command(self, command: Command) -> None:
        """Called with every command right before it is executed."""

    # Flow construction

    def _command(self, command: CommandInput, args: Sequence[Any]) -> Command:
        if isinstance(command, Command):
            if args:
                raise TypeError("Positional arguments are only accepted with a template.")
            return command
        return self.create_command(command, *args)

    def _prepare(self, command: CommandInput, args: Sequence[Any]) -> Command:
        built = self._command(command, args)
        self.on_execute_command(built)
        return built

    def _scoped(self, connection: Any, operation: Callable[[Any], Flow[T]]) -> Flow[T]:
        return flows.with_connection(
            self.driver, self.connection_string, connection, operation
        )

    def _non_query_flow(self, command: CommandInput, args: Sequence[Any], connection: Any) -> Flow[int]:
        built = self._prepare(command, args)
        return self._scoped(connection, lambda conn: flows.non_query(self.driver, conn, built))

    def _scalar_flow(
        self,
        target: Any,
        command: CommandInput,
        args: Sequence[Any],
        converter: Optional[Callable[[Any], Any]],
        connection: Any,
    ) -> Flow[Any]:
        convert = converter or self.get_type_converter(target)
        built = self._prepare(command, args)
        return self._scoped(
            connection, lambda conn: flows.scalar(self.driver, conn, built, convert)
        )

    def _array_flow(
        self,
        target: Any,
        command: CommandInput,
        args: Sequence[Any],
        converter: Optional[Callable[[Any], Any]],
        skip: int,
        take: int,
        connection: Any,
    ) -> Flow[List[Any]]:
        flows.check_skip(skip)
        convert = converter or self.get_type_converter(target)
        built = self._prepare(command, args)
        return self._scoped(
            connection,
            lambda conn: flows.array(self.driver, conn, built, convert, skip, take),
        )

    def _dictionary_flow(
        self,
        key_type: Any,
        value_type: Any,
        command: CommandInput,
        args: Sequence[Any],
        key_converter: Optional[Callable[[Any], Any]],
        value_converter: Optional[Callable[[Any], Any]],
        skip: int,
        take: int,
        connection: Any,
    ) -> Flow[Dict[Any, Any]]:
        flows.check_skip(skip)
        convert_key = key_converter or self.get_type_converter(key_type)
        convert_value = value_converter or self.get_type_converter(value_type)
        built = self._prepare(command, args)
        return self._scoped(
            connection,
            lambda conn: flows.dictionary(
                self.driver, conn, built, convert_key, convert_value, skip, take
            ),
        )

    def _object_flow(
        self,
        target: Optional[Type[T]],
        command: CommandInput,
        args: Sequence[Any],
        converter: Optional[Callable[[Record], T]],
        connection: Any,
    ) -> Flow[Optional[T]]:
        convert = self._row_converter(target, converter)
        default = zero_value(target) if target is not None else None
        built = self._prepare(command, args)
        return self._scoped(
            connection,
            lambda conn: flows.single(self.driver, conn, built, convert, default),
        )

    def _list_flow(
        self,
        target: Optional[Type[T]],
        command: CommandInput,
        args: Sequence[Any],
        converter: Optional[Callable[[Record], T]],
        skip: int,
        take: int,
        connection: Any,
    ) -> Flow[List[T]]:
        flows.check_skip(skip)
        convert = self._row_converter(target, converter)
        built = self._prepare(command, args)
        return self._scoped(
            connection,
            lambda conn: flows.many(self.driver, conn, built, convert, skip, take),
        )

    def _table_flow(
        self,
        command: CommandInput,
        args: Sequence[Any],
        skip: int,
        take: int,
        connection: Any,
    ) -> Flow[DataTable]:
        flows.check_skip(skip)
        built = self._prepare(command, args)
        return self._scoped(
            connection, lambda conn: flows.table(self.driver, conn, built, skip, take)
        )

    def _table_set_flow(
        self, command: CommandInput, args: Sequence[Any], connection: Any
    ) -> Flow[DataTableSet]:
        built = self._prepare(command, args)
        return self._scoped(connection, lambda conn: flows.table_set(self.driver, conn, built))

    def _reader_flow(
        self, command: CommandInput, args: Sequence[Any], connection: Any
    ) -> Flow[Tuple[Any, Any]]:
        built = self._prepare(command, args)
        return flows.open_reader(self.driver, self.connection_string, connection, built)

    def _row_converter(
        self,
        target: Optional[Type[T]],
        converter: Optional[Callable[[Record], T]],
    ) -> Callable[[Record], T]:
        if converter is not None:
            return converter
        if target is None:
            raise TypeError("Either a target type or a row converter is required.")
        return self.get_row_converter(target)
