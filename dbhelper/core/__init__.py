"""Public core API for command building, conversion, mapping, and execution."""

from .commands import Command, CommandBuilder, Parameter, PlaceholderSyntaxCache
from .contracts import DriverPort, PlaceholderRenderer
from .converters import convert, converter_for, zero_value
from .engine import QueryEngine
from .errors import (
    ConfigurationError,
    ConversionError,
    DBHelperError,
    DuplicateKey,
    InvalidArgument,
    InvalidTemplate,
    UnsupportedDriver,
)
from .flows import IOStep, run_blocking, run_suspending, walk, with_connection
from .helper import QueryHelper
from .helper_async import AsyncQueryHelper
from .mapping import BindingPlan, ObjectMapper, binding_plan, map_row
from .readers import AsyncReader, Reader
from .records import DataColumn, DataTable, DataTableSet, Record
from .types import Byte, DBNull, Int16, Int32, Int64, RawLiteral, SizedInt, is_null

__all__ = [
    "AsyncQueryHelper",
    "AsyncReader",
    "BindingPlan",
    "Byte",
    "Command",
    "CommandBuilder",
    "ConfigurationError",
    "ConversionError",
    "DBHelperError",
    "DBNull",
    "DataColumn",
    "DataTable",
    "DataTableSet",
    "DriverPort",
    "DuplicateKey",
    "IOStep",
    "Int16",
    "Int32",
    "Int64",
    "InvalidArgument",
    "InvalidTemplate",
    "ObjectMapper",
    "Parameter",
    "PlaceholderRenderer",
    "PlaceholderSyntaxCache",
    "QueryEngine",
    "QueryHelper",
    "RawLiteral",
    "Reader",
    "Record",
    "SizedInt",
    "UnsupportedDriver",
    "binding_plan",
    "convert",
    "converter_for",
    "is_null",
    "map_row",
    "run_blocking",
    "run_suspending",
    "walk",
    "with_connection",
    "zero_value",
]
