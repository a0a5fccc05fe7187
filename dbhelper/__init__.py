"""dbhelper: template-based command execution and result materialization."""

from .config import ConnectionEntry, Settings, get_settings, reset_settings
from .core import (
    AsyncQueryHelper,
    AsyncReader,
    Command,
    ConfigurationError,
    ConversionError,
    DataColumn,
    DataTable,
    DataTableSet,
    DBHelperError,
    DBNull,
    DriverPort,
    DuplicateKey,
    InvalidArgument,
    InvalidTemplate,
    ObjectMapper,
    Parameter,
    QueryHelper,
    RawLiteral,
    Reader,
    Record,
    UnsupportedDriver,
    convert,
    zero_value,
)
from .ports import (
    DBAPIDriver,
    Dialect,
    MySQLDialect,
    PostgresDialect,
    SQLiteDialect,
    get_driver,
    register_driver,
)

__all__ = [
    "AsyncQueryHelper",
    "AsyncReader",
    "Command",
    "ConfigurationError",
    "ConnectionEntry",
    "ConversionError",
    "DBAPIDriver",
    "DBHelperError",
    "DBNull",
    "DataColumn",
    "DataTable",
    "DataTableSet",
    "Dialect",
    "DriverPort",
    "DuplicateKey",
    "InvalidArgument",
    "InvalidTemplate",
    "MySQLDialect",
    "ObjectMapper",
    "Parameter",
    "PostgresDialect",
    "QueryHelper",
    "RawLiteral",
    "Reader",
    "Record",
    "SQLiteDialect",
    "Settings",
    "UnsupportedDriver",
    "convert",
    "get_driver",
    "get_settings",
    "register_driver",
    "reset_settings",
    "zero_value",
]
