"""DB-API driver, dialect, and driver registry exports."""

from .dialects import Dialect, MySQLDialect, PostgresDialect, SQLiteDialect
from .driver import DBAPICursor, DBAPIDriver
from .registry import get_driver, register_driver, registered_drivers, unregister_driver

__all__ = [
    "DBAPICursor",
    "DBAPIDriver",
    "Dialect",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "get_driver",
    "register_driver",
    "registered_drivers",
    "unregister_driver",
]
