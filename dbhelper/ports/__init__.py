"""Public port exports for concrete driver implementations."""

from .db_api import (
    DBAPIDriver,
    Dialect,
    MySQLDialect,
    PostgresDialect,
    SQLiteDialect,
    get_driver,
    register_driver,
)

__all__ = [
    "DBAPIDriver",
    "Dialect",
    "SQLiteDialect",
    "PostgresDialect",
    "MySQLDialect",
    "get_driver",
    "register_driver",
]
