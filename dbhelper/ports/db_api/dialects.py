"""Placeholder rendering and parameter binding per DB-API paramstyle."""

from __future__ import annotations

from typing import Sequence

from ...core.commands import Parameter
from ...core.errors import UnsupportedDriver
from ...core.types import DBNull, NamedParams

# Positional styles carry no index, so repeated or reordered slots cannot be
# expressed with them.
INDEXED_PARAMSTYLES = frozenset({"named", "pyformat"})


class Dialect:
    """Base dialect that renders index-bearing placeholders."""

    name: str = "generic"
    paramstyle: str = "named"

    def __init__(self, paramstyle: str | None = None):
        if paramstyle is not None:
            self.paramstyle = paramstyle

    def param_key(self, index: int) -> str:
        """Return the bind key used for template slot `index`."""

        return f"p{index}"

    def render_placeholder(self, index: int) -> str:
        """Return the marker written into command text for slot `index`."""

        key = self.param_key(index)
        if self.paramstyle == "named":
            return f":{key}"
        if self.paramstyle == "pyformat":
            return f"%({key})s"
        raise UnsupportedDriver(
            f"Paramstyle {self.paramstyle!r} cannot carry a parameter index; "
            f"use one of {sorted(INDEXED_PARAMSTYLES)}."
        )

    def bind(self, parameters: Sequence[Parameter]) -> NamedParams:
        """Return DB-API bind values; `DBNull` becomes `None`."""

        return {
            self.param_key(parameter.index): (
                None if parameter.value is DBNull else parameter.value
            )
            for parameter in parameters
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(paramstyle={self.paramstyle!r})"


class SQLiteDialect(Dialect):
    """SQLite dialect (`:p0` named parameters)."""

    name = "sqlite"
    paramstyle = "named"


class PostgresDialect(Dialect):
    """PostgreSQL dialect (`%(p0)s` parameters for psycopg)."""

    name = "postgres"
    paramstyle = "pyformat"


class MySQLDialect(Dialect):
    """MySQL dialect (`%(p0)s` parameters for PyMySQL)."""

    name = "mysql"
    paramstyle = "pyformat"
