"""Named connection configuration using Pydantic Settings.

Connections are read from the environment (or a `.env` file), e.g.::

    DBHELPER_CONNECTIONS__reports__PROVIDER=psycopg
    DBHELPER_CONNECTIONS__reports__CONNECTION_STRING=postgresql://localhost/reports
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Literal, Tuple

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.errors import ConfigurationError

if TYPE_CHECKING:
    from .core.contracts import DriverPort


class ConnectionEntry(BaseModel):
    """One named connection: driver provider and connection string."""

    provider: str
    connection_string: str = ""


class Settings(BaseSettings):
    """Settings loaded from `DBHELPER_*` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DBHELPER_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    connections: Dict[str, ConnectionEntry] = Field(default_factory=dict)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "console"] = "console"


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None


def resolve_connection(name: str, settings: Settings | None = None) -> Tuple[DriverPort, str]:
    """Return `(driver, connection_string)` for the named connection.

    Raises:
        ConfigurationError: If the entry is missing, its connection string is
            empty, or its provider has no registered driver factory.
    """

    from .ports.db_api.registry import get_driver

    settings = settings or get_settings()
    entry = settings.connections.get(name)
    if entry is None:
        raise ConfigurationError(
            f"The connection {name!r} does not exist in the configuration."
        )
    if not entry.connection_string.strip():
        raise ConfigurationError(f"The connection string for {name!r} is empty.")
    return get_driver(entry.provider), entry.connection_string
