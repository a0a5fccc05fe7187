"""Opt-in structlog setup for applications and scripts using dbhelper.

Library modules only call `structlog.get_logger()`; nothing is configured
unless the application calls `configure_logging()`. Output goes through the
`dbhelper` standard-library logger, so the root logger is left untouched.
"""

import logging
import sys
from typing import IO, Optional

import structlog

from dbhelper.config import Settings, get_settings

LOGGER_NAME = "dbhelper"
_HANDLER_NAME = "dbhelper-structlog"


def _renderer(log_format: str):
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(settings: Optional[Settings] = None, stream: Optional[IO[str]] = None) -> logging.Logger:
    """Route dbhelper events to `stream` (stdout by default).

    Calling it again replaces the handler installed by the previous call.
    Returns the configured `dbhelper` logger.
    """
    settings = settings or get_settings()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=_renderer(settings.log_format))
    )

    logger = logging.getLogger(LOGGER_NAME)
    for existing in list(logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(settings.log_level)
    logger.propagate = False
    return logger


def bind_context(**kwargs) -> None:
    """Bind context variables (e.g. a request id) to subsequent log events."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
