"""Internal helpers for driver objects that may be sync or async."""

from __future__ import annotations

import inspect
from typing import Any


async def _maybe_await(value: Any) -> Any:
    """Await awaitables and return non-awaitable values unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


async def _maybe_close(resource: Any) -> None:
    """Call `close()` when present, awaiting it for async resources."""
    close = getattr(resource, "close", None)
    if callable(close):
        await _maybe_await(close())


def _close_sync(resource: Any) -> None:
    """Call a synchronous `close()` when present."""
    close = getattr(resource, "close", None)
    if callable(close):
        close()
