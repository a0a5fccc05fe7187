"""Open forward-only readers handed to callers by `execute_reader`."""

from __future__ import annotations

from typing import Any, AsyncIterator, Iterator, Optional

from .contracts import DriverPort
from .flows import close_reader, io, run_blocking, run_suspending
from .records import Record


class _ReaderBase:
    def __init__(self, driver: DriverPort, cursor: Any, owned_connection: Any = None):
        self.driver = driver
        self.cursor = cursor
        self._owned_connection = owned_connection
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def owns_connection(self) -> bool:
        return self._owned_connection is not None

    def _require_open(self) -> None:
        if self._closed:
            raise RuntimeError("reader is closed")


class Reader(_ReaderBase):
    """Blocking reader; closing it also closes an engine-owned connection."""

    def read(self) -> Optional[Record]:
        """Advance to the next row; None once the cursor is exhausted."""

        self._require_open()
        return run_blocking(_single_step(io(self.driver, "read", self.cursor)))

    def __iter__(self) -> Iterator[Record]:
        while True:
            record = self.read()
            if record is None:
                return
            yield record

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        run_blocking(close_reader(self.driver, self.cursor, self._owned_connection))

    def __enter__(self) -> Reader:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()


class AsyncReader(_ReaderBase):
    """Suspendable reader; `aclose()` also closes an engine-owned connection."""

    async def read(self) -> Optional[Record]:
        """Advance to the next row; None once the cursor is exhausted."""

        self._require_open()
        return await run_suspending(_single_step(io(self.driver, "read", self.cursor)))

    def __aiter__(self) -> AsyncIterator[Record]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[Record]:
        while True:
            record = await self.read()
            if record is None:
                return
            yield record

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await run_suspending(close_reader(self.driver, self.cursor, self._owned_connection))

    async def __aenter__(self) -> AsyncReader:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.aclose()


def _single_step(step: Any) -> Any:
    return (yield step)
