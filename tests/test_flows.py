from __future__ import annotations

import asyncio
import unittest

from dbhelper.core import flows
from dbhelper.core.commands import Command
from dbhelper.core.errors import InvalidArgument
from dbhelper.core.flows import run_blocking, run_suspending, walk, with_connection
from tests._fakes import FakeConnection, FakeDriver


def _rows(count: int) -> list[tuple[int, str]]:
    return [(i, f"row{i}") for i in range(1, count + 1)]


def _walk_ids(driver: FakeDriver, skip: int, take: int) -> list[int]:
    cursor = driver.execute_reader(None, Command("SELECT"))
    visited: list[int] = []
    run_blocking(walk(driver, cursor, skip, take, lambda r: visited.append(r[0])))
    return visited


class CursorWalkerTests(unittest.TestCase):
    def test_skip_two_take_three_over_four_rows(self) -> None:
        driver = FakeDriver(rows=_rows(4))
        self.assertEqual(_walk_ids(driver, 2, 3), [3, 4])

    def test_visit_count_matches_paging_window(self) -> None:
        for total in (0, 1, 4):
            for skip in (0, 1, 3, 5):
                for take in (-1, 0, 1, 2, 10):
                    with self.subTest(total=total, skip=skip, take=take):
                        driver = FakeDriver(rows=_rows(total))
                        visited = _walk_ids(driver, skip, take)
                        remaining = max(0, total - skip)
                        expected = remaining if take <= 0 else min(take, remaining)
                        self.assertEqual(len(visited), expected)
                        self.assertEqual(visited, list(range(skip + 1, skip + 1 + expected)))

    def test_take_stops_without_extra_read(self) -> None:
        driver = FakeDriver(rows=_rows(10))
        cursor = driver.execute_reader(None, Command("SELECT"))
        run_blocking(walk(driver, cursor, 1, 2, lambda r: None))
        self.assertEqual(cursor.reads, 3)

    def test_exhaustion_during_skip_is_not_an_error(self) -> None:
        driver = FakeDriver(rows=_rows(2))
        cursor = driver.execute_reader(None, Command("SELECT"))
        count = run_blocking(walk(driver, cursor, 5, 0, lambda r: None))
        self.assertEqual(count, 0)
        self.assertEqual(cursor.reads, 3)

    def test_negative_skip_is_invalid(self) -> None:
        driver = FakeDriver(rows=_rows(2))
        cursor = driver.execute_reader(None, Command("SELECT"))
        with self.assertRaises(InvalidArgument):
            run_blocking(walk(driver, cursor, -1, 0, lambda r: None))
        self.assertEqual(cursor.reads, 0)


class ConnectionLifecycleTests(unittest.TestCase):
    def test_engine_owned_connection_is_closed(self) -> None:
        driver = FakeDriver(affected=3)
        flow = with_connection(
            driver, "cs", None, lambda conn: flows.non_query(driver, conn, Command("DELETE"))
        )

        self.assertEqual(run_blocking(flow), 3)
        self.assertEqual(driver.events, ["connect", "non_query", "close"])
        self.assertTrue(driver.connections[0].closed)
        self.assertEqual(driver.connections[0].connection_string, "cs")

    def test_engine_owned_connection_is_closed_on_error(self) -> None:
        driver = FakeDriver(execute_error=RuntimeError("backend down"))
        flow = with_connection(
            driver, "cs", None, lambda conn: flows.scalar(driver, conn, Command("X"), int)
        )

        with self.assertRaises(RuntimeError):
            run_blocking(flow)
        self.assertEqual(driver.events, ["connect", "scalar", "close"])

    def test_caller_connection_is_never_closed(self) -> None:
        driver = FakeDriver(scalar=5)
        conn = FakeConnection("mine")
        flow = with_connection(
            driver, "cs", conn, lambda c: flows.scalar(driver, c, Command("X"), int)
        )

        self.assertEqual(run_blocking(flow), 5)
        self.assertFalse(conn.closed)
        self.assertEqual(driver.events, ["scalar"])

    def test_reader_and_connection_closed_when_visit_fails(self) -> None:
        driver = FakeDriver(rows=_rows(3))

        def explode(record):
            raise ValueError("bad row")

        flow = with_connection(
            driver,
            "cs",
            None,
            lambda conn: flows.read_rows(driver, conn, Command("SELECT"), 0, 0, explode),
        )
        with self.assertRaises(ValueError):
            run_blocking(flow)
        self.assertEqual(driver.events, ["connect", "reader", "close_reader", "close"])


class SuspendingRunnerTests(unittest.IsolatedAsyncioTestCase):
    async def test_same_results_as_blocking_runner(self) -> None:
        def build(driver):
            return with_connection(
                driver,
                "cs",
                None,
                lambda conn: flows.many(
                    driver, conn, Command("SELECT"), lambda r: r.as_dict(), 1, 2
                ),
            )

        sync_driver = FakeDriver(rows=_rows(5))
        async_driver = FakeDriver(rows=_rows(5))

        expected = run_blocking(build(sync_driver))
        actual = await run_suspending(build(async_driver))

        self.assertEqual(actual, expected)
        self.assertEqual(actual, [{"id": 2, "name": "row2"}, {"id": 3, "name": "row3"}])
        self.assertEqual(async_driver.events, sync_driver.events)

    async def test_cancellation_closes_engine_owned_connection(self) -> None:
        driver = FakeDriver(rows=_rows(3), block_reads=True)
        flow = with_connection(
            driver,
            "cs",
            None,
            lambda conn: flows.array(driver, conn, Command("SELECT"), int, 0, 0),
        )
        task = asyncio.create_task(run_suspending(flow))
        for _ in range(10):
            await asyncio.sleep(0)

        task.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await task
        self.assertEqual(driver.events, ["connect", "reader", "close_reader", "close"])
        self.assertTrue(driver.connections[0].closed)


if __name__ == "__main__":
    unittest.main()
