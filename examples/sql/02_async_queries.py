"""AsyncQueryHelper example with configuration-driven connections."""

from __future__ import annotations

import asyncio
import os
import sys
import tempfile
from pathlib import Path

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "dbhelper").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dbhelper import AsyncQueryHelper, Command, reset_settings
from dbhelper.log import configure_logging


class AuditedHelper(AsyncQueryHelper):
    def on_execute_command(self, command: Command) -> None:
        print("Executing:", command.text, [p.value for p in command.parameters])


async def main() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        # 1) Named connection from DBHELPER_* environment variables.
        os.environ["DBHELPER_CONNECTIONS__demo__PROVIDER"] = "sqlite3"
        os.environ["DBHELPER_CONNECTIONS__demo__CONNECTION_STRING"] = os.path.join(tmp, "demo.db")
        os.environ["DBHELPER_LOG_LEVEL"] = "DEBUG"
        reset_settings()
        configure_logging()

        helper = AuditedHelper.from_config("demo")

        # 2) Same operations as QueryHelper, awaited.
        await helper.execute_non_query('CREATE TABLE "events" ("id" INTEGER, "kind" TEXT);')
        for i, kind in enumerate(["open", "click", "close"], start=1):
            await helper.execute_non_query('INSERT INTO "events" VALUES ({0}, {1});', i, kind)

        kinds = await helper.execute_array(str, 'SELECT "kind" FROM "events" ORDER BY "id"', take=2)
        print("First kinds:", kinds)

        # 3) Async reader owns its connection until closed.
        async with await helper.execute_reader('SELECT * FROM "events"') as reader:
            async for record in reader:
                print("Event:", record.as_dict())


if __name__ == "__main__":
    asyncio.run(main())
