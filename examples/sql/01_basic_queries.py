"""Basic QueryHelper example: every result shape against SQLite."""

from __future__ import annotations

import os
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "dbhelper").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dbhelper import QueryHelper, RawLiteral, get_driver


@dataclass
class User:
    Id: int = 0
    Email: str = ""
    Age: Optional[int] = None


def main() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        # 1) Engine-owned connections: each call opens and closes its own.
        helper = QueryHelper(get_driver("sqlite3"), os.path.join(tmp, "example.db"))

        # 2) Create and fill a table; arguments become bound parameters.
        helper.execute_non_query(
            'CREATE TABLE "users" ("id" INTEGER PRIMARY KEY, "email" TEXT, "age" INTEGER);'
        )
        for email, age in [("alice@example.com", 25), ("bob@example.com", 30), ("cy@example.com", None)]:
            helper.execute_non_query(
                'INSERT INTO "users" ("email", "age") VALUES ({0}, {1});', email, age
            )

        # 3) Scalars and single-column arrays.
        print("Count:", helper.execute_scalar(int, 'SELECT COUNT(*) FROM "users"'))
        print("Emails:", helper.execute_array(str, 'SELECT "email" FROM "users" ORDER BY "id"'))

        # 4) Column 0 -> column 1 dictionary.
        print("Ages:", helper.execute_dictionary(str, Optional[int], 'SELECT "email", "age" FROM "users"'))

        # 5) Rows mapped to objects; column names match members case-insensitively.
        print("First:", helper.execute_object(User, 'SELECT * FROM "users" WHERE "id" = {0}', 1))
        print("Missing:", helper.execute_object(User, 'SELECT * FROM "users" WHERE "id" = {0}', 99))

        # 6) RawLiteral splices trusted text; skip/take page the cursor.
        page = helper.execute_list(
            User,
            'SELECT * FROM "users" ORDER BY {0}',
            RawLiteral('"id" DESC'),
            skip=1,
            take=1,
        )
        print("Page:", page)

        # 7) Generic tables and a forward-only reader.
        table = helper.execute_table('SELECT "id", "email" FROM "users"')
        print("Table columns:", table.column_names, "rows:", len(table))
        with helper.execute_reader('SELECT "email" FROM "users"') as reader:
            for record in reader:
                print("Read:", record["email"])


if __name__ == "__main__":
    main()
