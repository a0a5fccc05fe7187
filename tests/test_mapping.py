from __future__ import annotations

import unittest
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional

from dbhelper.core.errors import ConversionError
from dbhelper.core.mapping import ObjectMapper, binding_plan, map_row, member_table
from dbhelper.core.records import Record


class Status(str, Enum):
    ACTIVE = "active"
    BLOCKED = "blocked"


@dataclass
class User:
    UserId: int = 0
    name: str = ""
    age: Optional[int] = None
    status: Status = Status.ACTIVE
    tags: list = field(default_factory=list)


@dataclass(frozen=True)
class Point:
    x: int
    y: int
    label: str = "origin"


class Account:
    id: int
    balance: float
    kind: ClassVar[str] = "account"

    def __init__(self) -> None:
        self.id = -1
        self.balance = -1.0


class NeedsArgs:
    value: int

    def __init__(self, value: int) -> None:
        self.value = value


def _record(columns, values) -> Record:
    return Record(tuple(columns), values)


class ObjectMapperTests(unittest.TestCase):
    def test_column_names_match_case_insensitively(self) -> None:
        for column in ("UserId", "userid", "USERID"):
            with self.subTest(column=column):
                user = map_row(_record([column], (12,)), User)
                self.assertEqual(user.UserId, 12)

    def test_values_are_converted_to_member_types(self) -> None:
        user = map_row(
            _record(["userid", "NAME", "Age", "status"], ("5", b"ann", 31.0, "blocked")),
            User,
        )

        self.assertEqual(user, User(UserId=5, name="ann", age=31, status=Status.BLOCKED))

    def test_unmatched_columns_are_ignored_and_members_keep_defaults(self) -> None:
        user = map_row(_record(["name", "extra"], ("bo", "ignored")), User)

        self.assertEqual(user.name, "bo")
        self.assertEqual(user.UserId, 0)
        self.assertIsNone(user.age)
        self.assertEqual(user.tags, [])

    def test_null_cells_become_zero_values(self) -> None:
        user = map_row(_record(["UserId", "name", "age"], (None, None, None)), User)
        self.assertEqual((user.UserId, user.name, user.age), (0, "", None))

    def test_required_dataclass_fields_without_column_get_zero_value(self) -> None:
        point = map_row(_record(["X"], (3,)), Point)
        self.assertEqual(point, Point(x=3, y=0))

    def test_plain_class_is_populated_with_setattr(self) -> None:
        account = map_row(_record(["ID", "Balance", "kind"], (9, "12.5", "x")), Account)

        self.assertEqual(account.id, 9)
        self.assertEqual(account.balance, 12.5)
        self.assertEqual(Account.kind, "account")

    def test_class_requiring_arguments_is_rejected(self) -> None:
        with self.assertRaises(TypeError):
            map_row(_record(["value"], (1,)), NeedsArgs)

    def test_conversion_failure_propagates(self) -> None:
        with self.assertRaises(ConversionError):
            map_row(_record(["UserId"], ("not-a-number",)), User)

    def test_plan_is_reused_for_same_cursor_shape(self) -> None:
        columns = ("userid", "name", "unused")
        first = binding_plan(User, columns)
        second = binding_plan(User, columns)

        self.assertIs(first, second)
        self.assertEqual([b.member.name for b in first.bindings], ["UserId", "name"])
        self.assertEqual([b.ordinal for b in first.bindings], [0, 1])

    def test_values_are_read_per_row(self) -> None:
        mapper = ObjectMapper(User)
        columns = ("UserId", "name")
        users = [mapper(Record(columns, row)) for row in [(1, "a"), (2, "b")]]

        self.assertEqual([(u.UserId, u.name) for u in users], [(1, "a"), (2, "b")])
        self.assertIsNot(users[0], users[1])

    def test_first_duplicate_column_wins(self) -> None:
        user = map_row(_record(["name", "NAME"], ("first", "second")), User)
        self.assertEqual(user.name, "first")

    def test_member_table_skips_class_vars(self) -> None:
        self.assertEqual(set(member_table(Account)), {"id", "balance"})

    def test_local_annotation_does_not_break_other_members(self) -> None:
        class Color(Enum):
            RED = 1

        @dataclass
        class Item:
            id: int = 0
            label: Optional[str] = None
            color: Color = Color.RED

        item = map_row(_record(["id", "label", "color"], ("5", b"tag", 1)), Item)

        self.assertEqual(item.id, 5)
        self.assertEqual(item.label, "tag")
        self.assertEqual(item.color, 1)
        self.assertIs(member_table(Item)["id"].annotation, int)

    def test_unannotated_class_attributes_are_members(self) -> None:
        class Plain:
            id = 0
            name = ""
            note = None

            def describe(self) -> str:
                return self.name

            @property
            def upper(self) -> str:
                return self.name.upper()

        plain = map_row(_record(["ID", "Name", "NOTE", "upper"], ("3", "x", "free", "y")), Plain)

        self.assertEqual((plain.id, plain.name, plain.note), (3, "x", "free"))
        self.assertEqual(set(member_table(Plain)), {"id", "name", "note"})

    def test_mapper_requires_class_target(self) -> None:
        with self.assertRaises(TypeError):
            ObjectMapper(Optional[int])


if __name__ == "__main__":
    unittest.main()
