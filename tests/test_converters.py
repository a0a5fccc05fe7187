from __future__ import annotations

import unittest
import uuid
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Any, Optional

from dbhelper.core.converters import convert, converter_for, zero_value
from dbhelper.core.errors import ConversionError
from dbhelper.core.types import Byte, DBNull, Int16, Int32, Int64


class Color(Enum):
    RED = "red"
    GREEN = "green"


class Level(IntEnum):
    NONE = 0
    LOW = 1
    HIGH = 2


class ZeroValueTests(unittest.TestCase):
    def test_null_converts_to_zero_value_for_every_supported_type(self) -> None:
        expected = {
            int: 0,
            float: 0.0,
            bool: False,
            str: "",
            bytes: b"",
            Decimal: Decimal(0),
            Int32: 0,
            Byte: 0,
            Optional[int]: None,
            Any: None,
            Level: Level.NONE,
            Color: None,
            datetime: None,
            uuid.UUID: None,
        }
        for target, zero in expected.items():
            with self.subTest(target=target):
                self.assertEqual(zero_value(target), zero)
                self.assertEqual(convert(DBNull, target), zero)
                self.assertEqual(convert(None, target), zero)

    def test_sized_zero_keeps_type(self) -> None:
        self.assertIs(type(zero_value(Int16)), Int16)


class ConvertTests(unittest.TestCase):
    def test_matching_type_passes_through(self) -> None:
        payload = b"abc"
        self.assertIs(convert(payload, bytes), payload)
        marker = object()
        self.assertIs(convert(marker, Any), marker)

    def test_integer_coercion(self) -> None:
        self.assertEqual(convert("42", int), 42)
        self.assertEqual(convert(" 7 ", int), 7)
        self.assertEqual(convert(3.0, int), 3)
        self.assertEqual(convert(Decimal("5"), int), 5)
        self.assertEqual(convert(True, int), 1)

    def test_integer_refuses_truncation(self) -> None:
        for value in (3.5, Decimal("1.25"), float("nan"), "x"):
            with self.subTest(value=value):
                with self.assertRaises(ConversionError):
                    convert(value, int)

    def test_sized_integers_check_range(self) -> None:
        self.assertEqual(convert(255, Byte), 255)
        self.assertIsInstance(convert(300, Int32), Int32)
        self.assertEqual(convert(2**63 - 1, Int64), 2**63 - 1)
        with self.assertRaises(ConversionError):
            convert(256, Byte)
        with self.assertRaises(ConversionError):
            convert(-1, Byte)
        with self.assertRaises(ConversionError):
            convert(2**31, Int32)
        with self.assertRaises(ConversionError):
            convert(40000, Int16)

    def test_float_and_decimal(self) -> None:
        self.assertEqual(convert(2, float), 2.0)
        self.assertEqual(convert("1.5", float), 1.5)
        self.assertEqual(convert(0.1, Decimal), Decimal("0.1"))
        self.assertEqual(convert("2.50", Decimal), Decimal("2.50"))
        self.assertEqual(convert(2**53, float), float(2**53))
        with self.assertRaises(ConversionError):
            convert(10**400, float)
        with self.assertRaises(ConversionError):
            convert(2**53 + 1, float)
        with self.assertRaises(ConversionError):
            convert("abc", Decimal)

    def test_bool(self) -> None:
        self.assertTrue(convert(1, bool))
        self.assertFalse(convert(0, bool))
        self.assertTrue(convert("TRUE", bool))
        self.assertFalse(convert("no", bool))
        with self.assertRaises(ConversionError):
            convert("maybe", bool)
        for value in (float("nan"), float("inf"), Decimal("NaN")):
            with self.subTest(value=value):
                with self.assertRaises(ConversionError):
                    convert(value, bool)

    def test_text_and_bytes(self) -> None:
        self.assertEqual(convert(12, str), "12")
        self.assertEqual(convert(b"caf\xc3\xa9", str), "café")
        self.assertEqual(convert(Color.RED, str), "red")
        self.assertEqual(convert("é", bytes), b"\xc3\xa9")
        self.assertEqual(convert(bytearray(b"ab"), bytes), b"ab")
        with self.assertRaises(ConversionError):
            convert(b"\xff", str)
        with self.assertRaises(ConversionError):
            convert(5, bytes)

    def test_enums(self) -> None:
        self.assertIs(convert("red", Color), Color.RED)
        self.assertIs(convert("GREEN", Color), Color.GREEN)
        self.assertIs(convert(2, Level), Level.HIGH)
        self.assertIs(convert("1", Level), Level.LOW)
        self.assertIs(convert("HIGH", Level), Level.HIGH)
        with self.assertRaises(ConversionError):
            convert("blue", Color)
        with self.assertRaises(ConversionError):
            convert(9, Level)

    def test_optional_unwraps(self) -> None:
        self.assertEqual(convert("3", Optional[int]), 3)
        self.assertIsNone(convert(None, Optional[int]))

    def test_temporal_and_uuid(self) -> None:
        self.assertEqual(convert("2024-05-06T07:08:09", datetime), datetime(2024, 5, 6, 7, 8, 9))
        self.assertEqual(convert("2024-05-06", date), date(2024, 5, 6))
        self.assertEqual(convert(datetime(2024, 5, 6, 7, 8), date), date(2024, 5, 6))
        self.assertEqual(convert("07:08", time), time(7, 8))
        value = uuid.uuid4()
        self.assertEqual(convert(str(value), uuid.UUID), value)
        self.assertEqual(convert(value.bytes, uuid.UUID), value)

    def test_unsupported_target_fails(self) -> None:
        class Custom:
            pass

        with self.assertRaises(ConversionError):
            convert(1, Custom)
        with self.assertRaises(ConversionError):
            convert(1, list[int])

    def test_error_names_source_and_target(self) -> None:
        with self.assertRaises(ConversionError) as ctx:
            convert("abc", int)

        self.assertIs(ctx.exception.source_type, str)
        self.assertIs(ctx.exception.target_type, int)
        self.assertIn("str", str(ctx.exception))
        self.assertIn("int", str(ctx.exception))
        self.assertIsInstance(ctx.exception, TypeError)

    def test_converter_for_binds_target(self) -> None:
        to_int = converter_for(int)
        self.assertEqual(to_int("8"), 8)
        self.assertEqual(to_int(None), 0)


if __name__ == "__main__":
    unittest.main()
