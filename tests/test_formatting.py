"""Tests for tempo.formatting."""

from __future__ import annotations

import math
import unittest

from tempo.formatting import format_pct, format_section_header, format_table, truncate


class TestFormatTable(unittest.TestCase):
    """Tests for format_table()."""

    def test_alignment(self) -> None:
        text = format_table(["Name", "N"], [["a", "1"], ["bbb", "22"]], alignments=["l", "r"])
        lines = text.splitlines()
        self.assertEqual(lines[0], "  Name   N")
        self.assertEqual(lines[1], "  a      1")
        self.assertEqual(lines[2], "  bbb   22")

    def test_truncation(self) -> None:
        text = format_table(["Name"], [["abcdefghij"]], max_col_width={0: 6}, indent=0)
        self.assertIn("abc...", text)

    def test_no_headers(self) -> None:
        self.assertEqual(format_table([], []), "")


class TestHelpers(unittest.TestCase):
    """Tests for small formatting helpers."""

    def test_format_pct(self) -> None:
        self.assertEqual(format_pct(4.0), "+4.0%")
        self.assertEqual(format_pct(-40.0), "-40.0%")
        self.assertEqual(format_pct(math.inf), "+inf%")
        self.assertEqual(format_pct(math.nan), "N/A")

    def test_truncate(self) -> None:
        self.assertEqual(truncate("hello", 10), "hello")
        self.assertEqual(truncate("hello world", 8), "hello...")

    def test_section_header(self) -> None:
        header = format_section_header("Title", width=20)
        self.assertTrue(header.startswith("─── Title "))
        self.assertEqual(len(header), 20)
