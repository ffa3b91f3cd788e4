"""Tests for tempo.bench.display: terminal formatting."""

from __future__ import annotations

import unittest

from bench_test_helpers import make_summary

from tempo.bench.compare import analyze
from tempo.bench.display import _format_time, format_analysis, format_summary


class TestFormatTime(unittest.TestCase):
    """Tests for adaptive time units."""

    def test_units(self) -> None:
        self.assertEqual(_format_time(0.0005), "500µs")
        self.assertEqual(_format_time(0.25), "250.00ms")
        self.assertEqual(_format_time(1.5), "1.50s")
        self.assertEqual(_format_time(90.0), "1m30s")
        self.assertEqual(_format_time(None), "N/A")


class TestFormatSummary(unittest.TestCase):
    """Tests for format_summary()."""

    def test_contains_series_and_points(self) -> None:
        summary = make_summary({"sort n": {"100": 2_000_000, "200": 4_000_000}})
        text = format_summary(summary)
        self.assertIn("Test", text)
        self.assertIn("sort n", text)
        self.assertIn("config: default", text)
        self.assertIn("Median", text)
        self.assertIn("2.00ms", text)
        self.assertIn("4.00ms", text)

    def test_empty_summary(self) -> None:
        text = format_summary(make_summary({}))
        self.assertIn("Series: 0", text)


class TestFormatAnalysis(unittest.TestCase):
    """Tests for format_analysis()."""

    def test_divergent_and_new(self) -> None:
        previous = make_summary({"slow": {"p": 100_000_000}, "same": {"p": 100}})
        current = make_summary(
            {"slow": {"p": 150_000_000}, "same": {"p": 100}, "fresh": {"p": 1}}
        )
        text = format_analysis(analyze(current, previous, 10.0))
        self.assertIn("slow", text)
        self.assertIn("+50.0%", text)
        self.assertIn("SLOWER", text)
        self.assertIn("Unchanged: same", text)
        self.assertIn("New (no baseline): fresh", text)
        self.assertIn("Divergent series: 1 (1 slower points, 0 faster points)", text)
