"""Tests for tempo.bench.export: CSV and Markdown export."""

from __future__ import annotations

import csv
import unittest

from bench_test_helpers import make_run_summary, make_series, make_summary, noop_workload

from tempo.bench.compare import analyze
from tempo.bench.export import (
    analysis_as_markdown,
    csv_headers,
    series_as_csv,
    summary_as_csv,
    summary_as_markdown,
)
from tempo.bench.results import SeriesSummary
from tempo.bench.runner import Benchmark


class TestCsvExport(unittest.TestCase):
    """Tests for CSV export."""

    def _series(self) -> SeriesSummary:
        series = SeriesSummary(name="s", config="slowdown: 10")
        series.add(
            "100",
            make_run_summary(
                "100",
                2_000_000_000,
                min_nanos=1_000_000_000,
                max_nanos=3_000_000_000,
                std_dev=500_000_000.0,
                repeat=3,
                ramp_up=1,
            ),
        )
        series.add("200", make_run_summary("200", 500_000_000, std_dev=None, repeat=1))
        return series

    def test_headers(self) -> None:
        self.assertEqual(
            csv_headers(),
            "point,ramp_up,repeat,min_sec,max_sec,median_sec,std_dev_sec",
        )
        self.assertTrue(csv_headers(separator=";").startswith("point;ramp_up;"))

    def test_rows(self) -> None:
        lines = series_as_csv(self._series())
        self.assertEqual(len(lines), 3)
        self.assertEqual(lines[1], "100,1,3,1.0,3.0,2.0,0.5")
        self.assertEqual(lines[2], "200,1,1,0.5,0.5,0.5,0.0")

    def test_without_headers(self) -> None:
        lines = series_as_csv(self._series(), with_headers=False)
        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[0].startswith("100,"))

    def test_with_config_and_separator(self) -> None:
        lines = series_as_csv(self._series(), with_config=True, separator="\t")
        self.assertEqual(
            lines[0],
            "point\tramp_up\trepeat\tmin_sec\tmax_sec\tmedian_sec\tstd_dev_sec"
            "\t\tconfiguration: slowdown: 10",
        )
        self.assertEqual(lines[2], "200\t1\t1\t0.5\t0.5\t0.5\t0.0")

    def test_point_containing_separator_is_quoted(self) -> None:
        series = Benchmark("b", noop_workload, None, [(1, 2)], repeat=2).run()
        series.config = "a=1, b=2"
        lines = series_as_csv(series, with_config=True)
        header, row = list(csv.reader(lines))
        self.assertEqual(len(header), 9)
        self.assertEqual(header[-1], "configuration: a=1, b=2")
        self.assertEqual(len(row), 7)
        self.assertEqual(row[0], "(1, 2)")
        self.assertTrue(lines[1].startswith('"(1, 2)",'))

    def test_multi_character_separator_rejected(self) -> None:
        with self.assertRaises(ValueError):
            series_as_csv(self._series(), separator="::")

    def test_summary_as_csv_keyed_by_series(self) -> None:
        summary = make_summary({"a": {"1": 1}, "b": {"1": 1, "2": 2}})
        tables = summary_as_csv(summary, with_headers=False)
        self.assertEqual(list(tables), ["a", "b"])
        self.assertEqual(len(tables["b"]), 2)


class TestMarkdownExport(unittest.TestCase):
    """Tests for Markdown export."""

    def test_summary_markdown(self) -> None:
        summary = make_summary({"sort n": {"100": 1_500_000_000}})
        text = summary_as_markdown(summary)
        self.assertIn("# Test", text)
        self.assertIn("## sort n", text)
        self.assertIn("Configuration: `default`", text)
        self.assertIn("| 100 | 5 | 00:00:01.500 | 00:00:01.500 | 00:00:01.500 |", text)
        self.assertIn("2026-10-18", text)

    def test_summary_markdown_absent_std_dev(self) -> None:
        summary = make_summary({})
        summary.add("s", make_series("s", {}))
        summary.series["s"].add("1", make_run_summary("1", 10, std_dev=None))
        self.assertIn("| - |", summary_as_markdown(summary))

    def test_analysis_markdown(self) -> None:
        previous = make_summary({"slow": {"p": 100}, "same": {"p": 100}})
        current = make_summary({"slow": {"p": 150}, "same": {"p": 100}, "new": {"p": 1}})
        text = analysis_as_markdown(analyze(current, previous, 10.0))
        self.assertIn("| slow | p | 100 | 150 | +50.0% | Greater |", text)
        self.assertIn("- Equal series: 1", text)
        self.assertIn("- Regressed points: 1", text)
        self.assertIn("- New series: new", text)

    def test_analysis_markdown_no_divergence(self) -> None:
        summary = make_summary({"a": {"p": 100}})
        text = analysis_as_markdown(analyze(summary, summary, 0.0))
        self.assertIn("None.", text)
