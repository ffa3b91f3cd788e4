"""Tests for tempo.bench.suite: registering, running and reporting benchmarks."""

from __future__ import annotations

import json
import unittest

from bench_test_helpers import (
    RecordingWorkload,
    config_sleep_workload,
    noop_workload,
    sleep_workload,
)

from tempo.bench.compare import Ordering
from tempo.bench.errors import ComparisonError, ConfigurationError
from tempo.bench.suite import Suite


class TestSuiteRegistration(unittest.TestCase):
    """Tests for Suite.add()."""

    def test_duplicate_name_rejected(self) -> None:
        suite = Suite("Test")
        suite.add("exists", noop_workload, None, [0], repeat=1, ramp_up=1)
        with self.assertRaises(ConfigurationError):
            suite.add("exists", noop_workload, None, [0], repeat=1, ramp_up=1)
        self.assertEqual(suite.names, ["exists"])

    def test_zero_repeat_rejected(self) -> None:
        suite = Suite("Test")
        suite.add("first", noop_workload, None, [0], repeat=1)
        with self.assertRaises(ConfigurationError):
            suite.add("run zero times", noop_workload, None, [0], repeat=0)
        self.assertEqual(suite.names, ["first"])

    def test_rejected_name_can_be_registered_later(self) -> None:
        suite = Suite("Test")
        with self.assertRaises(ConfigurationError):
            suite.add("b", noop_workload, None, [0], repeat=0)
        suite.add("b", noop_workload, None, [0], repeat=1)
        self.assertEqual(suite.names, ["b"])


class TestSuiteRun(unittest.TestCase):
    """Tests for Suite.run() and the summary views."""

    def _suite(self) -> Suite:
        suite = Suite("Test")
        suite.add("sort n", noop_workload, "slowdown: 0", [100, 200, 300], repeat=2, ramp_up=1)
        suite.add("sleep", sleep_workload, "slowdown: 1", [1, 2], repeat=2)
        return suite

    def test_summary_before_run_is_empty(self) -> None:
        summary = Suite("Test").summary()
        self.assertEqual(summary.name, "Test")
        self.assertEqual(summary.series, {})

    def test_run_produces_series_per_benchmark(self) -> None:
        suite = self._suite()
        suite.run()
        summary = suite.summary()
        self.assertEqual(list(summary.series), ["sort n", "sleep"])
        self.assertEqual(summary.series["sort n"].points, ["100", "200", "300"])
        self.assertEqual(summary.series["sleep"].points, ["1", "2"])

    def test_rerun_overwrites(self) -> None:
        workload = RecordingWorkload()
        suite = Suite("Test")
        suite.add("b", workload, None, [1], repeat=1)
        suite.run()
        suite.run()
        self.assertEqual(len(suite.summary().series), 1)
        self.assertEqual(len(workload.calls), 2)

    def test_failure_stops_suite(self) -> None:
        suite = Suite("Test")
        suite.add("ok", noop_workload, None, [1], repeat=1)
        suite.add("bad", RecordingWorkload(fail_on_call=1), None, [1], repeat=1)
        suite.add("never", noop_workload, None, [1], repeat=1)
        with self.assertRaises(RuntimeError):
            suite.run()
        self.assertEqual(list(suite.summary().series), ["ok"])

    def test_summary_as_json(self) -> None:
        suite = self._suite()
        suite.run()
        data = json.loads(suite.summary_as_json())
        self.assertEqual(data["name"], "Test")
        self.assertEqual(data["series"]["sleep"]["config"], "slowdown: 1")

    def test_configs(self) -> None:
        suite = self._suite()
        suite.run()
        self.assertEqual(suite.configs(), {"sort n": "slowdown: 0", "sleep": "slowdown: 1"})

    def test_summary_as_csv(self) -> None:
        suite = self._suite()
        suite.run()
        csv = suite.summary_as_csv(with_headers=True, with_config=True)
        self.assertEqual(
            csv["sort n"][0],
            "point,ramp_up,repeat,min_sec,max_sec,median_sec,std_dev_sec,,"
            "configuration: slowdown: 0",
        )
        self.assertEqual(len(csv["sort n"]), 4)
        self.assertTrue(csv["sort n"][1].startswith("100,1,2,"))
        self.assertEqual(suite.csv_headers(), csv["sleep"][0].split(",,")[0])


class TestSuiteAnalyze(unittest.TestCase):
    """Tests for Suite.analyze()."""

    def test_analyze_without_baseline_marks_all_new(self) -> None:
        suite = Suite("Test")
        suite.add("sort n", noop_workload, None, [0, 100, 200], repeat=2, ramp_up=1)
        suite.run()
        result = suite.analyze(None, 0.0)
        self.assertEqual(result.new_series, {"sort n"})
        self.assertEqual(result.results, {})
        self.assertEqual(result.equal_series, {})

    def test_analyze_against_own_report_is_equal(self) -> None:
        suite = Suite("Test")
        suite.add("sort n", sleep_workload, None, [0, 1, 2], repeat=2, ramp_up=1)
        suite.add("sort n and rest", noop_workload, None, [0, 1, 2], repeat=2, ramp_up=1)
        suite.run()
        result = suite.analyze(suite.summary_as_json(), 0.0)
        self.assertEqual(result.new_series, set())
        self.assertEqual(set(result.equal_series), {"sort n", "sort n and rest"})
        self.assertEqual(result.divergent_series, {})
        for comparisons in result.equal_series.values():
            self.assertTrue(all(c.kind is Ordering.EQUAL for c in comparisons.values()))

    def test_analyze_different_suite_name_fails(self) -> None:
        first = Suite("One")
        first.add("b", noop_workload, None, [1], repeat=1)
        first.run()
        second = Suite("Two")
        second.add("b", noop_workload, None, [1], repeat=1)
        second.run()
        with self.assertRaises(ComparisonError):
            second.analyze(first.summary_as_json(), 5.0)

    def test_analyze_changed_points_fails(self) -> None:
        first = Suite("Test")
        first.add("b", noop_workload, None, [1, 2], repeat=1)
        first.run()
        second = Suite("Test")
        second.add("b", noop_workload, None, [1, 3], repeat=1)
        second.run()
        with self.assertRaises(ComparisonError):
            second.analyze(first.summary(), 5.0)

    def test_analyze_malformed_baseline(self) -> None:
        suite = Suite("Test")
        suite.add("b", noop_workload, None, [1], repeat=1)
        suite.run()
        with self.assertRaises(json.JSONDecodeError):
            suite.analyze("{", 5.0)

    def test_regression_and_improvement_detected(self) -> None:
        before = Suite("Test")
        before.add("slower", config_sleep_workload, 1, ["p"], repeat=3)
        before.add("faster", config_sleep_workload, 40, ["p"], repeat=3)
        before.run()
        after = Suite("Test")
        after.add("slower", config_sleep_workload, 40, ["p"], repeat=3)
        after.add("faster", config_sleep_workload, 1, ["p"], repeat=3)
        after.add("brand new", noop_workload, None, ["p"], repeat=1)
        after.run()

        result = after.analyze(before.summary_as_json(), 10.0)
        self.assertEqual(result.new_series, {"brand new"})
        self.assertEqual(set(result.divergent_series), {"slower", "faster"})
        self.assertTrue(result.divergent_series["slower"]["p"].regressed)
        self.assertTrue(result.divergent_series["faster"]["p"].improved)
