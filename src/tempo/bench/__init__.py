"""Benchmarking subsystem for tempo.

Runs workload functions over ordered workload points with ramp-up and
repeated measurement, summarizes the timings, and compares summaries
from different runs to flag regressions and improvements.
"""

from tempo.bench.compare import AnalysisResult, BenchmarkComparison, Ordering, analyze
from tempo.bench.errors import BenchError, ComparisonError, ConfigurationError, ReportFormatError
from tempo.bench.results import RunSummary, SeriesSummary, Summary
from tempo.bench.suite import Suite
from tempo.bench.timer import Timer

__all__ = [
    "AnalysisResult",
    "BenchError",
    "BenchmarkComparison",
    "ComparisonError",
    "ConfigurationError",
    "Ordering",
    "ReportFormatError",
    "RunSummary",
    "SeriesSummary",
    "Suite",
    "Summary",
    "Timer",
    "analyze",
]
