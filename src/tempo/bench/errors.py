"""Exceptions raised by the benchmarking subsystem.

Each class also derives from :class:`ValueError` so callers that only
expect the standard "bad input" exception keep working.
"""

from __future__ import annotations


class BenchError(Exception):
    """Base class for tempo benchmarking errors."""


class ConfigurationError(BenchError, ValueError):
    """A benchmark or suite was declared with invalid settings."""


class ComparisonError(BenchError, ValueError):
    """Two summaries cannot be compared with each other."""


class ReportFormatError(BenchError, ValueError):
    """A stored report is valid JSON but does not describe a Summary."""
