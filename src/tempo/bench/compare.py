"""Benchmark comparison analysis.

Compares the current run's Summary against a baseline Summary, workload
point by workload point, using the median duration. Each point is
classified against a symmetric percentage threshold:

* ``Equal``: medians identical, or ``|change| <= |threshold|``
* ``Less``: current is faster beyond the threshold (improvement)
* ``Greater``: current is slower beyond the threshold (regression)

where ``change = current / (previous / 100) - 100``.

A series with at least one point that is not ``Equal`` is divergent as a
whole. Series that only exist in the current run are reported as new and
are never classified.
"""

from __future__ import annotations

import enum
import json
import math
from dataclasses import dataclass, field
from typing import Any

from tempo.bench.errors import ComparisonError
from tempo.bench.results import RunSummary, Summary
from tempo.logging import get_logger

log = get_logger("compare")


# ---------------------------------------------------------------------------
# Per-point comparison
# ---------------------------------------------------------------------------


class Ordering(str, enum.Enum):
    """How the current median relates to the previous one."""

    LESS = "Less"
    EQUAL = "Equal"
    GREATER = "Greater"


@dataclass(frozen=True)
class BenchmarkComparison:
    """Outcome of comparing one workload point across two runs."""

    kind: Ordering
    point: str
    previous: int  # median nanoseconds
    current: int
    change: float  # signed percent

    @property
    def improved(self) -> bool:
        return self.kind is Ordering.LESS

    @property
    def regressed(self) -> bool:
        return self.kind is Ordering.GREATER

    def to_dict(self) -> dict[str, Any]:
        """Serialize as ``{"<Kind>": {point, previous, current, change}}``."""
        return {
            self.kind.value: {
                "point": self.point,
                "previous": self.previous,
                "current": self.current,
                "change": self.change,
            }
        }


def percent_change(current: int, previous: int) -> float:
    """Signed change of *current* relative to *previous*, in percent."""
    if previous == 0:
        if current == 0:
            return 0.0
        return math.inf
    return (current / (previous / 100.0)) - 100.0


def compare_median(
    point: str,
    current: int,
    previous: int,
    threshold: float,
) -> BenchmarkComparison:
    """Classify one point's median change against *threshold* percent."""
    change = percent_change(current, previous)
    if current == previous or abs(change) <= abs(threshold):
        kind = Ordering.EQUAL
    elif change < 0:
        kind = Ordering.LESS
    else:
        kind = Ordering.GREATER
    return BenchmarkComparison(
        kind=kind,
        point=point,
        previous=previous,
        current=current,
        change=change,
    )


def compare_series(
    current_runs: list[tuple[str, RunSummary]],
    previous_runs: list[tuple[str, RunSummary]],
    threshold: float,
) -> dict[str, BenchmarkComparison]:
    """Compare two index-aligned series point by point.

    Returns:
        Point identity → comparison, in the series' point order.

    Raises:
        ComparisonError: If either series is empty or the ordered point
            identities differ.
    """
    current_points = [point for point, _ in current_runs]
    previous_points = [point for point, _ in previous_runs]

    if not current_points or not previous_points:
        raise ComparisonError("Can compare only non empty series")
    if current_points != previous_points:
        raise ComparisonError(
            "Can compare series with identical points only: "
            f"{current_points} <=> {previous_points}"
        )

    comparisons: dict[str, BenchmarkComparison] = {}
    for (point, current), (_, previous) in zip(current_runs, previous_runs):
        comparisons[point] = compare_median(
            point,
            current.median_nanos,
            previous.median_nanos,
            threshold,
        )
    return comparisons


# ---------------------------------------------------------------------------
# Suite-level result
# ---------------------------------------------------------------------------


SeriesComparisons = dict[str, dict[str, BenchmarkComparison]]


@dataclass
class AnalysisResult:
    """Result of comparing a suite run against its baseline."""

    name: str
    new_series: set[str] = field(default_factory=set)
    equal_series: SeriesComparisons = field(default_factory=dict)
    divergent_series: SeriesComparisons = field(default_factory=dict)

    def add_new(self, name: str) -> None:
        self.new_series.add(name)

    def add(self, name: str, comparisons: dict[str, BenchmarkComparison]) -> None:
        """File a compared series as equal or divergent.

        One non-``Equal`` point is enough to make the series divergent.
        """
        if all(c.kind is Ordering.EQUAL for c in comparisons.values()):
            self.equal_series[name] = comparisons
        else:
            self.divergent_series[name] = comparisons

    @property
    def results(self) -> SeriesComparisons:
        """Alias of :attr:`divergent_series`."""
        return self.divergent_series

    @property
    def has_divergence(self) -> bool:
        return bool(self.divergent_series)

    @property
    def regressions(self) -> list[tuple[str, BenchmarkComparison]]:
        """(series, comparison) pairs for every slower point."""
        return [
            (name, c)
            for name, comparisons in self.divergent_series.items()
            for c in comparisons.values()
            if c.regressed
        ]

    @property
    def improvements(self) -> list[tuple[str, BenchmarkComparison]]:
        """(series, comparison) pairs for every faster point."""
        return [
            (name, c)
            for name, comparisons in self.divergent_series.items()
            for c in comparisons.values()
            if c.improved
        ]

    def to_dict(self) -> dict[str, Any]:
        def _series(series: SeriesComparisons) -> dict[str, Any]:
            return {
                name: {point: c.to_dict() for point, c in comparisons.items()}
                for name, comparisons in series.items()
            }

        return {
            "name": self.name,
            "new_series": sorted(self.new_series),
            "equal_series": _series(self.equal_series),
            "divergent_series": _series(self.divergent_series),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def __str__(self) -> str:
        return self.to_json()


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


def analyze(
    current: Summary,
    previous: Summary | str | None,
    threshold: float,
) -> AnalysisResult:
    """Compare *current* against a baseline.

    Args:
        current: Summary of the run under test.
        previous: Baseline Summary, its JSON report text, or None when
            there is no baseline (every series is then new).
        threshold: Allowed change in percent; the sign is ignored.

    Raises:
        ComparisonError: If the suite names differ, or a shared series
            cannot be compared.
        json.JSONDecodeError: If *previous* is malformed JSON.
        ReportFormatError: If *previous* is JSON but not a Summary.
    """
    if previous is None:
        baseline = Summary(name=current.name)
    elif isinstance(previous, str):
        baseline = Summary.from_json(previous)
    else:
        baseline = previous

    if current.name != baseline.name:
        raise ComparisonError(
            f"Comparing differently named benchmarks: {current.name} <=> {baseline.name}"
        )

    result = AnalysisResult(name=current.name)
    for name, current_series in current.series.items():
        previous_series = baseline.series.get(name)
        if previous_series is None:
            log.debug("Series '%s' has no baseline", name)
            result.add_new(name)
            continue
        comparisons = compare_series(current_series.runs, previous_series.runs, threshold)
        result.add(name, comparisons)

    log.info(
        "Analyzed '%s': %d new, %d equal, %d divergent (threshold %.2f%%)",
        result.name,
        len(result.new_series),
        len(result.equal_series),
        len(result.divergent_series),
        abs(threshold),
    )
    return result
