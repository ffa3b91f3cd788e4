"""Statistical reduction of raw iteration timings.

Turns the nanosecond durations measured for one workload point into a
:class:`~tempo.bench.results.RunSummary`: minimum, maximum, median and
sample standard deviation. No outlier rejection or significance testing
is applied; every measured iteration counts.
"""

from __future__ import annotations

import statistics
from dataclasses import dataclass
from typing import Sequence

from tempo.bench.results import RunSummary


@dataclass
class DurationStats:
    """Summary statistics for a sample of nanosecond durations."""

    n: int
    min: int
    max: int
    median: int
    std_dev: float | None  # None when n < 2


def describe(durations: Sequence[int]) -> DurationStats:
    """Compute descriptive statistics for nanosecond durations.

    The median of an even-sized sample is the mean of the two middle
    values, truncated to whole nanoseconds. The standard deviation is
    the sample (n - 1) deviation and is ``None`` for a single value.

    Raises:
        ValueError: If *durations* is empty.
    """
    if not durations:
        raise ValueError("Cannot summarize an empty list of durations")

    sorted_d = sorted(int(d) for d in durations)
    n = len(sorted_d)
    std_dev = statistics.stdev(sorted_d) if n >= 2 else None

    return DurationStats(
        n=n,
        min=sorted_d[0],
        max=sorted_d[-1],
        median=int(statistics.median(sorted_d)),
        std_dev=float(std_dev) if std_dev is not None else None,
    )


def summarize(
    name: str,
    durations: Sequence[int],
    *,
    ramp_up: int,
    repeat: int,
) -> RunSummary:
    """Reduce one workload point's measured durations to a RunSummary.

    Args:
        name: Identity of the workload point.
        durations: Measured nanoseconds, one per repeat.
        ramp_up: Number of unmeasured ramp-up iterations that preceded them.
        repeat: Number of measured iterations requested.
    """
    stats = describe(durations)
    return RunSummary.from_nanos(
        name,
        ramp_up=ramp_up,
        repeat=repeat,
        min_nanos=stats.min,
        max_nanos=stats.max,
        median_nanos=stats.median,
        std_dev=stats.std_dev,
    )
