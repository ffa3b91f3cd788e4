"""Benchmark execution engine.

For each workload point, in declaration order:

1. Ramp-up: call the workload ``ramp_up`` times with a fresh, stopped
   timer; results are discarded.
2. Measure: call the workload ``repeat`` times, each with a fresh timer
   started just before the call and stopped just after it returns.
3. Summarize the measured durations into a RunSummary.

Execution is synchronous and fail-fast: the first exception raised by
the workload aborts the whole series and propagates unchanged, so a
failed benchmark never yields a partial SeriesSummary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Sequence, TypeVar

from tempo.bench.errors import ConfigurationError
from tempo.bench.results import SeriesSummary
from tempo.bench.stats import summarize
from tempo.bench.timer import Timer
from tempo.logging import get_logger

log = get_logger("runner")

C = TypeVar("C")
W = TypeVar("W")

# A workload receives the timer (to pause around setup/cleanup), the
# benchmark's configuration and one workload point.  Its return value
# is ignored; failures are signalled by raising.
Workload = Callable[[Timer, C, W], Any]


# ---------------------------------------------------------------------------
# Progress callback
# ---------------------------------------------------------------------------


@dataclass
class BenchProgress:
    """Progress info passed to the callback."""

    phase: str  # "ramp_up", "measure", "done"
    benchmark: str
    point: str
    iteration: int  # 1-based
    total_iterations: int
    points_done: int
    points_total: int
    elapsed_ns: int = 0


ProgressCallback = Callable[[BenchProgress], None]


def log_progress(progress: BenchProgress) -> None:
    """Default progress callback: log each iteration at DEBUG."""
    if progress.phase == "done":
        log.debug(
            "[%s] point %s done (%d/%d)",
            progress.benchmark,
            progress.point,
            progress.points_done,
            progress.points_total,
        )
        return
    log.debug(
        "[%s] point %s %s %d/%d: %d ns",
        progress.benchmark,
        progress.point,
        progress.phase,
        progress.iteration,
        progress.total_iterations,
        progress.elapsed_ns,
    )


# ---------------------------------------------------------------------------
# Benchmark
# ---------------------------------------------------------------------------


class Benchmark(Generic[C, W]):
    """One named workload measured over an ordered list of workload points.

    Usage::

        bench = Benchmark("sort", bench_sort, config, [100, 1000], repeat=5, ramp_up=1)
        series = bench.run()
    """

    def __init__(
        self,
        name: str,
        func: Workload[C, W],
        config: C,
        points: Sequence[W],
        repeat: int,
        ramp_up: int = 0,
    ) -> None:
        if repeat <= 0:
            raise ConfigurationError(f"Cannot benchmark {repeat} runs of '{name}'")
        if ramp_up < 0:
            raise ConfigurationError(f"Ramp-up for '{name}' cannot be negative (got {ramp_up})")
        self.name = name
        self.func = func
        self.config = config
        self.points = list(points)
        self.repeat = repeat
        self.ramp_up = ramp_up

    def __repr__(self) -> str:
        return (
            f"Benchmark({self.name!r}, points={len(self.points)}, "
            f"repeat={self.repeat}, ramp_up={self.ramp_up})"
        )

    def run(self, progress_callback: ProgressCallback | None = None) -> SeriesSummary:
        """Measure every workload point and return the series summary.

        Raises:
            Exception: Whatever the workload raised, unchanged.
        """
        progress = progress_callback or log_progress
        series = SeriesSummary(name=self.name, config=str(self.config))
        total = len(self.points)

        for index, point in enumerate(self.points):
            identity = str(point)

            for i in range(self.ramp_up):
                timer = Timer()
                self.func(timer, self.config, point)
                progress(
                    BenchProgress(
                        phase="ramp_up",
                        benchmark=self.name,
                        point=identity,
                        iteration=i + 1,
                        total_iterations=self.ramp_up,
                        points_done=index,
                        points_total=total,
                        elapsed_ns=timer.accumulated(),
                    )
                )

            durations: list[int] = []
            for i in range(self.repeat):
                timer = Timer()
                timer.start()
                self.func(timer, self.config, point)
                timer.stop()
                durations.append(timer.accumulated())
                progress(
                    BenchProgress(
                        phase="measure",
                        benchmark=self.name,
                        point=identity,
                        iteration=i + 1,
                        total_iterations=self.repeat,
                        points_done=index,
                        points_total=total,
                        elapsed_ns=durations[-1],
                    )
                )

            series.add(
                identity,
                summarize(identity, durations, ramp_up=self.ramp_up, repeat=self.repeat),
            )
            progress(
                BenchProgress(
                    phase="done",
                    benchmark=self.name,
                    point=identity,
                    iteration=self.repeat,
                    total_iterations=self.repeat,
                    points_done=index + 1,
                    points_total=total,
                )
            )

        return series
