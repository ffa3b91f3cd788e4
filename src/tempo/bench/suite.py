"""Benchmark suite: a named collection of benchmarks run and reported together."""

from __future__ import annotations

from typing import Generic, Sequence

from tempo.bench.compare import AnalysisResult, analyze
from tempo.bench.errors import ConfigurationError
from tempo.bench.export import csv_headers, summary_as_csv
from tempo.bench.results import SeriesSummary, Summary
from tempo.bench.runner import C, W, Benchmark, ProgressCallback, Workload
from tempo.logging import get_logger

log = get_logger("suite")


class Suite(Generic[C, W]):
    """Register benchmarks, run them, and report or analyze the results.

    Usage::

        suite = Suite("sorting")
        suite.add("sort n", bench_sort, config, [100, 200, 300], repeat=5, ramp_up=1)
        suite.run()
        report = suite.summary_as_json()
        result = suite.analyze(previous_report, threshold=5.0)
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._benchmarks: list[Benchmark[C, W]] = []
        self._summaries: dict[str, SeriesSummary] = {}

    @property
    def names(self) -> list[str]:
        """Registered benchmark names, in registration order."""
        return [b.name for b in self._benchmarks]

    def add(
        self,
        name: str,
        func: Workload[C, W],
        config: C,
        points: Sequence[W],
        repeat: int,
        ramp_up: int = 0,
    ) -> None:
        """Register a benchmark.

        Args:
            name: Benchmark name; the key of its series in the summary.
            func: Workload called as ``func(timer, config, point)``.
            config: Configuration passed to every call; ``str(config)``
                is recorded as the series' configuration description.
            points: Workload points, measured in this order.
            repeat: Measured iterations per point (must be > 0).
            ramp_up: Unmeasured iterations per point before measuring.

        Raises:
            ConfigurationError: On a duplicate name, ``repeat <= 0`` or a
                negative ramp-up. Existing registrations are unaffected.
        """
        if name in self.names:
            raise ConfigurationError(f"Benchmark with identical name exists: {name}")
        benchmark = Benchmark(name, func, config, points, repeat=repeat, ramp_up=ramp_up)
        self._benchmarks.append(benchmark)
        log.debug("Registered %r", benchmark)

    def run(self, progress_callback: ProgressCallback | None = None) -> None:
        """Run all benchmarks in registration order.

        Each benchmark's series replaces the one stored by a previous run.
        A workload exception stops the suite and propagates unchanged.
        """
        for benchmark in self._benchmarks:
            log.info(
                "Running '%s': %d points x %d (+%d ramp-up)",
                benchmark.name,
                len(benchmark.points),
                benchmark.repeat,
                benchmark.ramp_up,
            )
            try:
                series = benchmark.run(progress_callback)
            except Exception:
                log.error("Benchmark '%s' failed", benchmark.name)
                raise
            self._summaries[benchmark.name] = series
            log.info("Finished '%s'", benchmark.name)

    def summary(self) -> Summary:
        """Snapshot of the latest results of every benchmark that has run."""
        summary = Summary(name=self.name)
        for name, series in self._summaries.items():
            summary.add(name, series)
        return summary

    def summary_as_json(self) -> str:
        return self.summary().to_json()

    def csv_headers(self, separator: str = ",") -> str:
        """Header row matching :meth:`summary_as_csv` data rows."""
        return csv_headers(separator=separator)

    def summary_as_csv(
        self,
        with_headers: bool = True,
        with_config: bool = False,
        separator: str = ",",
    ) -> dict[str, list[str]]:
        """CSV lines per benchmark name."""
        return summary_as_csv(
            self.summary(),
            with_headers=with_headers,
            with_config=with_config,
            separator=separator,
        )

    def configs(self) -> dict[str, str]:
        """Configuration description per benchmark name."""
        return {name: series.config for name, series in self._summaries.items()}

    def analyze(self, previous: Summary | str | None, threshold: float) -> AnalysisResult:
        """Compare the latest results against a baseline report."""
        return analyze(self.summary(), previous, threshold)

    def __repr__(self) -> str:
        return f"Suite({self.name!r}, benchmarks={self.names!r})"
