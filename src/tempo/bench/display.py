"""Terminal display formatting for benchmark results.

Produces aligned tables for a run Summary and for an AnalysisResult.
"""

from __future__ import annotations

import math

from tempo.bench.compare import AnalysisResult, Ordering
from tempo.bench.results import Summary
from tempo.formatting import format_pct, format_section_header, format_table


def _format_time(seconds: float | None, precision: int = 2) -> str:
    """Format a time value with adaptive units."""
    if seconds is None or math.isnan(seconds):
        return "N/A"
    if seconds < 0.001:
        return f"{seconds * 1_000_000:.0f}µs"
    if seconds < 1:
        return f"{seconds * 1000:.{precision}f}ms"
    if seconds < 60:
        return f"{seconds:.{precision}f}s"
    minutes = int(seconds // 60)
    secs = seconds % 60
    return f"{minutes}m{secs:.0f}s"


_VERDICTS = {
    Ordering.LESS: "faster",
    Ordering.EQUAL: "same",
    Ordering.GREATER: "SLOWER",
}


def format_summary(summary: Summary) -> str:
    """Format a suite Summary: one table per series."""
    lines: list[str] = []

    title = summary.name
    lines.append(title)
    lines.append("─" * len(title))
    lines.append(f"Created: {summary.created_at}")
    lines.append(f"Series: {len(summary.series)}")

    for name, series in summary.series.items():
        lines.append("")
        lines.append(format_section_header(name))
        if series.config:
            lines.append(f"  config: {series.config}")
        rows = [
            [
                point,
                str(rs.repeat),
                _format_time(rs.min_sec),
                _format_time(rs.median_sec),
                _format_time(rs.max_sec),
                _format_time(rs.std_dev_sec),
            ]
            for point, rs in series.runs
        ]
        lines.append(
            format_table(
                ["Point", "Repeat", "Min", "Median", "Max", "±"],
                rows,
                alignments=["l", "r", "r", "r", "r", "r"],
                max_col_width={0: 30},
            )
        )

    return "\n".join(lines)


def format_analysis(result: AnalysisResult) -> str:
    """Format an AnalysisResult: divergent points first, then totals."""
    lines: list[str] = []

    title = f"{result.name}: comparison with baseline"
    lines.append(title)
    lines.append("─" * len(title))

    for name, comparisons in result.divergent_series.items():
        lines.append("")
        lines.append(format_section_header(name))
        rows = [
            [
                c.point,
                _format_time(c.previous / 1e9),
                _format_time(c.current / 1e9),
                format_pct(c.change),
                _VERDICTS[c.kind],
            ]
            for c in comparisons.values()
        ]
        lines.append(
            format_table(
                ["Point", "Previous", "Current", "Change", "Verdict"],
                rows,
                alignments=["l", "r", "r", "r", "l"],
                max_col_width={0: 30},
            )
        )

    lines.append("")
    if result.equal_series:
        lines.append(f"Unchanged: {', '.join(result.equal_series)}")
    if result.new_series:
        lines.append(f"New (no baseline): {', '.join(sorted(result.new_series))}")
    lines.append(
        f"Divergent series: {len(result.divergent_series)} "
        f"({len(result.regressions)} slower points, "
        f"{len(result.improvements)} faster points)"
    )

    return "\n".join(lines)
