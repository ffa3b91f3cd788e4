"""Export benchmark results to CSV and Markdown formats.

CSV format: one row per workload point of a series, with the columns
``point, ramp_up, repeat, min_sec, max_sec, median_sec, std_dev_sec``.
The separator and the header/configuration annotation are optional so
the rows can be pasted into spreadsheets or plotting tools directly.

Markdown format: summary and comparison tables suitable for reports,
README files, and GitHub issues.
"""

from __future__ import annotations

import csv
import io

from tempo.bench.compare import AnalysisResult, BenchmarkComparison
from tempo.bench.results import CSV_HEADERS, SeriesSummary, Summary
from tempo.formatting import format_pct


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------


def _csv_line(fields: list[str], separator: str) -> str:
    """Render one CSV record, quoting fields that contain the separator.

    Raises:
        ValueError: If *separator* is not a single character.
    """
    if len(separator) != 1:
        raise ValueError(f"CSV separator must be a single character, got {separator!r}")
    output = io.StringIO()
    writer = csv.writer(output, delimiter=separator, lineterminator="")
    writer.writerow(fields)
    return output.getvalue()


def csv_headers(*, separator: str = ",") -> str:
    """Header row for :func:`series_as_csv`."""
    return _csv_line(CSV_HEADERS, separator)


def series_as_csv(
    series: SeriesSummary,
    *,
    with_headers: bool = True,
    with_config: bool = False,
    separator: str = ",",
) -> list[str]:
    """Render a series as CSV lines.

    With *with_config*, the header row is followed by an empty column
    and a ``configuration: <config>`` annotation.

    Raises:
        ValueError: If *separator* is not a single character.
    """
    lines: list[str] = []
    if with_headers:
        header = list(CSV_HEADERS)
        if with_config:
            header += ["", f"configuration: {series.config}"]
        lines.append(_csv_line(header, separator))
    for point, run_summary in series.runs:
        lines.append(_csv_line([point, *run_summary.csv_fields()], separator))
    return lines


def summary_as_csv(
    summary: Summary,
    *,
    with_headers: bool = True,
    with_config: bool = False,
    separator: str = ",",
) -> dict[str, list[str]]:
    """CSV lines for every series of *summary*, keyed by series name."""
    return {
        name: series_as_csv(
            series,
            with_headers=with_headers,
            with_config=with_config,
            separator=separator,
        )
        for name, series in summary.series.items()
    }


# ---------------------------------------------------------------------------
# Markdown export
# ---------------------------------------------------------------------------


def summary_as_markdown(summary: Summary) -> str:
    """Render a Summary as a Markdown report, one table per series."""
    lines: list[str] = [f"# {summary.name}", ""]

    for name, series in summary.series.items():
        lines.append(f"## {name}")
        lines.append("")
        if series.config:
            lines.append(f"Configuration: `{series.config}`")
            lines.append("")
        lines.append("| Point | Repeat | Min | Median | Max | Std dev |")
        lines.append("|---|---:|---:|---:|---:|---:|")
        for point, rs in series.runs:
            std_dev = rs.std_dev_str if rs.std_dev is not None else "-"
            lines.append(
                f"| {point} | {rs.repeat} | {rs.min_str} | {rs.median_str} | "
                f"{rs.max_str} | {std_dev} |"
            )
        lines.append("")

    lines.append(f"*Generated by tempo on {summary.created_at}*")
    return "\n".join(lines)


def _comparison_row(series_name: str, c: BenchmarkComparison) -> str:
    return (
        f"| {series_name} | {c.point} | {c.previous} | {c.current} | "
        f"{format_pct(c.change)} | {c.kind.value} |"
    )


def analysis_as_markdown(result: AnalysisResult) -> str:
    """Render an AnalysisResult as a Markdown report."""
    lines: list[str] = [f"# {result.name}: comparison", ""]

    lines.append("## Divergent series")
    lines.append("")
    if result.divergent_series:
        lines.append("| Series | Point | Previous (ns) | Current (ns) | Change | Verdict |")
        lines.append("|---|---|---:|---:|---:|---|")
        for name, comparisons in result.divergent_series.items():
            for c in comparisons.values():
                lines.append(_comparison_row(name, c))
    else:
        lines.append("None.")
    lines.append("")

    lines.append("## Summary")
    lines.append("")
    lines.append(f"- Equal series: {len(result.equal_series)}")
    lines.append(f"- Divergent series: {len(result.divergent_series)}")
    lines.append(f"- Regressed points: {len(result.regressions)}")
    lines.append(f"- Improved points: {len(result.improvements)}")
    if result.new_series:
        lines.append(f"- New series: {', '.join(sorted(result.new_series))}")
    return "\n".join(lines)
