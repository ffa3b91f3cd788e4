"""Command-line interface for tempo.

Subcommands:
    tempo run       Run a benchmark profile and save its report
    tempo show      Display a saved report
    tempo compare   Compare a report against a baseline report
    tempo export    Export a report to CSV or Markdown
    tempo du        Print the disk usage of a path
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import NoReturn

import click

from tempo import __version__
from tempo.bench.errors import BenchError
from tempo.logging import setup_logging


def _fail(exc: Exception) -> NoReturn:
    click.echo(f"Error: {exc}", err=True)
    raise SystemExit(1) from exc


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Tempo: measure workloads and catch performance regressions between runs."""


# ---------------------------------------------------------------------------
# tempo run
# ---------------------------------------------------------------------------


@main.command()
@click.argument("profile_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--previous",
    "previous_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Baseline report to compare against.",
)
@click.option(
    "--threshold",
    type=float,
    default=None,
    help="Allowed median change in percent (default: profile value, else 5.0).",
)
@click.option("--repeat", type=int, default=None, help="Override measured iterations.")
@click.option("--ramp-up", "ramp_up", type=int, default=None, help="Override ramp-up iterations.")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to write the JSON report (default: <suite name>.json).",
)
@click.option(
    "--csv-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Also write one CSV file per benchmark into this directory.",
)
@click.option("--strict", is_flag=True, help="Exit with status 1 if any series diverges.")
@click.option("-v", "--verbose", is_flag=True, help="Show per-iteration progress.")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also log at DEBUG level to this file.",
)
def run(  # noqa: PLR0913
    profile_path: Path,
    previous_path: Path | None,
    threshold: float | None,
    repeat: int | None,
    ramp_up: int | None,
    output: Path | None,
    csv_dir: Path | None,
    strict: bool,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Run the benchmarks defined in a YAML profile.

    \b
    Examples:
        tempo run benches/sorting.yaml
        tempo run benches/sorting.yaml --previous sorting.json --threshold 10 --strict
    """
    from tempo.bench.config import build_suite, config_from_profile, load_profile
    from tempo.bench.display import format_analysis, format_summary
    from tempo.bench.results import load_summary, save_summary

    log = setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    try:
        config = config_from_profile(
            load_profile(profile_path),
            base_dir=profile_path.parent,
            cli_overrides={"threshold": threshold, "repeat": repeat, "ramp_up": ramp_up},
        )
        suite = build_suite(config)
        previous = load_summary(previous_path) if previous_path else None
    except (BenchError, ValueError, OSError) as exc:
        _fail(exc)

    if config.description:
        log.info("%s", config.description)

    try:
        suite.run()
    except KeyboardInterrupt:
        click.echo("\nBenchmark interrupted.", err=True)
        raise SystemExit(130)  # noqa: B904
    except Exception as exc:  # noqa: BLE001
        _fail(exc)

    summary = suite.summary()
    click.echo(format_summary(summary))

    report_path = output or Path(f"{summary.name}.json")
    save_summary(report_path, summary)

    if csv_dir is not None:
        csv_dir.mkdir(parents=True, exist_ok=True)
        for name, lines in suite.summary_as_csv(with_headers=True, with_config=True).items():
            csv_path = csv_dir / f"{name.replace('/', '_')}.csv"
            csv_path.write_text("\n".join(lines) + "\n")
            log.info("Wrote %s", csv_path)

    if previous is not None:
        try:
            result = suite.analyze(previous, config.threshold)
        except BenchError as exc:
            _fail(exc)
        click.echo()
        click.echo(format_analysis(result))
        if strict and result.has_divergence:
            raise SystemExit(1)

    click.echo()
    click.echo(f"Report saved to: {report_path}")


# ---------------------------------------------------------------------------
# tempo show
# ---------------------------------------------------------------------------


@main.command("show")
@click.argument("report", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def show(report: Path) -> None:
    """Display a saved JSON report."""
    from tempo.bench.display import format_summary
    from tempo.bench.results import load_summary

    try:
        summary = load_summary(report)
    except (BenchError, ValueError) as exc:
        _fail(exc)
    click.echo(format_summary(summary))


# ---------------------------------------------------------------------------
# tempo compare
# ---------------------------------------------------------------------------


@main.command("compare")
@click.argument("current", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("previous", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--threshold",
    type=float,
    default=5.0,
    show_default=True,
    help="Allowed median change in percent.",
)
@click.option("--json", "as_json", is_flag=True, help="Output the analysis as JSON.")
@click.option("--strict", is_flag=True, help="Exit with status 1 if any series diverges.")
def compare(current: Path, previous: Path, threshold: float, as_json: bool, strict: bool) -> None:
    """Compare the CURRENT report against the PREVIOUS (baseline) report.

    \b
    Examples:
        tempo compare sorting.json baseline/sorting.json
        tempo compare sorting.json baseline/sorting.json --threshold 10 --json
    """
    from tempo.bench.compare import analyze
    from tempo.bench.display import format_analysis
    from tempo.bench.results import load_summary

    try:
        result = analyze(load_summary(current), previous.read_text(), threshold)
    except (BenchError, ValueError) as exc:
        _fail(exc)

    if as_json:
        click.echo(result.to_json())
    else:
        click.echo(format_analysis(result))

    if strict and result.has_divergence:
        raise SystemExit(1)


# ---------------------------------------------------------------------------
# tempo export
# ---------------------------------------------------------------------------


@main.command("export")
@click.argument("report", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["csv", "markdown", "json"]),
    default="csv",
    help="Export format.",
)
@click.option(
    "--separator",
    type=str,
    default=",",
    show_default=True,
    help="CSV separator (a single character).",
)
@click.option("--no-headers", is_flag=True, help="Omit the CSV header row.")
@click.option("--with-config", is_flag=True, help="Annotate the CSV header with the config.")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: stdout).",
)
def export(
    report: Path,
    fmt: str,
    separator: str,
    no_headers: bool,
    with_config: bool,
    output: Path | None,
) -> None:
    """Export a saved report to CSV, Markdown or normalized JSON.

    \b
    Examples:
        tempo export sorting.json --format csv --with-config > sorting.csv
        tempo export sorting.json --format markdown -o report.md
    """
    from tempo.bench.export import summary_as_csv, summary_as_markdown
    from tempo.bench.results import load_summary

    try:
        summary = load_summary(report)
    except (BenchError, ValueError) as exc:
        _fail(exc)

    if fmt == "csv":
        try:
            tables = summary_as_csv(
                summary,
                with_headers=not no_headers,
                with_config=with_config,
                separator=separator,
            )
        except ValueError as exc:
            _fail(exc)
        blocks = []
        for name, lines in tables.items():
            blocks.append("\n".join([f"# {name}", *lines]))
        text = "\n\n".join(blocks)
    elif fmt == "markdown":
        text = summary_as_markdown(summary)
    else:
        text = json.dumps(summary.to_dict(), indent=2)

    if output:
        output.write_text(text + "\n")
        click.echo(f"Exported to {output}")
    else:
        click.echo(text)


# ---------------------------------------------------------------------------
# tempo du
# ---------------------------------------------------------------------------


@main.command("du")
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--bytes", "as_bytes", is_flag=True, help="Print the raw byte count.")
def du(path: Path, as_bytes: bool) -> None:
    """Print the disk usage of PATH (recursively for directories)."""
    from tempo.bench.disk import disk_usage, to_human

    try:
        size = disk_usage(path)
    except OSError as exc:
        _fail(exc)
    click.echo(str(size) if as_bytes else to_human(size))
