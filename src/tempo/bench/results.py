"""Benchmark result data structures and serialization.

Hierarchy::

    Summary (one suite run)
      → series: dict[str, SeriesSummary]   (benchmark name → series)
        → runs: list[(point, RunSummary)]  (declaration order)

A Summary serializes to the JSON report that later runs load back as
their baseline, so field names and nesting here are the stored format::

    {"name": ..., "created_at": ...,
     "series": {"<benchmark>": {"name": ..., "config": ...,
                                "runs": [["<point>", {RunSummary}], ...]}}}
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any

from tempo.bench.errors import ConfigurationError, ReportFormatError
from tempo.bench.timer import format_clock
from tempo.logging import get_logger

log = get_logger("results")


def _format_std_dev(std_dev: float | None) -> str:
    if std_dev is None or not math.isfinite(std_dev):
        return "null"
    return format_clock(int(std_dev))


def _utc_now() -> str:
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat(sep=" ")


def _plain_decimal(value: float) -> str:
    """Shortest round-tripping text for *value*, never in exponent form.

    ``5e-07`` becomes ``0.0000005``; ``1.0`` stays ``1.0``.
    """
    text = repr(float(value))
    if "e" not in text and "E" not in text:
        return text
    return format(Decimal(text), "f")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_optional_number(value: Any) -> bool:
    return value is None or _is_number(value)


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


_FIELD_CHECKS = {
    "name": _is_str,
    "ramp_up": _is_int,
    "repeat": _is_int,
    "min_nanos": _is_int,
    "min_sec": _is_number,
    "min_str": _is_str,
    "max_nanos": _is_int,
    "max_sec": _is_number,
    "max_str": _is_str,
    "median_nanos": _is_int,
    "median_sec": _is_number,
    "median_str": _is_str,
    "std_dev": _is_optional_number,
    "std_dev_sec": _is_optional_number,
    "std_dev_str": _is_str,
}
_OPTIONAL_FIELDS = {"std_dev", "std_dev_sec", "std_dev_str"}


# ---------------------------------------------------------------------------
# Point-level result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RunSummary:
    """Statistical result of one workload point.

    Durations are kept in three forms: integer nanoseconds, float seconds
    and an ``HH:MM:SS.mmm`` clock string. The clock string is derived from
    the nanoseconds, never from the seconds.
    """

    name: str
    ramp_up: int
    repeat: int
    min_nanos: int
    min_sec: float
    min_str: str
    max_nanos: int
    max_sec: float
    max_str: str
    median_nanos: int
    median_sec: float
    median_str: str
    std_dev: float | None = None
    std_dev_sec: float | None = None
    std_dev_str: str = "null"

    @classmethod
    def from_nanos(
        cls,
        name: str,
        *,
        ramp_up: int,
        repeat: int,
        min_nanos: int,
        max_nanos: int,
        median_nanos: int,
        std_dev: float | None,
    ) -> RunSummary:
        """Build a RunSummary, deriving the seconds and clock forms."""
        return cls(
            name=name,
            ramp_up=ramp_up,
            repeat=repeat,
            min_nanos=min_nanos,
            min_sec=min_nanos / 1e9,
            min_str=format_clock(min_nanos),
            max_nanos=max_nanos,
            max_sec=max_nanos / 1e9,
            max_str=format_clock(max_nanos),
            median_nanos=median_nanos,
            median_sec=median_nanos / 1e9,
            median_str=format_clock(median_nanos),
            std_dev=std_dev,
            std_dev_sec=std_dev / 1e9 if std_dev is not None else None,
            std_dev_str=_format_std_dev(std_dev),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "name": self.name,
            "ramp_up": self.ramp_up,
            "repeat": self.repeat,
            "min_nanos": self.min_nanos,
            "min_sec": self.min_sec,
            "min_str": self.min_str,
            "max_nanos": self.max_nanos,
            "max_sec": self.max_sec,
            "max_str": self.max_str,
            "median_nanos": self.median_nanos,
            "median_sec": self.median_sec,
            "median_str": self.median_str,
            "std_dev": self.std_dev,
            "std_dev_sec": self.std_dev_sec,
            "std_dev_str": self.std_dev_str,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunSummary:
        """Deserialize from a dict, ignoring unknown fields.

        Raises:
            ReportFormatError: If a field is missing or has the wrong type.
        """
        if not isinstance(data, dict):
            raise ReportFormatError(f"Run summary must be an object, got {type(data).__name__}")
        known = {f for f in cls.__dataclass_fields__}
        filtered = {k: v for k, v in data.items() if k in known}
        missing = sorted(known - filtered.keys() - _OPTIONAL_FIELDS)
        if missing:
            raise ReportFormatError(f"Run summary is missing fields: {', '.join(missing)}")
        for key, value in filtered.items():
            if not _FIELD_CHECKS[key](value):
                raise ReportFormatError(
                    f"Run summary field '{key}' has invalid value {value!r}"
                )
        return cls(**filtered)

    def csv_fields(self) -> list[str]:
        """Values for the ``ramp_up .. std_dev_sec`` CSV columns."""
        std_dev_sec = self.std_dev_sec if self.std_dev_sec is not None else 0.0
        return [
            str(self.ramp_up),
            str(self.repeat),
            _plain_decimal(self.min_sec),
            _plain_decimal(self.max_sec),
            _plain_decimal(self.median_sec),
            _plain_decimal(std_dev_sec),
        ]


CSV_HEADERS = ["point", "ramp_up", "repeat", "min_sec", "max_sec", "median_sec", "std_dev_sec"]


# ---------------------------------------------------------------------------
# Series-level result
# ---------------------------------------------------------------------------


@dataclass
class SeriesSummary:
    """All measured points of one benchmark, in declaration order."""

    name: str
    config: str
    runs: list[tuple[str, RunSummary]] = field(default_factory=list)

    def add(self, point: str, run_summary: RunSummary) -> None:
        """Append the result for *point*.

        Raises:
            ConfigurationError: If *point* is already part of the series.
        """
        if point in self.points:
            raise ConfigurationError(
                f"Workload point '{point}' appears twice in series '{self.name}'"
            )
        self.runs.append((point, run_summary))

    @property
    def points(self) -> list[str]:
        """Point identities in declaration order."""
        return [point for point, _ in self.runs]

    def get(self, point: str) -> RunSummary | None:
        for p, run_summary in self.runs:
            if p == point:
                return run_summary
        return None

    def __len__(self) -> int:
        return len(self.runs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "config": self.config,
            "runs": [[point, rs.to_dict()] for point, rs in self.runs],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SeriesSummary:
        """Deserialize from a dict.

        Raises:
            ReportFormatError: If the series or one of its runs is malformed.
        """
        if not isinstance(data, dict):
            raise ReportFormatError(f"Series must be an object, got {type(data).__name__}")
        name = data.get("name")
        config = data.get("config", "")
        if not isinstance(name, str) or not isinstance(config, str):
            raise ReportFormatError("Series 'name' and 'config' must be strings")
        runs = data.get("runs", [])
        if not isinstance(runs, list):
            raise ReportFormatError(f"Series '{name}' runs must be a list")
        series = cls(name=name, config=config)
        for entry in runs:
            if not isinstance(entry, list) or len(entry) != 2:
                raise ReportFormatError(f"Series '{name}' has a malformed run entry: {entry!r}")
            point, rs_data = entry
            if not isinstance(point, str):
                raise ReportFormatError(
                    f"Series '{name}' has a non-string point identity: {point!r}"
                )
            series.add(point, RunSummary.from_dict(rs_data))
        return series


# ---------------------------------------------------------------------------
# Suite-level snapshot
# ---------------------------------------------------------------------------


@dataclass
class Summary:
    """Snapshot of one suite run; the unit stored and reused as a baseline."""

    name: str
    created_at: str = field(default_factory=_utc_now)
    series: dict[str, SeriesSummary] = field(default_factory=dict)

    def add(self, name: str, series_summary: SeriesSummary) -> None:
        """Store *series_summary* under *name*, replacing any previous entry."""
        self.series[name] = series_summary

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "created_at": self.created_at,
            "series": {name: s.to_dict() for name, s in self.series.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Summary:
        """Deserialize from a dict.

        Raises:
            ReportFormatError: If required fields are missing or malformed.
        """
        if not isinstance(data, dict):
            raise ReportFormatError(f"Summary must be a JSON object, got {type(data).__name__}")
        try:
            summary = cls(name=data["name"], created_at=data["created_at"])
            if not isinstance(summary.name, str) or not isinstance(summary.created_at, str):
                raise ReportFormatError("Summary 'name' and 'created_at' must be strings")
            for name, series_data in data["series"].items():
                summary.series[name] = SeriesSummary.from_dict(series_data)
        except ReportFormatError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise ReportFormatError(f"Malformed summary report: {exc!r}") from exc
        return summary

    def to_json(self) -> str:
        """Serialize to pretty-printed JSON."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, text: str) -> Summary:
        """Parse a JSON report.

        Raises:
            json.JSONDecodeError: If *text* is not valid JSON.
            ReportFormatError: If the JSON does not describe a Summary.
        """
        return cls.from_dict(json.loads(text))


# ---------------------------------------------------------------------------
# I/O functions
# ---------------------------------------------------------------------------


def save_summary(path: Path, summary: Summary) -> None:
    """Write *summary* as a JSON report, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(summary.to_json() + "\n")
    log.info("Wrote %s", path)


def load_summary(path: Path) -> Summary:
    """Load a JSON report written by :func:`save_summary`.

    Raises:
        FileNotFoundError: If *path* does not exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"No report at {path}")
    return Summary.from_json(path.read_text())
