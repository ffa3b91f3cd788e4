"""Benchmark profile loading and validation.

Handles:
- Loading benchmark profiles from YAML files.
- Merging CLI overrides with profile defaults.
- Resolving ``module:function`` workload references to callables.
- Validating the final configuration before building a Suite.
"""

from __future__ import annotations

import importlib
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import yaml

from tempo.bench.errors import ConfigurationError
from tempo.bench.suite import Suite
from tempo.logging import get_logger

log = get_logger("config")


class WorkloadConfig(dict):
    """Mapping handed to workloads as their configuration.

    Renders as ``key=value, key=value`` so the series records a readable
    configuration description.
    """

    def __str__(self) -> str:
        return ", ".join(f"{k}={v}" for k, v in self.items())


# ---------------------------------------------------------------------------
# Profile configuration
# ---------------------------------------------------------------------------


@dataclass
class BenchmarkDef:
    """One benchmark entry of a profile."""

    name: str
    workload: str  # "package.module:function"
    points: list[Any] = field(default_factory=list)
    config: WorkloadConfig = field(default_factory=WorkloadConfig)
    repeat: int | None = None  # None = profile default
    ramp_up: int | None = None


@dataclass
class ProfileConfig:
    """Resolved configuration for a suite run."""

    name: str = ""
    description: str = ""
    repeat: int = 5
    ramp_up: int = 1
    threshold: float = 5.0
    python_path: list[Path] = field(default_factory=list)
    benchmarks: list[BenchmarkDef] = field(default_factory=list)

    def repeat_for(self, bench: BenchmarkDef) -> int:
        return bench.repeat if bench.repeat is not None else self.repeat

    def ramp_up_for(self, bench: BenchmarkDef) -> int:
        return bench.ramp_up if bench.ramp_up is not None else self.ramp_up


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationError:
    """A single configuration validation error."""

    field: str
    message: str
    severity: str = "error"  # "error" or "warning"


def validate_profile(config: ProfileConfig) -> list[ValidationError]:
    """Validate a profile configuration.

    Returns a list of validation errors.  Empty list means valid.
    """
    errors: list[ValidationError] = []

    if not config.name or not config.name.strip():
        errors.append(ValidationError(field="name", message="Suite name must be non-empty."))

    if not config.benchmarks:
        errors.append(
            ValidationError(field="benchmarks", message="Profile defines no benchmarks.")
        )

    seen: set[str] = set()
    for i, bench in enumerate(config.benchmarks):
        prefix = f"benchmarks[{i}]"
        if not bench.name or not bench.name.strip():
            errors.append(
                ValidationError(
                    field=f"{prefix}.name",
                    message="Benchmark names must be non-empty.",
                )
            )
        elif bench.name in seen:
            errors.append(
                ValidationError(
                    field=f"{prefix}.name",
                    message=f"Benchmark with identical name exists: {bench.name}",
                )
            )
        seen.add(bench.name)

        if ":" not in bench.workload:
            errors.append(
                ValidationError(
                    field=f"{prefix}.workload",
                    message=(
                        f"Workload '{bench.workload}' must be a 'module:function' reference."
                    ),
                )
            )

        repeat = config.repeat_for(bench)
        if repeat <= 0:
            errors.append(
                ValidationError(
                    field=f"{prefix}.repeat",
                    message=f"Cannot benchmark {repeat} runs.",
                )
            )
        elif repeat < 2:
            errors.append(
                ValidationError(
                    field=f"{prefix}.repeat",
                    message="A single measured run has no standard deviation.",
                    severity="warning",
                )
            )

        if config.ramp_up_for(bench) < 0:
            errors.append(
                ValidationError(
                    field=f"{prefix}.ramp_up",
                    message="Ramp-up iterations cannot be negative.",
                )
            )

        if not bench.points:
            errors.append(
                ValidationError(field=f"{prefix}.points", message="No workload points defined.")
            )
        else:
            identities = [str(p) for p in bench.points]
            if len(set(identities)) != len(identities):
                errors.append(
                    ValidationError(
                        field=f"{prefix}.points",
                        message="Workload points must have distinct text representations.",
                    )
                )

    return errors


# ---------------------------------------------------------------------------
# YAML profile loading
# ---------------------------------------------------------------------------


def load_profile(profile_path: Path) -> dict[str, Any]:
    """Load a benchmark profile from a YAML file.

    Profile format::

        name: "sorting"
        repeat: 5
        ramp_up: 1
        threshold: 5.0
        python_path: ["benches"]

        benchmarks:
          - name: "sort n"
            workload: "benches.sorting:bench_sort"
            config: {slowdown_us: 0}
            points: [100, 200, 300]
          - name: "sort n and rest"
            workload: "benches.sorting:bench_sort"
            config: {slowdown_us: 10}
            points: {start: 100, stop: 400, step: 100}
            repeat: 30

    Returns:
        The parsed YAML as a dict.
    """
    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_path}")

    data = yaml.safe_load(profile_path.read_text())

    if not isinstance(data, dict):
        raise ConfigurationError(f"Profile must be a YAML mapping, got {type(data).__name__}")

    return data


def _parse_points(name: str, raw: Any) -> list[Any]:
    """Accept a list of points or an inclusive ``{start, stop, step}`` range."""
    if raw is None:
        return []
    if isinstance(raw, list):
        return raw
    if isinstance(raw, dict):
        try:
            start = int(raw.get("start", 0))
            stop = int(raw["stop"])
            step = int(raw.get("step", 1))
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"Benchmark '{name}' has an invalid points range: {raw!r}"
            ) from exc
        if step <= 0:
            raise ConfigurationError(f"Benchmark '{name}' points step must be positive")
        return list(range(start, stop + 1, step))
    raise ConfigurationError(
        f"Benchmark '{name}' points must be a list or a range, got {type(raw).__name__}"
    )


def _optional_int(name: str, key: str, raw: Any) -> int | None:
    """Convert a per-benchmark override to int; None keeps the profile default."""
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"Benchmark '{name}' {key} must be an integer, got {raw!r}"
        ) from exc


def config_from_profile(
    profile_data: dict[str, Any],
    *,
    base_dir: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> ProfileConfig:
    """Build a ProfileConfig from a parsed YAML profile.

    CLI overrides take precedence over profile values for: name,
    repeat, ramp_up, threshold.

    Args:
        profile_data: Parsed YAML profile dict.
        base_dir: Directory that relative ``python_path`` entries are
            resolved against (normally the profile's directory).
        cli_overrides: Dict of CLI option values; ``None`` values are ignored.
    """
    cli = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    base = base_dir or Path.cwd()

    config = ProfileConfig(
        name=str(cli.get("name", profile_data.get("name", ""))),
        description=profile_data.get("description", ""),
        repeat=int(cli.get("repeat", profile_data.get("repeat", 5))),
        ramp_up=int(cli.get("ramp_up", profile_data.get("ramp_up", 1))),
        threshold=float(cli.get("threshold", profile_data.get("threshold", 5.0))),
        python_path=[base / p for p in profile_data.get("python_path", [])],
    )

    benchmarks_data = profile_data.get("benchmarks", [])
    if not isinstance(benchmarks_data, list):
        raise ConfigurationError("Profile 'benchmarks' must be a list of benchmark definitions")

    for bench_data in benchmarks_data:
        if not isinstance(bench_data, dict):
            raise ConfigurationError(
                f"Benchmark entries must be mappings, got {type(bench_data).__name__}"
            )
        name = str(bench_data.get("name", ""))
        bench_config = bench_data.get("config") or {}
        if not isinstance(bench_config, dict):
            raise ConfigurationError(f"Benchmark '{name}' config must be a mapping")
        config.benchmarks.append(
            BenchmarkDef(
                name=name,
                workload=str(bench_data.get("workload", "")),
                points=_parse_points(name, bench_data.get("points")),
                config=WorkloadConfig(bench_config),
                repeat=_optional_int(name, "repeat", bench_data.get("repeat")),
                ramp_up=_optional_int(name, "ramp_up", bench_data.get("ramp_up")),
            )
        )

    return config


# ---------------------------------------------------------------------------
# Suite construction
# ---------------------------------------------------------------------------


def resolve_workload(reference: str) -> Callable[..., Any]:
    """Import the callable named by a ``module:function`` reference.

    Raises:
        ConfigurationError: If the reference is malformed, the module
            cannot be imported, or the attribute is not callable.
    """
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        raise ConfigurationError(f"Workload '{reference}' must be a 'module:function' reference")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Cannot import workload module '{module_name}': {exc}") from exc
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise ConfigurationError(
                f"Workload '{reference}': '{module_name}' has no attribute '{attr_path}'"
            ) from exc
    if not callable(obj):
        raise ConfigurationError(f"Workload '{reference}' is not callable")
    return obj


def build_suite(config: ProfileConfig) -> Suite[WorkloadConfig, Any]:
    """Validate *config* and register all of its benchmarks in a Suite.

    Raises:
        ConfigurationError: If validation reports any error, or a
            workload cannot be resolved.
    """
    errors = validate_profile(config)
    fatal = [e for e in errors if e.severity == "error"]
    for w in (e for e in errors if e.severity == "warning"):
        log.warning("Config warning: %s: %s", w.field, w.message)
    if fatal:
        messages = [f"  {e.field}: {e.message}" for e in fatal]
        raise ConfigurationError("Invalid benchmark profile:\n" + "\n".join(messages))

    for entry in config.python_path:
        path_str = str(entry.resolve())
        if path_str not in sys.path:
            sys.path.insert(0, path_str)
            log.debug("Added %s to sys.path", path_str)

    suite: Suite[WorkloadConfig, Any] = Suite(config.name)
    for bench in config.benchmarks:
        suite.add(
            bench.name,
            resolve_workload(bench.workload),
            bench.config,
            bench.points,
            repeat=config.repeat_for(bench),
            ramp_up=config.ramp_up_for(bench),
        )
    return suite
