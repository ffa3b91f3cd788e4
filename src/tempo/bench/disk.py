"""Disk usage measurement for benchmarks that produce files."""

from __future__ import annotations

from pathlib import Path

_UNITS = [
    (1 << 40, "T"),
    (1 << 30, "G"),
    (1 << 20, "M"),
    (1 << 10, "K"),
]


def disk_usage(path: Path) -> int:
    """Total size in bytes of *path*, recursing into directories.

    Entries that are neither regular files nor directories are ignored.

    Raises:
        FileNotFoundError: If *path* does not exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"path does not exist: [{path}]")
    if path.is_file():
        return path.stat().st_size
    size = 0
    if path.is_dir():
        for entry in path.iterdir():
            size += disk_usage(entry)
    return size


def to_human(size: int) -> str:
    """Format a byte count with binary suffixes: ``512``, ``1.500K``, ``2.000G``."""
    for factor, suffix in _UNITS:
        if size // factor > 0:
            return f"{size / factor:.3f}{suffix}"
    return str(size)
