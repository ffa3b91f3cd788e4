"""Shared text formatting helpers for tempo.

Provides aligned tables, section headers and signed percentages used by
the terminal display and the CLI.
"""

from __future__ import annotations

import math


_ALIGNERS = {
    "l": str.ljust,
    "r": str.rjust,
    "c": str.center,
}


def format_table(
    headers: list[str],
    rows: list[list[str]],
    *,
    alignments: list[str] | None = None,
    max_col_width: dict[int, int] | None = None,
    indent: int = 2,
) -> str:
    """Render *rows* under *headers* as a column-aligned text table.

    Short rows are padded with empty cells and long rows are cut to the
    number of headers. Columns listed in *max_col_width* are truncated
    with :func:`truncate`, headers included.

    Args:
        headers: Column header strings.
        rows: Cell strings, one list per row.
        alignments: ``'l'``, ``'r'`` or ``'c'`` per column; missing
            entries default to ``'l'``.
        max_col_width: Column index to maximum width.
        indent: Leading spaces on every line.
    """
    if not headers:
        return ""

    ncols = len(headers)
    aligns = (list(alignments or []) + ["l"] * ncols)[:ncols]
    limits = {ci: w for ci, w in (max_col_width or {}).items() if ci < ncols}

    def _cells(row: list[str]) -> list[str]:
        cells = (list(row) + [""] * ncols)[:ncols]
        for ci, limit in limits.items():
            cells[ci] = truncate(cells[ci], limit)
        return cells

    table = [_cells(headers)] + [_cells(row) for row in rows]
    widths = [max(len(line[ci]) for line in table) for ci in range(ncols)]

    prefix = " " * indent
    return "\n".join(
        prefix
        + "  ".join(
            _ALIGNERS.get(align, str.ljust)(cell, width)
            for cell, width, align in zip(line, widths, aligns)
        )
        for line in table
    )


def format_section_header(title: str, width: int = 80) -> str:
    """Format a section header: ``'─── Title ──...'``."""
    prefix = "─── "
    suffix_len = width - len(prefix) - len(title) - 1
    suffix = " " + "─" * max(0, suffix_len)
    return prefix + title + suffix


def truncate(text: str, max_len: int, suffix: str = "...") -> str:
    """Truncate text to *max_len*, adding *suffix* if truncated."""
    if len(text) <= max_len:
        return text
    if max_len <= len(suffix):
        return suffix[:max_len]
    return text[: max_len - len(suffix)] + suffix


def format_pct(value: float, precision: int = 1) -> str:
    """Format a percentage change with an explicit sign: ``'+4.0%'``."""
    if math.isnan(value):
        return "N/A"
    if math.isinf(value):
        return "+inf%" if value > 0 else "-inf%"
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.{precision}f}%"
