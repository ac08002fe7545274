"""Text formatting helpers for blockbench terminal output."""

from __future__ import annotations

import math


def format_seconds(seconds: float, precision: int = 3) -> str:
    """Format a duration with adaptive units (``'850µs'``, ``'12.5ms'``, ``'1.204s'``)."""
    if math.isnan(seconds):
        return "N/A"
    if seconds < 0.001:
        return f"{seconds * 1_000_000:.0f}µs"
    if seconds < 1:
        return f"{seconds * 1000:.1f}ms"
    return f"{seconds:.{precision}f}s"


def format_count(value: float) -> str:
    """Format a (possibly averaged) counter with thousands separators."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def truncate(text: str, max_len: int, suffix: str = "...") -> str:
    """Truncate text to *max_len*, adding *suffix* if truncated."""
    if len(text) <= max_len:
        return text
    if max_len <= len(suffix):
        return suffix[:max_len]
    return text[: max_len - len(suffix)] + suffix


def format_section_header(title: str, width: int = 72) -> str:
    """Format a section header: ``'─── Title ─────'``."""
    prefix = "─── "
    fill = width - len(prefix) - len(title) - 1
    return prefix + title + " " + "─" * max(0, fill)


def format_table(
    headers: list[str],
    rows: list[list[str]],
    *,
    alignments: list[str] | None = None,
    max_width: int | None = None,
    indent: int = 2,
) -> str:
    """Format rows as an aligned text table with a rule under the header.

    Args:
        headers: Column header strings.
        rows: List of rows, each a list of cell strings.
        alignments: Per-column ``'l'`` or ``'r'``; missing entries are ``'l'``.
        max_width: Truncate the first column to this many characters.
        indent: Number of leading spaces per line.

    Returns:
        The formatted table, or ``""`` if there are no headers.
    """
    if not headers:
        return ""

    ncols = len(headers)
    aligns = list(alignments or [])
    aligns += ["l"] * (ncols - len(aligns))

    cells = [(list(row) + [""] * ncols)[:ncols] for row in rows]
    if max_width is not None:
        for row in cells:
            row[0] = truncate(row[0], max_width)

    widths = [len(h) for h in headers]
    for row in cells:
        for ci, cell in enumerate(row):
            widths[ci] = max(widths[ci], len(cell))

    def _line(values: list[str]) -> str:
        parts = [
            v.rjust(widths[i]) if aligns[i] == "r" else v.ljust(widths[i])
            for i, v in enumerate(values)
        ]
        return " " * indent + "  ".join(parts).rstrip()

    lines = [_line(list(headers))]
    lines.append(" " * indent + "  ".join("─" * w for w in widths))
    lines.extend(_line(row) for row in cells)
    return "\n".join(lines)
