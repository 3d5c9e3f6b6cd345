"""Markdown primitives for size reports."""

from __future__ import annotations

import math
from collections.abc import Callable

_BYTE_UNITS = ("B", "kB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB")


def pretty_bytes(value: int) -> str:
    """Format a byte count with SI units and three significant digits."""
    if value < 0:
        return f"-{pretty_bytes(-value)}"
    if value < 1:
        return f"{value} B"
    exponent = min(int(math.log10(value) // 3), len(_BYTE_UNITS) - 1)
    scaled = float(f"{value / 1000**exponent:.3g}")
    if scaled.is_integer():
        number = str(int(scaled))
    else:
        number = f"{scaled:g}"
    return f"{number} {_BYTE_UNITS[exponent]}"


def signed_percent(value: float) -> str:
    """Render 0 as '=' and anything else as a signed two-decimal percentage."""
    if value == 0:
        return "="
    return f"{value:+.2f}%"


def optional_cell(value: int | float | None, render: Callable[[int | float], str]) -> str:
    """Render a value, or an empty cell for None."""
    if value is None:
        return ""
    return render(value)


def markdown_table(rows: list[list[str]]) -> str:
    """Render a header row plus body rows as an aligned GitHub markdown table."""
    if not rows:
        return ""
    escaped = [[cell.replace("|", "\\|") for cell in row] for row in rows]
    widths = [max(3, *(len(row[col]) for row in escaped)) for col in range(len(escaped[0]))]
    lines = [_table_row(escaped[0], widths), _table_row(["-" * w for w in widths], widths)]
    lines.extend(_table_row(row, widths) for row in escaped[1:])
    return "\n".join(lines)


def collapsible(title: str, content: str) -> str:
    """Wrap content in a details/summary disclosure block."""
    return f"<details>\n<summary>{title}</summary>\n\n{content}\n\n</details>"


def _table_row(cells: list[str], widths: list[int]) -> str:
    padded = [cell.ljust(width) for cell, width in zip(cells, widths, strict=True)]
    return "| " + " | ".join(padded) + " |"
