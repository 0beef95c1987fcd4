"""
Plain-text rendering of the swap log grid.
"""

import math
from typing import Any

from .grid import ColumnSpec, cell_link


def format_cell(value: Any) -> str:
    """Render a grid cell as text."""
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return f"{value:.10g}"
    return str(value)


def render_table(columns: list[ColumnSpec], rows: list[dict[str, Any]], links: bool = False) -> str:
    """
    Render rows as a fixed-width text table with column titles as headers.

    Args:
        columns: Grid columns, in display order
        rows: Grid rows
        links: Show explorer URLs in place of the values of linked columns

    Returns:
        The table text
    """
    def cell_text(column: ColumnSpec, row: dict[str, Any]) -> str:
        url = cell_link(column, row) if links else None
        return url if url is not None else format_cell(row.get(column.field))

    header = [column.title for column in columns]
    body = [[cell_text(column, row) for column in columns] for row in rows]
    widths = [max(len(cell) for cell in [title] + [line[i] for line in body]) for i, title in enumerate(header)]

    lines = ["  ".join(title.ljust(widths[i]) for i, title in enumerate(header))]
    lines.append("  ".join("-" * width for width in widths))
    for line in body:
        lines.append("  ".join(
            cell.rjust(widths[i]) if columns[i].type == "number" else cell.ljust(widths[i])
            for i, cell in enumerate(line)
        ))
    return "\n".join(lines)
