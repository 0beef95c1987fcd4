"""
Spreadsheet export of the swap log grid.

Linked columns become hyperlink cells to the block explorer, and header
tooltips are attached to the header cells as comments.
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.comments import Comment
from openpyxl.worksheet.worksheet import Worksheet

from .grid import ColumnSpec, ExportSpec, cell_link, column_tooltip

logger = logging.getLogger(__name__)

SHEET_NAME = "Swaps"


def records_to_frame(rows: Iterable[dict[str, Any]], columns: list[ColumnSpec]) -> pd.DataFrame:
    """Build a DataFrame with one column per grid column, titled like the grid."""
    frame = pd.DataFrame(list(rows), columns=[column.field for column in columns])
    return frame.rename(columns={column.field: column.title for column in columns})


def _add_links(sheet: Worksheet, rows: list[dict[str, Any]], columns: list[ColumnSpec]) -> None:
    for col_index, column in enumerate(columns, start=1):
        if column.link_template is None:
            continue
        for row_index, row in enumerate(rows, start=2):
            cell = sheet.cell(row=row_index, column=col_index)
            cell.hyperlink = cell_link(column, row)
            cell.style = "Hyperlink"


def _add_tooltips(sheet: Worksheet, columns: list[ColumnSpec]) -> None:
    for col_index, column in enumerate(columns, start=1):
        tooltip = column_tooltip(column.title)
        if tooltip != column.title:
            sheet.cell(row=1, column=col_index).comment = Comment(tooltip, "vanilla-swaplog")


def export_to_excel(
    rows: Iterable[dict[str, Any]],
    columns: list[ColumnSpec],
    export_spec: ExportSpec,
    directory: Path | str = "."
) -> Path:
    """
    Write rows to an xlsx file named by the export options.

    Args:
        rows: Grid rows to export
        columns: Grid columns, in display order
        export_spec: Export options
        directory: Output directory

    Returns:
        Path of the written file
    """
    rows = list(rows)
    frame = records_to_frame(rows, columns)
    path = Path(directory) / export_spec.file_name
    path.parent.mkdir(parents=True, exist_ok=True)

    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        frame.to_excel(writer, index=False, sheet_name=SHEET_NAME)
        sheet = writer.sheets[SHEET_NAME]
        _add_links(sheet, rows, columns)
        _add_tooltips(sheet, columns)
        if export_spec.filterable:
            sheet.auto_filter.ref = sheet.dimensions

    logger.info(f"Exported {len(frame)} rows to {path}")
    return path
