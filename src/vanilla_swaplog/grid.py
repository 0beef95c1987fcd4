#!/usr/bin/env python3
"""Grid configuration for the swap log table.

This module describes the table the swap records are shown in: its
columns, default sort, export options and column-resize hook, together
with the sorting and per-column filtering the table supports.
"""

import math
import operator
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar

from .config import DEFAULT_EXPLORER_URL

COLUMN_WIDTHS_KEY = "vanillaswaplog.colWidths"

LOG_ITEM_SCHEMA: dict[str, str] = {
    "Block": "number",
    "Amount0": "number",
    "Amount1": "number",
    "Ratio_0_1": "number",
    "Ratio_1_0": "number",
    "tx_id": "string",
}

COLUMN_TOOLTIPS: dict[str, str] = {
    "Block": "Blocknumber",
}


def _check_field(field_name: str) -> None:
    if field_name not in LOG_ITEM_SCHEMA:
        raise ValueError(
            f"Unknown column: {field_name}. "
            f"Supported columns: {', '.join(LOG_ITEM_SCHEMA)}"
        )


@dataclass(frozen=True, slots=True)
class ColumnSpec:
    """A grid column.

    Attributes:
        field: Row key shown in the column
        title: Header text
        width: Pixel width, None to take the remaining space
        link_template: Optional URL template formatted with the row
    """

    field: str
    title: str
    width: int | None = None
    link_template: str | None = None

    @property
    def type(self) -> str:
        return LOG_ITEM_SCHEMA.get(self.field, "string")


@dataclass(frozen=True, slots=True)
class SortSpec:
    """Sort order of the grid."""

    field: str
    direction: str = "asc"

    DIRECTIONS: ClassVar[set[str]] = {"asc", "desc"}

    def __post_init__(self) -> None:
        _check_field(self.field)
        if self.direction not in self.DIRECTIONS:
            raise ValueError(
                f"Invalid sort direction: {self.direction}. Expected asc or desc"
            )

    @classmethod
    def parse(cls, text: str) -> "SortSpec":
        """Parse "FIELD" or "FIELD:asc|desc"."""
        field_name, _, direction = text.partition(':')
        return cls(field=field_name, direction=direction or "asc")


@dataclass(frozen=True, slots=True)
class ExportSpec:
    """Spreadsheet export options."""

    file_name: str = "Vanilla_swap_log.xlsx"
    filterable: bool = True


@dataclass(frozen=True, slots=True)
class ColumnFilter:
    """A per-column filter condition."""

    field: str
    operator: str
    value: Any

    OPERATORS: ClassVar[dict[str, Callable[[Any, Any], bool]]] = {
        "eq": operator.eq,
        "neq": operator.ne,
        "gt": operator.gt,
        "gte": operator.ge,
        "lt": operator.lt,
        "lte": operator.le,
        "contains": lambda cell, value: str(value).lower() in str(cell).lower(),
    }

    def __post_init__(self) -> None:
        _check_field(self.field)
        if self.operator not in self.OPERATORS:
            raise ValueError(
                f"Unsupported filter operator: {self.operator}. "
                f"Supported operators: {', '.join(sorted(self.OPERATORS))}"
            )
        if self.operator != "contains" and LOG_ITEM_SCHEMA[self.field] == "number":
            try:
                float(self.value)
            except (TypeError, ValueError):
                raise ValueError(f"Column {self.field} needs a numeric filter value, got {self.value!r}") from None

    @classmethod
    def parse(cls, text: str) -> "ColumnFilter":
        """Parse "FIELD:OPERATOR:VALUE"."""
        parts = text.split(':', 2)
        if len(parts) != 3:
            raise ValueError(f"Invalid filter {text!r}, expected FIELD:OPERATOR:VALUE")
        return cls(field=parts[0], operator=parts[1], value=parts[2])

    def matches(self, row: dict[str, Any]) -> bool:
        cell = row.get(self.field)
        value = self.value
        if self.operator != "contains" and LOG_ITEM_SCHEMA.get(self.field) == "number":
            value = float(value)
        return self.OPERATORS[self.operator](cell, value)


@dataclass(slots=True)
class GridConfig:
    """Full table configuration.

    Columns are mutable so resizing can update widths in place.
    """

    columns: list[ColumnSpec]
    default_sort: SortSpec = field(default_factory=lambda: SortSpec("Block", "desc"))
    export_options: ExportSpec = field(default_factory=ExportSpec)
    on_column_resize: Callable[[list[ColumnSpec]], None] | None = None
    sortable: bool = True
    resizable: bool = True
    filterable: bool = True

    def column(self, field_name: str) -> ColumnSpec:
        for column in self.columns:
            if column.field == field_name:
                return column
        raise ValueError(f"Unknown column: {field_name}")

    def resize_column(self, index: int, width: int) -> None:
        """Set a column's width and fire the resize hook."""
        if not 0 <= index < len(self.columns):
            raise ValueError(f"Column index out of range: {index}")
        if width <= 0:
            raise ValueError(f"Column width must be positive, got {width}")
        self.columns[index] = replace(self.columns[index], width=width)
        if self.on_column_resize:
            self.on_column_resize(self.columns)

    def column_widths(self) -> list[int | None]:
        return [column.width for column in self.columns]


def log_columns(
    column_widths: list[int | None] | None = None,
    explorer_url: str = DEFAULT_EXPLORER_URL
) -> list[ColumnSpec]:
    """Build the swap log columns, applying stored widths where present."""
    widths = column_widths or []

    def width_at(index: int, default: int | None) -> int | None:
        stored = widths[index] if index < len(widths) else None
        return stored or default

    return [
        ColumnSpec("Block", "Block", width_at(0, 80), explorer_url + "/block/{Block}"),
        ColumnSpec("Amount0", "Amount 0", width_at(1, 100)),
        ColumnSpec("Amount1", "Amount 1", width_at(2, 100)),
        ColumnSpec("Ratio_0_1", "Ratio 0/1", width_at(3, 100)),
        ColumnSpec("Ratio_1_0", "Ratio 1/0", width_at(4, 100)),
        ColumnSpec("tx_id", "tx", width_at(5, None), explorer_url + "/tx/{tx_id}"),
    ]


def build_grid_config(
    column_widths: list[int | None] | None = None,
    on_column_resize: Callable[[list[ColumnSpec]], None] | None = None,
    explorer_url: str = DEFAULT_EXPLORER_URL
) -> GridConfig:
    return GridConfig(
        columns=log_columns(column_widths, explorer_url),
        on_column_resize=on_column_resize
    )


def column_tooltip(text: str) -> str:
    """Header tooltip for a column title."""
    text = text.strip()
    return COLUMN_TOOLTIPS.get(text, text)


def cell_link(column: ColumnSpec, row: dict[str, Any]) -> str | None:
    """Fill a column's link template with the row, None if it has none."""
    if column.link_template is None:
        return None
    return column.link_template.format(**row)


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def sort_records(rows: Iterable[dict[str, Any]], sort: SortSpec) -> list[dict[str, Any]]:
    """Sort rows by one column. NaN cells always go last."""
    rows = list(rows)
    ordered = [row for row in rows if not _is_nan(row.get(sort.field))]
    nans = [row for row in rows if _is_nan(row.get(sort.field))]
    ordered.sort(key=lambda row: row.get(sort.field), reverse=sort.direction == "desc")
    return ordered + nans


def filter_records(
    rows: Iterable[dict[str, Any]],
    filters: Iterable[ColumnFilter]
) -> list[dict[str, Any]]:
    """Keep rows matching every filter."""
    filters = list(filters)
    return [row for row in rows if all(f.matches(row) for f in filters)]
