"""
Tabular projection of an extraction into a renderer-agnostic grid plan.

The plan holds everything a renderer needs: a metadata block, the header,
one row per line item with cells aligned to the reporting periods, and the
analyst notes. Renderers decide fonts and colors; the plan only records the
row role and which numeric cells are negative.
"""

import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Optional, Sequence, Tuple

from research_portal.extraction.models import ExtractionResult
from research_portal.extraction.reconciler import RowRole, derive_roles

LABEL_HEADER = "Particulars"
NOTES_HEADER = "Analyst Notes"

# Column sizing (characters)
MIN_COLUMN_WIDTH = 10
MAX_COLUMN_WIDTH = 45
COLUMN_PADDING = 4
MIN_LABEL_COLUMN_WIDTH = 38


def is_numeric(value: Any) -> bool:
    """
    Finite real numbers only; booleans and numeric strings do not count.

    Infinities and integers beyond float range are rendered as text.
    """
    if not isinstance(value, Real) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def format_number(value: Any) -> str:
    """Thousands separators, two decimals, leading minus sign kept."""
    return f"{value:,.2f}"


@dataclass(frozen=True)
class GridCell:
    """A value cell; ``value`` is None when the period has no value."""
    value: Any = None

    @property
    def is_empty(self) -> bool:
        return self.value is None

    @property
    def is_numeric(self) -> bool:
        return is_numeric(self.value)

    @property
    def is_negative(self) -> bool:
        return self.is_numeric and self.value < 0

    @property
    def display_text(self) -> str:
        if self.value is None:
            return ""
        if self.is_numeric:
            return format_number(self.value)
        return str(self.value)


@dataclass(frozen=True)
class GridRow:
    """One line item as it will be rendered."""
    label_text: str
    indent_level: int
    role: RowRole
    cells: Tuple[GridCell, ...]
    note_text: Optional[str] = None

    @property
    def cell_values(self) -> Tuple[Any, ...]:
        return tuple(cell.value for cell in self.cells)


@dataclass(frozen=True)
class GridPlan:
    """Complete layout of one extraction."""
    metadata_rows: Tuple[Tuple[str, str], ...]
    header: Tuple[str, ...]
    rows: Tuple[GridRow, ...]
    analyst_notes: Tuple[str, ...] = ()
    column_widths: Tuple[float, ...] = field(default=())

    @property
    def period_count(self) -> int:
        return len(self.header) - 1


def metadata_rows(result: ExtractionResult) -> Tuple[Tuple[str, str], ...]:
    """Key/value pairs shown above the grid."""
    metadata = result.metadata
    return (
        ("Company", metadata.company_name or "Unknown"),
        ("Currency", metadata.currency or "N/A"),
        ("Units", metadata.units or "N/A"),
        ("Statement Type", metadata.statement_type.value),
    )


def _column_widths(
    meta: Sequence[Tuple[str, str]],
    header: Sequence[str],
    rows: Sequence[GridRow],
    notes: Sequence[str],
) -> Tuple[float, ...]:
    column_count = max(len(header), 2)
    longest = [MIN_COLUMN_WIDTH] * column_count

    def measure(column: int, text: str) -> None:
        if len(text) > longest[column]:
            longest[column] = len(text)

    for key, value in meta:
        measure(0, key)
        measure(1, value)
    for column, text in enumerate(header):
        measure(column, text)
    for row in rows:
        measure(0, row.label_text)
        for offset, cell in enumerate(row.cells):
            measure(offset + 1, cell.display_text)
    if notes:
        measure(0, NOTES_HEADER)
    for note in notes:
        measure(0, note)

    widths = [min(length + COLUMN_PADDING, MAX_COLUMN_WIDTH) for length in longest]
    widths[0] = max(widths[0], MIN_LABEL_COLUMN_WIDTH)
    return tuple(float(width) for width in widths)


def project(result: ExtractionResult) -> GridPlan:
    """
    Build the grid plan for an extraction.

    Cells follow ``reporting_periods`` order. Value keys that are not
    reporting periods are left out; periods without a value get an empty
    cell, so every row has exactly one cell per period.
    """
    periods = result.periods
    roles = derive_roles(result.line_items, periods)

    rows = tuple(
        GridRow(
            label_text=item.display_label,
            indent_level=item.depth,
            role=role,
            cells=tuple(GridCell(item.value_for(period)) for period in periods),
            note_text=item.notes,
        )
        for item, role in zip(result.line_items, roles)
    )

    meta = metadata_rows(result)
    header = (LABEL_HEADER,) + tuple(periods)

    return GridPlan(
        metadata_rows=meta,
        header=header,
        rows=rows,
        analyst_notes=tuple(result.analyst_notes),
        column_widths=_column_widths(meta, header, rows, result.analyst_notes),
    )
