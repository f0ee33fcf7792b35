"""
WorkbookEncoder renders a grid plan into a styled single-sheet workbook.

Layout, top to bottom:
1. Metadata key/value rows
2. One blank separator row
3. Header row (``Particulars`` + one column per reporting period), frozen
4. One row per line item
5. Optional analyst notes block after a blank row
"""

import base64
import io
from datetime import datetime, timezone
from typing import Optional

import structlog
from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from research_portal.extraction.models import ExtractionResult
from research_portal.extraction.projector import NOTES_HEADER, GridPlan, GridRow, project
from research_portal.extraction.reconciler import RowRole
from research_portal.services.excel_builder.styles import DEFAULT_STYLE, STYLES, StyleConfig

logger = structlog.get_logger(__name__)


def write_text(sheet: Worksheet, row: int, column: int, text: str):
    """Write a string cell; text starting with "=" stays text, not a formula."""
    cell = sheet.cell(row=row, column=column, value=ILLEGAL_CHARACTERS_RE.sub("", text))
    cell.data_type = "s"
    return cell


SHEET_TITLE = "Financial Data"
WORKBOOK_CREATOR = "AI Research Portal"
NUMBER_FORMAT = "#,##0.00"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class WorkbookEncoder:
    """
    Builds xlsx workbooks from grid plans.

    The label column is A; reporting periods start at column B. Numeric
    cells are written as numbers with a thousands/two-decimal format, so
    signs are kept as-is and never turned into parentheses.
    """

    LABEL_COLUMN = 1
    DATA_START_COLUMN = 2

    def __init__(self, style: str = DEFAULT_STYLE):
        self.style_name = style
        self.style: StyleConfig = STYLES.get(style, STYLES[DEFAULT_STYLE])

    def build(self, plan: GridPlan) -> Workbook:
        """Render a grid plan into a new workbook."""
        workbook = Workbook()
        workbook.properties.creator = WORKBOOK_CREATOR
        workbook.properties.created = datetime.now(timezone.utc).replace(tzinfo=None)

        sheet = workbook.active
        sheet.title = SHEET_TITLE

        for row_num, (key, value) in enumerate(plan.metadata_rows, start=1):
            write_text(sheet, row_num, 1, key).font = self.style.meta_label_font
            write_text(sheet, row_num, 2, value).font = self.style.meta_value_font

        # Blank separator between metadata and header
        header_row = len(plan.metadata_rows) + 2

        self._write_header(sheet, header_row, plan)
        sheet.freeze_panes = sheet.cell(row=header_row + 1, column=1)

        for offset, row in enumerate(plan.rows, start=1):
            self._write_line_item(sheet, header_row + offset, row, plan.period_count)

        if plan.analyst_notes:
            notes_row = header_row + len(plan.rows) + 2
            write_text(sheet, notes_row, 1, NOTES_HEADER).font = self.style.meta_label_font
            for offset, note in enumerate(plan.analyst_notes, start=1):
                write_text(sheet, notes_row + offset, 1, note).font = self.style.note_font

        for index, width in enumerate(plan.column_widths, start=1):
            sheet.column_dimensions[get_column_letter(index)].width = width

        logger.info(
            "Workbook built",
            style=self.style_name,
            rows=len(plan.rows),
            periods=plan.period_count,
        )
        return workbook

    def _write_header(self, sheet: Worksheet, row_num: int, plan: GridPlan) -> None:
        for column, text in enumerate(plan.header, start=1):
            cell = write_text(sheet, row_num, column, text)
            cell.font = self.style.header_font
            if self.style.header_fill:
                cell.fill = self.style.header_fill
            if self.style.cell_border:
                cell.border = self.style.cell_border
            if self.style.header_alignment:
                cell.alignment = self.style.header_alignment

        sheet.cell(row=row_num, column=self.LABEL_COLUMN).alignment = Alignment(
            horizontal="left", vertical="center"
        )
        sheet.row_dimensions[row_num].height = self.style.header_height

    def _write_line_item(self, sheet: Worksheet, row_num: int, row: GridRow, period_count: int) -> None:
        if row.role == RowRole.TOTAL:
            font, fill = self.style.total_font, self.style.total_fill
        elif row.role == RowRole.SECTION_HEADING:
            font, fill = self.style.section_font, self.style.section_fill
        else:
            font, fill = self.style.item_font, None

        label_cell = write_text(sheet, row_num, self.LABEL_COLUMN, row.label_text)
        label_cell.font = font
        label_cell.alignment = Alignment(
            horizontal="left", vertical="center", indent=min(row.indent_level * 2, 250)
        )
        self._decorate(label_cell, fill)

        for offset in range(period_count):
            cell_plan = row.cells[offset]
            column = self.DATA_START_COLUMN + offset
            if cell_plan.is_numeric:
                cell = sheet.cell(row=row_num, column=column, value=cell_plan.value)
                cell.number_format = NUMBER_FORMAT
            elif cell_plan.is_empty:
                cell = sheet.cell(row=row_num, column=column)
            else:
                cell = write_text(sheet, row_num, column, cell_plan.display_text)

            if row.role == RowRole.NORMAL and cell_plan.is_negative:
                cell.font = self.style.negative_font
            else:
                cell.font = font
            if self.style.value_alignment:
                cell.alignment = self.style.value_alignment
            self._decorate(cell, fill)

    def _decorate(self, cell, fill) -> None:
        if fill:
            cell.fill = fill
        if self.style.cell_border:
            cell.border = self.style.cell_border

    def to_bytes(self, plan: GridPlan) -> bytes:
        """Render a plan and return the xlsx file content."""
        buffer = io.BytesIO()
        self.build(plan).save(buffer)
        return buffer.getvalue()

    def encode(self, plan: GridPlan) -> str:
        """Render a plan and return the xlsx content as base64 text."""
        return base64.b64encode(self.to_bytes(plan)).decode("ascii")


def encode_workbook(result: ExtractionResult, style: Optional[str] = None) -> str:
    """Project an extraction and return the base64 workbook."""
    return WorkbookEncoder(style or DEFAULT_STYLE).encode(project(result))


def get_workbook_encoder(style: str = DEFAULT_STYLE) -> WorkbookEncoder:
    """Create a new WorkbookEncoder instance."""
    return WorkbookEncoder(style)
