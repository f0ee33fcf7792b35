"""
Unit tests for the workbook encoder.
"""
import base64
import io
from datetime import datetime, timedelta, timezone

import pytest
from openpyxl import load_workbook

from research_portal.extraction.models import parse_extraction
from research_portal.extraction.projector import project
from research_portal.services.excel_builder import STYLES, WorkbookEncoder, encode_workbook
from research_portal.services.excel_builder.builder import NUMBER_FORMAT, SHEET_TITLE

# Metadata rows 1-4, blank row 5, header row 6
HEADER_ROW = 6
FIRST_ITEM_ROW = 7


@pytest.fixture
def sheet(sample_result):
    """Worksheet decoded from the base64 workbook."""
    encoded = encode_workbook(sample_result)
    workbook = load_workbook(io.BytesIO(base64.b64decode(encoded)))
    return workbook.active


class TestWorkbookLayout:
    """Tests for sheet layout."""

    def test_single_sheet(self, sample_result):
        """Test the workbook has one titled sheet."""
        workbook = WorkbookEncoder().build(project(sample_result))

        assert workbook.sheetnames == [SHEET_TITLE]

    def test_metadata_block(self, sheet):
        """Test metadata key/value rows."""
        assert sheet["A1"].value == "Company"
        assert sheet["B1"].value == "Acme Industries Ltd"
        assert sheet["A4"].value == "Statement Type"
        assert sheet["B4"].value == "Consolidated"
        assert sheet["A5"].value is None

    def test_header_row(self, sheet):
        """Test header row contents and frozen pane below it."""
        header = [cell.value for cell in sheet[HEADER_ROW]]

        assert header == ["Particulars", "FY 25", "FY 24"]
        assert sheet.freeze_panes == f"A{FIRST_ITEM_ROW}"

    def test_line_items_in_order(self, sheet, sample_result):
        """Test one row per line item in document order."""
        labels = [
            sheet.cell(row=FIRST_ITEM_ROW + offset, column=1).value
            for offset in range(len(sample_result.line_items))
        ]

        assert labels == [item.display_label for item in sample_result.line_items]

    def test_analyst_notes(self, sheet, sample_result):
        """Test notes block after a blank row."""
        notes_row = FIRST_ITEM_ROW + len(sample_result.line_items) + 1

        assert sheet.cell(row=notes_row - 1, column=1).value is None
        assert sheet.cell(row=notes_row, column=1).value == "Analyst Notes"
        assert sheet.cell(row=notes_row + 1, column=1).value == sample_result.analyst_notes[0]
        assert sheet.cell(row=notes_row + 2, column=1).value == sample_result.analyst_notes[1]

    def test_column_widths(self, sheet):
        """Test label column width is applied."""
        assert sheet.column_dimensions["A"].width >= 38


class TestWorkbookValues:
    """Tests for value cells."""

    def test_numbers_are_numeric(self, sheet):
        """Test numeric values are stored as numbers with the display format."""
        cell = sheet.cell(row=FIRST_ITEM_ROW, column=2)

        assert cell.value == 204813
        assert cell.number_format == NUMBER_FORMAT

    def test_negative_keeps_sign(self, sheet):
        """Test negative values keep their sign."""
        cell = sheet.cell(row=FIRST_ITEM_ROW + 3, column=2)

        assert cell.value == -1500.5

    def test_missing_value_blank(self, sheet):
        """Test periods without a value are left blank."""
        assert sheet.cell(row=FIRST_ITEM_ROW + 3, column=3).value is None
        assert sheet.cell(row=FIRST_ITEM_ROW + 1, column=2).value is None

    def test_unknown_period_not_written(self, sheet):
        """Test no column is added for a value key outside the periods."""
        assert sheet.max_column == 3

    def test_text_value_stays_text(self):
        """Test non-numeric values are written as text, formulas included."""
        result = parse_extraction({
            "metadata": {"reporting_periods": ["FY 25", "FY 24"]},
            "line_items": [{"standard_label": "=SUM(A1:A2)", "values": {"FY 25": "n/a", "FY 24": "=1+1"}}],
        })

        workbook = WorkbookEncoder().build(project(result))
        ws = workbook.active

        assert ws.cell(row=FIRST_ITEM_ROW, column=1).data_type == "s"
        assert ws.cell(row=FIRST_ITEM_ROW, column=2).value == "n/a"
        assert ws.cell(row=FIRST_ITEM_ROW, column=3).data_type == "s"


class TestWorkbookStyling:
    """Tests for role based styling."""

    def test_header_font(self, sheet):
        """Test header cells are bold."""
        assert sheet.cell(row=HEADER_ROW, column=2).font.b is True

    def test_total_row_bold(self, sheet):
        """Test total rows use the bold total font."""
        assert sheet.cell(row=FIRST_ITEM_ROW + 4, column=1).font.b is True
        assert sheet.cell(row=FIRST_ITEM_ROW + 4, column=2).font.b is True

    def test_section_heading_bold(self, sheet):
        """Test section headings are bold."""
        assert sheet.cell(row=FIRST_ITEM_ROW + 1, column=1).font.b is True

    def test_normal_row_not_bold(self, sheet):
        """Test normal rows use the regular font."""
        assert not sheet.cell(row=FIRST_ITEM_ROW, column=1).font.b

    def test_negative_colored(self, sheet):
        """Test negative values in normal rows use the negative font color."""
        font = sheet.cell(row=FIRST_ITEM_ROW + 3, column=2).font

        assert font.color.rgb.endswith(STYLES["portal"].negative_font.color.rgb[-6:])

    def test_indent(self, sheet):
        """Test nested rows are indented by depth."""
        assert sheet.cell(row=FIRST_ITEM_ROW, column=1).alignment.indent == 0
        assert sheet.cell(row=FIRST_ITEM_ROW + 2, column=1).alignment.indent == 2

    @pytest.mark.parametrize("style", ["portal", "basic", "missing"])
    def test_styles_render(self, sample_result, style):
        """Test every style, and an unknown style name, renders a workbook."""
        content = WorkbookEncoder(style).to_bytes(project(sample_result))

        assert content[:2] == b"PK"


class TestWorkbookProperties:
    """Tests for document properties."""

    def test_created_is_naive_utc(self, sample_result):
        """Test the creation time is stored as a naive UTC datetime."""
        before = datetime.now(timezone.utc).replace(tzinfo=None)

        workbook = WorkbookEncoder().build(project(sample_result))

        created = workbook.properties.created
        assert created.tzinfo is None
        assert before - timedelta(seconds=1) <= created <= datetime.now(timezone.utc).replace(tzinfo=None)
        assert workbook.properties.creator == "AI Research Portal"
