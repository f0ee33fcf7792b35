"""
Unit tests for the tabular projection.
"""
import pytest

from research_portal.extraction.models import parse_extraction
from research_portal.extraction.projector import (
    LABEL_HEADER,
    MAX_COLUMN_WIDTH,
    MIN_LABEL_COLUMN_WIDTH,
    GridCell,
    format_number,
    is_numeric,
    project,
)
from research_portal.extraction.reconciler import RowRole


class TestNumberFormatting:
    """Tests for numeric detection and display."""

    @pytest.mark.parametrize("value,expected", [
        (-1500.5, "-1,500.50"),
        (204813, "204,813.00"),
        (0, "0.00"),
        (1234567.891, "1,234,567.89"),
    ])
    def test_format_number(self, value, expected):
        """Test thousands separators and two decimals."""
        assert format_number(value) == expected

    @pytest.mark.parametrize("value,expected", [
        (1, True),
        (1.5, True),
        (True, False),
        ("100", False),
        (None, False),
        (float("inf"), False),
        (float("nan"), False),
        (10 ** 400, False),
    ])
    def test_is_numeric(self, value, expected):
        """Test booleans and numeric strings are not numbers."""
        assert is_numeric(value) is expected

    def test_grid_cell_text(self):
        """Test cell display for numbers, text and blanks."""
        assert GridCell(-1500.5).display_text == "-1,500.50"
        assert GridCell(-1500.5).is_negative is True
        assert GridCell("n/a").display_text == "n/a"
        assert GridCell("n/a").is_negative is False
        assert GridCell(None).display_text == ""
        assert GridCell(None).is_empty is True


class TestProject:
    """Tests for project()."""

    def test_header(self, sample_result):
        """Test header is the label column plus each period in order."""
        plan = project(sample_result)

        assert plan.header == (LABEL_HEADER, "FY 25", "FY 24")
        assert plan.period_count == 2

    def test_metadata_rows(self, sample_result):
        """Test metadata block contents."""
        plan = project(sample_result)

        assert plan.metadata_rows == (
            ("Company", "Acme Industries Ltd"),
            ("Currency", "INR"),
            ("Units", "in crores"),
            ("Statement Type", "Consolidated"),
        )

    def test_one_row_per_item(self, sample_result):
        """Test row count and row order follow the line items."""
        plan = project(sample_result)

        assert len(plan.rows) == len(sample_result.line_items)
        assert [row.label_text for row in plan.rows] == [
            item.display_label for item in sample_result.line_items
        ]

    def test_cells_aligned_to_periods(self, sample_result):
        """Test every row has one cell per period and missing ones are blank."""
        plan = project(sample_result)

        for row in plan.rows:
            assert len(row.cells) == plan.period_count

        assert plan.rows[0].cell_values == (204813, 163210.5)
        assert plan.rows[1].cell_values == (None, None)
        assert plan.rows[3].cell_values == (-1500.5, None)

    def test_unknown_period_keys_omitted(self, sample_result):
        """Test values outside reporting periods never reach the grid."""
        plan = project(sample_result)

        assert plan.rows[4].cell_values == (82937.43, 70264.61)

    def test_value_order_follows_periods_not_keys(self):
        """Test cell order comes from reporting_periods, not dict order."""
        result = parse_extraction({
            "metadata": {"reporting_periods": ["FY 25", "FY 24"]},
            "line_items": [{"standard_label": "Revenue", "values": {"FY 24": 1, "FY 25": 2}}],
        })

        assert project(result).rows[0].cell_values == (2, 1)

    def test_roles_and_indent(self, sample_result):
        """Test row roles and indentation levels."""
        plan = project(sample_result)

        assert [row.role for row in plan.rows] == [
            RowRole.NORMAL,
            RowRole.SECTION_HEADING,
            RowRole.NORMAL,
            RowRole.NORMAL,
            RowRole.TOTAL,
        ]
        assert [row.indent_level for row in plan.rows] == [0, 0, 1, 1, 0]

    def test_label_falls_back_to_standard(self, sample_result):
        """Test an empty original label shows the standard label."""
        plan = project(sample_result)

        assert plan.rows[3].label_text == "Change in Inventory"
        assert plan.rows[0].label_text == "Revenue from operations"

    def test_notes_carried(self, sample_result):
        """Test row notes and analyst notes are carried into the plan."""
        plan = project(sample_result)

        assert plan.rows[3].note_text == "FY 24 value not legible"
        assert plan.analyst_notes == sample_result.analyst_notes

    def test_projection_is_deterministic(self, sample_result):
        """Test projecting twice yields the same plan."""
        assert project(sample_result) == project(sample_result)

    def test_no_periods(self):
        """Test an extraction without periods still projects."""
        result = parse_extraction({"metadata": {}, "line_items": [{"standard_label": "Revenue"}]})

        plan = project(result)

        assert plan.header == (LABEL_HEADER,)
        assert plan.rows[0].cells == ()


class TestColumnWidths:
    """Tests for column width estimation."""

    def test_label_column_minimum(self, sample_result):
        """Test the label column is never narrower than the minimum."""
        plan = project(sample_result)

        assert plan.column_widths[0] >= MIN_LABEL_COLUMN_WIDTH
        assert len(plan.column_widths) == len(plan.header)

    def test_widths_capped(self):
        """Test very long labels are capped."""
        result = parse_extraction({
            "metadata": {"reporting_periods": ["FY 25"]},
            "line_items": [{"standard_label": "x" * 200, "values": {"FY 25": 1}}],
        })

        plan = project(result)

        assert plan.column_widths[0] == MAX_COLUMN_WIDTH

    def test_out_of_range_values_render_as_text(self):
        """Test values beyond float range project without error."""
        result = parse_extraction({
            "metadata": {"reporting_periods": ["FY 25", "FY 24"]},
            "line_items": [{"standard_label": "Revenue", "values": {"FY 25": 10 ** 400, "FY 24": float("-inf")}}],
        })

        plan = project(result)

        cells = plan.rows[0].cells
        assert cells[0].display_text == str(10 ** 400)
        assert cells[1].display_text == "-inf"
        assert cells[1].is_negative is False
        assert plan.column_widths[1] == MAX_COLUMN_WIDTH
