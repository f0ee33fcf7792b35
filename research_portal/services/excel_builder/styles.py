"""
Styles for the extraction workbook.

Each style maps the three row roles (total, section heading, normal) plus
negative values, the metadata block, the header row and analyst notes to
openpyxl fonts, fills and borders.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from openpyxl.styles import (
    Alignment,
    Border,
    Font,
    PatternFill,
    Side,
)


@dataclass
class StyleConfig:
    """Configuration for a workbook style."""

    name: str

    # Fonts
    header_font: Font
    section_font: Font
    item_font: Font
    negative_font: Font
    total_font: Font
    meta_label_font: Font
    meta_value_font: Font
    note_font: Font

    # Fills
    header_fill: Optional[PatternFill] = None
    section_fill: Optional[PatternFill] = None
    total_fill: Optional[PatternFill] = None

    # Borders
    cell_border: Optional[Border] = None

    # Alignment
    header_alignment: Optional[Alignment] = None
    value_alignment: Optional[Alignment] = None

    header_height: float = 28


def _thin_border(color: str) -> Border:
    side = Side(style="thin", color=color)
    return Border(top=side, bottom=side, left=side, right=side)


STYLES: Dict[str, StyleConfig] = {
    "portal": StyleConfig(
        name="Portal",
        header_font=Font(name="Calibri", bold=True, size=11, color="FFFFFF"),
        section_font=Font(name="Calibri", bold=True, size=11, color="5D4037"),
        item_font=Font(name="Calibri", size=11),
        negative_font=Font(name="Calibri", size=11, color="C62828"),
        total_font=Font(name="Calibri", bold=True, size=11, color="4A154B"),
        meta_label_font=Font(name="Calibri", bold=True, size=11, color="4A154B"),
        meta_value_font=Font(name="Calibri", size=11),
        note_font=Font(name="Calibri", size=11, italic=True, color="757575"),
        header_fill=PatternFill("solid", fgColor="4A154B"),  # Deep purple
        section_fill=PatternFill("solid", fgColor="FFF8E1"),  # Light yellow
        total_fill=PatternFill("solid", fgColor="F2E8F2"),  # Light purple
        cell_border=_thin_border("D0D0D0"),
        header_alignment=Alignment(horizontal="center", vertical="center"),
        value_alignment=Alignment(horizontal="right", vertical="center"),
    ),

    "basic": StyleConfig(
        name="Basic",
        header_font=Font(bold=True, size=11),
        section_font=Font(bold=True, size=10),
        item_font=Font(size=10),
        negative_font=Font(size=10, color="C00000"),
        total_font=Font(bold=True, size=10),
        meta_label_font=Font(bold=True, size=10),
        meta_value_font=Font(size=10),
        note_font=Font(size=10, italic=True),
        cell_border=Border(bottom=Side(style="thin", color="000000")),
        header_alignment=Alignment(horizontal="center", vertical="center"),
        value_alignment=Alignment(horizontal="right", vertical="center"),
    ),
}

DEFAULT_STYLE = "portal"
