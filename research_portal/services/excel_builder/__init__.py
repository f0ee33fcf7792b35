"""
Excel Builder module.

Renders extraction grid plans into styled xlsx workbooks.
"""

from research_portal.services.excel_builder.builder import (
    XLSX_MEDIA_TYPE,
    WorkbookEncoder,
    encode_workbook,
    get_workbook_encoder,
)
from research_portal.services.excel_builder.styles import DEFAULT_STYLE, STYLES, StyleConfig

__all__ = [
    "XLSX_MEDIA_TYPE",
    "WorkbookEncoder",
    "encode_workbook",
    "get_workbook_encoder",
    "DEFAULT_STYLE",
    "STYLES",
    "StyleConfig",
]
