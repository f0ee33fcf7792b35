"""
CSV export of an extraction.

Built straight from the ExtractionResult, not from the styled grid. Quoting
is standard minimal CSV quoting applied to every field, headers and metadata
labels included: fields containing a comma, a double quote or a line break
are wrapped in double quotes with inner quotes doubled.
"""
import csv
import io
from typing import Any, List

import structlog

from research_portal.extraction.models import ExtractionResult

logger = structlog.get_logger(__name__)

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


def _cell(value: Any) -> Any:
    return "" if value is None else value


def csv_rows(result: ExtractionResult) -> List[List[Any]]:
    """Rows of the CSV artifact before quoting."""
    metadata = result.metadata
    periods = list(result.periods)

    rows: List[List[Any]] = [
        ["Company", metadata.company_name or "Unknown"],
        ["Currency", metadata.currency or "N/A"],
        ["Units", metadata.units or "N/A"],
        ["Statement Type", metadata.statement_type.value],
        [],
        ["Line Item", *periods, "Notes"],
    ]

    for item in result.line_items:
        values = [_cell(item.value_for(period)) for period in periods]
        rows.append([item.display_label, *values, item.notes or ""])

    if result.analyst_notes:
        rows.append([])
        rows.append(["Analyst Notes"])
        rows.extend([note] if note else [] for note in result.analyst_notes)

    return rows


def generate_csv(result: ExtractionResult) -> str:
    """
    Serialize an extraction to CSV text.

    Args:
        result: Extraction to export.

    Returns:
        CSV content, rows separated by ``\\n``.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    rows = csv_rows(result)
    writer.writerows(rows)

    logger.debug("CSV generated", rows=len(rows), periods=len(result.periods))
    return buffer.getvalue()
