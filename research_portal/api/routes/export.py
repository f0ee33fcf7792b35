"""
Export API routes.

Re-render a previously returned extraction as CSV or Excel without calling
the model again.
"""
import re
from typing import Any, Dict

import structlog
from fastapi import APIRouter, Body, Response

from research_portal.exceptions import MalformedExtractionError, UnsupportedInputError
from research_portal.extraction.models import ExtractionResult, parse_extraction
from research_portal.extraction.projector import project
from research_portal.schemas.extraction import ErrorResponse
from research_portal.services.csv_export import CSV_MEDIA_TYPE, generate_csv
from research_portal.services.excel_builder import XLSX_MEDIA_TYPE, get_workbook_encoder

logger = structlog.get_logger(__name__)

router = APIRouter()

EXPORT_RESPONSES = {
    422: {"model": ErrorResponse, "description": "Body is a rejection, not an extraction"},
    400: {"model": ErrorResponse, "description": "Body is not an extraction"},
}


def export_filename(result: ExtractionResult, extension: str) -> str:
    """Download name derived from the company name."""
    slug = re.sub(r"[^A-Za-z0-9]+", "_", result.metadata.company_name).strip("_")
    return f"{slug}_financial_data.{extension}" if slug else f"financial_data.{extension}"


def _attachment(filename: str) -> Dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


def parse_body(payload: Dict[str, Any]) -> ExtractionResult:
    """Client-supplied extraction; a malformed body is the client's error."""
    try:
        return parse_extraction(payload)
    except MalformedExtractionError as e:
        raise UnsupportedInputError("Request body is not a valid extraction.", details=e.details) from e


@router.post(
    "/export/csv",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}}, **EXPORT_RESPONSES},
    summary="Export extraction as CSV",
)
async def export_csv(payload: Dict[str, Any] = Body(..., description="Extraction as returned in 'data'")) -> Response:
    """Serialize an extraction to CSV."""
    result = parse_body(payload)
    content = generate_csv(result)
    logger.info("CSV exported", line_items=len(result.line_items))
    return Response(
        content=content.encode("utf-8"),
        media_type=CSV_MEDIA_TYPE,
        headers=_attachment(export_filename(result, "csv")),
    )


@router.post(
    "/export/excel",
    response_class=Response,
    responses={200: {"content": {XLSX_MEDIA_TYPE: {}}}, **EXPORT_RESPONSES},
    summary="Export extraction as Excel",
)
async def export_excel(payload: Dict[str, Any] = Body(..., description="Extraction as returned in 'data'")) -> Response:
    """Render an extraction into an xlsx workbook."""
    result = parse_body(payload)
    content = get_workbook_encoder().to_bytes(project(result))
    logger.info("Workbook exported", line_items=len(result.line_items))
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers=_attachment(export_filename(result, "xlsx")),
    )
