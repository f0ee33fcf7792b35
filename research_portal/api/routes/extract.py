"""
Extraction API routes.

Provides the endpoint that turns uploaded statements into structured data
and a styled workbook.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile

from research_portal.api.uploads import read_documents
from research_portal.extraction.orchestrator import ExtractionOptions, ExtractionOrchestrator
from research_portal.middleware.rate_limit import extract_rate_limit
from research_portal.schemas.extraction import ErrorResponse, ExtractResponse
from research_portal.services.oracle import OracleClient, get_oracle_client


router = APIRouter()


@router.post(
    "/extract",
    response_model=ExtractResponse,
    response_model_exclude_unset=True,
    responses={
        400: {"model": ErrorResponse, "description": "Unsupported or oversized file"},
        422: {"model": ErrorResponse, "description": "Document is not a financial statement"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
        500: {"model": ErrorResponse, "description": "Model or processing failure"},
    },
    summary="Extract income statement",
    description=(
        "Upload one or more PDF or TXT documents. Returns the extracted income "
        "statement and a base64-encoded Excel workbook."
    ),
)
@extract_rate_limit()
async def extract_statement(
    request: Request,
    files: Optional[List[UploadFile]] = File(None, description="PDF or TXT documents"),
    include_csv: bool = Query(False, description="Also return the CSV export"),
    oracle: OracleClient = Depends(get_oracle_client),
) -> dict:
    """
    Extract a structured income statement from uploaded documents.

    Args:
        files: Uploaded documents.
        include_csv: Add a ``csv`` field to the response.
        oracle: Language model client.

    Returns:
        ``{"data": ..., "excel": ...}`` plus ``csv`` when requested.
    """
    documents = await read_documents(files)
    outcome = await ExtractionOrchestrator(oracle).run(
        documents,
        ExtractionOptions(include_csv=include_csv),
    )
    return outcome.to_response()
