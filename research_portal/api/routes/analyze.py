"""
Analysis API routes.

Provides the endpoint that writes a narrative analyst report for an
earnings call transcript or annual report.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile

from research_portal.api.uploads import read_documents
from research_portal.middleware.rate_limit import extract_rate_limit
from research_portal.schemas.extraction import AnalyzeResponse, ErrorResponse
from research_portal.services.analysis import AnalysisService
from research_portal.services.oracle import OracleClient, get_oracle_client

router = APIRouter()


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Unsupported or oversized file"},
        500: {"model": ErrorResponse, "description": "Model failure"},
    },
    summary="Generate analyst report",
    description="Upload one PDF or TXT document and receive a ten-section analyst report in markdown.",
)
@extract_rate_limit()
async def analyze_document(
    request: Request,
    file: Optional[UploadFile] = File(None, description="PDF or TXT document"),
    oracle: OracleClient = Depends(get_oracle_client),
) -> AnalyzeResponse:
    """Generate the report for a single document."""
    documents = await read_documents([file] if file else [])
    report = await AnalysisService(oracle).analyze(documents[0])
    return AnalyzeResponse(report=report)
