"""
Pydantic schemas for the extraction, analysis and export endpoints.

These document the wire shape for OpenAPI. Request bodies that carry an
extraction are still validated by ``parse_extraction``, which is more
forgiving than these schemas.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class StatementMetadataSchema(BaseModel):
    """Statement metadata as returned to clients."""

    company_name: str = Field(..., description="Company name as found in the document")
    currency: str = Field(..., description="Currency code or free text")
    units: str = Field(..., description="Units, e.g. 'in crores'")
    reporting_periods: List[str] = Field(..., description="Period labels in document order")
    statement_type: str = Field(..., description="Consolidated, Standalone or Unknown")
    source_description: str = Field("", description="Short description of the source")


class LineItemSchema(BaseModel):
    """One statement row."""

    standard_label: str = Field(..., description="Normalized label")
    original_label: str = Field(..., description="Label as printed in the document")
    depth: int = Field(0, ge=0, description="Indentation level, 0 = top level")
    is_total: bool = Field(False, description="Subtotal or total row")
    values: Dict[str, Any] = Field(default_factory=dict, description="Value per reporting period")
    notes: Optional[str] = Field(None, description="Ambiguity or structure note")


class ExtractionResultSchema(BaseModel):
    """Complete extraction."""

    metadata: StatementMetadataSchema
    line_items: List[LineItemSchema]
    analyst_notes: List[str] = Field(default_factory=list)


class ExtractResponse(BaseModel):
    """Response model for a successful extraction."""

    data: ExtractionResultSchema = Field(..., description="Extracted statement")
    excel: str = Field(..., description="Base64-encoded xlsx workbook")
    csv: Optional[str] = Field(None, description="CSV export, when requested")


class AnalyzeResponse(BaseModel):
    """Response model for a narrative analyst report."""

    report: str = Field(..., description="Markdown report text")


class ErrorResponse(BaseModel):
    """Response model for API errors."""

    error: str = Field(..., description="Human-readable error message")
    error_code: str = Field(..., description="Error code")
    retryable: bool = Field(..., description="Whether resubmitting may succeed")
    analyst_notes: Optional[List[str]] = Field(None, description="Model's explanation for rejected documents")
