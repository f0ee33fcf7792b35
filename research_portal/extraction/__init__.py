"""
Structured income statement extraction.

Model output is decoded, validated into an immutable ExtractionResult,
classified into row roles, and projected into a grid plan. The orchestrator
in ``research_portal.extraction.orchestrator`` ties these to the model call
and the encoders.
"""

from research_portal.extraction.models import (
    ExtractionResult,
    LineItem,
    StatementMetadata,
    StatementType,
    parse_extraction,
)
from research_portal.extraction.projector import GridPlan, GridRow, project
from research_portal.extraction.reconciler import RowRole, derive_role, derive_roles

__all__ = [
    "ExtractionResult",
    "LineItem",
    "StatementMetadata",
    "StatementType",
    "parse_extraction",
    "GridPlan",
    "GridRow",
    "project",
    "RowRole",
    "derive_role",
    "derive_roles",
]
