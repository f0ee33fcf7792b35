"""
Row role derivation for extracted line items.

Roles drive presentation only. They are computed from the flags and notes
the oracle supplied and are never written back onto the line items.
"""

from enum import Enum
from typing import Dict, List, Sequence, Tuple

from research_portal.extraction.models import (
    SECTION_HEADING_NOTE,
    ExtractionResult,
    LineItem,
)


class RowRole(str, Enum):
    """Presentation role of a line item."""
    TOTAL = "total"
    SECTION_HEADING = "section_heading"
    NORMAL = "normal"


def derive_role(item: LineItem, periods: Sequence[str]) -> RowRole:
    """
    Classify a single line item.

    ``is_total`` wins over everything. A row with no value for any reporting
    period is a section heading when the oracle labelled it so or when it
    sits at the top level.
    """
    if item.is_total:
        return RowRole.TOTAL
    if not item.has_values(tuple(periods)):
        if item.notes == SECTION_HEADING_NOTE or item.depth == 0:
            return RowRole.SECTION_HEADING
    return RowRole.NORMAL


def derive_roles(items: Sequence[LineItem], periods: Sequence[str]) -> List[RowRole]:
    """Roles for every item, parallel to ``items``."""
    period_tuple = tuple(periods)
    return [derive_role(item, period_tuple) for item in items]


def find_unknown_period_keys(result: ExtractionResult) -> Dict[int, Tuple[str, ...]]:
    """
    Value keys that are not reporting periods, by line item index.

    These values are omitted from every artifact; callers only log them.
    """
    known = set(result.periods)
    unknown: Dict[int, Tuple[str, ...]] = {}
    for index, item in enumerate(result.line_items):
        extra = tuple(key for key in item.values if key not in known)
        if extra:
            unknown[index] = extra
    return unknown
