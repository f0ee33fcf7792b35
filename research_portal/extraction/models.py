"""
Period/value model for one extracted financial statement.

The only place where untyped oracle JSON is accepted. ``parse_extraction``
turns a decoded JSON value into an immutable ``ExtractionResult``:

- a missing ``metadata`` object or ``line_items`` list is malformed
- an ``error`` field is the oracle declaring the document out of domain
- every other missing field gets a default, never an exception
- line item values are kept exactly as given
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import structlog

from research_portal.exceptions import MalformedExtractionError, NotAFinancialStatementError

logger = structlog.get_logger(__name__)


SECTION_HEADING_NOTE = "Section heading"


class StatementType(str, Enum):
    """Scope of the statement as reported by the oracle."""
    CONSOLIDATED = "Consolidated"
    STANDALONE = "Standalone"
    UNKNOWN = "Unknown"

    @classmethod
    def from_value(cls, value: Any) -> "StatementType":
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value.lower() == lowered:
                    return member
        return cls.UNKNOWN


@dataclass(frozen=True)
class StatementMetadata:
    """Header information describing the extracted statement."""
    company_name: str = "Unknown"
    currency: str = "N/A"
    units: str = "N/A"
    reporting_periods: Tuple[str, ...] = ()
    statement_type: StatementType = StatementType.UNKNOWN
    source_description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "company_name": self.company_name,
            "currency": self.currency,
            "units": self.units,
            "reporting_periods": list(self.reporting_periods),
            "statement_type": self.statement_type.value,
            "source_description": self.source_description,
        }


@dataclass(frozen=True)
class LineItem:
    """One row of the statement, in source order."""
    standard_label: str = ""
    original_label: str = ""
    depth: int = 0
    is_total: bool = False
    values: Dict[str, Any] = field(default_factory=dict)
    notes: Optional[str] = None

    @property
    def display_label(self) -> str:
        """Label as printed in artifacts: source wording first."""
        return self.original_label or self.standard_label or "Unknown"

    def value_for(self, period: str) -> Any:
        """Value reported for a period, or None when absent."""
        return self.values.get(period)

    def has_values(self, periods: Tuple[str, ...]) -> bool:
        """Whether any reporting period carries a non-null value."""
        return any(self.values.get(period) is not None for period in periods)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "standard_label": self.standard_label,
            "original_label": self.original_label,
            "depth": self.depth,
            "is_total": self.is_total,
            "values": dict(self.values),
            "notes": self.notes,
        }


@dataclass(frozen=True)
class ExtractionResult:
    """A complete extraction: metadata, ordered line items, analyst notes."""
    metadata: StatementMetadata
    line_items: Tuple[LineItem, ...] = ()
    analyst_notes: Tuple[str, ...] = ()

    @property
    def periods(self) -> Tuple[str, ...]:
        return self.metadata.reporting_periods

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the oracle wire shape."""
        return {
            "metadata": self.metadata.to_dict(),
            "line_items": [item.to_dict() for item in self.line_items],
            "analyst_notes": list(self.analyst_notes),
        }


# =============================================================================
# Construction from decoded JSON
# =============================================================================

def _text(value: Any, default: str) -> str:
    if value is None:
        return default
    text = str(value)
    return text if text else default


def _text_list(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(entry) for entry in value if entry is not None)


def _depth(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        depth = int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(depth, 0)


def parse_metadata(raw: Dict[str, Any]) -> StatementMetadata:
    """Build metadata, defaulting every missing field."""
    return StatementMetadata(
        company_name=_text(raw.get("company_name"), "Unknown"),
        currency=_text(raw.get("currency"), "N/A"),
        units=_text(raw.get("units"), "N/A"),
        reporting_periods=_text_list(raw.get("reporting_periods")),
        statement_type=StatementType.from_value(raw.get("statement_type")),
        source_description=_text(raw.get("source_description"), ""),
    )


def parse_line_item(raw: Dict[str, Any]) -> LineItem:
    """Build one line item; values are passed through untouched."""
    values = raw.get("values")
    notes = raw.get("notes")
    return LineItem(
        standard_label=_text(raw.get("standard_label"), ""),
        original_label=_text(raw.get("original_label"), ""),
        depth=_depth(raw.get("depth")),
        is_total=raw.get("is_total") is True,
        values={str(k): v for k, v in values.items()} if isinstance(values, dict) else {},
        notes=str(notes) if notes is not None else None,
    )


def raise_for_domain_error(data: Any) -> None:
    """Raise NotAFinancialStatementError if the oracle declined the document."""
    if isinstance(data, dict) and data.get("error"):
        raise NotAFinancialStatementError(
            str(data["error"]),
            analyst_notes=list(_text_list(data.get("analyst_notes"))),
        )


def parse_extraction(data: Any) -> ExtractionResult:
    """
    Build an ExtractionResult from a decoded JSON value.

    Args:
        data: Output of ``json.loads`` on the oracle response.

    Returns:
        Immutable ExtractionResult.

    Raises:
        NotAFinancialStatementError: The value carries an ``error`` field.
        MalformedExtractionError: ``metadata`` or ``line_items`` is missing.
    """
    raise_for_domain_error(data)

    if not isinstance(data, dict):
        raise MalformedExtractionError(details={"reason": "top-level value is not an object"})

    metadata = data.get("metadata")
    line_items = data.get("line_items")
    if not isinstance(metadata, dict):
        raise MalformedExtractionError(details={"reason": "missing metadata object"})
    if not isinstance(line_items, list):
        raise MalformedExtractionError(details={"reason": "missing line_items list"})

    items: List[LineItem] = []
    for index, raw_item in enumerate(line_items):
        if not isinstance(raw_item, dict):
            logger.warning("line_item_skipped", index=index, item_type=type(raw_item).__name__)
            continue
        items.append(parse_line_item(raw_item))

    return ExtractionResult(
        metadata=parse_metadata(metadata),
        line_items=tuple(items),
        analyst_notes=_text_list(data.get("analyst_notes")),
    )
