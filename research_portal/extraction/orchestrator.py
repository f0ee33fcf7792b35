"""
Orchestrator for one extraction request.

Stages:
Received -> OracleInvoked -> ResponseParsed -> ResultReady | DomainError | ParseFailed

One request makes exactly one model call. Nothing is cached or retried here,
and every failure leaves as a PortalError so callers never see internals.
"""

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence

import structlog

from research_portal.config import get_settings
from research_portal.exceptions import (
    ExtractionFailedError,
    MalformedExtractionError,
    NotAFinancialStatementError,
    PortalError,
)
from research_portal.extraction.models import ExtractionResult, parse_extraction
from research_portal.extraction.parsing import decode_oracle_json
from research_portal.extraction.projector import project
from research_portal.extraction.reconciler import find_unknown_period_keys
from research_portal.services.csv_export import generate_csv
from research_portal.services.excel_builder import DEFAULT_STYLE, WorkbookEncoder
from research_portal.services.oracle import DocumentPart, OracleClient, get_oracle_client
from research_portal.services.prompts import EXTRACTION_PROMPT

logger = structlog.get_logger(__name__)


class ExtractionStage(str, Enum):
    """Pipeline stages of one request."""
    RECEIVED = "received"
    ORACLE_INVOKED = "oracle_invoked"
    RESPONSE_PARSED = "response_parsed"
    RESULT_READY = "result_ready"
    DOMAIN_ERROR = "domain_error"
    PARSE_FAILED = "parse_failed"


@dataclass
class ExtractionOptions:
    """Per-request options."""
    include_csv: bool = False
    style: str = DEFAULT_STYLE
    temperature: Optional[float] = None


@dataclass(frozen=True)
class ExtractionOutcome:
    """Successful extraction with its encoded artifacts."""
    result: ExtractionResult
    excel: str
    csv: Optional[str] = None

    def to_response(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"data": self.result.to_dict(), "excel": self.excel}
        if self.csv is not None:
            payload["csv"] = self.csv
        return payload


def build_artifacts(result: ExtractionResult, options: ExtractionOptions) -> ExtractionOutcome:
    """Run a parsed extraction through projection and encoding."""
    unknown_keys = find_unknown_period_keys(result)
    if unknown_keys:
        logger.warning(
            "unknown_period_keys",
            line_items=len(unknown_keys),
            keys=sorted({key for keys in unknown_keys.values() for key in keys}),
        )

    plan = project(result)
    excel = WorkbookEncoder(options.style).encode(plan)
    csv_text = generate_csv(result) if options.include_csv else None
    return ExtractionOutcome(result=result, excel=excel, csv=csv_text)


class ExtractionOrchestrator:
    """Drives documents through the model call, parsing and artifact encoding."""

    def __init__(self, oracle: Optional[OracleClient] = None):
        self._oracle = oracle or get_oracle_client()

    async def run(
        self,
        documents: Sequence[DocumentPart],
        options: Optional[ExtractionOptions] = None,
    ) -> ExtractionOutcome:
        """
        Extract the income statement from uploaded documents.

        Args:
            documents: Validated uploads.
            options: Request options.

        Returns:
            ExtractionOutcome with the model, base64 workbook and optional CSV.

        Raises:
            NotAFinancialStatementError: The model declared the documents out of domain.
            MalformedExtractionError: The response held no recoverable JSON.
            OracleTransportError: The model call failed.
            ExtractionFailedError: Anything else went wrong.
        """
        options = options or ExtractionOptions()
        request_id = str(uuid.uuid4())[:8]
        log = logger.bind(extraction_id=request_id)
        stage = ExtractionStage.RECEIVED
        log.info("extraction_received", documents=[d.filename for d in documents])

        temperature = options.temperature
        if temperature is None:
            temperature = get_settings().extraction_temperature

        try:
            stage = ExtractionStage.ORACLE_INVOKED
            raw_text = await self._oracle.generate(
                documents,
                EXTRACTION_PROMPT,
                temperature=temperature,
                json_mode=True,
            )
            log.info("oracle_response_received", chars=len(raw_text), prefix=raw_text[:300])

            data = decode_oracle_json(raw_text)
            stage = ExtractionStage.RESPONSE_PARSED

            result = parse_extraction(data)
            outcome = build_artifacts(result, options)

        except NotAFinancialStatementError as e:
            stage = ExtractionStage.DOMAIN_ERROR
            log.info("extraction_rejected", stage=stage.value, reason=e.message, notes=len(e.analyst_notes))
            raise
        except MalformedExtractionError as e:
            stage = ExtractionStage.PARSE_FAILED
            log.warning("extraction_unparseable", stage=stage.value, details=e.details)
            raise
        except PortalError as e:
            log.error("extraction_failed", stage=stage.value, error_code=e.error_code)
            raise
        except Exception as e:
            log.error("extraction_failed", stage=stage.value, error_type=type(e).__name__, error=str(e))
            raise ExtractionFailedError(details={"stage": stage.value}) from e

        stage = ExtractionStage.RESULT_READY
        log.info(
            "extraction_completed",
            stage=stage.value,
            company=result.metadata.company_name,
            periods=len(result.periods),
            line_items=len(result.line_items),
        )
        return outcome


def get_extraction_orchestrator(oracle: Optional[OracleClient] = None) -> ExtractionOrchestrator:
    """Create a new ExtractionOrchestrator instance."""
    return ExtractionOrchestrator(oracle)
