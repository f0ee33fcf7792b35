"""
Narrative analyst report for earnings call transcripts.
"""
from typing import Optional

import structlog

from research_portal.config import get_settings
from research_portal.exceptions import AnalysisFailedError, OracleTransportError
from research_portal.services.oracle import DocumentPart, OracleClient, get_oracle_client
from research_portal.services.prompts import ANALYST_PROMPT

logger = structlog.get_logger(__name__)


class AnalysisService:
    """Produces a markdown analyst report from one document."""

    def __init__(self, oracle: Optional[OracleClient] = None, temperature: Optional[float] = None):
        self._oracle = oracle or get_oracle_client()
        self.temperature = temperature if temperature is not None else get_settings().analysis_temperature

    async def analyze(self, document: DocumentPart) -> str:
        """
        Generate the report.

        Args:
            document: Transcript or report to analyze.

        Returns:
            Report text as produced by the model.

        Raises:
            AnalysisFailedError: The model call failed.
        """
        try:
            report = await self._oracle.generate(
                [document],
                ANALYST_PROMPT,
                temperature=self.temperature,
            )
        except OracleTransportError as e:
            raise AnalysisFailedError(details=e.details) from e

        logger.info("analysis_completed", filename=document.filename, report_chars=len(report))
        return report
