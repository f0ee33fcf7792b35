"""
Language model client.

Sends uploaded documents plus an instruction to the OpenAI chat completions
API and returns the raw response text. PDFs travel as base64 file inputs;
text documents are decoded, truncated and merged into one text part. The
instruction is always the last part.

Timeouts and retries belong to the underlying client. Every failure of the
call surfaces as OracleTransportError.
"""
import base64
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any, Dict, List, Optional, Sequence

import openai
import structlog
from openai import AsyncOpenAI

from research_portal.config import get_settings
from research_portal.exceptions import OracleTransportError
from research_portal.middleware.logging import log_performance

logger = structlog.get_logger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
TEXT_MEDIA_TYPE = "text/plain"


@dataclass(frozen=True)
class DocumentPart:
    """One uploaded document held in memory for the duration of a request."""

    filename: str
    content_type: str
    data: bytes

    @property
    def extension(self) -> str:
        return PurePath(self.filename).suffix.lower().lstrip(".")

    @property
    def is_pdf(self) -> bool:
        return self.content_type == PDF_MEDIA_TYPE or self.extension == "pdf"

    @property
    def size(self) -> int:
        return len(self.data)


class OracleClient:
    """
    Thin async wrapper around the OpenAI client.

    The OpenAI client is created on first use so the application can start
    without credentials; a missing key fails the first call instead.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        max_text_chars: Optional[int] = None,
    ):
        settings = get_settings()
        self._api_key = api_key or settings.openai_api_key
        self.model = model or settings.oracle_model
        self.timeout = timeout or settings.oracle_timeout_seconds
        self.max_text_chars = max_text_chars or settings.max_text_chars
        self._client: Optional[AsyncOpenAI] = None
        self._call_count = 0

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self._api_key, timeout=self.timeout)
        return self._client

    def build_content(self, documents: Sequence[DocumentPart], instruction: str) -> List[Dict[str, Any]]:
        """
        Build the message content parts for a request.

        Args:
            documents: Uploaded documents, in upload order.
            instruction: Prompt text appended after the documents.

        Returns:
            Content parts for a single user message.
        """
        parts: List[Dict[str, Any]] = []
        text_chunks: List[str] = []

        for document in documents:
            if document.is_pdf:
                encoded = base64.b64encode(document.data).decode("ascii")
                parts.append({
                    "type": "file",
                    "file": {
                        "filename": document.filename,
                        "file_data": f"data:{PDF_MEDIA_TYPE};base64,{encoded}",
                    },
                })
            else:
                text = document.data.decode("utf-8", errors="replace")[: self.max_text_chars]
                text_chunks.append(f"--- Document: {document.filename} ---\n{text}")

        if text_chunks:
            parts.append({"type": "text", "text": "\n\n".join(text_chunks)})

        parts.append({"type": "text", "text": instruction})
        return parts

    @log_performance("oracle_call")
    async def generate(
        self,
        documents: Sequence[DocumentPart],
        instruction: str,
        temperature: float,
        json_mode: bool = False,
    ) -> str:
        """
        Run one model call.

        Args:
            documents: Uploaded documents.
            instruction: Prompt text.
            temperature: Sampling temperature.
            json_mode: Request a strict JSON object response.

        Returns:
            Response text ("" when the model returned no content).

        Raises:
            OracleTransportError: The call could not be completed.
        """
        request: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": self.build_content(documents, instruction)}],
            "temperature": temperature,
        }
        if json_mode:
            request["response_format"] = {"type": "json_object"}

        logger.info(
            "oracle_invoked",
            model=self.model,
            documents=len(documents),
            total_bytes=sum(d.size for d in documents),
            json_mode=json_mode,
        )

        try:
            response = await self._get_client().chat.completions.create(**request)
        except openai.OpenAIError as e:
            logger.error("oracle_call_failed", error_type=type(e).__name__, error=str(e))
            raise OracleTransportError(details={"error_type": type(e).__name__}) from e

        self._call_count += 1
        content = response.choices[0].message.content if response.choices else None
        return content or ""

    @property
    def call_count(self) -> int:
        """Get total completed calls."""
        return self._call_count


# Singleton instance
_oracle_instance: Optional[OracleClient] = None


def get_oracle_client() -> OracleClient:
    """Get singleton OracleClient instance."""
    global _oracle_instance
    if _oracle_instance is None:
        _oracle_instance = OracleClient()
    return _oracle_instance
