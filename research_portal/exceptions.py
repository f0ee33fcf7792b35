"""
Custom exceptions for the Research Portal.

Every failure reaching a client is one of these kinds. Each carries an error
code, the HTTP status it maps to, and whether resubmitting can help.
"""
from typing import Any, Dict, List, Optional


class PortalError(Exception):
    """
    Base exception for all Research Portal errors.

    Attributes:
        error_code: Unique error code (e.g., RP-100)
        message: Human-readable error message
        details: Additional error context (logged, not returned)
        retryable: Whether the same request may succeed if resubmitted
    """
    error_code: str = "RP-000"
    http_status: int = 500
    retryable: bool = True

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ):
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API response."""
        return {
            "error": self.message,
            "error_code": self.error_code,
            "retryable": self.retryable,
        }


# Input Errors (RP-1XX)
class UnsupportedInputError(PortalError):
    """Uploaded input rejected before any oracle call."""
    error_code = "RP-100"
    http_status = 400

    def __init__(self, message: str = "Unsupported input", **kwargs):
        super().__init__(message, **kwargs)


class NoFilesUploadedError(UnsupportedInputError):
    """Request carried no documents."""
    error_code = "RP-101"

    def __init__(self, **kwargs):
        super().__init__("No files uploaded.", **kwargs)


class InvalidFileTypeError(UnsupportedInputError):
    """Document is neither PDF nor plain text."""
    error_code = "RP-102"

    def __init__(self, filename: str, extension: str, **kwargs):
        message = (
            f'Unsupported file type "{extension}" in "{filename}". '
            "Please upload PDF or TXT files only."
        )
        super().__init__(message, details={"filename": filename, "extension": extension}, **kwargs)


class FileTooLargeError(UnsupportedInputError):
    """Document exceeds the per-file size limit."""
    error_code = "RP-103"

    def __init__(self, filename: str, size: int, max_size: int, **kwargs):
        size_mb = size / (1024 * 1024)
        max_mb = max_size // (1024 * 1024)
        message = (
            f'"{filename}" is too large ({size_mb:.1f} MB). '
            f"Maximum allowed size is {max_mb} MB per file."
        )
        super().__init__(message, details={"filename": filename, "size": size, "max_size": max_size}, **kwargs)


# Oracle Errors (RP-2XX)
class OracleTransportError(PortalError):
    """The language model call itself failed (network, quota, timeout)."""
    error_code = "RP-200"
    http_status = 500

    def __init__(self, message: str = "Failed to reach the language model. Please try again.", **kwargs):
        super().__init__(message, **kwargs)


class MalformedExtractionError(PortalError):
    """The oracle responded, but no JSON extraction could be recovered."""
    error_code = "RP-201"
    http_status = 500

    def __init__(self, message: str = "AI returned invalid data format. Please try again.", **kwargs):
        super().__init__(message, **kwargs)


class NotAFinancialStatementError(PortalError):
    """The oracle declared the document out of domain."""
    error_code = "RP-202"
    http_status = 422
    retryable = False

    def __init__(self, message: str, analyst_notes: Optional[List[str]] = None, **kwargs):
        self.analyst_notes = list(analyst_notes or [])
        super().__init__(message, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["analyst_notes"] = self.analyst_notes
        return payload


# Pipeline Errors (RP-3XX)
class ExtractionFailedError(PortalError):
    """Any other failure while turning a response into artifacts."""
    error_code = "RP-300"
    http_status = 500

    def __init__(self, message: str = "Failed to extract financial data. Please try again.", **kwargs):
        super().__init__(message, **kwargs)


class AnalysisFailedError(PortalError):
    """The narrative report could not be produced."""
    error_code = "RP-301"
    http_status = 500

    def __init__(self, message: str = "Failed to process document", **kwargs):
        super().__init__(message, **kwargs)
