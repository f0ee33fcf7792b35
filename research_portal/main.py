"""
FastAPI application entry point.

Configures the application with routes, middleware, and settings.
"""
import logging
import os

import sentry_sdk
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from slowapi.errors import RateLimitExceeded

from research_portal import __version__
from research_portal.api.routes import analyze, export, extract
from research_portal.config import get_settings
from research_portal.exceptions import PortalError, UnsupportedInputError
from research_portal.middleware.logging import (
    CorrelationIdMiddleware,
    RequestLoggingMiddleware,
    add_correlation_id_processor,
    redact_sensitive_processor,
)
from research_portal.middleware.rate_limit import limiter, rate_limit_exceeded_handler
from research_portal.middleware.security import SecurityHeadersMiddleware, get_cors_origins

settings = get_settings()

sentry_dsn = os.getenv("SENTRY_DSN")
if sentry_dsn:
    sentry_sdk.init(
        dsn=sentry_dsn,
        environment=os.getenv("ENVIRONMENT", "development"),
        release=os.getenv("APP_VERSION", __version__),
        traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1")),
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            LoggingIntegration(level=None, event_level="ERROR"),
        ],
        # Uploaded documents must never leave the process
        send_default_pii=False,
        max_request_body_size="never",
    )

logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        add_correlation_id_processor,
        redact_sensitive_processor,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Research Portal API",
    description="""
## Financial document extraction and analyst reports

- **Extract**: upload income statements (PDF or TXT) and receive the line items
  as structured JSON plus a styled Excel workbook.
- **Analyze**: upload an earnings call transcript and receive a ten-section
  analyst report.
- **Export**: re-render a previous extraction as CSV or Excel.
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Extraction", "description": "Structured statement extraction"},
        {"name": "Analysis", "description": "Narrative analyst reports"},
        {"name": "Export", "description": "CSV and Excel re-export"},
        {"name": "Health", "description": "Health checks"},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-ID", "Content-Disposition"],
)
app.add_middleware(SecurityHeadersMiddleware)

# Order matters: correlation ID first
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(CorrelationIdMiddleware)

app.add_middleware(GZipMiddleware, minimum_size=1000)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

app.include_router(extract.router, prefix="/api/v1", tags=["Extraction"])
app.include_router(analyze.router, prefix="/api/v1", tags=["Analysis"])
app.include_router(export.router, prefix="/api/v1", tags=["Export"])


@app.exception_handler(PortalError)
async def portal_exception_handler(request: Request, exc: PortalError):
    """Handle all Research Portal exceptions."""
    log = logger.warning if exc.http_status < 500 else logger.error
    log(
        "portal_error",
        error_code=exc.error_code,
        message=exc.message,
        details=exc.details,
        path=str(request.url.path),
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed requests as 400 in the portal error shape."""
    error = UnsupportedInputError("Invalid request.")
    logger.warning(
        "request_validation_failed",
        error_code=error.error_code,
        errors=[{"loc": list(e.get("loc", ())), "type": e.get("type")} for e in exc.errors()],
        path=str(request.url.path),
    )
    return JSONResponse(status_code=error.http_status, content=error.to_dict())


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions without leaking internals."""
    sentry_sdk.capture_exception(exc)
    logger.error(
        "unhandled_error",
        error_type=type(exc).__name__,
        message=str(exc),
        path=str(request.url.path),
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "An unexpected error occurred. Please try again.",
            "error_code": "RP-999",
            "retryable": True,
        },
    )


@app.get("/health", tags=["Health"])
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}
