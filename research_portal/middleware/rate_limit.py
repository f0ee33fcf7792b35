"""
Per-client rate limiting of the HTTP endpoints using slowapi.

Limits inbound requests only; the model call itself is never throttled.
"""
from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse
import structlog

from research_portal.config import get_settings

logger = structlog.get_logger(__name__)
settings = get_settings()

RETRY_AFTER_SECONDS = 60


def get_client_identifier(request: Request) -> str:
    """Client IP, honouring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(key_func=get_client_identifier, enabled=settings.rate_limit_enabled)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Return the standard error body with retry information."""
    logger.warning(
        "rate_limit_exceeded",
        client=get_client_identifier(request),
        path=request.url.path,
        limit=str(exc.detail),
    )
    return JSONResponse(
        status_code=429,
        content={
            "error": "Too many requests. Please slow down.",
            "error_code": "RP-429",
            "retryable": True,
        },
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )


def extract_rate_limit():
    """Rate limit decorator for endpoints that call the model."""
    return limiter.limit(settings.extract_rate_limit)
