"""
Middleware module initialization.
"""
from research_portal.middleware.logging import (
    CorrelationIdMiddleware,
    RequestLoggingMiddleware,
    get_correlation_id,
    redact_sensitive_data,
    log_performance,
    add_correlation_id_processor,
    redact_sensitive_processor,
)
from research_portal.middleware.rate_limit import (
    limiter,
    rate_limit_exceeded_handler,
    extract_rate_limit,
)
from research_portal.middleware.security import SecurityHeadersMiddleware, get_cors_origins

__all__ = [
    "CorrelationIdMiddleware",
    "RequestLoggingMiddleware",
    "get_correlation_id",
    "redact_sensitive_data",
    "log_performance",
    "add_correlation_id_processor",
    "redact_sensitive_processor",
    "limiter",
    "rate_limit_exceeded_handler",
    "extract_rate_limit",
    "SecurityHeadersMiddleware",
    "get_cors_origins",
]
