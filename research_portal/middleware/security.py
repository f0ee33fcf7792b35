"""
Security headers middleware and CORS configuration.
"""
import os
from typing import Callable, List

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds security headers to all responses.

    Headers added:
    - X-Content-Type-Options: nosniff
    - X-Frame-Options: DENY
    - Referrer-Policy
    - Content-Security-Policy
    - Strict-Transport-Security (when ENABLE_HSTS=true)
    """

    ENABLE_HSTS = os.getenv("ENABLE_HSTS", "false").lower() == "true"

    # One year
    HSTS_MAX_AGE = 31536000

    CSP_POLICY = "; ".join([
        "default-src 'self'",
        "script-src 'self' 'unsafe-inline'",  # Swagger UI
        "style-src 'self' 'unsafe-inline'",
        "img-src 'self' data: https:",
        "frame-ancestors 'none'",
        "base-uri 'self'",
    ])

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = self.CSP_POLICY

        if self.ENABLE_HSTS:
            response.headers["Strict-Transport-Security"] = (
                f"max-age={self.HSTS_MAX_AGE}; includeSubDomains"
            )

        if "Server" in response.headers:
            del response.headers["Server"]

        return response


def get_cors_origins() -> List[str]:
    """
    Get allowed CORS origins from environment.

    Falls back to common local development URLs.
    """
    origins_str = os.getenv("CORS_ORIGINS", "")

    if origins_str:
        return [origin.strip() for origin in origins_str.split(",") if origin.strip()]

    return [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
