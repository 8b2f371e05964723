"""Security headers and CORS origin parsing for the research API.

Every response carries an ``X-Request-ID``; the OWASP header set can be
switched off with ``ENABLE_SECURITY_HEADERS=false`` for local work.
"""

from __future__ import annotations

import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

# The API serves JSON plus the Swagger/ReDoc pages, which load from these CDNs.
_CSP_DIRECTIVES = (
    "default-src 'self'",
    "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net https://cdn.redoc.ly",
    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net https://fonts.googleapis.com",
    "font-src 'self' https://fonts.gstatic.com",
    "img-src 'self' data: https:",
    "connect-src 'self'",
    "frame-ancestors 'none'",
    "base-uri 'self'",
    "form-action 'self'",
)

_PERMISSIONS = (
    "accelerometer=()",
    "camera=()",
    "geolocation=()",
    "gyroscope=()",
    "magnetometer=()",
    "microphone=()",
    "payment=()",
    "usb=()",
)

SECURITY_HEADERS = {
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains; preload",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Content-Security-Policy": "; ".join(_CSP_DIRECTIVES),
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": ", ".join(_PERMISSIONS),
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and add the OWASP headers to its response.

    Usage:
        app.add_middleware(SecurityHeadersMiddleware, enabled=config.enable_security_headers)
    """

    def __init__(self, app: Callable, enabled: bool = True):
        super().__init__(app)
        self.enabled = enabled

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)

        if self.enabled:
            for name, value in SECURITY_HEADERS.items():
                response.headers[name] = value
        response.headers["X-Request-ID"] = request_id
        return response


def parse_cors_origins(origins_string: str) -> list[str]:
    """Parse CORS origins from a comma-separated string.

    Example:
        >>> parse_cors_origins("https://app1.com, https://app2.com")
        ['https://app1.com', 'https://app2.com']

        >>> parse_cors_origins("*")
        ['*']
    """
    if origins_string.strip() == "*":
        return ["*"]

    return [origin.strip() for origin in origins_string.split(",") if origin.strip()]
