"""
Gainsly API - Security Headers Middleware.

Hardening headers for a JSON-only API consumed by the mobile app.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from settings import settings


API_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-site",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
}

HSTS_HEADER = "max-age=31536000; includeSubDomains"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Stamp ``API_HEADERS`` on every response.

    HSTS is only sent in production, and responses to requests carrying a
    bearer token are marked ``no-store`` so workout data is never cached.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        response.headers.update(API_HEADERS)
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = HSTS_HEADER
        if "authorization" in request.headers:
            response.headers["Cache-Control"] = "no-store"

        return response
