# gainsly/middleware/db_middleware.py
"""
Gainsly API - Lazy Database Middleware.

If MongoDB was unreachable at startup, every later request retries the
connection before reaching a route. Health probes are never delayed.
"""

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from database import Database
from settings import settings

HEALTH_PATHS = frozenset({"/health", "/health/detailed"})


class LazyDatabaseMiddleware(BaseHTTPMiddleware):
    """Connect to MongoDB on demand."""

    async def dispatch(self, request: Request, call_next):
        if request.url.path not in HEALTH_PATHS:
            # A failed attempt is logged; the route then reports its own error
            await Database.ensure_connected(settings.DATABASE_URL, settings.DATABASE_NAME)
        return await call_next(request)
