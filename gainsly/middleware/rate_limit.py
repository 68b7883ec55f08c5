"""
Gainsly API - Rate Limiting.

SlowAPI limiter for the credential endpoints (register and login). Callers
are not signed in there, so counters are kept per client address, in
process memory unless RATE_LIMIT_STORAGE_URI points at Redis.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from settings import settings


limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    enabled=settings.ENV != "testing",
)


def auth_limit() -> str:
    """Limit applied to register and login, e.g. ``20/minute``."""
    return settings.AUTH_RATE_LIMIT
