"""Gainsly API - Utilities Package."""

from gainsly.utils.errors import (
    GainslyException,
    ValidationError,
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
)
from gainsly.utils.objectid import parse_object_id

__all__ = [
    "GainslyException",
    "ValidationError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "parse_object_id",
]
