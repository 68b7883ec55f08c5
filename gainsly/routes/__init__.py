"""Gainsly API - Routes Package."""

from gainsly.routes import (
    auth,
    user,
    exercise,
    workout,
)

__all__ = [
    "auth",
    "user",
    "exercise",
    "workout",
]
