"""
Gainsly client service layer.

Example:
    >>> settings = ClientSettings()
    >>> session = AuthState.load(settings.SESSION_PATH)
    >>> backend = create_backend(settings, session)
    >>> auth = AuthService(backend, session)
"""

from gainsly.client.backend import Backend, create_backend
from gainsly.client.config import ClientSettings
from gainsly.client.errors import ApiError, get_error_message
from gainsly.client.http import HttpBackend
from gainsly.client.local import LocalBackend
from gainsly.client.services import AuthService, ExerciseService, WorkoutService
from gainsly.client.session import AuthState

__all__ = [
    "Backend",
    "create_backend",
    "ClientSettings",
    "ApiError",
    "get_error_message",
    "HttpBackend",
    "LocalBackend",
    "AuthService",
    "ExerciseService",
    "WorkoutService",
    "AuthState",
]
