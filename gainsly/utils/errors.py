"""
Gainsly API - Custom Exception Classes.

Routes and services raise these; ``gainsly.utils.handlers`` turns them into
the ``{success: false, message}`` envelope with the class's status code.
"""

from typing import Optional


class GainslyException(Exception):
    """
    Base class for errors reported to API clients.

    Subclasses set ``status_code`` and ``default_message``; instances may
    override the message.

    Attributes:
        message: Text sent to the client as ``message``.
        status_code: HTTP status of the response.
        detail: Extra context for logs, defaults to the message.
    """

    status_code: int = 500
    default_message: str = "Server Error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail or self.message
        super().__init__(self.message)


class ValidationError(GainslyException):
    """Bad input or a broken business rule, such as instantiating a plain workout (400)."""

    status_code = 400
    default_message = "Validation error"


class AuthenticationError(GainslyException):
    """
    Missing or bad credentials (401).

    Also used when a workout or set belongs to another user, which is what
    the mobile app expects.
    """

    status_code = 401
    default_message = "Not authorized to access this route"


class ForbiddenError(GainslyException):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(GainslyException):
    """``NotFoundError("Workout")`` reports ``"Workout not found"`` (404)."""

    status_code = 404

    def __init__(self, resource: str = "Resource", detail: Optional[str] = None):
        self.resource = resource
        super().__init__(f"{resource} not found", detail)


class ConflictError(GainslyException):
    """Duplicate user or email (409)."""

    status_code = 409
    default_message = "Resource already exists"
