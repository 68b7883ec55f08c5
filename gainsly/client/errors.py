"""
Gainsly Client - Errors.

``ApiError`` is raised by every backend for a non-2xx answer;
``get_error_message`` turns any failure into text fit for the user.
"""

from typing import Any, Dict, Optional

import httpx


STATUS_MESSAGES = {
    401: "Your session has expired. Please log in again.",
    403: "You do not have permission to do that.",
    404: "The requested item could not be found.",
    500: "Something went wrong on our end. Please try again later.",
}

TIMEOUT_MESSAGE = "The request timed out. Please try again."
NETWORK_MESSAGE = "Unable to reach the server. Please check your connection."
FALLBACK_MESSAGE = "An unexpected error occurred."


class ApiError(Exception):
    """
    Error answer from the Gainsly API (or the local backend).

    Attributes:
        status_code: HTTP status.
        message: Server-provided message, if any.
        data: Decoded error body.
    """

    def __init__(
        self,
        status_code: int,
        message: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        self.status_code = status_code
        self.message = message
        self.data = data or {}
        super().__init__(message or f"Request failed with status {status_code}")


def get_error_message(exc: BaseException) -> str:
    """Map an exception to a user-facing message."""
    if isinstance(exc, ApiError):
        if exc.message:
            return exc.message
        return STATUS_MESSAGES.get(exc.status_code, FALLBACK_MESSAGE)
    if isinstance(exc, httpx.TimeoutException):
        return TIMEOUT_MESSAGE
    if isinstance(exc, httpx.TransportError):
        return NETWORK_MESSAGE
    return str(exc) or FALLBACK_MESSAGE
