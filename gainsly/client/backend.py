"""
Gainsly Client - Backend Interface.

Services talk to a ``Backend``; which one is used (the real API over HTTP
or the offline JSON store) is decided once, from settings.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from gainsly.client.config import ClientSettings
from gainsly.client.session import AuthState


class Backend(ABC):
    """Transport for API calls."""

    @abstractmethod
    async def request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        auth: bool = True,
    ) -> Dict[str, Any]:
        """
        Perform one API call.

        Args:
            method: HTTP method.
            path: API path such as ``/workouts``.
            json: Request body.
            params: Query string parameters.
            auth: Whether the call is made on behalf of the signed-in user.

        Returns:
            Dict[str, Any]: The decoded response envelope.

        Raises:
            ApiError: For any non-2xx answer.
        """

    async def aclose(self) -> None:
        """Release resources held by the backend."""


def create_backend(settings: ClientSettings, session: AuthState) -> Backend:
    """Pick the offline store when ``USE_LOCAL_BACKEND`` is set, else HTTP."""
    if settings.USE_LOCAL_BACKEND:
        from gainsly.client.local import LocalBackend

        return LocalBackend(settings.LOCAL_STORE_PATH, session)

    from gainsly.client.http import HttpBackend

    return HttpBackend(settings, session)
