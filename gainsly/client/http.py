"""
Gainsly Client - HTTP Backend.

Calls the Gainsly API with httpx. Signed-in calls carry the bearer token;
a 401 triggers one silent refresh and a single retry of the request.
Concurrent 401s share one refresh, since the server accepts each refresh
token only once.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from gainsly.client.backend import Backend
from gainsly.client.config import ClientSettings
from gainsly.client.errors import ApiError
from gainsly.client.session import AuthState

logger = logging.getLogger(__name__)

REFRESH_PATH = "/auth/refresh"


class HttpBackend(Backend):
    """
    Backend for the real API.

    Args:
        settings: Client settings (base URL and timeout).
        session: Auth state providing and receiving tokens.
        transport: Optional httpx transport, e.g. ``ASGITransport`` in tests.
    """

    def __init__(
        self,
        settings: ClientSettings,
        session: AuthState,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.session = session
        self.client = httpx.AsyncClient(
            base_url=settings.API_URL,
            timeout=settings.REQUEST_TIMEOUT,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )
        self._refresh_lock = asyncio.Lock()

    async def request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        auth: bool = True,
    ) -> Dict[str, Any]:
        sent_token = self.session.token
        response = await self._send(method, path, json, params, auth)

        if response.status_code == 401 and auth and path != REFRESH_PATH:
            if not await self._refresh(sent_token):
                self.session.logout()
                raise self._error(response)
            # Retried once only; a second 401 falls through as an error
            response = await self._send(method, path, json, params, auth)

        if response.is_error:
            raise self._error(response)
        return self._decode(response)

    async def _send(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]],
        params: Optional[Dict[str, Any]],
        auth: bool,
    ) -> httpx.Response:
        headers = {}
        if auth and self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        return await self.client.request(method, path, json=json, params=params, headers=headers)

    async def _refresh(self, rejected_token: Optional[str]) -> bool:
        """
        Swap the refresh token for a new pair. Returns False on any failure.

        ``rejected_token`` is the access token the 401 answered. If another
        request already replaced it while this one waited for the lock, the
        new pair is reused instead of spending the refresh token again.
        """
        async with self._refresh_lock:
            if self.session.token and self.session.token != rejected_token:
                return True
            if not self.session.refresh_token:
                return False
            try:
                response = await self.client.post(
                    REFRESH_PATH, json={"refresh_token": self.session.refresh_token}
                )
            except httpx.HTTPError as e:
                logger.warning(f"Token refresh failed: {e}")
                return False

            if response.is_error:
                logger.info(f"Token refresh rejected with status {response.status_code}")
                return False

            data = self._decode(response)
            self.session.update_token(data["token"], data["refresh_token"])
            return True

    @staticmethod
    def _decode(response: httpx.Response) -> Dict[str, Any]:
        try:
            return response.json()
        except ValueError:
            return {}

    @classmethod
    def _error(cls, response: httpx.Response) -> ApiError:
        data = cls._decode(response)
        message = data.get("message") if isinstance(data, dict) else None
        return ApiError(response.status_code, message, data if isinstance(data, dict) else None)

    async def aclose(self) -> None:
        await self.client.aclose()
