"""
Gainsly API - Authentication Middleware.

Bearer scheme that turns the ``Authorization`` header into a user id.
"""

from typing import Optional

from fastapi import Request
from fastapi.security import HTTPBearer
from fastapi.security.utils import get_authorization_scheme_param

from gainsly.services.auth import verify_access_token
from gainsly.utils.errors import AuthenticationError


class JWTBearer(HTTPBearer):
    """
    Accepts only Gainsly access tokens.

    Refresh tokens, expired tokens and malformed headers all fail with 401,
    the status the client treats as "try a silent refresh".
    """

    async def __call__(self, request: Request) -> Optional[str]:
        scheme, token = get_authorization_scheme_param(request.headers.get("Authorization"))
        payload = verify_access_token(token) if scheme.lower() == "bearer" and token else None

        if payload is None:
            if self.auto_error:
                raise AuthenticationError()
            return None
        return payload["sub"]


jwt_bearer = JWTBearer(bearerFormat="JWT", description="Gainsly access token")
