"""
Gainsly API - FastAPI Dependencies.

Dependency injection helpers for routes.
"""

from fastapi import Depends, Request

from gainsly.middleware.auth import jwt_bearer
from gainsly.models.mongodb import UserDocument
from gainsly.utils.errors import AuthenticationError, NotFoundError
from gainsly.utils.objectid import parse_object_id


async def get_current_user(
    request: Request,
    user_id: str = Depends(jwt_bearer)
) -> UserDocument:
    """
    Resolve the bearer token to a user and attach it to ``request.state.user``.

    ``jwt_bearer`` has already rejected missing or invalid tokens with 401.

    Raises:
        AuthenticationError: 401 if the token's user no longer exists.
    """
    try:
        user = await UserDocument.get(parse_object_id(user_id, "User"))
    except NotFoundError:
        user = None

    if not user:
        raise AuthenticationError("User not found")

    request.state.user = user
    return user
