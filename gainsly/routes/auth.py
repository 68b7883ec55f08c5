# gainsly/routes/auth.py
"""
Gainsly API - Authentication Routes.

Register, login, token refresh, logout and current-user endpoints.
"""

from fastapi import APIRouter, Depends, Request, status
from bson.errors import InvalidId
from beanie import PydanticObjectId
from pymongo.errors import DuplicateKeyError
import logging

from gainsly.dependencies import get_current_user
from gainsly.middleware.rate_limit import auth_limit, limiter
from gainsly.models.mongodb import UserDocument
from gainsly.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenPairResponse,
    UserOut,
)
from gainsly.services.auth import (
    consume_refresh_token,
    hash_password,
    issue_token_pair,
    revoke_refresh_token,
    verify_password,
    verify_refresh_token,
)
from gainsly.utils.errors import AuthenticationError, ConflictError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(auth_limit)
async def register(request: Request, payload: RegisterRequest):
    """
    Register a new user.

    Args:
        payload: RegisterRequest with name, email, password

    Returns:
        AuthResponse with user, access token and refresh token

    Raises:
        ConflictError 409: Email already registered
    """
    email = payload.email.lower()

    existing_user = await UserDocument.find_one(UserDocument.email == email)
    if existing_user:
        raise ConflictError("User already exists")

    user = UserDocument(
        name=payload.name,
        email=email,
        password_hash=hash_password(payload.password),
    )
    try:
        await user.insert()
    except DuplicateKeyError:
        # Lost a race with a concurrent registration for the same email
        raise ConflictError("User already exists")

    token, refresh_token = await issue_token_pair(user)
    logger.info(f"Registered user {user.id}")

    return AuthResponse(
        user=UserOut.from_document(user),
        token=token,
        refresh_token=refresh_token,
    )


@router.post("/login", response_model=AuthResponse)
@limiter.limit(auth_limit)
async def login(request: Request, payload: LoginRequest):
    """
    Authenticate user and return tokens.

    Raises:
        AuthenticationError 401: Unknown email or wrong password
    """
    user = await UserDocument.find_one(UserDocument.email == payload.email.lower())

    if not user or not verify_password(payload.password, user.password_hash):
        raise AuthenticationError("Invalid credentials")

    token, refresh_token = await issue_token_pair(user)

    return AuthResponse(
        user=UserOut.from_document(user),
        token=token,
        refresh_token=refresh_token,
    )


@router.post("/refresh", response_model=TokenPairResponse)
async def refresh(payload: RefreshRequest):
    """
    Exchange a refresh token for a new token pair.

    The presented token is consumed; reusing it afterwards fails with 401.
    """
    claims = verify_refresh_token(payload.refresh_token)
    if not claims:
        raise AuthenticationError("Invalid refresh token")

    try:
        user_id = PydanticObjectId(claims["sub"])
    except (InvalidId, TypeError):
        raise AuthenticationError("Invalid refresh token")

    if not await consume_refresh_token(payload.refresh_token, user_id):
        raise AuthenticationError("Invalid refresh token")

    user = await UserDocument.get(user_id)
    if not user:
        raise AuthenticationError("User not found")

    token, refresh_token = await issue_token_pair(user)
    return TokenPairResponse(token=token, refresh_token=refresh_token)


@router.post("/logout")
async def logout(payload: RefreshRequest):
    """Revoke a refresh token. Unknown tokens are accepted silently."""
    await revoke_refresh_token(payload.refresh_token)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me")
async def get_me(user: UserDocument = Depends(get_current_user)):
    """Get current user info."""
    return {
        "success": True,
        "user": UserOut.from_document(user).model_dump(by_alias=True),
    }
