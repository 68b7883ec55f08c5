"""
Gainsly API - Authentication Service.

Password hashing, JWT token generation and refresh-token persistence.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, Tuple
import logging
import uuid

import bcrypt
from beanie import PydanticObjectId
from jose import jwt, JWTError

from settings import settings
from gainsly.models.mongodb import RefreshTokenDocument, UserDocument

logger = logging.getLogger(__name__)


# Maximum password length for bcrypt (72 bytes)
MAX_PASSWORD_BYTES = 72

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def _prepare_password(password: str) -> bytes:
    """
    Prepare password for bcrypt hashing.

    Bcrypt only uses the first 72 bytes of any password.
    This function encodes and truncates to ensure consistent behavior.
    """
    return password.encode('utf-8')[:MAX_PASSWORD_BYTES]


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password to hash.

    Returns:
        str: Bcrypt hashed password.

    Example:
        >>> hashed = hash_password("secret1")
        >>> verify_password("secret1", hashed)
        True
    """
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(_prepare_password(password), salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash.

    Returns:
        bool: True if password matches, False otherwise (including a
        malformed hash).
    """
    try:
        return bcrypt.checkpw(
            _prepare_password(plain_password),
            hashed_password.encode('utf-8')
        )
    except ValueError as e:
        logger.warning(f"Password verification failed: {e}")
        return False


def _encode(data: Dict[str, Any], token_type: str, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    to_encode = data.copy()
    to_encode.update({
        "exp": now + expires_delta,
        "iat": now,
        "type": token_type,
    })
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _decode(token: str, token_type: str) -> Optional[Dict[str, Any]]:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.debug(f"{token_type} token rejected: {e}")
        return None

    if payload.get("type") != token_type or not payload.get("sub"):
        logger.warning(f"Token is not a valid {token_type} token")
        return None
    return payload


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Dictionary containing token payload (must include 'sub' key).
        expires_delta: Optional custom expiration time.

    Returns:
        str: Encoded JWT access token.
    """
    return _encode(
        data,
        ACCESS_TOKEN_TYPE,
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a JWT refresh token with longer expiration.

    Every refresh token gets a random ``jti`` so two tokens minted for the
    same user within the same second are still distinct.
    """
    to_encode = {**data, "jti": uuid.uuid4().hex}
    return _encode(
        to_encode,
        REFRESH_TOKEN_TYPE,
        expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def verify_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Verify and decode a JWT access token.

    Returns:
        Optional[Dict[str, Any]]: Token payload if valid, None otherwise.

    Example:
        >>> token = create_access_token({"sub": "user-123"})
        >>> verify_access_token(token)["sub"]
        'user-123'
    """
    return _decode(token, ACCESS_TOKEN_TYPE)


def verify_refresh_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify and decode a JWT refresh token. Access tokens are rejected."""
    return _decode(token, REFRESH_TOKEN_TYPE)


def refresh_token_expiry() -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)


async def issue_token_pair(user: UserDocument) -> Tuple[str, str]:
    """
    Create an access/refresh pair for ``user`` and persist the refresh token.

    Returns:
        Tuple[str, str]: (access_token, refresh_token)
    """
    subject = {"sub": str(user.id)}
    access_token = create_access_token(subject)
    refresh_token = create_refresh_token(subject)

    await RefreshTokenDocument(
        user_id=user.id,
        token=refresh_token,
        expires_at=refresh_token_expiry(),
    ).insert()

    return access_token, refresh_token


async def consume_refresh_token(token: str, user_id: PydanticObjectId) -> bool:
    """
    Atomically claim a persisted refresh token.

    The row is removed with a single ``delete_one``; only the caller whose
    delete matched may rotate, so a token can be exchanged at most once even
    under concurrent refresh calls.

    Returns:
        bool: True if this call removed the token.
    """
    result = await RefreshTokenDocument.get_motor_collection().delete_one(
        {"token": token, "user_id": user_id}
    )
    return result.deleted_count == 1


async def revoke_refresh_token(token: str) -> int:
    """Delete a refresh token. Unknown tokens are ignored."""
    result = await RefreshTokenDocument.get_motor_collection().delete_one({"token": token})
    return result.deleted_count


async def revoke_user_tokens(user_id: PydanticObjectId) -> int:
    """Delete every refresh token belonging to ``user_id``."""
    result = await RefreshTokenDocument.get_motor_collection().delete_many({"user_id": user_id})
    logger.info(f"Revoked {result.deleted_count} refresh tokens for user {user_id}")
    return result.deleted_count
