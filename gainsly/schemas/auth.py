"""
Gainsly API - Authentication Schemas.

Pydantic schemas for authentication requests and responses.
"""

from typing import Optional

from pydantic import ConfigDict, EmailStr, Field

from gainsly.models.mongodb import UserDocument
from gainsly.schemas.base import APIModel, NonEmptyStr


class RegisterRequest(APIModel):
    """
    Schema for user registration request.

    Attributes:
        name: User's display name.
        email: User's email address.
        password: User's password (min 6 characters).
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Alex Lifter",
                "email": "alex@gainsly.app",
                "password": "secret1"
            }
        }
    )

    name: NonEmptyStr = Field(..., description="User's display name")
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(
        ...,
        min_length=6,
        description="User's password (minimum 6 characters)"
    )


class LoginRequest(APIModel):
    """Schema for user login request."""

    email: NonEmptyStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")


class RefreshRequest(APIModel):
    """Schema for token refresh and logout requests."""

    model_config = ConfigDict(
        alias_generator=None,
        json_schema_extra={
            "example": {
                "refresh_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."
            }
        }
    )

    refresh_token: NonEmptyStr = Field(..., description="Refresh token")


class UserOut(APIModel):
    """Public view of a user; the password hash is never included."""

    id: str
    name: str
    email: str
    profile_picture: Optional[str] = None

    @classmethod
    def from_document(cls, user: UserDocument) -> "UserOut":
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            profile_picture=user.profile_picture,
        )


class AuthResponse(APIModel):
    """
    Schema for register/login responses.

    Attributes:
        success: Always true.
        user: Authenticated user.
        token: JWT access token.
        refresh_token: JWT refresh token (kept snake_case on the wire).
    """

    model_config = ConfigDict(alias_generator=None)

    success: bool = True
    user: UserOut
    token: str
    refresh_token: str


class TokenPairResponse(APIModel):
    """Schema for refresh responses."""

    model_config = ConfigDict(alias_generator=None)

    success: bool = True
    token: str
    refresh_token: str
