"""
Gainsly API - User Schemas.

Pydantic schemas for profile management.
"""

from typing import Optional

from pydantic import EmailStr, Field

from gainsly.schemas.base import APIModel, NonEmptyStr


class UserUpdate(APIModel):
    """
    Schema for profile update request. Only supplied fields change.

    Attributes:
        name: New display name.
        email: New email address.
        profile_picture: URL of the profile picture.
    """

    name: Optional[NonEmptyStr] = None
    email: Optional[EmailStr] = None
    profile_picture: Optional[str] = None


class ChangePasswordRequest(APIModel):
    """Schema for password change request."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)
