# gainsly/routes/user.py
"""
Gainsly API - User Routes.

Profile and password management for the signed-in user.
"""

from fastapi import APIRouter, Depends
from datetime import datetime, timezone

from gainsly.dependencies import get_current_user
from gainsly.models.mongodb import UserDocument
from gainsly.schemas.auth import UserOut
from gainsly.schemas.user import ChangePasswordRequest, UserUpdate
from gainsly.services.auth import hash_password, revoke_user_tokens, verify_password
from gainsly.utils.errors import ConflictError, ValidationError

router = APIRouter()


@router.get("/profile")
async def get_profile(user: UserDocument = Depends(get_current_user)):
    """Get current user's profile."""
    return {"success": True, "data": UserOut.from_document(user).model_dump(by_alias=True)}


@router.put("/profile")
async def update_profile(
    payload: UserUpdate,
    user: UserDocument = Depends(get_current_user)
):
    """Update current user's profile."""
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationError("Please provide at least one field to update")

    if "email" in changes:
        email = changes["email"].lower()
        other = await UserDocument.find_one(UserDocument.email == email)
        if other and other.id != user.id:
            raise ConflictError("Email is already in use")
        changes["email"] = email

    for field, value in changes.items():
        setattr(user, field, value)

    user.updated_at = datetime.now(timezone.utc)
    await user.save()

    return {"success": True, "data": UserOut.from_document(user).model_dump(by_alias=True)}


@router.put("/password")
async def change_password(
    payload: ChangePasswordRequest,
    user: UserDocument = Depends(get_current_user)
):
    """Change password and sign out every other session."""
    if not verify_password(payload.current_password, user.password_hash):
        raise ValidationError("Current password is incorrect")

    user.password_hash = hash_password(payload.new_password)
    user.updated_at = datetime.now(timezone.utc)
    await user.save()
    await revoke_user_tokens(user.id)

    return {"success": True, "message": "Password updated successfully"}
