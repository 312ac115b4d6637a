"""
Profile Routes

GET /profile - Get own profile
PUT /profile - Update profile (allow-listed fields only)
DELETE /profile - Accepted but not implemented; nothing is deleted
"""

import logging

from fastapi import APIRouter, Depends

from talent_portal.core.auth import get_credential_store, get_current_user
from talent_portal.core.exceptions import UserNotFound
from talent_portal.schemas.schemas import MessageResponse, ProfileResponse, ProfileUpdate, UserResponse
from talent_portal.services.user_service import CredentialStore, serialize_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=ProfileResponse, response_model_exclude_none=True)
async def get_profile(
    user: dict = Depends(get_current_user),
    store: CredentialStore = Depends(get_credential_store),
):
    """Get the caller's profile."""
    record = store.find_by_id(user["_id"])
    if record is None:
        raise UserNotFound()

    return ProfileResponse(
        message="Profile retrieved successfully",
        data=UserResponse.model_validate(serialize_user(record)),
    )


@router.put("", response_model=ProfileResponse, response_model_exclude_none=True)
async def update_profile(
    data: ProfileUpdate,
    user: dict = Depends(get_current_user),
    store: CredentialStore = Depends(get_credential_store),
):
    """Update profile. Only provided fields are updated; email and password cannot be changed here."""
    updated = store.update_fields(user["_id"], data.to_document())

    return ProfileResponse(
        message="Profile updated successfully",
        data=UserResponse.model_validate(serialize_user(updated)),
    )


@router.delete("", response_model=MessageResponse)
async def delete_profile(user: dict = Depends(get_current_user)):
    """
    Account deletion is not implemented yet. The request is acknowledged
    and logged but the record is left untouched.
    """
    logger.warning("Profile deletion requested for %s; deletion is not implemented", user["_id"])
    return MessageResponse(
        message="Profile deletion request received. Account deletion is not implemented yet; no data was removed."
    )
