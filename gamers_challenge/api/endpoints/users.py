"""
User profile endpoints

PUT /user/profile carries two operations on one path. With an Authorization
header the caller's own profile is updated; without one, the profile named by
``username`` in the body is updated with no authentication at all.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Header, UploadFile

from gamers_challenge.api.deps import get_upload_storage, get_user_service
from gamers_challenge.core.exceptions import AuthenticationException
from gamers_challenge.core.security import (
    SecurityUtils,
    TokenData,
    get_current_user_token,
    get_security,
)
from gamers_challenge.schemas.users import (
    AvatarUploadResponse,
    ProfileResponse,
    ProfileUpdate,
    ProfileUpdateResponse,
)
from gamers_challenge.services.uploads import UploadStorage
from gamers_challenge.services.users import UserService

router = APIRouter()


@router.get("/user/profile", response_model=ProfileResponse)
async def get_own_profile(
    token: TokenData = Depends(get_current_user_token),
    users: UserService = Depends(get_user_service),
):
    """Profile of the authenticated user"""
    return await users.get_profile_by_id(token.user_id)


async def update_authenticated_profile(
    authorization: str, payload: ProfileUpdate, security: SecurityUtils, users: UserService
) -> ProfileUpdateResponse:
    token = get_current_user_token(authorization, security)
    await users.update_profile_by_id(
        token.user_id, profile_picture=payload.profilePicture, password=payload.password
    )
    return ProfileUpdateResponse()


async def update_profile_by_username(
    payload: ProfileUpdate, users: UserService
) -> ProfileUpdateResponse:
    # TODO: decide with the product owner whether this unauthenticated update stays
    await users.update_profile_by_username(
        payload.username, profile_picture=payload.profilePicture, password=payload.password
    )
    return ProfileUpdateResponse()


@router.put("/user/profile", response_model=ProfileUpdateResponse)
async def update_profile(
    payload: ProfileUpdate,
    authorization: Optional[str] = Header(None),
    security: SecurityUtils = Depends(get_security),
    users: UserService = Depends(get_user_service),
):
    """Update avatar and/or password"""
    if authorization is not None:
        return await update_authenticated_profile(authorization, payload, security, users)
    if payload.username:
        return await update_profile_by_username(payload, users)
    raise AuthenticationException("Access denied")


@router.post("/user/profile/picture", response_model=AvatarUploadResponse)
async def upload_profile_picture(
    token: TokenData = Depends(get_current_user_token),
    profile_picture: UploadFile = File(..., alias="profilePicture"),
    users: UserService = Depends(get_user_service),
    storage: UploadStorage = Depends(get_upload_storage),
):
    """Upload an avatar image for the authenticated user"""
    # Fail before writing anything if the token's user is gone
    await users.get_profile_by_id(token.user_id)

    avatar_url = await storage.save_image(profile_picture, field_name="profilePicture")
    await users.set_avatar(token.user_id, avatar_url)
    return AvatarUploadResponse(profilePicture=avatar_url)


@router.get("/user/profile/{email}", response_model=ProfileResponse)
async def get_profile_by_email(email: str, users: UserService = Depends(get_user_service)):
    """Public profile lookup by email"""
    return await users.get_profile_by_email(email)
