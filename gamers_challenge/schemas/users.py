"""User schemas"""

from typing import Optional

from pydantic import BaseModel, Field


class UserRegister(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)


class UserLogin(BaseModel):
    email: str
    password: str


class RegisterResponse(BaseModel):
    id: str
    username: str


class Token(BaseModel):
    token: str


class ProfileResponse(BaseModel):
    username: str
    profilePicture: str = ""
    email: str


class ProfileUpdate(BaseModel):
    """
    Body of PUT /user/profile

    ``username`` is only read when the request carries no Authorization header.
    """

    username: Optional[str] = None
    profilePicture: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdateResponse(BaseModel):
    success: bool = True
    message: str = "Profile updated successfully"


class AvatarUploadResponse(ProfileUpdateResponse):
    profilePicture: str
