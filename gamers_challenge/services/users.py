"""User service: registration, login and profile management"""

import logging
from typing import Any, Dict, Optional

from gamers_challenge.core.database import USERS_COLLECTION
from gamers_challenge.core.exceptions import (
    AuthenticationException,
    ConflictException,
    NotFoundException,
)
from gamers_challenge.core.security import SecurityUtils
from gamers_challenge.utils.documents import to_object_id

logger = logging.getLogger(__name__)


def _profile_view(user: Dict[str, Any]) -> Dict[str, Any]:
    profile = user.get("profile") or {}
    return {
        "username": user.get("username"),
        "profilePicture": profile.get("avatar", ""),
        "email": user.get("email"),
    }


class UserService:
    """
    Operations on the users collection.

    Username/email uniqueness is a read-then-insert check with no index
    behind it, so two concurrent registrations can both pass.
    """

    def __init__(self, db, security: SecurityUtils):
        self.users = db[USERS_COLLECTION]
        self.security = security

    async def register(self, username: str, password: str, email: str) -> Dict[str, Any]:
        """Create a user with an empty profile, returns its id and username"""
        existing_user = await self.users.find_one(
            {"$or": [{"username": username}, {"email": email}]}
        )
        if existing_user:
            raise ConflictException("Username or email already taken")

        new_user = {
            "username": username,
            "password": await self.security.get_password_hash(password),
            "email": email,
            "profile": {
                "bio": "",
                "avatar": "",
            },
            "leaderboardPosition": None,
        }
        result = await self.users.insert_one(new_user)

        logger.info(f"Registered user '{username}'")
        return {"id": str(result.inserted_id), "username": username}

    async def login(self, email: str, password: str) -> Dict[str, str]:
        """Check credentials and issue an access token"""
        user = await self.users.find_one({"email": email})
        # Same error for unknown email and wrong password
        if not user or not await self.security.verify_password(password, user.get("password", "")):
            raise AuthenticationException("Invalid credentials")

        return {"token": self.security.create_access_token(str(user["_id"]))}

    async def _find_by_id(self, user_id: str) -> Dict[str, Any]:
        object_id = to_object_id(user_id)
        user = await self.users.find_one({"_id": object_id}) if object_id else None
        if not user:
            raise NotFoundException("User")
        return user

    async def get_profile_by_id(self, user_id: str) -> Dict[str, Any]:
        return _profile_view(await self._find_by_id(user_id))

    async def get_profile_by_email(self, email: str) -> Dict[str, Any]:
        user = await self.users.find_one({"email": email})
        if not user:
            raise NotFoundException("User")
        return _profile_view(user)

    async def _build_update(
        self, profile_picture: Optional[str], password: Optional[str]
    ) -> Dict[str, Any]:
        updated_fields = {}
        if profile_picture:
            updated_fields["profile.avatar"] = profile_picture
        if password:
            updated_fields["password"] = await self.security.get_password_hash(password)
        return updated_fields

    async def _apply_update(self, user: Dict[str, Any], updated_fields: Dict[str, Any]) -> None:
        if not updated_fields:
            return
        await self.users.update_one({"_id": user["_id"]}, {"$set": updated_fields})
        logger.info(
            f"Updated profile of '{user.get('username')}'",
            extra={"fields": sorted(updated_fields)},
        )

    async def update_profile_by_id(
        self,
        user_id: str,
        profile_picture: Optional[str] = None,
        password: Optional[str] = None,
    ) -> None:
        """Update the profile of an authenticated user"""
        user = await self._find_by_id(user_id)
        await self._apply_update(user, await self._build_update(profile_picture, password))

    async def update_profile_by_username(
        self,
        username: str,
        profile_picture: Optional[str] = None,
        password: Optional[str] = None,
    ) -> None:
        """
        Update a profile by username with no authentication.

        Anyone who knows a username can change that user's avatar and password.
        """
        user = await self.users.find_one({"username": username})
        if not user:
            raise NotFoundException("User")
        await self._apply_update(user, await self._build_update(profile_picture, password))

    async def set_avatar(self, user_id: str, avatar_url: str) -> None:
        user = await self._find_by_id(user_id)
        await self._apply_update(user, {"profile.avatar": avatar_url})
