"""
Security utilities for authentication
Handles JWT bearer tokens and password hashing
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Header, Request
from jose import JWTError, jwt
from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from gamers_challenge.core.config import Settings
from gamers_challenge.core.exceptions import AuthenticationException, AuthorizationException

logger = logging.getLogger(__name__)


class TokenData:
    """Identity carried by a verified access token"""

    def __init__(self, user_id: str):
        self.user_id = user_id


class SecurityUtils:
    """
    Token issuance/verification and password hashing over one shared secret.

    Built once at startup from the application settings.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 60,
        bcrypt_rounds: int = 10,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_token_expire_minutes = access_token_expire_minutes
        self.pwd_context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=bcrypt_rounds
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "SecurityUtils":
        return cls(
            secret_key=settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            access_token_expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
            bcrypt_rounds=settings.BCRYPT_ROUNDS,
        )

    async def get_password_hash(self, password: str) -> str:
        """Hash a password using bcrypt, off the event loop"""
        return await run_in_threadpool(self.pwd_context.hash, password)

    async def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a plain password against hashed password"""
        try:
            return await run_in_threadpool(self.pwd_context.verify, plain_password, hashed_password)
        except (ValueError, TypeError):
            logger.warning("Stored password hash could not be parsed")
            return False

    def create_access_token(self, user_id: str, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create JWT access token

        Args:
            user_id: Identifier of the authenticated user
            expires_delta: Token lifetime, defaults to the configured expiry

        Returns:
            Encoded JWT token
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=self.access_token_expire_minutes)

        to_encode = {"sub": str(user_id), "exp": datetime.now(timezone.utc) + expires_delta}
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> TokenData:
        """
        Decode and validate a JWT token

        Raises:
            AuthorizationException: If the token is malformed, tampered or expired
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.info(f"Rejected access token: {e}")
            raise AuthorizationException("Invalid token")

        user_id = payload.get("sub")
        if not user_id:
            raise AuthorizationException("Invalid token")

        return TokenData(user_id=user_id)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token part of an 'Authorization: Bearer <token>' header"""
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


def get_security(request: Request) -> SecurityUtils:
    """Dependency returning the security utilities attached to the application"""
    return request.app.state.security


def get_current_user_token(
    authorization: Optional[str] = Header(None),
    security: SecurityUtils = Depends(get_security),
) -> TokenData:
    """
    Gate for protected routes

    Raises:
        AuthenticationException: 401 when no bearer token is presented
        AuthorizationException: 403 when the token does not verify
    """
    token = extract_bearer_token(authorization)
    if token is None:
        raise AuthenticationException("Access denied")

    return security.decode_token(token)
