"""
Authentication endpoints
"""

from fastapi import APIRouter, Depends, status

from gamers_challenge.api.deps import get_user_service
from gamers_challenge.schemas.users import RegisterResponse, Token, UserLogin, UserRegister
from gamers_challenge.services.users import UserService

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: UserRegister, users: UserService = Depends(get_user_service)):
    """Register new user"""
    return await users.register(payload.username, payload.password, payload.email)


@router.post("/login", response_model=Token)
async def login(payload: UserLogin, users: UserService = Depends(get_user_service)):
    """Exchange email and password for a bearer token"""
    return await users.login(payload.email, payload.password)
