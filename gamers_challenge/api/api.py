"""
Main router
Combines all endpoint routers
"""

from fastapi import APIRouter

from gamers_challenge.api.endpoints import auth, health, leaderboard, users
from gamers_challenge.api.endpoints.quiz import build_quiz_router
from gamers_challenge.services.quiz import QUIZ_INSTANCES

api_router = APIRouter()

api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(users.router, tags=["Users"])
for quiz_instance in QUIZ_INSTANCES:
    api_router.include_router(build_quiz_router(quiz_instance), tags=["Quiz"])
api_router.include_router(leaderboard.router, tags=["Leaderboard"])
api_router.include_router(health.router, tags=["Health"])
