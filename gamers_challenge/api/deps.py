"""
Shared FastAPI dependencies
Services are built per request around the handles stored on app.state
"""

from typing import Callable

from fastapi import Depends, Request

from gamers_challenge.core.config import Settings
from gamers_challenge.core.database import get_db
from gamers_challenge.core.security import SecurityUtils, get_security
from gamers_challenge.services.leaderboard import LeaderboardService
from gamers_challenge.services.quiz import QuizInstance, QuizService
from gamers_challenge.services.uploads import UploadStorage
from gamers_challenge.services.users import UserService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_upload_storage(request: Request) -> UploadStorage:
    return request.app.state.uploads


def get_user_service(
    db=Depends(get_db), security: SecurityUtils = Depends(get_security)
) -> UserService:
    return UserService(db, security)


def get_leaderboard_service(db=Depends(get_db)) -> LeaderboardService:
    return LeaderboardService(db)


def quiz_service_for(instance: QuizInstance) -> Callable[..., QuizService]:
    """Build a dependency yielding the QuizService of one quiz instance"""

    def get_quiz_service(
        db=Depends(get_db),
        leaderboard: LeaderboardService = Depends(get_leaderboard_service),
    ) -> QuizService:
        return QuizService(db, instance, leaderboard)

    return get_quiz_service
