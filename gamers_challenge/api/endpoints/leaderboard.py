"""
Leaderboard endpoints
Both paths read the same leaderboard collection
"""

from fastapi import APIRouter, Depends

from gamers_challenge.api.deps import get_leaderboard_service, get_settings
from gamers_challenge.core.config import Settings
from gamers_challenge.schemas.leaderboard import LeaderboardResponse
from gamers_challenge.services.leaderboard import LeaderboardService

router = APIRouter()


@router.get("/leaderboard", response_model=LeaderboardResponse)
@router.get("/quiz2/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    leaderboard: LeaderboardService = Depends(get_leaderboard_service),
    settings: Settings = Depends(get_settings),
):
    """Top entries by score"""
    return {"leaderboard": await leaderboard.top(settings.LEADERBOARD_LIMIT)}
