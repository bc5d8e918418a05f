"""Leaderboard schemas"""

from typing import Any, Dict, List

from pydantic import BaseModel


class LeaderboardResponse(BaseModel):
    leaderboard: List[Dict[str, Any]]
