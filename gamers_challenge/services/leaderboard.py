"""Leaderboard service"""

import logging
from typing import Any, Dict, List

from pymongo import DESCENDING

from gamers_challenge.core.database import LEADERBOARD_COLLECTION
from gamers_challenge.utils.documents import serialize_documents

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10


class LeaderboardService:
    """
    One leaderboard shared by every quiz instance, keyed by username.

    A submission replaces the previous score for that username, even when
    it is lower.
    """

    def __init__(self, db):
        self.entries = db[LEADERBOARD_COLLECTION]

    async def upsert(self, username: str, score: int) -> None:
        await self.entries.update_one(
            {"username": username},
            {"$set": {"username": username, "score": score}},
            upsert=True,
        )
        logger.info(f"Leaderboard score for '{username}' set to {score}")

    async def top(self, limit: int = DEFAULT_LIMIT) -> List[Dict[str, Any]]:
        """Highest scores first, at most ``limit`` entries"""
        cursor = self.entries.find().sort("score", DESCENDING).limit(limit)
        return serialize_documents(await cursor.to_list(length=limit))
