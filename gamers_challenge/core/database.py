"""
Database gateway
Owns the MongoDB client and hands out the database handle
"""

import logging
from typing import Any, Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from gamers_challenge.core.exceptions import DatabaseNotInitializedError

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
LEADERBOARD_COLLECTION = "leaderboard"


class Database:
    """
    Gateway to the document store.

    Constructed once by the application factory. ``connect()`` is attempted a
    single time at startup; when it fails the gateway stays uninitialized and
    every ``get_handle()`` call raises ``DatabaseNotInitializedError``.

    Example:
        .. code-block:: python

            database = Database("mongodb://localhost:27017", "gamers_challenge")
            await database.connect()
            users = database.get_handle()["users"]
    """

    def __init__(self, uri: str, name: str, timeout_ms: int = 5000):
        self.uri = uri
        self.name = name
        self.timeout_ms = timeout_ms
        self.client: Optional[AsyncIOMotorClient] = None
        self._handle: Optional[Any] = None

    @classmethod
    def from_handle(cls, handle: Any, name: str = "gamers_challenge") -> "Database":
        """Build an already-initialized gateway around an existing database handle"""
        database = cls(uri="", name=name)
        database._handle = handle
        return database

    @property
    def is_connected(self) -> bool:
        return self._handle is not None

    async def connect(self) -> None:
        """
        Connect to MongoDB and select the configured database.

        Failures are logged and swallowed: the process keeps running with an
        uninitialized gateway. There is no retry.
        """
        if self._handle is not None:
            return

        client = None
        try:
            # TODO: move to pymongo.AsyncMongoClient (motor is deprecated) and await close()
            client = AsyncIOMotorClient(self.uri, serverSelectionTimeoutMS=self.timeout_ms)
            await client.admin.command("ping")
        except Exception as e:
            logger.error(f"Error connecting to MongoDB: {e}", exc_info=True)
            if client is not None:
                client.close()
            return

        self.client = client
        self._handle = client[self.name]
        logger.info(f"Connected to MongoDB database '{self.name}'")

    def get_handle(self) -> AsyncIOMotorDatabase:
        """Return the active database handle"""
        if self._handle is None:
            raise DatabaseNotInitializedError()
        return self._handle

    def close(self) -> None:
        if self.client is not None:
            # Motor client's close() is not async
            self.client.close()
            self.client = None
            logger.info("MongoDB connection closed")
        self._handle = None


def get_database(request: Request) -> Database:
    """Dependency returning the gateway attached to the application"""
    return request.app.state.database


def get_db(request: Request) -> AsyncIOMotorDatabase:
    """Dependency returning the active database handle for this request"""
    return get_database(request).get_handle()
