import copy
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from gamers_challenge.core.config import Settings
from gamers_challenge.core.database import Database
from gamers_challenge.core.security import SecurityUtils
from gamers_challenge.main import create_app

# ---------------------------------------------------------------------------
# In-memory stand-in for the slice of the motor API the services use
# ---------------------------------------------------------------------------

_ABSENT = object()


def _lookup(document: Dict[str, Any], dotted_key: str) -> Any:
    value: Any = document
    for part in dotted_key.split("."):
        if not isinstance(value, dict) or part not in value:
            return _ABSENT
        value = value[part]
    return value


def _assign(document: Dict[str, Any], dotted_key: str, value: Any) -> None:
    *parents, last = dotted_key.split(".")
    target = document
    for part in parents:
        target = target.setdefault(part, {})
    target[last] = value


def _matches(document: Dict[str, Any], query: Optional[Dict[str, Any]]) -> bool:
    for key, expected in (query or {}).items():
        if key == "$or":
            if not any(_matches(document, clause) for clause in expected):
                return False
        elif _lookup(document, key) != expected:
            return False
    return True


class FakeCursor:
    def __init__(self, documents: List[Dict[str, Any]]):
        self._documents = documents

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        # sorted() is stable, ties keep insertion order
        self._documents = sorted(
            self._documents, key=lambda d: d.get(key, 0), reverse=direction < 0
        )
        return self

    def limit(self, count: int) -> "FakeCursor":
        if count:
            self._documents = self._documents[:count]
        return self

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        if length is None:
            return list(self._documents)
        return self._documents[:length]


class FakeCollection:
    def __init__(self):
        self.documents: List[Dict[str, Any]] = []

    async def find_one(self, query: Optional[Dict[str, Any]] = None):
        for document in self.documents:
            if _matches(document, query):
                return copy.deepcopy(document)
        return None

    def find(self, query: Optional[Dict[str, Any]] = None) -> FakeCursor:
        return FakeCursor([copy.deepcopy(d) for d in self.documents if _matches(d, query)])

    async def insert_one(self, document: Dict[str, Any]):
        document.setdefault("_id", ObjectId())
        self.documents.append(copy.deepcopy(document))
        return SimpleNamespace(inserted_id=document["_id"])

    async def insert_many(self, documents: List[Dict[str, Any]]):
        if not documents:
            raise ValueError("documents must be a non-empty list")
        for document in documents:
            await self.insert_one(document)
        return SimpleNamespace(inserted_ids=[d["_id"] for d in documents])

    async def update_one(self, query: Dict[str, Any], update: Dict[str, Any], upsert: bool = False):
        if not update.get("$set"):
            raise ValueError("'$set' is empty")
        for document in self.documents:
            if _matches(document, query):
                for key, value in update["$set"].items():
                    _assign(document, key, copy.deepcopy(value))
                return SimpleNamespace(matched_count=1, upserted_id=None)

        if not upsert:
            return SimpleNamespace(matched_count=0, upserted_id=None)

        document = {k: v for k, v in query.items() if not k.startswith("$")}
        for key, value in update["$set"].items():
            _assign(document, key, copy.deepcopy(value))
        result = await self.insert_one(document)
        return SimpleNamespace(matched_count=0, upserted_id=result.inserted_id)


class FakeDatabase:
    def __init__(self):
        self.collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        MONGODB_URI="mongodb://localhost:27017",
        SECRET_KEY="test-secret-key",
        BCRYPT_ROUNDS=4,
        UPLOAD_DIR=str(tmp_path / "uploads"),
    )


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def database(fake_db) -> Database:
    return Database.from_handle(fake_db)


@pytest.fixture
def security(settings) -> SecurityUtils:
    return SecurityUtils.from_settings(settings)


@pytest.fixture
def app(settings, database):
    return create_app(settings, database)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def registered_user(client) -> Dict[str, str]:
    payload = {"username": "alice", "password": "wonderland", "email": "alice@example.com"}
    response = client.post("/register", json=payload)
    assert response.status_code == 201
    return {**payload, "id": response.json()["id"]}


@pytest.fixture
def auth_headers(client, registered_user) -> Dict[str, str]:
    response = client.post(
        "/login",
        json={"email": registered_user["email"], "password": registered_user["password"]},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
