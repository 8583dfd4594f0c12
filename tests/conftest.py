"""
Shared fixtures.

InMemoryUsersCollection stands in for the MongoDB users collection: it
implements the async subset of the collection API the repository uses and
yields to the event loop once per call, the way a real driver round-trip does.
Queries and documents are BSON-encoded first, so values the driver cannot
encode fail here too.
"""
import asyncio
import copy
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest
import bson
from bson import ObjectId
from fastapi.testclient import TestClient

from usersvc.app import create_app
from usersvc.modules.users.repositories import UserRepository


def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
    return all(document.get(key) == value for key, value in query.items())


class InMemoryCursor:
    def __init__(self, documents: List[Dict[str, Any]]):
        self._documents = documents

    async def to_list(self, length=None):
        await asyncio.sleep(0)
        return self._documents if length is None else self._documents[:length]


class InMemoryUsersCollection:
    def __init__(self):
        self.documents: List[Dict[str, Any]] = []

    def find(self, query: Dict[str, Any]) -> InMemoryCursor:
        bson.encode(query)
        return InMemoryCursor([copy.deepcopy(d) for d in self.documents if _matches(d, query)])

    async def find_one(self, query: Dict[str, Any]):
        bson.encode(query)
        found = next((copy.deepcopy(d) for d in self.documents if _matches(d, query)), None)
        await asyncio.sleep(0)
        return found

    async def insert_one(self, document: Dict[str, Any]):
        bson.encode(document)
        document["_id"] = ObjectId()
        self.documents.append(copy.deepcopy(document))
        return SimpleNamespace(acknowledged=True, inserted_id=document["_id"])

    async def update_one(self, query: Dict[str, Any], update: Dict[str, Any]):
        bson.encode(query)
        bson.encode(update)
        for document in self.documents:
            if _matches(document, query):
                document.update(copy.deepcopy(update["$set"]))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_one(self, query: Dict[str, Any]):
        bson.encode(query)
        for index, document in enumerate(self.documents):
            if _matches(document, query):
                del self.documents[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


@pytest.fixture
def users_collection():
    return InMemoryUsersCollection()


@pytest.fixture
def user_repository(users_collection):
    return UserRepository(users_collection)


@pytest.fixture
def client(user_repository):
    """TestClient over an app bound to the in-memory collection."""
    return TestClient(create_app(user_repository))
