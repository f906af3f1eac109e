"""Shared fixtures: an in-memory stand-in for the Motor database and an API client.

The fake implements only the slice of the Motor collection API the service
uses (find/sort/limit/to_list/async iteration, find_one, insert_one,
update_one with $set/$max, delete_one, delete_many).
"""

from __future__ import annotations

import copy
from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from core.config import settings
from core.database import get_database
from core.security import create_access_token
from core.time_utils import UTC


# =============================================================================
# Fake Motor database
# =============================================================================


def _bson_rank(value):
    if value is None:
        return (0, 0)
    if isinstance(value, bool):
        return (4, value)
    if isinstance(value, (int, float)):
        return (1, value)
    if isinstance(value, str):
        return (2, value)
    if isinstance(value, datetime):
        return (3, value)
    return (5, str(value))


def _matches(document, query):
    return all(document.get(key) == value for key, value in query.items())


class FakeCursor:
    def __init__(self, documents):
        self._documents = documents
        self._limit = None

    def sort(self, key, direction=1):
        self._documents.sort(key=lambda doc: _bson_rank(doc.get(key)), reverse=direction == -1)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def _results(self):
        docs = self._documents
        if self._limit:
            docs = docs[: self._limit]
        return [copy.deepcopy(doc) for doc in docs]

    async def to_list(self, length=None):
        docs = self._results()
        return docs[:length] if length else docs

    def __aiter__(self):
        self._iter = iter(self._results())
        return self

    async def __anext__(self):
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration


class FakeCollection:
    def __init__(self):
        self.documents = []
        self.fail_update_for = set()
        self.fail_delete_many = False

    def find(self, query=None):
        return FakeCursor([doc for doc in self.documents if _matches(doc, query or {})])

    async def find_one(self, query):
        for doc in self.documents:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    async def insert_one(self, document):
        document = copy.deepcopy(document)
        document.setdefault("_id", ObjectId())
        self.documents.append(document)
        return SimpleNamespace(inserted_id=document["_id"])

    async def update_one(self, query, update):
        for doc in self.documents:
            if _matches(doc, query):
                if doc["_id"] in self.fail_update_for:
                    raise RuntimeError("write failed")
                doc.update(update.get("$set", {}))
                for key, value in update.get("$max", {}).items():
                    if doc.get(key) is None or _bson_rank(value) > _bson_rank(doc[key]):
                        doc[key] = value
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_one(self, query):
        for index, doc in enumerate(self.documents):
            if _matches(doc, query):
                del self.documents[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def delete_many(self, query):
        if self.fail_delete_many:
            raise RuntimeError("delete failed")
        before = len(self.documents)
        self.documents = [doc for doc in self.documents if not _matches(doc, query)]
        return SimpleNamespace(deleted_count=before - len(self.documents))


class FakeDatabase:
    def __init__(self):
        self.habits = FakeCollection()
        self.entries = FakeCollection()


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def now():
    """A fixed 'now' in the middle of a UTC day."""
    return datetime(2025, 3, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def days_ago(now):
    """Factory: instant `n` days before `now`, optionally at a given hour."""

    def _days_ago(n, hour=None):
        instant = now - timedelta(days=n)
        if hour is not None:
            instant = instant.replace(hour=hour)
        return instant

    return _days_ago


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def client(fake_db, monkeypatch):
    monkeypatch.setattr(settings, "SCHEDULER_ENABLED", False)
    monkeypatch.setattr(settings, "STREAK_JOB_API_KEY", "job-key")

    from main import app

    app.dependency_overrides[get_database] = lambda: fake_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(owner_id="owner-1"):
        return {"Authorization": f"Bearer {create_access_token(owner_id)}"}

    return _headers
