import sys
from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest
from bson import ObjectId

# Ensure project root is on sys.path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import create_app  # noqa: E402


def _matches(doc, query):
    return all(doc.get(k) == v for k, v in (query or {}).items())


class FakeCursor:
    """Lazily failing cursor, like pymongo's: errors surface on iteration."""

    def __init__(self, docs, error=None):
        self._docs = list(docs)
        self._error = error

    def sort(self, key, direction=1):
        self._docs.sort(key=lambda d: d.get(key), reverse=direction < 0)
        return self

    def __iter__(self):
        if self._error is not None:
            raise self._error
        return iter(self._docs)


class FakeCollection:
    def __init__(self, name):
        self.name = name
        self.docs = []
        self.indexes = []
        self.error = None
        self.find_calls = 0

    def find(self, query=None):
        self.find_calls += 1
        return FakeCursor([dict(d) for d in self.docs if _matches(d, query)], self.error)

    def find_one(self, query=None):
        if self.error is not None:
            raise self.error
        return next((dict(d) for d in self.docs if _matches(d, query)), None)

    def insert_one(self, doc):
        if self.error is not None:
            raise self.error
        doc = dict(doc)
        doc.setdefault("_id", ObjectId())
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    def update_one(self, query, update):
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(update.get("$set", {}))
                return SimpleNamespace(modified_count=1)
        return SimpleNamespace(modified_count=0)

    def delete_one(self, query):
        if self.error is not None:
            raise self.error
        for index, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    def count_documents(self, query):
        if self.error is not None:
            raise self.error
        return sum(1 for d in self.docs if _matches(d, query))

    def create_index(self, keys, **kwargs):
        self.indexes.append((keys, kwargs))


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection(name))


class FakeStore:
    """Stands in for MongoConnection: exposes db() and ping()."""

    def __init__(self):
        self.database = FakeDatabase()
        self.down = None

    def db(self):
        return self.database

    def ping(self):
        if self.down is not None:
            raise self.down

    def add(self, collection, name, created_at, **fields):
        doc = {
            "_id": ObjectId(),
            "name": name,
            "description": fields.pop("description", ""),
            "created_at": created_at,
            **fields,
        }
        self.database[collection].docs.append(doc)
        return str(doc["_id"])


def ts(hour):
    """Deterministic creation timestamps for ordering assertions."""
    return datetime(2024, 1, 1, hour, tzinfo=timezone.utc)


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def app(store):
    return create_app({"TESTING": True, "DASHBOARD_TIMEOUT": 5}, store=store)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    with client.session_transaction() as sess:
        sess["username"] = "tester"
    return client
