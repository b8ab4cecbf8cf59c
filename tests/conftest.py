"""Shared pytest fixtures."""

import copy
import operator
from types import SimpleNamespace
from typing import Any

import bcrypt
import pytest
from fastapi.testclient import TestClient

from classroll.app import App
from classroll.config import Config
from classroll.core.core import Core
from classroll.core.modules.mail.service import MailService
from classroll.web.server import create_fastapi_app

# Low bcrypt cost keeps the suite fast; checkpw reads the cost from the hash
TEACHER_PASSWORD_HASH = bcrypt.hashpw(b"pw123", bcrypt.gensalt(rounds=4)).decode("utf-8")
STUDENT_PASSWORD_HASH = bcrypt.hashpw(b"study42", bcrypt.gensalt(rounds=4)).decode("utf-8")

JWT_SECRET = "test-secret-key-that-is-long-enough-for-hs256"

_OPERATORS = {
    "$lt": operator.lt,
    "$lte": operator.le,
    "$gt": operator.gt,
    "$gte": operator.ge,
}


def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    for key, condition in query.items():
        value = doc.get(key)
        if isinstance(condition, dict):
            for op, operand in condition.items():
                if value is None or not _OPERATORS[op](value, operand):
                    return False
        elif value != condition:
            return False
    return True


class FakeCollection:
    """In-memory stand-in for the subset of AsyncCollection the services use."""

    def __init__(self) -> None:
        self.docs: list[dict[str, Any]] = []
        self.indexes: list[tuple[Any, dict[str, Any]]] = []

    async def create_index(self, keys: Any, **kwargs: Any) -> str:
        self.indexes.append((keys, kwargs))
        return "index"

    async def find_one(
        self, query: dict[str, Any], projection: Any = None, sort: list[tuple[str, int]] | None = None
    ) -> dict[str, Any] | None:
        found = [doc for doc in self.docs if _matches(doc, query)]
        for key, direction in reversed(sort or []):
            found.sort(key=lambda doc: doc[key], reverse=direction < 0)
        return copy.deepcopy(found[0]) if found else None

    async def insert_one(self, doc: dict[str, Any]) -> SimpleNamespace:
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc.get("_id"))

    async def replace_one(self, query: dict[str, Any], doc: dict[str, Any], upsert: bool = False) -> SimpleNamespace:
        for index, existing in enumerate(self.docs):
            if _matches(existing, query):
                self.docs[index] = copy.deepcopy(doc)
                return SimpleNamespace(matched_count=1)
        if upsert:
            self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(matched_count=0)

    async def find_one_and_replace(
        self, query: dict[str, Any], doc: dict[str, Any], upsert: bool = False, return_document: bool = False
    ) -> dict[str, Any] | None:
        # return_document=False is ReturnDocument.BEFORE
        for index, existing in enumerate(self.docs):
            if _matches(existing, query):
                self.docs[index] = copy.deepcopy(doc)
                return existing if not return_document else copy.deepcopy(doc)
        if upsert:
            self.docs.append(copy.deepcopy(doc))
            return None if not return_document else copy.deepcopy(doc)
        return None

    async def delete_one(self, query: dict[str, Any]) -> SimpleNamespace:
        for index, existing in enumerate(self.docs):
            if _matches(existing, query):
                del self.docs[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def find_one_and_delete(self, query: dict[str, Any]) -> dict[str, Any] | None:
        for index, existing in enumerate(self.docs):
            if _matches(existing, query):
                return self.docs.pop(index)
        return None


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


def make_config(**overrides: Any) -> Config:
    values: dict[str, Any] = {
        "database_url": "mongodb://localhost:27017/classroll_test",
        "host": "127.0.0.1",
        "port": 3100,
        "debug": True,
        "jwt_secret": JWT_SECRET,
        "otp_backend": "memory",
    }
    values.update(overrides)
    return Config(_env_file=None, **values)  # type: ignore[call-arg]


@pytest.fixture
def fake_collection():
    return FakeCollection()


@pytest.fixture
def config_factory():
    return make_config


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def empty_database():
    return FakeDatabase()


@pytest.fixture
def database():
    """Database with one administrator teacher and one student."""
    db = FakeDatabase()
    db.get_collection("teachers").docs.append(
        {
            "_id": 7,
            "name": "Test Admin",
            "email": "t@s.com",
            "contact_number": 9876543210,
            "password_hash": TEACHER_PASSWORD_HASH,
            "is_admin": True,
        }
    )
    db.get_collection("students").docs.append(
        {
            "_id": 12,
            "name": "Test Student",
            "email": "s@s.com",
            "contact_number": "5550100",
            "password_hash": STUDENT_PASSWORD_HASH,
        }
    )
    return db


@pytest.fixture
def outbox(monkeypatch):
    """Capture passcode emails instead of talking to an SMTP server."""
    sent: list[tuple[str, str]] = []

    async def send_otp_code(self, email: str, code: str) -> None:
        sent.append((email, code))

    monkeypatch.setattr(MailService, "send_otp_code", send_otp_code)
    return sent


@pytest.fixture
def core(config, database):
    return Core(config, database)


@pytest.fixture
async def app(config, database, outbox):
    app = App(config, database)
    async with app.lifespan():
        yield app


@pytest.fixture
def client(config, database, outbox):
    fastapi_app = create_fastapi_app(App(config, database), config)
    with TestClient(fastapi_app, raise_server_exceptions=False) as test_client:
        yield test_client
