"""Pytest configuration for the MindCase backend tests.

Sets up a minimal environment and an in-memory stand-in for the parts of the
pymongo collection API the repositories use, so no MongoDB or completion
service is needed.
"""

import copy
import os
from dataclasses import replace
from types import SimpleNamespace

import pytest

os.environ.setdefault("GROQ_API_KEY", "test-key")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017")
os.environ.setdefault("MONGO_DB_NAME", "mindcase_test")

from backend.app.chat.context import ContextAggregator  # noqa: E402
from backend.app.chat.store import ConversationStore  # noqa: E402
from backend.app.core.config import get_settings  # noqa: E402
from backend.app.core.db import mongo  # noqa: E402
from backend.app.core.errors import UpstreamError  # noqa: E402
from backend.app.orchestrator.chat_orchestrator import ChatOrchestrator  # noqa: E402
from backend.app.wellness.repository import JournalRepository, MoodRepository  # noqa: E402


# ---------------------------------------------------------------------------
# In-memory collection
# ---------------------------------------------------------------------------

def _matches(doc, query):
    for key, cond in (query or {}).items():
        value = doc.get(key)
        if isinstance(cond, dict) and any(k.startswith("$") for k in cond):
            for op, arg in cond.items():
                if op == "$gte" and not (value is not None and value >= arg):
                    return False
                if op == "$lte" and not (value is not None and value <= arg):
                    return False
                if op == "$in" and value not in arg:
                    return False
        elif value != cond:
            return False
    return True


def _project(doc, projection):
    out = copy.deepcopy(doc)
    for key, flag in (projection or {}).items():
        if not flag:
            out.pop(key, None)
    return out


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    def sort(self, key, direction=1):
        self._docs = sorted(self._docs, key=lambda d: d.get(key), reverse=direction < 0)
        return self

    def limit(self, n):
        if n:
            self._docs = self._docs[:n]
        return self

    def __iter__(self):
        return iter(self._docs)


class FakeCollection:
    def __init__(self):
        self.docs = {}

    def insert_one(self, doc):
        if doc["_id"] in self.docs:
            raise ValueError(f"duplicate _id {doc['_id']}")
        self.docs[doc["_id"]] = copy.deepcopy(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    def find_one(self, query, projection=None):
        for doc in self.docs.values():
            if _matches(doc, query):
                return _project(doc, projection)
        return None

    def find(self, query=None, projection=None):
        return FakeCursor([_project(d, projection) for d in self.docs.values() if _matches(d, query)])

    def replace_one(self, query, doc):
        for key, existing in self.docs.items():
            if _matches(existing, query):
                self.docs[key] = copy.deepcopy(doc)
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    def update_one(self, query, update):
        for existing in self.docs.values():
            if _matches(existing, query):
                existing.update(copy.deepcopy(update.get("$set", {})))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    def delete_one(self, query):
        for key, existing in list(self.docs.items()):
            if _matches(existing, query):
                del self.docs[key]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


class FakeDatabase:
    def __init__(self):
        self._collections = {}

    def __getitem__(self, name):
        return self._collections.setdefault(name, FakeCollection())


# ---------------------------------------------------------------------------
# Completion gateway double
# ---------------------------------------------------------------------------

class FakeGateway:
    def __init__(self, reply="I hear you"):
        self.reply = reply
        self.error = None
        self.calls = []

    def complete(self, directive, context_summary, messages):
        self.calls.append(
            {"directive": directive, "context_summary": context_summary, "messages": list(messages)}
        )
        if self.error is not None:
            raise self.error
        return self.reply

    def fail_with(self, error=None):
        self.error = error or UpstreamError("completion service returned 502")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def settings():
    return replace(get_settings(), completion_api_key="test-key")


@pytest.fixture
def db():
    return FakeDatabase()


@pytest.fixture
def store(settings, db):
    return ConversationStore(db[mongo.CHAT_SESSIONS], fallback=settings.session_fallback)


@pytest.fixture
def mood_repo(db):
    return MoodRepository(db[mongo.MOODS])


@pytest.fixture
def journal_repo(db):
    return JournalRepository(db[mongo.JOURNALS], db[mongo.JOURNAL_ENTRIES])


@pytest.fixture
def aggregator(mood_repo, journal_repo):
    return ContextAggregator(mood_repo, journal_repo)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def orchestrator(settings, store, aggregator, gateway):
    return ChatOrchestrator(settings=settings, store=store, context=aggregator, gateway=gateway)


@pytest.fixture
def current_user():
    return SimpleNamespace(id="user-1")


@pytest.fixture
def app(settings, db, store, mood_repo, journal_repo, orchestrator, current_user):
    from backend.app.api import deps
    from backend.app.core.auth.jwt_auth import get_current_user_id
    from backend.main import app as fastapi_app

    fastapi_app.dependency_overrides = {
        deps.get_app_settings: lambda: settings,
        deps.get_database: lambda: db,
        deps.get_conversation_store: lambda: store,
        deps.get_mood_repository: lambda: mood_repo,
        deps.get_journal_repository: lambda: journal_repo,
        deps.get_chat_orchestrator: lambda: orchestrator,
        get_current_user_id: lambda: current_user.id,
    }
    yield fastapi_app
    fastapi_app.dependency_overrides = {}


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client
