"""
FastAPI dependencies shared by the routers.

Everything here is cached per process; tests swap them out through
app.dependency_overrides.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from backend.app.chat.store import ConversationStore
from backend.app.core.config import Settings, get_settings
from backend.app.core.db.mongo import get_db
from backend.app.orchestrator.chat_orchestrator import ChatOrchestrator
from backend.app.orchestrator.factory import (
    build_chat_orchestrator,
    build_conversation_store,
    build_journal_repository,
    build_mood_repository,
)
from backend.app.wellness.repository import JournalRepository, MoodRepository


@lru_cache(maxsize=1)
def get_app_settings() -> Settings:
    return get_settings()


def get_database() -> Any:
    return get_db()


@lru_cache(maxsize=1)
def get_conversation_store() -> ConversationStore:
    return build_conversation_store(get_app_settings(), get_database())


@lru_cache(maxsize=1)
def get_mood_repository() -> MoodRepository:
    return build_mood_repository(get_database())


@lru_cache(maxsize=1)
def get_journal_repository() -> JournalRepository:
    return build_journal_repository(get_database())


@lru_cache(maxsize=1)
def get_chat_orchestrator() -> ChatOrchestrator:
    return build_chat_orchestrator(get_app_settings(), get_database())
