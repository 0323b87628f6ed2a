"""
Wiring for the chat pipeline.
"""

from __future__ import annotations

from typing import Any, Optional

from backend.app.chat.context import ContextAggregator
from backend.app.chat.store import ConversationStore
from backend.app.core.config import Settings
from backend.app.core.db import mongo
from backend.app.core.llm.groq_client import CompletionGateway
from backend.app.orchestrator.chat_orchestrator import ChatOrchestrator
from backend.app.wellness.repository import JournalRepository, MoodRepository


def build_conversation_store(settings: Settings, db: Any) -> ConversationStore:
    return ConversationStore(db[mongo.CHAT_SESSIONS], fallback=settings.session_fallback)


def build_mood_repository(db: Any) -> MoodRepository:
    return MoodRepository(db[mongo.MOODS])


def build_journal_repository(db: Any) -> JournalRepository:
    return JournalRepository(db[mongo.JOURNALS], db[mongo.JOURNAL_ENTRIES])


def build_chat_orchestrator(
    settings: Settings,
    db: Any,
    gateway: Optional[CompletionGateway] = None,
) -> ChatOrchestrator:
    context = ContextAggregator(build_mood_repository(db), build_journal_repository(db))
    return ChatOrchestrator(
        settings=settings,
        store=build_conversation_store(settings, db),
        context=context,
        gateway=gateway or CompletionGateway(settings),
    )
