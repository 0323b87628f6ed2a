"""
Conversation store.

Owns the chat_sessions collection. Appends and title changes happen in memory;
nothing reaches MongoDB until save() is called, so a caller can batch several
changes into one write.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pymongo import DESCENDING

from backend.app.chat.models import ChatSession, ChatSummary, Message, Role, derive_title, utc_now
from backend.app.chat.prompts import CLEARED_CHAT_GREETING, NEW_CHAT_GREETING
from backend.app.core.config import SessionFallback
from backend.app.core.errors import NotFoundError, SessionConflictError

log = logging.getLogger(__name__)

SUMMARY_PROJECTION = {"messages": 0}


class ConversationStore:
    def __init__(self, collection: Any, fallback: SessionFallback = SessionFallback.CREATE):
        self._collection = collection
        self.fallback = fallback

    def get(self, user_id: str, session_id: str) -> Optional[ChatSession]:
        """Return the session only when it exists and belongs to `user_id`."""
        if not session_id:
            return None
        doc = self._collection.find_one({"_id": session_id, "user_id": user_id})
        if doc is None:
            return None
        return ChatSession.from_document(doc)

    def require(self, user_id: str, session_id: str) -> ChatSession:
        session = self.get(user_id, session_id)
        if session is None:
            raise NotFoundError(f"chat {session_id} not found for user {user_id}", public_message="Chat not found")
        return session

    def create(self, user_id: str) -> ChatSession:
        """Create and persist a session seeded with the greeting."""
        session = ChatSession(owner_id=user_id)
        self.append(session, Role.ASSISTANT, NEW_CHAT_GREETING)
        self.save(session)
        return session

    def resolve_or_create(self, user_id: str, session_id: Optional[str] = None) -> ChatSession:
        """
        Resolve `session_id` for `user_id`, or start a fresh session.

        A fresh session is not persisted here; it is written by the first save().
        A missing or foreign id falls back to a new session unless the store was
        configured with SessionFallback.REJECT, in which case NotFoundError is raised.
        """
        if session_id:
            session = self.get(user_id, session_id)
            if session is not None:
                return session
            if self.fallback == SessionFallback.REJECT:
                raise NotFoundError(f"chat {session_id} not found for user {user_id}", public_message="Chat not found")
            log.info("chat %s not usable by user %s, starting a new one", session_id, user_id)
        return ChatSession(owner_id=user_id)

    def append(self, session: ChatSession, role: Role, content: str) -> Message:
        message = Message(role=role, content=content)
        session.messages.append(message)
        return message

    def derive_title_if_absent(self, session: ChatSession, candidate_text: str) -> bool:
        if session.user_message_count != 1:
            return False
        session.title = derive_title(candidate_text)
        return True

    def clear(self, session: ChatSession) -> None:
        session.messages = []
        self.append(session, Role.ASSISTANT, CLEARED_CHAT_GREETING)

    def save(self, session: ChatSession) -> None:
        """
        Persist the whole session in one write.

        The stored version must still be the one this copy was loaded with;
        otherwise SessionConflictError is raised and nothing is written.
        """
        session.updated_at = utc_now()
        expected = session.version
        doc = session.to_document()
        doc["version"] = expected + 1

        if expected == 0:
            self._collection.insert_one(doc)
        else:
            result = self._collection.replace_one({"_id": session.id, "version": expected}, doc)
            if result.matched_count == 0:
                raise SessionConflictError(f"chat {session.id} changed since version {expected}")
        session.version = expected + 1

    def delete(self, user_id: str, session_id: str) -> None:
        result = self._collection.delete_one({"_id": session_id, "user_id": user_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"chat {session_id} not found for user {user_id}", public_message="Chat not found")

    def list_summaries(self, user_id: str) -> list[ChatSummary]:
        cursor = self._collection.find({"user_id": user_id}, SUMMARY_PROJECTION).sort("updated_at", DESCENDING)
        out: list[ChatSummary] = []
        for doc in cursor:
            session = ChatSession.from_document(doc)
            out.append(
                ChatSummary(
                    id=session.id,
                    title=session.title,
                    created_at=session.created_at,
                    updated_at=session.updated_at,
                )
            )
        return out
