"""
Wire models. Field names are camelCase on the wire, snake_case in Python.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from backend.app.chat.models import ChatSession, ChatSummary, Message
from backend.app.wellness.models import Journal, Mood


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SendMessageRequest(WireModel):
    message: Optional[str] = None
    chat_id: Optional[str] = None


class MessageOut(WireModel):
    role: str
    content: str
    timestamp: datetime

    @classmethod
    def of(cls, message: Message) -> "MessageOut":
        return cls(role=message.role.value, content=message.content, timestamp=message.timestamp)


class SendMessageResponse(WireModel):
    chat_id: str
    message: MessageOut


class SessionOut(WireModel):
    id: str
    title: str
    messages: list[MessageOut]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def of(cls, session: ChatSession) -> "SessionOut":
        return cls(
            id=session.id,
            title=session.title,
            messages=[MessageOut.of(m) for m in session.messages],
            created_at=session.created_at,
            updated_at=session.updated_at,
        )


class SessionEnvelope(WireModel):
    session: SessionOut


class SessionSummaryOut(WireModel):
    id: str
    title: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def of(cls, summary: ChatSummary) -> "SessionSummaryOut":
        return cls(id=summary.id, title=summary.title, created_at=summary.created_at, updated_at=summary.updated_at)


class SessionListOut(WireModel):
    count: int
    sessions: list[SessionSummaryOut]


class MoodIn(WireModel):
    mood_type: Optional[str] = None


class MoodOut(WireModel):
    id: str
    mood_type: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def of(cls, mood: Mood) -> "MoodOut":
        return cls(id=mood.id, mood_type=mood.mood_type.value, created_at=mood.created_at, updated_at=mood.updated_at)


class MoodListOut(WireModel):
    count: int
    moods: list[MoodOut]


class MoodStatOut(WireModel):
    mood_type: str
    count: int


class JournalIn(WireModel):
    title: Optional[str] = None
    text: Optional[str] = None


class JournalEntryOut(WireModel):
    id: str
    title: str
    text: str


class JournalOut(WireModel):
    id: str
    entry: Optional[JournalEntryOut]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def of(cls, journal: Journal) -> "JournalOut":
        entry = None
        if journal.entry is not None:
            entry = JournalEntryOut(id=journal.entry.id, title=journal.entry.title, text=journal.entry.text)
        return cls(id=journal.id, entry=entry, created_at=journal.created_at, updated_at=journal.updated_at)


class JournalListOut(WireModel):
    count: int
    journals: list[JournalOut]


class MessageEnvelope(BaseModel):
    message: str
