"""
Mood and journal records, plus the read-only signal views used by the chat.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from backend.app.chat.models import as_utc, utc_now


class MoodType(str, Enum):
    HAPPY = "happy"
    SAD = "sad"
    ANGRY = "angry"
    ANXIOUS = "anxious"
    CALM = "calm"
    EXCITED = "excited"
    NEUTRAL = "neutral"
    STRESSED = "stressed"
    TIRED = "tired"
    MOTIVATED = "motivated"

    @classmethod
    def values(cls) -> list[str]:
        return [m.value for m in cls]


@dataclass(frozen=True)
class MoodSignal:
    mood_type: MoodType
    created_at: datetime


@dataclass(frozen=True)
class JournalSignal:
    # None when the linked entry could not be resolved
    title: Optional[str]
    text: Optional[str]
    created_at: datetime


@dataclass
class Mood:
    user_id: str
    mood_type: MoodType
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def to_document(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "user_id": self.user_id,
            "mood_type": self.mood_type.value,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "Mood":
        return cls(
            user_id=str(data["user_id"]),
            mood_type=MoodType(data["mood_type"]),
            id=str(data["_id"]),
            created_at=as_utc(data.get("created_at")),
            updated_at=as_utc(data.get("updated_at")),
        )


@dataclass
class JournalEntry:
    title: str
    text: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def to_document(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "title": self.title,
            "text": self.text,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "JournalEntry":
        return cls(
            title=str(data.get("title") or ""),
            text=str(data.get("text") or ""),
            id=str(data["_id"]),
            created_at=as_utc(data.get("created_at")),
            updated_at=as_utc(data.get("updated_at")),
        )


@dataclass
class Journal:
    """Links a user to one journal entry."""

    user_id: str
    entry_id: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    entry: Optional[JournalEntry] = None

    def to_document(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "user_id": self.user_id,
            "entry_id": self.entry_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_document(cls, data: dict[str, Any], entry: Optional[JournalEntry] = None) -> "Journal":
        return cls(
            user_id=str(data["user_id"]),
            entry_id=str(data["entry_id"]),
            id=str(data["_id"]),
            created_at=as_utc(data.get("created_at")),
            updated_at=as_utc(data.get("updated_at")),
            entry=entry,
        )


@dataclass(frozen=True)
class MoodUpdate:
    mood_type: Optional[MoodType] = None


@dataclass(frozen=True)
class JournalUpdate:
    title: Optional[str] = None
    text: Optional[str] = None
