"""
Chat session entity and its embedded messages.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

log = logging.getLogger(__name__)

DEFAULT_TITLE = "New Conversation"
TITLE_MAX_CHARS = 50
TITLE_ELLIPSIS = "..."


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        return raw if raw.tzinfo else raw.replace(tzinfo=timezone.utc)
    text = str(raw or "").strip()
    if not text:
        return utc_now()
    try:
        return as_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        return utc_now()


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass
class Message:
    role: Role
    content: str
    timestamp: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        self.role = Role(self.role)
        if not self.content or not self.content.strip():
            raise ValueError("Message content must not be empty")

    def to_document(self) -> dict[str, Any]:
        return {"role": self.role.value, "content": self.content, "timestamp": self.timestamp}

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "Message":
        return cls(
            role=Role(str(data.get("role") or "")),
            content=str(data.get("content") or ""),
            timestamp=as_utc(data.get("timestamp")),
        )


def load_messages(raw: Any, session_id: str = "") -> list[Message]:
    """Stored messages that can be read back; blank or unknown-role entries are dropped."""
    messages: list[Message] = []
    for item in raw or []:
        if not isinstance(item, dict):
            continue
        try:
            messages.append(Message.from_document(item))
        except ValueError:
            log.warning("skipping unreadable message in chat %s (role=%r)", session_id, item.get("role"))
    return messages


@dataclass
class ChatSession:
    """A conversation thread owned by exactly one user."""

    owner_id: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    title: str = DEFAULT_TITLE
    messages: list[Message] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    # 0 means "never persisted"
    version: int = 0

    @property
    def user_message_count(self) -> int:
        return sum(1 for m in self.messages if m.role == Role.USER)

    def to_document(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "user_id": self.owner_id,
            "title": self.title,
            "messages": [m.to_document() for m in self.messages],
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "version": self.version,
        }

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "ChatSession":
        return cls(
            owner_id=str(data["user_id"]),
            id=str(data["_id"]),
            title=str(data.get("title") or DEFAULT_TITLE),
            messages=load_messages(data.get("messages"), session_id=str(data["_id"])),
            created_at=as_utc(data.get("created_at")),
            updated_at=as_utc(data.get("updated_at")),
            version=int(data.get("version") or 0),
        )


@dataclass(frozen=True)
class ChatSummary:
    id: str
    title: str
    created_at: datetime
    updated_at: datetime


def derive_title(text: str) -> str:
    if len(text) > TITLE_MAX_CHARS:
        return text[:TITLE_MAX_CHARS] + TITLE_ELLIPSIS
    return text
