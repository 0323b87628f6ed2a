"""
Data structures for the chat orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from backend.app.chat.models import Message


@dataclass
class OrchestratorInput:
    user_id: str
    text: str
    chat_id: Optional[str] = None


@dataclass
class ChatReply:
    chat_id: str
    message: Message


class Completer(Protocol):
    def complete(self, directive: str, context_summary: str, messages: Sequence[Message]) -> str: ...


class Summarizer(Protocol):
    def summarize(self, user_id: str) -> str: ...
