"""
Chat orchestrator.

One inbound message goes through:
    resolve session -> append user message (in memory) -> context summary
    -> completion gateway -> append reply + title -> single save

The store is only written after the completion service answered. When the
gateway fails the whole exchange is dropped, including the user's message.
"""

from __future__ import annotations

import logging
import time

from backend.app.chat.models import Role
from backend.app.chat.prompts import SYSTEM_DIRECTIVE
from backend.app.chat.store import ConversationStore
from backend.app.core.config import Settings
from backend.app.core.errors import ConfigurationError, InvalidInputError, UpstreamError
from backend.app.observability.logging import log_event
from backend.app.orchestrator.types import ChatReply, Completer, OrchestratorInput, Summarizer


class ChatOrchestrator:
    def __init__(
        self,
        settings: Settings,
        store: ConversationStore,
        context: Summarizer,
        gateway: Completer,
        directive: str = SYSTEM_DIRECTIVE,
    ):
        self._settings = settings
        self._store = store
        self._context = context
        self._gateway = gateway
        self._directive = directive

    def validate(self, text: str) -> str:
        if not text or not text.strip():
            raise InvalidInputError("Message is required")
        if len(text) > self._settings.max_message_chars:
            raise InvalidInputError(f"Message must be at most {self._settings.max_message_chars} characters")
        return text

    def handle_incoming_message(self, payload: OrchestratorInput) -> ChatReply:
        text = self.validate(payload.text)
        if not self._settings.completion_configured:
            raise ConfigurationError("GROQ_API_KEY not found in environment variables")

        session = self._store.resolve_or_create(payload.user_id, payload.chat_id)
        self._store.append(session, Role.USER, text)

        summary = self._context.summarize(payload.user_id)

        started = time.perf_counter()
        try:
            reply_text = self._gateway.complete(self._directive, summary, session.messages)
        except UpstreamError as exc:
            log_event(
                "chat_upstream_failed",
                level=logging.ERROR,
                user_id=payload.user_id,
                chat_id=session.id,
                error_class=type(exc).__name__,
                error=exc.detail,
            )
            raise

        reply = self._store.append(session, Role.ASSISTANT, reply_text)
        self._store.derive_title_if_absent(session, text)
        self._store.save(session)

        log_event(
            "chat_completed",
            user_id=payload.user_id,
            chat_id=session.id,
            messages=len(session.messages),
            context_chars=len(summary),
            llm_latency_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return ChatReply(chat_id=session.id, message=reply)
