"""
Prompt assembly layer.
"""

from __future__ import annotations

from typing import Any, Sequence

from backend.app.chat.models import Message, Role

HISTORY_WINDOW = 10


def build_directive(base_directive: str, context_summary: str) -> str:
    summary = (context_summary or "").strip()
    if not summary:
        return base_directive
    return f"{base_directive}\n\n{summary}"


def history_window(messages: Sequence[Message], size: int = HISTORY_WINDOW) -> list[Message]:
    """Last `size` messages, oldest first."""
    if size <= 0:
        return []
    return list(messages[-size:])


class PromptAssembler:
    def build(self, directive: str, context_summary: str, messages: Sequence[Message]) -> list[dict[str, Any]]:
        payload = [{"role": Role.SYSTEM.value, "content": build_directive(directive, context_summary)}]
        for message in history_window(messages):
            payload.append({"role": message.role.value, "content": message.content})
        return payload
