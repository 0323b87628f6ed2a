"""
Chat endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from backend.app.api.deps import get_chat_orchestrator, get_conversation_store
from backend.app.api.schemas import (
    MessageEnvelope,
    MessageOut,
    SendMessageRequest,
    SendMessageResponse,
    SessionEnvelope,
    SessionListOut,
    SessionOut,
    SessionSummaryOut,
)
from backend.app.chat.store import ConversationStore
from backend.app.core.auth.jwt_auth import get_current_user_id
from backend.app.orchestrator.chat_orchestrator import ChatOrchestrator
from backend.app.orchestrator.types import OrchestratorInput


router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.post("/message", response_model=SendMessageResponse)
def send_message(
    request: SendMessageRequest,
    user_id: str = Depends(get_current_user_id),
    orchestrator: ChatOrchestrator = Depends(get_chat_orchestrator),
):
    reply = orchestrator.handle_incoming_message(
        OrchestratorInput(user_id=user_id, text=request.message or "", chat_id=request.chat_id)
    )
    return SendMessageResponse(chat_id=reply.chat_id, message=MessageOut.of(reply.message))


@router.post("/new", response_model=SessionEnvelope, status_code=status.HTTP_201_CREATED)
def create_chat(
    user_id: str = Depends(get_current_user_id),
    store: ConversationStore = Depends(get_conversation_store),
):
    session = store.create(user_id)
    return SessionEnvelope(session=SessionOut.of(session))


@router.get("", response_model=SessionListOut)
def list_chats(
    user_id: str = Depends(get_current_user_id),
    store: ConversationStore = Depends(get_conversation_store),
):
    summaries = store.list_summaries(user_id)
    return SessionListOut(count=len(summaries), sessions=[SessionSummaryOut.of(s) for s in summaries])


@router.get("/{chat_id}", response_model=SessionEnvelope)
def get_chat(
    chat_id: str,
    user_id: str = Depends(get_current_user_id),
    store: ConversationStore = Depends(get_conversation_store),
):
    return SessionEnvelope(session=SessionOut.of(store.require(user_id, chat_id)))


@router.delete("/{chat_id}", response_model=MessageEnvelope)
def delete_chat(
    chat_id: str,
    user_id: str = Depends(get_current_user_id),
    store: ConversationStore = Depends(get_conversation_store),
):
    store.delete(user_id, chat_id)
    return MessageEnvelope(message="Chat deleted")


@router.delete("/{chat_id}/messages", response_model=SessionEnvelope)
def clear_chat(
    chat_id: str,
    user_id: str = Depends(get_current_user_id),
    store: ConversationStore = Depends(get_conversation_store),
):
    session = store.require(user_id, chat_id)
    store.clear(session)
    store.save(session)
    return SessionEnvelope(session=SessionOut.of(session))
