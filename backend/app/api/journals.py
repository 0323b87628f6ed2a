"""
Journal endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from backend.app.api.deps import get_journal_repository
from backend.app.api.schemas import JournalIn, JournalListOut, JournalOut, MessageEnvelope
from backend.app.core.auth.jwt_auth import get_current_user_id
from backend.app.core.errors import InvalidInputError
from backend.app.wellness.models import JournalUpdate
from backend.app.wellness.repository import JournalRepository


router = APIRouter(prefix="/api/journals", tags=["journals"])


@router.post("", response_model=JournalOut, status_code=status.HTTP_201_CREATED)
def create_journal(
    payload: JournalIn,
    user_id: str = Depends(get_current_user_id),
    journals: JournalRepository = Depends(get_journal_repository),
):
    title = (payload.title or "").strip()
    text = (payload.text or "").strip()
    if not title or not text:
        raise InvalidInputError("Title and text are required")
    return JournalOut.of(journals.create(user_id, title, text))


@router.get("", response_model=JournalListOut)
def list_journals(
    user_id: str = Depends(get_current_user_id),
    journals: JournalRepository = Depends(get_journal_repository),
):
    items = journals.list_for_user(user_id)
    return JournalListOut(count=len(items), journals=[JournalOut.of(j) for j in items])


@router.get("/{journal_id}", response_model=JournalOut)
def get_journal(
    journal_id: str,
    user_id: str = Depends(get_current_user_id),
    journals: JournalRepository = Depends(get_journal_repository),
):
    return JournalOut.of(journals.get_owned(user_id, journal_id))


@router.put("/{journal_id}", response_model=JournalOut)
def update_journal(
    journal_id: str,
    payload: JournalIn,
    user_id: str = Depends(get_current_user_id),
    journals: JournalRepository = Depends(get_journal_repository),
):
    changes = JournalUpdate(title=(payload.title or "").strip() or None, text=(payload.text or "").strip() or None)
    return JournalOut.of(journals.update(user_id, journal_id, changes))


@router.delete("/{journal_id}", response_model=MessageEnvelope)
def delete_journal(
    journal_id: str,
    user_id: str = Depends(get_current_user_id),
    journals: JournalRepository = Depends(get_journal_repository),
):
    journals.delete(user_id, journal_id)
    return MessageEnvelope(message="Journal deleted successfully")
