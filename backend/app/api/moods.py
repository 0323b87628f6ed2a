"""
Mood tracking endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from backend.app.api.deps import get_mood_repository
from backend.app.api.schemas import MessageEnvelope, MoodIn, MoodListOut, MoodOut, MoodStatOut
from backend.app.core.auth.jwt_auth import get_current_user_id
from backend.app.core.errors import InvalidInputError
from backend.app.wellness.models import MoodType, MoodUpdate
from backend.app.wellness.repository import MoodRepository


router = APIRouter(prefix="/api/moods", tags=["moods"])


def parse_mood_type(raw: Optional[str]) -> MoodType:
    try:
        return MoodType(str(raw or "").strip().lower())
    except ValueError:
        raise InvalidInputError(f"Invalid mood type. Valid moods: {', '.join(MoodType.values())}")


@router.post("", response_model=MoodOut, status_code=status.HTTP_201_CREATED)
def create_mood(
    payload: MoodIn,
    user_id: str = Depends(get_current_user_id),
    moods: MoodRepository = Depends(get_mood_repository),
):
    if not payload.mood_type:
        raise InvalidInputError("Mood type is required")
    return MoodOut.of(moods.create(user_id, parse_mood_type(payload.mood_type)))


@router.get("", response_model=MoodListOut)
def list_moods(
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    mood_type: Optional[str] = Query(None, alias="moodType"),
    user_id: str = Depends(get_current_user_id),
    moods: MoodRepository = Depends(get_mood_repository),
):
    kind = parse_mood_type(mood_type) if mood_type else None
    items = moods.list_for_user(user_id, start_date, end_date, kind)
    return MoodListOut(count=len(items), moods=[MoodOut.of(m) for m in items])


@router.get("/stats", response_model=list[MoodStatOut])
def mood_stats(
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    user_id: str = Depends(get_current_user_id),
    moods: MoodRepository = Depends(get_mood_repository),
):
    return [MoodStatOut(**row) for row in moods.stats(user_id, start_date, end_date)]


@router.get("/{mood_id}", response_model=MoodOut)
def get_mood(
    mood_id: str,
    user_id: str = Depends(get_current_user_id),
    moods: MoodRepository = Depends(get_mood_repository),
):
    return MoodOut.of(moods.get_owned(user_id, mood_id))


@router.put("/{mood_id}", response_model=MoodOut)
def update_mood(
    mood_id: str,
    payload: MoodIn,
    user_id: str = Depends(get_current_user_id),
    moods: MoodRepository = Depends(get_mood_repository),
):
    kind = parse_mood_type(payload.mood_type) if payload.mood_type else None
    return MoodOut.of(moods.update(user_id, mood_id, MoodUpdate(mood_type=kind)))


@router.delete("/{mood_id}", response_model=MessageEnvelope)
def delete_mood(
    mood_id: str,
    user_id: str = Depends(get_current_user_id),
    moods: MoodRepository = Depends(get_mood_repository),
):
    moods.delete(user_id, mood_id)
    return MessageEnvelope(message="Mood deleted successfully")
