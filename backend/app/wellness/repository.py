"""
Mongo repositories for moods and journals.

Besides the CRUD used by the mood/journal routers, each repository exposes a
read used by the chat context aggregator (recent_for_user).
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Any, Optional

from pymongo import DESCENDING

from backend.app.chat.models import utc_now
from backend.app.core.errors import ForbiddenError, NotFoundError
from backend.app.wellness.models import (
    Journal,
    JournalEntry,
    JournalSignal,
    JournalUpdate,
    Mood,
    MoodSignal,
    MoodType,
    MoodUpdate,
)


def _date_range(start: Optional[datetime], end: Optional[datetime]) -> dict[str, Any]:
    bounds: dict[str, Any] = {}
    if start is not None:
        bounds["$gte"] = start
    if end is not None:
        bounds["$lte"] = end
    return bounds


class MoodRepository:
    def __init__(self, collection: Any):
        self._collection = collection

    def create(self, user_id: str, mood_type: MoodType) -> Mood:
        mood = Mood(user_id=user_id, mood_type=mood_type)
        self._collection.insert_one(mood.to_document())
        return mood

    def get_owned(self, user_id: str, mood_id: str) -> Mood:
        doc = self._collection.find_one({"_id": mood_id})
        if doc is None:
            raise NotFoundError(f"mood {mood_id} not found", public_message="Mood not found")
        if str(doc.get("user_id")) != user_id:
            raise ForbiddenError(f"mood {mood_id} not owned by {user_id}", public_message="Not authorized to access this mood")
        return Mood.from_document(doc)

    def list_for_user(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        mood_type: Optional[MoodType] = None,
    ) -> list[Mood]:
        query: dict[str, Any] = {"user_id": user_id}
        bounds = _date_range(start, end)
        if bounds:
            query["created_at"] = bounds
        if mood_type is not None:
            query["mood_type"] = mood_type.value
        cursor = self._collection.find(query).sort("created_at", DESCENDING)
        return [Mood.from_document(doc) for doc in cursor]

    def update(self, user_id: str, mood_id: str, changes: MoodUpdate) -> Mood:
        mood = self.get_owned(user_id, mood_id)
        if changes.mood_type is None:
            return mood
        mood.mood_type = changes.mood_type
        mood.updated_at = utc_now()
        self._collection.update_one(
            {"_id": mood_id},
            {"$set": {"mood_type": mood.mood_type.value, "updated_at": mood.updated_at}},
        )
        return mood

    def delete(self, user_id: str, mood_id: str) -> None:
        self.get_owned(user_id, mood_id)
        self._collection.delete_one({"_id": mood_id})

    def stats(self, user_id: str, start: Optional[datetime] = None, end: Optional[datetime] = None) -> list[dict[str, Any]]:
        counts = Counter(m.mood_type.value for m in self.list_for_user(user_id, start, end))
        return [{"moodType": mood_type, "count": count} for mood_type, count in counts.most_common()]

    def recent_for_user(self, user_id: str, since: datetime, limit: int) -> list[MoodSignal]:
        cursor = (
            self._collection.find({"user_id": user_id, "created_at": {"$gte": since}})
            .sort("created_at", DESCENDING)
            .limit(limit)
        )
        signals = []
        for doc in cursor:
            mood = Mood.from_document(doc)
            signals.append(MoodSignal(mood_type=mood.mood_type, created_at=mood.created_at))
        return signals


class JournalRepository:
    def __init__(self, journals: Any, entries: Any):
        self._journals = journals
        self._entries = entries

    def _resolve(self, docs: list[dict[str, Any]]) -> list[Journal]:
        entry_ids = [str(d["entry_id"]) for d in docs]
        entries: dict[str, JournalEntry] = {}
        if entry_ids:
            for doc in self._entries.find({"_id": {"$in": entry_ids}}):
                entry = JournalEntry.from_document(doc)
                entries[entry.id] = entry
        return [Journal.from_document(d, entries.get(str(d["entry_id"]))) for d in docs]

    def create(self, user_id: str, title: str, text: str) -> Journal:
        entry = JournalEntry(title=title, text=text)
        self._entries.insert_one(entry.to_document())
        journal = Journal(user_id=user_id, entry_id=entry.id, entry=entry)
        self._journals.insert_one(journal.to_document())
        return journal

    def get_owned(self, user_id: str, journal_id: str) -> Journal:
        doc = self._journals.find_one({"_id": journal_id})
        if doc is None:
            raise NotFoundError(f"journal {journal_id} not found", public_message="Journal not found")
        if str(doc.get("user_id")) != user_id:
            raise ForbiddenError(
                f"journal {journal_id} not owned by {user_id}",
                public_message="Not authorized to access this journal",
            )
        return self._resolve([doc])[0]

    def list_for_user(self, user_id: str, limit: int = 0) -> list[Journal]:
        cursor = self._journals.find({"user_id": user_id}).sort("created_at", DESCENDING)
        if limit:
            cursor = cursor.limit(limit)
        return self._resolve(list(cursor))

    def update(self, user_id: str, journal_id: str, changes: JournalUpdate) -> Journal:
        journal = self.get_owned(user_id, journal_id)
        fields: dict[str, Any] = {}
        if changes.title:
            fields["title"] = changes.title
        if changes.text:
            fields["text"] = changes.text
        if fields:
            fields["updated_at"] = utc_now()
            self._entries.update_one({"_id": journal.entry_id}, {"$set": fields})
        return self.get_owned(user_id, journal_id)

    def delete(self, user_id: str, journal_id: str) -> None:
        journal = self.get_owned(user_id, journal_id)
        self._entries.delete_one({"_id": journal.entry_id})
        self._journals.delete_one({"_id": journal_id})

    def recent_for_user(self, user_id: str, limit: int) -> list[JournalSignal]:
        signals = []
        for journal in self.list_for_user(user_id, limit=limit):
            entry = journal.entry
            signals.append(
                JournalSignal(
                    title=entry.title if entry else None,
                    text=entry.text if entry else None,
                    created_at=journal.created_at,
                )
            )
        return signals
