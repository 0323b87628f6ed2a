"""
Context aggregator.

Reduces a user's recent moods and journal topics into the short summary that
is appended to the chat directive.
"""

from __future__ import annotations

from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta
from typing import Optional, Protocol, Sequence

from backend.app.chat.models import utc_now
from backend.app.wellness.models import JournalSignal, MoodSignal

MOOD_WINDOW = timedelta(days=7)
MOOD_LIMIT = 7
JOURNAL_LIMIT = 3


class MoodSource(Protocol):
    def recent_for_user(self, user_id: str, since: datetime, limit: int) -> list[MoodSignal]: ...


class JournalSource(Protocol):
    def recent_for_user(self, user_id: str, limit: int) -> list[JournalSignal]: ...


def dominant_mood(moods: Sequence[MoodSignal]) -> Optional[str]:
    """Most frequent mood; ties go to the one seen first (newest-first input)."""
    if not moods:
        return None
    counts = Counter(m.mood_type.value for m in moods)
    # most_common is stable, so equal counts keep insertion order
    return counts.most_common(1)[0][0]


def render_moods(moods: Sequence[MoodSignal]) -> list[str]:
    if not moods:
        return []
    listing = ", ".join(f"{m.created_at.date().isoformat()}: {m.mood_type.value}" for m in moods)
    return [
        f"User's recent moods (last 7 days): {listing}",
        f"Dominant mood this week: {dominant_mood(moods)}",
    ]


def render_journals(journals: Sequence[JournalSignal]) -> list[str]:
    titles = [j.title for j in journals if j.title]
    if not titles:
        return []
    return [f"Recent journal topics: {', '.join(titles)}"]


class ContextAggregator:
    def __init__(self, moods: MoodSource, journals: JournalSource):
        self._moods = moods
        self._journals = journals

    def summarize(self, user_id: str, now: Optional[datetime] = None) -> str:
        now = now or utc_now()
        since = now - MOOD_WINDOW
        with ThreadPoolExecutor(max_workers=2) as executor:
            moods_future = executor.submit(self._moods.recent_for_user, user_id, since, MOOD_LIMIT)
            journals_future = executor.submit(self._journals.recent_for_user, user_id, JOURNAL_LIMIT)
            moods = moods_future.result()
            journals = journals_future.result()

        lines = render_moods(moods) + render_journals(journals)
        return "\n".join(lines)
