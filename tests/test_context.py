"""Context aggregator: mood window, dominant mood, journal topics."""

from datetime import datetime, timedelta, timezone

from backend.app.chat.context import ContextAggregator, dominant_mood
from backend.app.core.db import mongo
from backend.app.wellness.models import Mood, MoodSignal, MoodType

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _add_mood(db, user_id, mood_type, age):
    mood = Mood(user_id=user_id, mood_type=MoodType(mood_type), created_at=NOW - age, updated_at=NOW - age)
    db[mongo.MOODS].insert_one(mood.to_document())
    return mood


def _add_journal(journal_repo, db, user_id, title, age):
    journal = journal_repo.create(user_id, title, f"text for {title}")
    db[mongo.JOURNALS].update_one({"_id": journal.id}, {"$set": {"created_at": NOW - age}})
    return journal


class TestDominantMood:

    def test_most_frequent_wins(self):
        moods = [
            MoodSignal(MoodType.HAPPY, NOW),
            MoodSignal(MoodType.HAPPY, NOW - timedelta(days=1)),
            MoodSignal(MoodType.SAD, NOW - timedelta(days=2)),
        ]
        assert dominant_mood(moods) == "happy"

    def test_tie_goes_to_newest(self):
        moods = [
            MoodSignal(MoodType.SAD, NOW),
            MoodSignal(MoodType.CALM, NOW - timedelta(days=1)),
            MoodSignal(MoodType.CALM, NOW - timedelta(days=2)),
            MoodSignal(MoodType.SAD, NOW - timedelta(days=3)),
        ]
        assert dominant_mood(moods) == "sad"

    def test_no_moods(self):
        assert dominant_mood([]) is None


class TestSummarize:

    def test_empty_user_gives_empty_summary(self, aggregator):
        assert aggregator.summarize("nobody", now=NOW) == ""

    def test_moods_listed_newest_first_with_dominant(self, aggregator, db):
        _add_mood(db, "u1", "sad", timedelta(days=3))
        _add_mood(db, "u1", "happy", timedelta(days=2))
        _add_mood(db, "u1", "happy", timedelta(days=1))

        summary = aggregator.summarize("u1", now=NOW)

        lines = summary.split("\n")
        assert lines[0] == (
            "User's recent moods (last 7 days): 2026-10-17: happy, 2026-10-16: happy, 2026-10-15: sad"
        )
        assert lines[1] == "Dominant mood this week: happy"
        assert len(lines) == 2

    def test_moods_outside_window_are_ignored(self, aggregator, db):
        _add_mood(db, "u1", "angry", timedelta(days=8))
        assert aggregator.summarize("u1", now=NOW) == ""

    def test_mood_count_is_capped(self, aggregator, db):
        for day in range(6):
            _add_mood(db, "u1", "calm", timedelta(hours=day))
        for hour in range(3):
            _add_mood(db, "u1", "tired", timedelta(days=5, hours=hour))

        first_line = aggregator.summarize("u1", now=NOW).split("\n")[0]
        assert first_line.count(":") - 1 == 7
        assert first_line.count("tired") == 1

    def test_other_users_moods_are_not_included(self, aggregator, db):
        _add_mood(db, "someone-else", "happy", timedelta(days=1))
        assert aggregator.summarize("u1", now=NOW) == ""

    def test_three_most_recent_journal_titles(self, aggregator, journal_repo, db):
        _add_journal(journal_repo, db, "u1", "Oldest", timedelta(days=40))
        _add_journal(journal_repo, db, "u1", "Work stress", timedelta(days=3))
        _add_journal(journal_repo, db, "u1", "Good run", timedelta(days=2))
        _add_journal(journal_repo, db, "u1", "Family dinner", timedelta(days=1))

        summary = aggregator.summarize("u1", now=NOW)

        assert summary == "Recent journal topics: Family dinner, Good run, Work stress"

    def test_unresolved_journal_entries_are_skipped(self, aggregator, journal_repo, db):
        _add_journal(journal_repo, db, "u1", "Kept", timedelta(days=2))
        lost = _add_journal(journal_repo, db, "u1", "Lost", timedelta(days=1))
        db[mongo.JOURNAL_ENTRIES].delete_one({"_id": lost.entry_id})

        assert aggregator.summarize("u1", now=NOW) == "Recent journal topics: Kept"

    def test_only_unresolved_journals_gives_no_line(self, aggregator, journal_repo, db):
        lost = _add_journal(journal_repo, db, "u1", "Lost", timedelta(days=1))
        db[mongo.JOURNAL_ENTRIES].delete_one({"_id": lost.entry_id})
        assert aggregator.summarize("u1", now=NOW) == ""

    def test_moods_then_journals(self, aggregator, journal_repo, db):
        _add_mood(db, "u1", "anxious", timedelta(days=1))
        _add_journal(journal_repo, db, "u1", "Exam week", timedelta(days=1))

        lines = aggregator.summarize("u1", now=NOW).split("\n")

        assert lines[0].startswith("User's recent moods")
        assert lines[1] == "Dominant mood this week: anxious"
        assert lines[2] == "Recent journal topics: Exam week"

    def test_sources_are_only_read(self):
        class Moods:
            def recent_for_user(self, user_id, since, limit):
                assert since == NOW - timedelta(days=7)
                assert limit == 7
                return []

        class Journals:
            def recent_for_user(self, user_id, limit):
                assert limit == 3
                return []

        assert ContextAggregator(Moods(), Journals()).summarize("u1", now=NOW) == ""

