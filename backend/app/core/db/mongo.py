"""
MongoDB connection helper.

Provides a single client and database handle for the application.
"""

from functools import lru_cache
from typing import Any

from pymongo import MongoClient

from backend.app.core.config import get_settings

USERS = "users"
CHAT_SESSIONS = "chat_sessions"
MOODS = "moods"
JOURNALS = "journals"
JOURNAL_ENTRIES = "journal_entries"


@lru_cache(maxsize=1)
def get_mongo_client() -> MongoClient:
    settings = get_settings()
    return MongoClient(settings.mongo_uri, tz_aware=True)


@lru_cache(maxsize=1)
def get_db() -> Any:
    client = get_mongo_client()
    return client[get_settings().mongo_db_name]
