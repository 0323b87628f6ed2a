"""
Central configuration for the MindCase backend.

Everything is read from the environment once, by get_settings(), and the
resulting Settings object is handed to the components that need it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum


class SessionFallback(str, Enum):
    """What to do when a message references an unknown or foreign chat."""

    CREATE = "create"
    REJECT = "reject"


@dataclass(frozen=True)
class Settings:
    app_env: str
    app_name: str
    debug: bool
    log_level: str
    cors_allow_origins: list[str]
    mongo_uri: str
    mongo_db_name: str
    jwt_secret: str
    jwt_algorithm: str
    jwt_expire_minutes: int
    completion_api_key: str
    completion_model: str
    completion_base_url: str
    completion_timeout_seconds: float
    max_message_chars: int
    session_fallback: SessionFallback

    @property
    def completion_configured(self) -> bool:
        return bool(self.completion_api_key)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


def _env_fallback(name: str, default: SessionFallback) -> SessionFallback:
    raw = (os.getenv(name) or "").strip().lower()
    try:
        return SessionFallback(raw)
    except ValueError:
        return default


def get_settings() -> Settings:
    raw_origins = os.getenv("CORS_ALLOW_ORIGINS", "*")
    if raw_origins.strip() == "*":
        cors_allow_origins = ["*"]
    else:
        cors_allow_origins = [x.strip() for x in raw_origins.split(",") if x.strip()]

    return Settings(
        app_env=os.getenv("APP_ENV", "dev").strip().lower(),
        app_name=os.getenv("APP_NAME", "MindCase"),
        debug=_env_bool("DEBUG", False),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        cors_allow_origins=cors_allow_origins,
        mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
        mongo_db_name=os.getenv("MONGO_DB_NAME", "mindcase").strip() or "mindcase",
        jwt_secret=os.getenv("JWT_SECRET", "CHANGE_ME_SECRET"),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        jwt_expire_minutes=_env_int("JWT_EXPIRE_MINUTES", 60 * 24 * 30),
        completion_api_key=(os.getenv("GROQ_API_KEY") or "").strip(),
        completion_model=os.getenv("GROQ_MODEL", "llama-3.1-8b-instant").strip() or "llama-3.1-8b-instant",
        completion_base_url=(os.getenv("COMPLETION_BASE_URL") or "").strip(),
        completion_timeout_seconds=_env_float("COMPLETION_TIMEOUT_SECONDS", 30.0),
        max_message_chars=_env_int("MAX_MESSAGE_CHARS", 4000),
        session_fallback=_env_fallback("CHAT_SESSION_FALLBACK", SessionFallback.CREATE),
    )
