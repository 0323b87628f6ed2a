"""
JWT utilities and FastAPI dependency for authenticated users.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from backend.app.api.deps import get_app_settings, get_database
from backend.app.core.config import Settings
from backend.app.core.db.mongo import USERS
from backend.app.core.errors import AuthenticationError

security_scheme = HTTPBearer(auto_error=False)


def create_access_token(settings: Settings, data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT token."""
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire, "iat": now})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_subject(settings: Settings, token: str) -> str:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise AuthenticationError(f"token rejected: {exc}", public_message="Invalid authentication token") from exc
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("token has no subject", public_message="Invalid authentication token")
    return str(user_id)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    settings: Settings = Depends(get_app_settings),
    db: Any = Depends(get_database),
) -> dict:
    """FastAPI dependency to get the current user from Authorization: Bearer <token>."""
    if credentials is None:
        raise AuthenticationError("no bearer token", public_message="Missing authentication token")

    user_id = decode_subject(settings, credentials.credentials)
    user = db[USERS].find_one({"_id": user_id}, {"password_hash": 0})
    if not user:
        raise AuthenticationError(f"token subject {user_id} unknown", public_message="User not found")

    # Attach to request.state for convenience
    request.state.user = user
    return user


def get_current_user_id(user: dict = Depends(get_current_user)) -> str:
    return str(user["_id"])
