"""
Email/password authentication endpoints.
"""

import hashlib
import hmac
import os
import uuid
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from pymongo.errors import PyMongoError

from backend.app.api.deps import get_app_settings, get_database
from backend.app.chat.models import utc_now
from backend.app.core.auth.jwt_auth import create_access_token, get_current_user
from backend.app.core.config import Settings
from backend.app.core.db.mongo import USERS


router = APIRouter(prefix="/api/auth", tags=["auth"])

PBKDF2_ITERATIONS = 120_000
PBKDF2_ALGORITHM = "sha256"
SALT_BYTES = 16
MIN_PASSWORD_CHARS = 6


class SignupRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class UserOut(BaseModel):
    id: str
    name: str
    email: str


class AuthResponse(BaseModel):
    token: str
    user: UserOut


def normalize_email(email: str) -> str:
    return email.strip().lower()


def hash_password(password: str) -> str:
    salt = os.urandom(SALT_BYTES)
    digest = hashlib.pbkdf2_hmac(
        PBKDF2_ALGORITHM,
        password.encode("utf-8"),
        salt,
        PBKDF2_ITERATIONS,
    )
    return f"pbkdf2_{PBKDF2_ALGORITHM}${PBKDF2_ITERATIONS}${salt.hex()}${digest.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        algo, iterations, salt_hex, digest_hex = password_hash.split("$", 3)
        if algo != f"pbkdf2_{PBKDF2_ALGORITHM}":
            return False
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(digest_hex)
        computed = hashlib.pbkdf2_hmac(
            PBKDF2_ALGORITHM,
            password.encode("utf-8"),
            salt,
            int(iterations),
        )
        return hmac.compare_digest(computed, expected)
    except ValueError:
        return False


def _user_out(user: dict[str, Any]) -> UserOut:
    return UserOut(id=str(user["_id"]), name=str(user.get("name") or ""), email=str(user.get("email") or ""))


def _database_unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Database unavailable. Please ensure MongoDB is running and try again.",
    )


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    payload: SignupRequest,
    settings: Settings = Depends(get_app_settings),
    db: Any = Depends(get_database),
):
    name = payload.name.strip()
    email = normalize_email(payload.email)
    if not name or not email or not payload.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="All fields are required")
    if "@" not in email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Valid email is required")
    if len(payload.password) < MIN_PASSWORD_CHARS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {MIN_PASSWORD_CHARS} characters",
        )

    try:
        users = db[USERS]
        if users.find_one({"email": email}):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")

        now = utc_now()
        user = {
            "_id": str(uuid.uuid4()),
            "name": name,
            "email": email,
            "password_hash": hash_password(payload.password),
            "created_at": now,
            "updated_at": now,
        }
        users.insert_one(user)
    except PyMongoError:
        raise _database_unavailable()

    token = create_access_token(settings, {"sub": user["_id"]})
    return AuthResponse(token=token, user=_user_out(user))


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    settings: Settings = Depends(get_app_settings),
    db: Any = Depends(get_database),
):
    email = normalize_email(payload.email)
    if not email or not payload.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="All fields are required")

    try:
        user = db[USERS].find_one({"email": email})
    except PyMongoError:
        raise _database_unavailable()

    if not user or not verify_password(payload.password, str(user.get("password_hash") or "")):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    token = create_access_token(settings, {"sub": str(user["_id"])})
    return AuthResponse(token=token, user=_user_out(user))


@router.get("/profile")
def profile(user: dict = Depends(get_current_user)):
    return {"user": _user_out(user).model_dump()}
