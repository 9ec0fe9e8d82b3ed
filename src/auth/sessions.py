"""Session keys and the signed cookie token that carries them."""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone

import jwt

from src.config.settings import get_settings


def generate_session_key() -> str:
    return secrets.token_urlsafe(32)


def hash_session_key(key: str) -> str:
    return hashlib.sha256(key.encode()).hexdigest()


def session_expiry() -> datetime:
    settings = get_settings()
    return datetime.now(timezone.utc) + timedelta(hours=settings.SESSION_TTL_HOURS)


def create_session_token(session_key: str, expires_at: datetime) -> str:
    settings = get_settings()
    payload = {
        "sid": session_key,
        "type": "session",
        "exp": expires_at,
        "iat": datetime.now(timezone.utc),
    }
    return jwt.encode(payload, settings.SESSION_SECRET, algorithm="HS256")


def verify_token(token: str) -> dict:
    """Decode and validate a session token. Raises jwt.ExpiredSignatureError or jwt.InvalidTokenError."""
    settings = get_settings()
    return jwt.decode(token, settings.SESSION_SECRET, algorithms=["HS256"])
