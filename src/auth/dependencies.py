"""Auth dependencies for FastAPI route injection."""

from dataclasses import dataclass

import jwt
from fastapi import Request

from src.auth import repository
from src.auth.sessions import hash_session_key, verify_token
from src.config.settings import get_settings
from src.utils.errors import AuthenticationRequired


@dataclass
class CurrentUser:
    id: str
    username: str


def _extract_bearer_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization")
    if auth and auth.startswith("Bearer "):
        return auth[7:]
    return None


def extract_session_token(request: Request) -> str | None:
    """Session cookie first; non-browser clients may send the same token as a Bearer header."""
    settings = get_settings()
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or _extract_bearer_token(request)


async def get_current_user(request: Request) -> CurrentUser:
    """FastAPI dependency: authenticate via the signed session token."""
    token = extract_session_token(request)
    if not token:
        raise AuthenticationRequired("Missing authentication credentials")

    try:
        payload = verify_token(token)
    except jwt.InvalidTokenError:
        raise AuthenticationRequired("Invalid or expired session")
    if payload.get("type") != "session" or not payload.get("sid"):
        raise AuthenticationRequired("Invalid session token")

    session = repository.get_active_session(hash_session_key(payload["sid"]))
    if not session:
        raise AuthenticationRequired("Session expired or revoked")

    user = repository.get_user_by_id(session["user_id"])
    if not user:
        raise AuthenticationRequired("Session expired or revoked")

    request.state.user_id = user["id"]
    return CurrentUser(id=user["id"], username=user["username"])
