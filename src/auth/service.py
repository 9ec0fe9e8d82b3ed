"""Registration, login and session lifecycle."""

import logging
import secrets
from datetime import datetime

import jwt
from postgrest.exceptions import APIError

from src.auth import repository
from src.auth.passwords import hash_password, needs_rehash, verify_password
from src.auth.sessions import create_session_token, generate_session_key, hash_session_key, session_expiry, verify_token
from src.config.settings import get_settings
from src.credits import ledger
from src.db.models import PUBLIC_USER_FIELDS
from src.notifications import repository as notifications
from src.utils.errors import DuplicateUsername, InvalidCredentials, LedgerError

logger = logging.getLogger(__name__)

PG_UNIQUE_VIOLATION = "23505"
REFERRAL_CODE_ATTEMPTS = 5


def public_user(user: dict) -> dict:
    return {k: user.get(k) for k in PUBLIC_USER_FIELDS}


def _mint_referral_code() -> str:
    for _ in range(REFERRAL_CODE_ATTEMPTS):
        code = secrets.token_hex(8)
        if not repository.get_user_by_referral_code(code):
            return code
    raise RuntimeError("Could not allocate a unique referral code")


def register(username: str, password: str, referral_code: str | None = None) -> dict:
    settings = get_settings()

    if repository.get_user_by_username(username):
        raise DuplicateUsername()

    referrer = None
    if referral_code:
        referrer = repository.get_user_by_referral_code(referral_code)
        if not referrer:
            logger.warning("Ignoring unknown referral code during registration of %s", username)

    try:
        user = repository.create_user({
            "username": username,
            "password_hash": hash_password(password),
            "credits": settings.SIGNUP_CREDITS,
            "referral_code": _mint_referral_code(),
            "referred_by": referrer["id"] if referrer else None,
        })
    except APIError as exc:
        # Lost a race with a concurrent registration of the same name
        if exc.code == PG_UNIQUE_VIOLATION and "username" in (exc.message or ""):
            raise DuplicateUsername() from exc
        raise

    try:
        notifications.create(
            user["id"],
            f"Welcome to Halal AI Chat! You've received {settings.SIGNUP_CREDITS} free credits to start.",
        )
    except APIError:
        logger.error("Registered %s without a welcome notification", user["id"], exc_info=True)

    if referrer:
        try:
            ledger.award_signup_bonus(referrer["id"], user)
        except LedgerError:
            logger.error("Registered %s without referral bonus for %s", user["id"], referrer["id"])

    logger.info("Registered user %s (referred_by=%s)", user["id"], user.get("referred_by"))
    return user


def authenticate(username: str, password: str) -> dict:
    user = repository.get_user_by_username(username)
    if not user or not verify_password(password, user["password_hash"]):
        raise InvalidCredentials()

    if needs_rehash(user["password_hash"]):
        try:
            repository.update_password_hash(user["id"], hash_password(password))
            logger.info("Upgraded legacy password format for user %s", user["id"])
        except APIError:
            logger.warning("Failed to upgrade password format for user %s", user["id"], exc_info=True)

    return user


def start_session(user_id: str) -> tuple[str, datetime]:
    """Persist a new session and return the signed cookie token and its expiry."""
    key = generate_session_key()
    expires_at = session_expiry()
    repository.create_session(user_id, hash_session_key(key), expires_at)
    return create_session_token(key, expires_at), expires_at


def end_session(token: str) -> None:
    try:
        payload = verify_token(token)
    except jwt.InvalidTokenError:
        return
    if payload.get("sid"):
        repository.revoke_session(hash_session_key(payload["sid"]))
