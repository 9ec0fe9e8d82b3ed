"""Data access layer for users and sessions."""

from datetime import datetime, timezone
from typing import Any

from src.db.client import get_supabase
from src.db.models import SESSIONS, USERS


def _first(result) -> dict | None:
    return result.data[0] if result.data else None


# --- Users ---

def get_user_by_id(user_id: str) -> dict | None:
    db = get_supabase()
    return _first(db.table(USERS).select("*").eq("id", user_id).execute())


def get_user_by_username(username: str) -> dict | None:
    db = get_supabase()
    return _first(db.table(USERS).select("*").eq("username", username).execute())


def get_user_by_referral_code(code: str) -> dict | None:
    db = get_supabase()
    return _first(db.table(USERS).select("*").eq("referral_code", code).execute())


def create_user(data: dict[str, Any]) -> dict:
    db = get_supabase()
    result = db.table(USERS).insert(data).execute()
    return result.data[0]


def update_password_hash(user_id: str, password_hash: str) -> None:
    db = get_supabase()
    db.table(USERS).update({"password_hash": password_hash}).eq("id", user_id).execute()


def count_referrals(user_id: str) -> int:
    db = get_supabase()
    result = db.table(USERS).select("id", count="exact").eq("referred_by", user_id).execute()
    return result.count or 0


# --- Sessions ---

def create_session(user_id: str, token_hash: str, expires_at: datetime) -> dict:
    db = get_supabase()
    result = db.table(SESSIONS).insert({
        "user_id": user_id,
        "token_hash": token_hash,
        "expires_at": expires_at.isoformat(),
    }).execute()
    return result.data[0]


def get_active_session(token_hash: str) -> dict | None:
    db = get_supabase()
    now = datetime.now(timezone.utc).isoformat()
    result = (
        db.table(SESSIONS)
        .select("*")
        .eq("token_hash", token_hash)
        .eq("is_revoked", False)
        .gt("expires_at", now)
        .execute()
    )
    return _first(result)


def revoke_session(token_hash: str) -> None:
    db = get_supabase()
    db.table(SESSIONS).update({"is_revoked": True}).eq("token_hash", token_hash).execute()
