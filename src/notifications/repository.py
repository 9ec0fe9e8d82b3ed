"""Data access layer for notifications."""

from src.db.client import get_supabase
from src.db.models import NOTIFICATIONS


def create(user_id: str, message: str) -> dict:
    db = get_supabase()
    result = db.table(NOTIFICATIONS).insert({"user_id": user_id, "message": message}).execute()
    return result.data[0]


def list_by_user(user_id: str) -> list[dict]:
    db = get_supabase()
    result = (
        db.table(NOTIFICATIONS)
        .select("*")
        .eq("user_id", user_id)
        .order("created_at", desc=True)
        .execute()
    )
    return result.data


def mark_all_read(user_id: str) -> int:
    db = get_supabase()
    result = db.table(NOTIFICATIONS).update({"read": True}).eq("user_id", user_id).eq("read", False).execute()
    return len(result.data or [])
