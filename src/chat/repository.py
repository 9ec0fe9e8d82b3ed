"""Data access layer for chat history."""

from src.db.client import get_supabase
from src.db.models import CHAT_HISTORY


def create(user_id: str, prompt: str, response: str) -> dict:
    db = get_supabase()
    result = db.table(CHAT_HISTORY).insert({
        "user_id": user_id,
        "prompt": prompt,
        "response": response,
    }).execute()
    return result.data[0]


def list_by_user(user_id: str) -> list[dict]:
    db = get_supabase()
    result = (
        db.table(CHAT_HISTORY)
        .select("*")
        .eq("user_id", user_id)
        .order("created_at", desc=True)
        .execute()
    )
    return result.data


def list_favorites(user_id: str) -> list[dict]:
    db = get_supabase()
    result = (
        db.table(CHAT_HISTORY)
        .select("*")
        .eq("user_id", user_id)
        .eq("is_favorite", True)
        .order("created_at", desc=True)
        .execute()
    )
    return result.data


def set_favorite(entry_id: str, user_id: str, is_favorite: bool) -> dict | None:
    db = get_supabase()
    result = (
        db.table(CHAT_HISTORY)
        .update({"is_favorite": is_favorite})
        .eq("id", entry_id)
        .eq("user_id", user_id)
        .execute()
    )
    return result.data[0] if result.data else None
