"""Data access layer for files and folders. Every query is scoped by owner."""

from typing import Any

from src.db.client import get_supabase
from src.db.models import FILES, FOLDERS


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _one(result) -> dict | None:
    return result.data[0] if result.data else None


# --- Files ---

def create_file(user_id: str, data: dict[str, Any]) -> dict:
    db = get_supabase()
    result = db.table(FILES).insert({"user_id": user_id, **data}).execute()
    return result.data[0]


def get_file(file_id: str, user_id: str) -> dict | None:
    db = get_supabase()
    return _one(db.table(FILES).select("*").eq("id", file_id).eq("user_id", user_id).execute())


def list_root_files(user_id: str) -> list[dict]:
    db = get_supabase()
    result = (
        db.table(FILES)
        .select("*")
        .eq("user_id", user_id)
        .is_("folder_id", "null")
        .order("created_at", desc=True)
        .execute()
    )
    return result.data


def list_files_in_folder(folder_id: str, user_id: str) -> list[dict]:
    db = get_supabase()
    result = (
        db.table(FILES)
        .select("*")
        .eq("user_id", user_id)
        .eq("folder_id", folder_id)
        .order("created_at", desc=True)
        .execute()
    )
    return result.data


def list_favorite_files(user_id: str) -> list[dict]:
    db = get_supabase()
    result = (
        db.table(FILES)
        .select("*")
        .eq("user_id", user_id)
        .eq("is_favorite", True)
        .order("created_at", desc=True)
        .execute()
    )
    return result.data


def update_file(file_id: str, user_id: str, data: dict[str, Any]) -> dict | None:
    db = get_supabase()
    return _one(db.table(FILES).update(data).eq("id", file_id).eq("user_id", user_id).execute())


def delete_file(file_id: str, user_id: str) -> bool:
    db = get_supabase()
    result = db.table(FILES).delete().eq("id", file_id).eq("user_id", user_id).execute()
    return bool(result.data)


def get_file_by_share_id(share_id: str) -> dict | None:
    db = get_supabase()
    return _one(db.table(FILES).select("name, content, created_at").eq("share_id", share_id).execute())


def search_files(user_id: str, query: str) -> list[dict]:
    """Files whose name or content contains ``query`` (case-insensitive)."""
    db = get_supabase()
    if not query:
        result = db.table(FILES).select("*").eq("user_id", user_id).order("created_at", desc=True).execute()
        return result.data

    pattern = f"%{_escape_like(query)}%"
    by_name = (
        db.table(FILES).select("*").eq("user_id", user_id)
        .ilike("name", pattern).order("created_at", desc=True).execute().data
    )
    by_content = (
        db.table(FILES).select("*").eq("user_id", user_id)
        .ilike("content", pattern).order("created_at", desc=True).execute().data
    )

    seen = set()
    merged = []
    for row in by_name + by_content:
        if row["id"] not in seen:
            seen.add(row["id"])
            merged.append(row)
    return merged


# --- Folders ---

def create_folder(user_id: str, name: str, parent_id: str | None = None) -> dict:
    db = get_supabase()
    row = {"user_id": user_id, "name": name}
    if parent_id:
        row["parent_id"] = parent_id
    result = db.table(FOLDERS).insert(row).execute()
    return result.data[0]


def get_folder(folder_id: str, user_id: str) -> dict | None:
    db = get_supabase()
    return _one(db.table(FOLDERS).select("*").eq("id", folder_id).eq("user_id", user_id).execute())


def list_folders(user_id: str) -> list[dict]:
    db = get_supabase()
    result = (
        db.table(FOLDERS)
        .select("*")
        .eq("user_id", user_id)
        .order("created_at", desc=True)
        .execute()
    )
    return result.data


def list_subfolders(folder_id: str, user_id: str) -> list[dict]:
    db = get_supabase()
    result = (
        db.table(FOLDERS)
        .select("*")
        .eq("user_id", user_id)
        .eq("parent_id", folder_id)
        .order("created_at", desc=True)
        .execute()
    )
    return result.data


def delete_folder(folder_id: str, user_id: str) -> bool:
    db = get_supabase()
    result = db.table(FOLDERS).delete().eq("id", folder_id).eq("user_id", user_id).execute()
    return bool(result.data)


def search_folders(user_id: str, query: str) -> list[dict]:
    db = get_supabase()
    builder = db.table(FOLDERS).select("*").eq("user_id", user_id)
    if query:
        builder = builder.ilike("name", f"%{_escape_like(query)}%")
    return builder.order("created_at", desc=True).execute().data
