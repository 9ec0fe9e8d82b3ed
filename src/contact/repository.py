"""Data access layer for contact form submissions."""

from src.db.client import get_supabase
from src.db.models import CONTACTS


def create(name: str, email: str, message: str) -> dict:
    db = get_supabase()
    result = db.table(CONTACTS).insert({"name": name, "email": email, "message": message}).execute()
    return result.data[0]
