"""Database table name constants and type references."""

# Table names: single source of truth for Supabase queries
USERS = "users"
SESSIONS = "sessions"
CHAT_HISTORY = "chat_history"
FILES = "files"
FOLDERS = "folders"
NOTIFICATIONS = "notifications"
CONTACTS = "contacts"

# Stored procedures
RPC_ADJUST_CREDITS = "adjust_credits"

# Columns that older deployments were created without
SCHEMA_PROBES = [
    (FOLDERS, "parent_id"),
    (FILES, "is_favorite"),
    (FILES, "share_id"),
]

# Postgres SQLSTATE for "undefined column"
PG_UNDEFINED_COLUMN = "42703"

# Columns safe to hand back to the account owner
PUBLIC_USER_FIELDS = ("id", "username", "credits", "referral_code", "referred_by", "created_at")
