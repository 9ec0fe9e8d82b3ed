"""Shared test fixtures.

The database is replaced with an in-memory stand-in for the Supabase query
builder, installed as the client singleton in ``src.db.client``.
"""

import copy
import os
import re
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("SESSION_SECRET", "test-session-secret-that-is-long-enough-for-hs256")
os.environ["GROQ_API_KEY"] = ""
os.environ["GOOGLE_AI_API_KEY"] = ""
os.environ["RATE_LIMIT_AI"] = "1000"
os.environ["RATE_LIMIT_STANDARD"] = "10000"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from postgrest.exceptions import APIError  # noqa: E402

from src.db import client as db_client  # noqa: E402
from src.main import app  # noqa: E402

TABLE_DEFAULTS = {
    "users": {"credits": 20, "referred_by": None},
    "sessions": {"is_revoked": False},
    "chat_history": {"is_favorite": False},
    "files": {"content": "", "folder_id": None, "is_favorite": False, "share_id": None},
    "folders": {"parent_id": None},
    "notifications": {"read": False},
    "contacts": {},
}

UNIQUE_COLUMNS = {
    "users": ("username", "referral_code"),
    "sessions": ("token_hash",),
    "files": ("share_id",),
}


def _like_to_regex(pattern: str) -> re.Pattern:
    out = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\" and i + 1 < len(pattern):
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if ch == "%":
            out.append(".*")
        elif ch == "_":
            out.append(".")
        else:
            out.append(re.escape(ch))
        i += 1
    return re.compile("^" + "".join(out) + "$", re.IGNORECASE | re.DOTALL)


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self._db = db
        self._table = table
        self._op = "select"
        self._columns = "*"
        self._count = None
        self._payload = None
        self._filters = []
        self._order = None
        self._limit = None
        self._range = None

    # --- operations ---

    def select(self, columns: str = "*", count: str | None = None):
        self._op = "select"
        self._columns = columns
        self._count = count
        return self

    def insert(self, row: dict):
        self._op = "insert"
        self._payload = row
        return self

    def update(self, data: dict):
        self._op = "update"
        self._payload = data
        return self

    def delete(self):
        self._op = "delete"
        return self

    # --- filters ---

    def eq(self, column, value):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self._filters.append(lambda row: row.get(column) != value)
        return self

    def gt(self, column, value):
        self._filters.append(lambda row: row.get(column) is not None and row.get(column) > value)
        return self

    def is_(self, column, value):
        expected = None if value in (None, "null") else value
        self._filters.append(lambda row: row.get(column) is expected)
        return self

    def ilike(self, column, pattern):
        regex = _like_to_regex(pattern)
        self._filters.append(lambda row: row.get(column) is not None and bool(regex.match(str(row[column]))))
        return self

    def order(self, column, desc: bool = False):
        self._order = (column, desc)
        return self

    def limit(self, n: int):
        self._limit = n
        return self

    def range(self, start: int, end: int):
        self._range = (start, end)
        return self

    # --- execution ---

    def _matches(self, row: dict) -> bool:
        return all(f(row) for f in self._filters)

    def _check_columns(self, columns):
        for column in columns:
            if (self._table, column) in self._db.missing_columns:
                raise APIError({"message": f'column {self._table}.{column} does not exist', "code": "42703"})

    def _project(self, row: dict) -> dict:
        if self._columns.strip() == "*":
            return copy.deepcopy(row)
        names = [c.strip() for c in self._columns.split(",")]
        return {name: copy.deepcopy(row.get(name)) for name in names}

    def execute(self):
        if self._table in self._db.fail_tables:
            raise APIError({"message": f"connection to {self._table} failed", "code": "08006"})
        rows = self._db.tables.setdefault(self._table, [])

        if self._op == "insert":
            self._check_columns(self._payload.keys())
            row = {**TABLE_DEFAULTS.get(self._table, {}), **copy.deepcopy(self._payload)}
            row.setdefault("id", str(uuid.uuid4()))
            row.setdefault("created_at", self._db.next_timestamp())
            self._db.check_unique(self._table, row)
            rows.append(row)
            return SimpleNamespace(data=[copy.deepcopy(row)], count=None)

        if self._op == "select" and self._columns.strip() != "*":
            self._check_columns(c.strip() for c in self._columns.split(","))

        matched = [row for row in rows if self._matches(row)]

        if self._op == "update":
            self._check_columns(self._payload.keys())
            for row in matched:
                self._db.check_unique(self._table, {**row, **self._payload}, ignore=row)
            for row in matched:
                row.update(copy.deepcopy(self._payload))
            return SimpleNamespace(data=[copy.deepcopy(r) for r in matched], count=None)

        if self._op == "delete":
            self._db.tables[self._table] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=[copy.deepcopy(r) for r in matched], count=None)

        if self._order:
            column, desc = self._order
            matched.sort(key=lambda r: r.get(column) or "", reverse=desc)
        count = len(matched) if self._count else None
        if self._range:
            start, end = self._range
            matched = matched[start:end + 1]
        if self._limit is not None:
            matched = matched[: self._limit]
        return SimpleNamespace(data=[self._project(r) for r in matched], count=count)


class FakeRpc:
    def __init__(self, db: "FakeSupabase", name: str, params: dict):
        self._db = db
        self._name = name
        self._params = params

    def execute(self):
        if self._name in self._db.fail_rpcs or "users" in self._db.fail_tables:
            raise APIError({"message": "connection failed", "code": "08006"})
        if self._name != "adjust_credits":
            raise APIError({"message": f"function {self._name} does not exist", "code": "42883"})
        user = self._db.find("users", self._params["p_user_id"])
        if user is None:
            raise APIError({"message": "user_not_found", "code": "P0002"})
        new_balance = user["credits"] + self._params["p_delta"]
        if new_balance < 0:
            raise APIError({"message": "insufficient_credits", "code": "P0001"})
        user["credits"] = new_balance
        return SimpleNamespace(data=new_balance, count=None)


class FakeSupabase:
    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.fail_tables: set[str] = set()
        self.fail_rpcs: set[str] = set()
        self.missing_columns: set[tuple[str, str]] = set()
        self._clock = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: dict) -> FakeRpc:
        return FakeRpc(self, name, params)

    def next_timestamp(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def find(self, table: str, row_id: str) -> dict | None:
        for row in self.tables.get(table, []):
            if row["id"] == row_id:
                return row
        return None

    def rows(self, table: str, **filters) -> list[dict]:
        return [
            row for row in self.tables.get(table, [])
            if all(row.get(k) == v for k, v in filters.items())
        ]

    def check_unique(self, table: str, row: dict, ignore: dict | None = None) -> None:
        for column in UNIQUE_COLUMNS.get(table, ()):
            value = row.get(column)
            if value is None:
                continue
            for existing in self.tables.get(table, []):
                if existing is not ignore and existing.get(column) == value:
                    raise APIError({
                        "message": f'duplicate key value violates unique constraint "{table}_{column}_key"',
                        "code": "23505",
                    })


@pytest.fixture()
def fake_db(monkeypatch):
    db = FakeSupabase()
    monkeypatch.setattr(db_client, "_client", db)
    return db


@pytest.fixture()
def make_client(fake_db):
    """Factory for independent clients, each with its own cookie jar."""
    def _make():
        return TestClient(app)
    return _make


@pytest.fixture()
def client(make_client):
    return make_client()


@pytest.fixture()
def test_password():
    return "SecureTestPass123"


def register(client: TestClient, username: str | None = None, password: str = "SecureTestPass123", referrer: str | None = None) -> dict:
    """Register through the API; the client keeps the session cookie."""
    body = {"username": username or f"user_{uuid.uuid4().hex[:8]}", "password": password}
    if referrer:
        body["referrer"] = referrer
    resp = client.post("/api/register", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


@pytest.fixture()
def user(client):
    """A registered user whose session cookie is held by ``client``."""
    return register(client)


@pytest.fixture()
def register_user():
    return register
