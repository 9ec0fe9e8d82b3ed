"""Tests for file endpoints, search, favorites and sharing."""

import uuid

from src.files import repository as files_repository


def _create_file(client, name="Notes", content="Morning reflections", **extra):
    resp = client.post("/api/files", json={"name": name, "content": content, **extra})
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


def test_create_and_get_round_trip(client, user):
    created = _create_file(client, content="Line one\nLine two")
    resp = client.get(f"/api/files/{created['id']}")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["content"] == "Line one\nLine two"
    assert data["user_id"] == user["id"]
    assert data["folder_id"] is None


def test_update_changes_only_given_fields(client, user):
    created = _create_file(client)
    resp = client.put(f"/api/files/{created['id']}", json={"content": "Evening reflections"})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["content"] == "Evening reflections"
    assert data["name"] == "Notes"

    fetched = client.get(f"/api/files/{created['id']}").json()["data"]
    assert fetched["content"] == "Evening reflections"


def test_root_listing_excludes_files_in_folders(client, user):
    folder = client.post("/api/folders", json={"name": "Drafts"}).json()["data"]
    root_file = _create_file(client, name="Root")
    _create_file(client, name="Nested", folderId=folder["id"])
    names = [f["name"] for f in client.get("/api/files").json()["data"]]
    assert names == [root_file["name"]]


def test_create_in_unknown_folder_is_404(client, user):
    resp = client.post("/api/files", json={"name": "x", "folderId": str(uuid.uuid4())})
    assert resp.status_code == 404


def test_other_users_file_is_404(client, make_client, register_user, user):
    created = _create_file(client)
    other = make_client()
    register_user(other)
    assert other.get(f"/api/files/{created['id']}").status_code == 404
    assert other.put(f"/api/files/{created['id']}", json={"name": "stolen"}).status_code == 404
    assert other.delete(f"/api/files/{created['id']}").status_code == 404
    assert client.get(f"/api/files/{created['id']}").json()["data"]["name"] == "Notes"


def test_delete(client, user):
    created = _create_file(client)
    assert client.delete(f"/api/files/{created['id']}").status_code == 200
    assert client.get(f"/api/files/{created['id']}").status_code == 404


def test_move_to_folder_and_back_to_root(client, user):
    folder = client.post("/api/folders", json={"name": "Archive"}).json()["data"]
    created = _create_file(client)

    moved = client.post(f"/api/files/{created['id']}/move", json={"folderId": folder["id"]})
    assert moved.status_code == 200
    assert moved.json()["data"]["folder_id"] == folder["id"]

    back = client.post(f"/api/files/{created['id']}/move", json={"folderId": None})
    assert back.status_code == 200
    assert back.json()["data"]["folder_id"] is None


def test_move_requires_folder_id_field(client, user):
    created = _create_file(client)
    resp = client.post(f"/api/files/{created['id']}/move", json={})
    assert resp.status_code == 400


def test_favorite_toggle_is_idempotent(client, user):
    created = _create_file(client)
    for _ in range(2):
        resp = client.post(f"/api/files/{created['id']}/favorite", json={"isFavorite": True})
        assert resp.status_code == 200
    favorites = client.get("/api/files/favorites").json()["data"]
    assert [f["id"] for f in favorites] == [created["id"]]


def test_search_matches_name_content_and_folders(client, user):
    by_name = _create_file(client, name="Ramadan plan", content="schedule")
    by_content = _create_file(client, name="Misc", content="Notes for RAMADAN evenings")
    _create_file(client, name="Other", content="nothing here")
    folder = client.post("/api/folders", json={"name": "Ramadan 2026"}).json()["data"]

    results = client.get("/api/files/search", params={"q": "ramadan"}).json()["data"]
    tagged = {(r["kind"], r["id"]) for r in results}
    assert tagged == {("file", by_name["id"]), ("file", by_content["id"]), ("folder", folder["id"])}


def test_search_does_not_duplicate_files(client, user):
    _create_file(client, name="ocean", content="ocean waves")
    results = client.get("/api/files/search", params={"q": "ocean"}).json()["data"]
    assert len(results) == 1


def test_search_treats_wildcards_literally(client, user):
    _create_file(client, name="100% done")
    _create_file(client, name="1000 done")
    results = client.get("/api/files/search", params={"q": "100%"}).json()["data"]
    assert [r["name"] for r in results] == ["100% done"]


def test_empty_search_returns_everything(client, user):
    _create_file(client, name="a")
    _create_file(client, name="b")
    client.post("/api/folders", json={"name": "c"})
    results = client.get("/api/files/search", params={"q": ""}).json()["data"]
    assert sorted(r["kind"] for r in results) == ["file", "file", "folder"]


def test_search_only_returns_own_rows(client, make_client, register_user, user):
    _create_file(client, name="private ocean")
    other = make_client()
    register_user(other)
    assert other.get("/api/files/search", params={"q": "ocean"}).json()["data"] == []


def test_share_link_readable_without_session(client, make_client, user):
    created = _create_file(client, name="Shared", content="For everyone")
    share = client.post(f"/api/files/{created['id']}/share")
    assert share.status_code == 200
    share_id = share.json()["data"]["share_id"]
    assert len(share_id) >= 16

    anonymous = make_client()
    resp = anonymous.get(f"/api/shared-files/{share_id}")
    assert resp.status_code == 200
    assert set(resp.json()["data"]) == {"name", "content", "created_at"}
    assert resp.json()["data"]["content"] == "For everyone"


def test_share_reuses_existing_token(client, user):
    created = _create_file(client)
    first = client.post(f"/api/files/{created['id']}/share").json()["data"]["share_id"]
    second = client.post(f"/api/files/{created['id']}/share").json()["data"]["share_id"]
    assert first == second


def test_unknown_share_token_is_404(make_client, fake_db):
    resp = make_client().get("/api/shared-files/not-a-real-token")
    assert resp.status_code == 404
    assert resp.json()["error"]["type"] == "not_found"


def test_files_require_session(client):
    assert client.get("/api/files").status_code == 401


def test_database_error_is_503_without_driver_details(client, fake_db, user):
    fake_db.fail_tables.add("files")
    resp = client.get("/api/files")
    assert resp.status_code == 503
    error = resp.json()["error"]
    assert error["type"] == "upstream_unavailable"
    assert error["code"] == "DB_ERROR"
    assert "connection to files" not in error["message"]


def test_missing_column_is_reported_as_schema_error(client, fake_db, user):
    fake_db.missing_columns.add(("files", "is_favorite"))
    created = _create_file(client)
    resp = client.post(f"/api/files/{created['id']}/favorite", json={"isFavorite": True})
    assert resp.status_code == 503
    assert resp.json()["error"]["code"] == "SCHEMA_ERROR"


def test_share_of_file_deleted_mid_request_is_404(client, user, monkeypatch):
    created = _create_file(client)
    monkeypatch.setattr(files_repository, "update_file", lambda file_id, user_id, data: None)
    resp = client.post(f"/api/files/{created['id']}/share")
    assert resp.status_code == 404
