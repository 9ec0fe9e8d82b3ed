"""Business logic for files and folders.

Rows belonging to another user are indistinguishable from missing rows:
every lookup filters by owner and a miss is reported as 404.
"""

import logging
import secrets
from uuid import UUID

from src.files import repository
from src.files.schemas import FileCreate, FileUpdate
from src.utils.errors import FolderNotEmpty, NotFound

logger = logging.getLogger(__name__)


def _require_folder(folder_id: UUID | str | None, user_id: str) -> str | None:
    if folder_id is None:
        return None
    folder = repository.get_folder(str(folder_id), user_id)
    if not folder:
        raise NotFound("Folder not found")
    return folder["id"]


def _require_file(file_id: str, user_id: str) -> dict:
    file = repository.get_file(file_id, user_id)
    if not file:
        raise NotFound("File not found")
    return file


# --- Files ---

def create_file(user_id: str, body: FileCreate) -> dict:
    data = {"name": body.name, "content": body.content}
    folder_id = _require_folder(body.folder_id, user_id)
    if folder_id:
        data["folder_id"] = folder_id
    return repository.create_file(user_id, data)


def get_file(file_id: str, user_id: str) -> dict:
    return _require_file(file_id, user_id)


def list_root_files(user_id: str) -> list[dict]:
    return repository.list_root_files(user_id)


def list_favorite_files(user_id: str) -> list[dict]:
    return repository.list_favorite_files(user_id)


def update_file(file_id: str, user_id: str, body: FileUpdate) -> dict:
    file = _require_file(file_id, user_id)
    changes = body.model_dump(exclude_unset=True)
    # null name/content means "leave as is"; null folder means root
    update_data = {k: v for k, v in changes.items() if v is not None or k == "folder_id"}
    if "folder_id" in update_data:
        update_data["folder_id"] = _require_folder(update_data["folder_id"], user_id)
    if not update_data:
        return file
    updated = repository.update_file(file_id, user_id, update_data)
    if not updated:
        raise NotFound("File not found")
    return updated


def delete_file(file_id: str, user_id: str) -> None:
    if not repository.delete_file(file_id, user_id):
        raise NotFound("File not found")


def move_file(file_id: str, user_id: str, folder_id: UUID | None) -> dict:
    _require_file(file_id, user_id)
    target = _require_folder(folder_id, user_id)
    updated = repository.update_file(file_id, user_id, {"folder_id": target})
    if not updated:
        raise NotFound("File not found")
    return updated


def set_favorite(file_id: str, user_id: str, is_favorite: bool) -> dict:
    updated = repository.update_file(file_id, user_id, {"is_favorite": is_favorite})
    if not updated:
        raise NotFound("File not found")
    return updated


def share_file(file_id: str, user_id: str) -> str:
    """Return the file's share token, minting one on first use."""
    file = _require_file(file_id, user_id)
    if file.get("share_id"):
        return file["share_id"]
    share_id = secrets.token_urlsafe(16)
    if not repository.update_file(file_id, user_id, {"share_id": share_id}):
        raise NotFound("File not found")
    logger.info("File %s shared by user %s", file_id, user_id)
    return share_id


def get_shared_file(share_id: str) -> dict:
    file = repository.get_file_by_share_id(share_id)
    if not file:
        raise NotFound("Shared file not found")
    return {"name": file["name"], "content": file["content"], "created_at": file["created_at"]}


def search(user_id: str, query: str) -> list[dict]:
    files = [{**row, "kind": "file"} for row in repository.search_files(user_id, query)]
    folders = [{**row, "kind": "folder"} for row in repository.search_folders(user_id, query)]
    return files + folders


# --- Folders ---

def create_folder(user_id: str, name: str, parent_id: UUID | None = None) -> dict:
    parent = _require_folder(parent_id, user_id)
    return repository.create_folder(user_id, name, parent)


def list_folders(user_id: str) -> list[dict]:
    return repository.list_folders(user_id)


def folder_contents(folder_id: str, user_id: str) -> dict:
    folder = repository.get_folder(folder_id, user_id)
    if not folder:
        raise NotFound("Folder not found")
    return {
        "name": folder["name"],
        "files": repository.list_files_in_folder(folder_id, user_id),
        "folders": repository.list_subfolders(folder_id, user_id),
    }


def delete_folder(folder_id: str, user_id: str) -> None:
    if not repository.get_folder(folder_id, user_id):
        raise NotFound("Folder not found")
    if repository.list_files_in_folder(folder_id, user_id):
        raise FolderNotEmpty()
    if repository.list_subfolders(folder_id, user_id):
        raise FolderNotEmpty("Cannot delete folder with subfolders. Move or delete them first.")
    repository.delete_folder(folder_id, user_id)
