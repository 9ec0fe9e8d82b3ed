"""File, folder and shared-file endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from src.auth.dependencies import CurrentUser, get_current_user
from src.files import service
from src.files.schemas import FavoriteRequest, FileCreate, FileUpdate, FolderCreate, MoveRequest

files_router = APIRouter(prefix="/api/files", tags=["Files"])
folders_router = APIRouter(prefix="/api/folders", tags=["Folders"])
shared_router = APIRouter(prefix="/api/shared-files", tags=["Files"])


# --- Files ---

@files_router.post("", summary="Create a file")
async def create_file(body: FileCreate, user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": service.create_file(user.id, body)}


@files_router.get("", summary="List root files", description="Files that are not inside any folder.")
async def list_root_files(user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": service.list_root_files(user.id)}


@files_router.get("/search", summary="Search files and folders", description="Case-insensitive match on file name, file content and folder name. Each result carries a `kind` of `file` or `folder`.")
async def search(q: str = Query("", max_length=200), user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": service.search(user.id, q)}


@files_router.get("/favorites", summary="List favorite files")
async def list_favorites(user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": service.list_favorite_files(user.id)}


@files_router.get("/{file_id}", summary="Get a file")
async def get_file(file_id: UUID, user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": service.get_file(str(file_id), user.id)}


@files_router.put("/{file_id}", summary="Update a file", description="Partial update of name, content or folder. A null folderId moves the file to the root.")
async def update_file(file_id: UUID, body: FileUpdate, user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": service.update_file(str(file_id), user.id, body)}


@files_router.delete("/{file_id}", summary="Delete a file")
async def delete_file(file_id: UUID, user: CurrentUser = Depends(get_current_user)):
    service.delete_file(str(file_id), user.id)
    return {"status": "success", "data": {"message": "File deleted"}}


@files_router.post("/{file_id}/move", summary="Move a file")
async def move_file(file_id: UUID, body: MoveRequest, user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": service.move_file(str(file_id), user.id, body.folder_id)}


@files_router.post("/{file_id}/favorite", summary="Set favorite flag on a file")
async def favorite_file(file_id: UUID, body: FavoriteRequest, user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": service.set_favorite(str(file_id), user.id, body.is_favorite)}


@files_router.post("/{file_id}/share", summary="Share a file", description="Return a share token that grants read access without a session. Repeat calls return the same token.")
async def share_file(file_id: UUID, user: CurrentUser = Depends(get_current_user)):
    share_id = service.share_file(str(file_id), user.id)
    return {"status": "success", "data": {"share_id": share_id}}


@shared_router.get("/{share_id}", summary="Read a shared file")
async def get_shared_file(share_id: str):
    return {"status": "success", "data": service.get_shared_file(share_id)}


# --- Folders ---

@folders_router.post("", summary="Create a folder")
async def create_folder(body: FolderCreate, user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": service.create_folder(user.id, body.name, body.parent_id)}


@folders_router.get("", summary="List folders")
async def list_folders(user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": service.list_folders(user.id)}


@folders_router.get("/{folder_id}/contents", summary="Folder contents", description="Files and direct subfolders of a folder.")
async def folder_contents(folder_id: UUID, user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": service.folder_contents(str(folder_id), user.id)}


@folders_router.delete("/{folder_id}", summary="Delete an empty folder")
async def delete_folder(folder_id: UUID, user: CurrentUser = Depends(get_current_user)):
    service.delete_folder(str(folder_id), user.id)
    return {"status": "success", "data": {"message": "Folder deleted"}}
