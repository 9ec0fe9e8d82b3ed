"""Pydantic schemas for file and folder requests."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class FileCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1, max_length=255)
    content: str = ""
    folder_id: UUID | None = Field(default=None, alias="folderId")


class FileUpdate(BaseModel):
    """Partial update; only fields present in the body are applied."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = None
    folder_id: UUID | None = Field(default=None, alias="folderId")


class MoveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Required, but null moves the file to the root
    folder_id: UUID | None = Field(alias="folderId")


class FavoriteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_favorite: bool = Field(alias="isFavorite")


class FolderCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1, max_length=255)
    parent_id: UUID | None = Field(default=None, alias="parentId")
