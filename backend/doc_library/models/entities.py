"""Records persisted in the local store.

Field names are snake_case in Python and camelCase on disk so existing caches
written by the web client stay readable.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from doc_library.utils.text import slugify

ROOT_FOLDER_ID = "root"

ActivityType = Literal["visit", "view", "download", "upload"]
ACTIVITY_TYPES: tuple[str, ...] = ("visit", "view", "download", "upload")


class StoredRecord(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_store(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class DocumentFile(StoredRecord):
    name: str
    size: int = 0
    type: str = "application/octet-stream"
    url: str = ""


class Permissions(StoredRecord):
    can_view: bool = True
    can_edit: bool = True
    can_delete: bool = True
    can_share: bool = True


class Document(StoredRecord):
    id: str
    title: str = ""
    description: str = ""
    category: str = ""
    tags: list[str] = Field(default_factory=list)
    files: list[DocumentFile] = Field(default_factory=list)
    created_at: str
    updated_at: str
    views: int = Field(default=0, ge=0)
    downloads: int = Field(default=0, ge=0)
    starred: bool = False
    folder_id: str | None = None
    permissions: Permissions = Field(default_factory=Permissions)


class Folder(StoredRecord):
    id: str
    name: str
    path: str = ""
    parent_id: str | None = None
    description: str = ""
    created_at: str | None = None
    updated_at: str | None = None

    @model_validator(mode="after")
    def _derive_path(self) -> "Folder":
        # Folders saved by the web client's folder page carry no path.
        if not self.path:
            self.path = "/" if self.id == ROOT_FOLDER_ID else folder_path(self.name)
        return self


def folder_path(name: str) -> str:
    return f"/{slugify(name)}"


class UserActivity(StoredRecord):
    # Numeric ids come from the recorder; older web-client records may carry strings.
    id: float | str
    type: ActivityType
    timestamp: str
    data: dict[str, Any] = Field(default_factory=dict)


__all__ = [
    "ROOT_FOLDER_ID",
    "ACTIVITY_TYPES",
    "ActivityType",
    "StoredRecord",
    "DocumentFile",
    "Permissions",
    "Document",
    "Folder",
    "folder_path",
    "UserActivity",
]
