"""Shapes returned by the remote file-storage API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(slots=True)
class ApiResult:
    """Outcome of one backend call; failures carry a message instead of raising."""

    success: bool
    data: Any = None
    message: str = ""
    status_code: int | None = None


@dataclass(slots=True)
class RemoteFile:
    """One entry of the backend file listing."""

    name: str
    size: int
    created: str | None = None
    modified: str | None = None
    original_name: str | None = None
    uploader: str | None = None
    mime: str | None = None
    mtime: str | None = None

    @property
    def display_name(self) -> str:
        return self.original_name or self.name

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RemoteFile":
        stats = payload.get("stats") or {}
        return cls(
            name=str(payload["name"]),
            size=int(payload.get("size") or 0),
            created=_as_text(payload.get("created")),
            modified=_as_text(payload.get("modified")),
            original_name=payload.get("originalName") or None,
            uploader=payload.get("uploader") or None,
            mime=payload.get("type") or None,
            mtime=_as_text(stats.get("mtime")) if isinstance(stats, Mapping) else None,
        )


@dataclass(slots=True)
class StorageStats:
    """Aggregate usage reported by the backend."""

    total_files: int = 0
    total_folders: int = 0
    total_size: int = 0
    storage_path: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "StorageStats":
        return cls(
            total_files=int(payload.get("totalFiles") or 0),
            total_folders=int(payload.get("totalFolders") or 0),
            total_size=int(payload.get("totalSize") or 0),
            storage_path=payload.get("storagePath"),
        )


def _as_text(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


__all__ = ["ApiResult", "RemoteFile", "StorageStats"]
