"""Pydantic DTOs exposed via API and returned by services."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from doc_library.models.entities import ActivityType, Document, UserActivity

PopularityTier = Literal["unseen", "low", "medium", "high"]
SortField = Literal["viewCount", "uploadTime", "size"]
SortOrder = Literal["asc", "desc"]


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OperationResult(ApiModel):
    """Success flag plus a human-readable message; services return these instead of raising."""

    success: bool
    message: str = ""
    data: Any = None

    @classmethod
    def ok(cls, message: str = "", data: Any = None) -> "OperationResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str, data: Any = None) -> "OperationResult":
        return cls(success=False, message=message, data=data)


class SearchResult(ApiModel):
    id: str
    type: Literal["document", "folder", "user"]
    title: str
    description: str | None = None
    content: str | None = None
    author: str | None = None
    created_at: str
    tags: list[str] | None = None
    relevance: int


class DashboardStats(ApiModel):
    total_documents: int = 0
    total_folders: int = 0
    today_views: int = 0
    weekly_views: int = 0
    total_views: int = 0
    total_downloads: int = 0
    starred_documents: int = 0
    recent_documents: list[Document] = Field(default_factory=list)
    recent_activities: list[UserActivity] = Field(default_factory=list)


class FileStatistic(ApiModel):
    filename: str
    original_name: str
    view_count: int = 0
    size: int = 0
    uploader: str
    upload_time: str
    last_viewed: str | None = None
    popularity: PopularityTier = "unseen"


class FileStatisticsReport(ApiModel):
    success: bool
    message: str = ""
    files: list[FileStatistic] = Field(default_factory=list)
    total_files: int = 0
    total_views: int = 0
    most_viewed_file: FileStatistic | None = None


class StorageSummary(ApiModel):
    total_files: int = 0
    total_folders: int = 0
    total_size: int = 0
    storage_path: str | None = None
    total_size_label: str = "0 Bytes"


class DataOverview(ApiModel):
    local_documents: int = 0
    local_folders: int = 0
    local_activities: int = 0
    backend_files: int = 0
    is_test_data: bool = False


class AuditLog(ApiModel):
    id: str
    user_id: str = "anonymous"
    username: str = ""
    action: str
    resource: str | None = None
    details: Any = Field(default_factory=dict)
    timestamp: str
    ip: str = ""


class LogPagination(ApiModel):
    total: int = 0
    page: int = 1
    limit: int = 10
    total_pages: int = 0


class LogQuery(ApiModel):
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1, le=100)
    search: str | None = None
    action: str | None = None
    start_date: str | None = None
    end_date: str | None = None


class LogPage(ApiModel):
    success: bool
    message: str = ""
    logs: list[AuditLog] = Field(default_factory=list)
    pagination: LogPagination = Field(default_factory=LogPagination)


class CreateFolderRequest(ApiModel):
    name: str
    parent_id: str | None = None


class ActivityRequest(ApiModel):
    type: ActivityType
    data: dict[str, Any] = Field(default_factory=dict)


class MoveDocumentRequest(ApiModel):
    folder_id: str | None


class StarRequest(ApiModel):
    starred: bool


__all__ = [
    "ApiModel",
    "OperationResult",
    "SearchResult",
    "DashboardStats",
    "FileStatistic",
    "FileStatisticsReport",
    "StorageSummary",
    "DataOverview",
    "AuditLog",
    "LogPagination",
    "LogQuery",
    "LogPage",
    "CreateFolderRequest",
    "ActivityRequest",
    "MoveDocumentRequest",
    "StarRequest",
    "PopularityTier",
    "SortField",
    "SortOrder",
]
