"""File-level statistics joined from the backend listing and view counters."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Callable, Sequence

from doc_library.core.logging import get_logger
from doc_library.models.dto import (
    FileStatistic,
    FileStatisticsReport,
    OperationResult,
    PopularityTier,
    SortField,
    SortOrder,
    StorageSummary,
)
from doc_library.remote.files import FileStorageClient
from doc_library.remote.types import RemoteFile
from doc_library.utils.text import contains, format_file_size
from doc_library.utils.time import EPOCH, parse_timestamp, to_iso, utc_now

logger = get_logger(__name__)

LOW_MAX_VIEWS = 5
MEDIUM_MAX_VIEWS = 20


def popularity_tier(view_count: int) -> PopularityTier:
    if view_count <= 0:
        return "unseen"
    if view_count <= LOW_MAX_VIEWS:
        return "low"
    if view_count <= MEDIUM_MAX_VIEWS:
        return "medium"
    return "high"


def most_viewed(statistics: Sequence[FileStatistic]) -> FileStatistic | None:
    """Strictly greatest view count, first seen on ties; None when nothing was viewed."""
    best: FileStatistic | None = None
    for item in statistics:
        if item.view_count > (best.view_count if best else 0):
            best = item
    return best


def _upload_instant(item: FileStatistic) -> datetime:
    return parse_timestamp(item.upload_time) or EPOCH


_SORT_KEYS: dict[str, Callable[[FileStatistic], object]] = {
    "viewCount": lambda item: item.view_count,
    "uploadTime": _upload_instant,
    "size": lambda item: item.size,
}


def filter_and_sort(
    statistics: Sequence[FileStatistic],
    search_term: str = "",
    sort_by: SortField = "viewCount",
    order: SortOrder = "desc",
) -> list[FileStatistic]:
    """Substring filter on original name or uploader, then a stable sort on one field."""
    if sort_by not in _SORT_KEYS:
        raise ValueError(f"Unsupported sort field: {sort_by}")
    filtered = [
        item
        for item in statistics
        if contains(item.original_name, search_term) or contains(item.uploader, search_term)
    ]
    return sorted(filtered, key=_SORT_KEYS[sort_by], reverse=order == "desc")


class FileStatisticsService:
    def __init__(self, client: FileStorageClient, default_uploader: str = "System Administrator") -> None:
        self.client = client
        self.default_uploader = default_uploader

    async def get_file_statistics(self) -> FileStatisticsReport:
        listing = await self.client.list_files()
        if not listing.success:
            logger.error("Failed to list backend files: %s", listing.message)
            return FileStatisticsReport(success=False, message=listing.message or "Failed to list files")

        files: list[RemoteFile] = listing.data
        statistics = list(await asyncio.gather(*(self._collect(remote) for remote in files)))
        return FileStatisticsReport(
            success=True,
            files=statistics,
            total_files=len(statistics),
            total_views=sum(item.view_count for item in statistics),
            most_viewed_file=most_viewed(statistics),
        )

    async def get_storage_summary(self) -> OperationResult:
        """Backend storage totals with a readable size; ``data`` is a :class:`StorageSummary`."""
        result = await self.client.get_storage_stats()
        if not result.success:
            return OperationResult.fail(result.message or "Failed to load storage stats")
        stats = result.data
        return OperationResult.ok(
            data=StorageSummary(
                total_files=stats.total_files,
                total_folders=stats.total_folders,
                total_size=stats.total_size,
                storage_path=stats.storage_path,
                total_size_label=format_file_size(stats.total_size),
            )
        )

    async def _collect(self, remote: RemoteFile) -> FileStatistic:
        view_count = 0
        try:
            result = await self.client.get_view_count(remote.name)
            if result.success:
                view_count = result.data
            else:
                logger.error("Failed to fetch view count for %s: %s", remote.name, result.message)
        except Exception as exc:
            logger.error("Failed to fetch view count for %s: %s", remote.name, exc)
        return FileStatistic(
            filename=remote.name,
            original_name=remote.display_name,
            view_count=view_count,
            size=remote.size,
            uploader=remote.uploader or self.default_uploader,
            upload_time=remote.created or remote.modified or to_iso(utc_now()),
            popularity=popularity_tier(view_count),
        )


__all__ = [
    "FileStatisticsService",
    "popularity_tier",
    "most_viewed",
    "filter_and_sort",
]
