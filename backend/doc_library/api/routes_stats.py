"""File statistics and storage usage routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from doc_library.api.dependencies import get_file_stats_service
from doc_library.models.dto import FileStatisticsReport, SortField, SortOrder, StorageSummary
from doc_library.stats.files import FileStatisticsService, filter_and_sort

router = APIRouter()


@router.get("/files", response_model=FileStatisticsReport, summary="Per-file view statistics")
async def file_statistics(
    search: str = Query("", description="Substring of file name or uploader"),
    sort_by: SortField = Query("viewCount", alias="sortBy"),
    order: SortOrder = Query("desc"),
    service: FileStatisticsService = Depends(get_file_stats_service),
) -> FileStatisticsReport:
    report = await service.get_file_statistics()
    if not report.success:
        raise HTTPException(status_code=502, detail=report.message)
    # Totals describe the whole listing; only the file rows are filtered.
    return report.model_copy(update={"files": filter_and_sort(report.files, search, sort_by, order)})


@router.get("/storage", response_model=StorageSummary, summary="Backend storage usage")
async def storage_summary(service: FileStatisticsService = Depends(get_file_stats_service)) -> StorageSummary:
    result = await service.get_storage_summary()
    if not result.success:
        raise HTTPException(status_code=502, detail=result.message)
    return result.data


__all__ = ["router"]
