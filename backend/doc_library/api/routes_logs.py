"""Audit log routes."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from doc_library.api.dependencies import get_audit_log_service
from doc_library.logs.query import AuditLogService, LogBrowser
from doc_library.models.dto import LogPage, LogQuery, OperationResult

router = APIRouter()


def log_query(
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, alias="pageSize", ge=1, le=100),
    search: Optional[str] = Query(None),
    action: Optional[str] = Query(None),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    service: AuditLogService = Depends(get_audit_log_service),
) -> LogQuery:
    return LogQuery(
        page=page,
        page_size=page_size or service.page_size,
        search=search,
        action=action,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("", response_model=LogPage, summary="Query audit logs")
async def list_logs(
    query: LogQuery = Depends(log_query),
    service: AuditLogService = Depends(get_audit_log_service),
) -> LogPage:
    page = await service.fetch(query)
    if not page.success:
        raise HTTPException(status_code=502, detail=page.message)
    return page


@router.get("/export", summary="Export one page of audit logs as CSV")
async def export_logs(
    query: LogQuery = Depends(log_query),
    service: AuditLogService = Depends(get_audit_log_service),
) -> Response:
    browser = LogBrowser(service, query=query)
    loaded = await browser.load()
    if not loaded.success:
        raise HTTPException(status_code=502, detail=loaded.message)
    exported = browser.export()
    if not exported.success:
        raise HTTPException(status_code=404, detail=exported.message)
    filename = f"user-logs-{date.today().isoformat()}.csv"
    return Response(
        content=exported.data,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.delete("/cleanup", response_model=OperationResult, summary="Delete logs past retention")
async def cleanup_logs(service: AuditLogService = Depends(get_audit_log_service)) -> OperationResult:
    result = await service.cleanup()
    if not result.success:
        raise HTTPException(status_code=502, detail=result.message)
    return result


__all__ = ["router"]
