"""Data management: overview, backend sync and destructive resets."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from doc_library.api.dependencies import get_reconciliation_service
from doc_library.models.dto import DataOverview, OperationResult
from doc_library.reconcile.sync import FAILURE_STORE, ReconciliationService, failure_source

router = APIRouter()


@router.get("/overview", response_model=DataOverview, summary="Local and backend record counts")
async def overview(service: ReconciliationService = Depends(get_reconciliation_service)) -> DataOverview:
    return await service.get_data_overview()


@router.post("/sync", response_model=OperationResult, summary="Replace local documents with the backend listing")
async def sync(service: ReconciliationService = Depends(get_reconciliation_service)) -> OperationResult:
    result = await service.sync_real_documents()
    if not result.success:
        raise HTTPException(status_code=_failure_status(result), detail=result.message)
    return result


@router.post("/clear", response_model=OperationResult, summary="Erase all local data")
async def clear(
    confirm: bool = Query(False, description="Must be true; the operation is irreversible"),
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> OperationResult:
    _require_confirmation(confirm)
    result = service.clear_all_data()
    if not result.success:
        raise HTTPException(status_code=500, detail=result.message)
    return result


@router.post("/reset", response_model=OperationResult, summary="Clear local data then sync from the backend")
async def reset(
    confirm: bool = Query(False, description="Must be true; the operation is irreversible"),
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> OperationResult:
    _require_confirmation(confirm)
    result = await service.reset_to_production()
    if not result.success:
        raise HTTPException(status_code=_failure_status(result), detail=result.message)
    return result


def _failure_status(result: OperationResult) -> int:
    # Local store failures are ours; anything else came from the backend.
    return 500 if failure_source(result) == FAILURE_STORE else 502


def _require_confirmation(confirm: bool) -> None:
    if not confirm:
        raise HTTPException(status_code=400, detail="Pass confirm=true to erase local data")


__all__ = ["router"]
