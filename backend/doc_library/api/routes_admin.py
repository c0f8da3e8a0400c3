"""Administrative routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from doc_library.api.dependencies import get_file_client
from doc_library.core.metrics import metrics_response
from doc_library.remote.files import FileStorageClient

router = APIRouter()


@router.get("/health", summary="Liveness plus backend reachability")
async def health(client: FileStorageClient = Depends(get_file_client)) -> dict[str, bool]:
    return {"ok": True, "backend": await client.check_health()}


@router.get("/metrics", summary="Prometheus metrics")
async def get_metrics():
    return metrics_response()


__all__ = ["router"]
