"""Documents, folders, search, activity and dashboard routes."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from doc_library.activity.recorder import ActivityRecorder
from doc_library.api.dependencies import (
    get_activity_recorder,
    get_dashboard_service,
    get_document_service,
    get_folder_service,
    get_search_service,
)
from doc_library.library.documents import DocumentService
from doc_library.library.folders import FolderService
from doc_library.models.dto import (
    ActivityRequest,
    CreateFolderRequest,
    DashboardStats,
    MoveDocumentRequest,
    OperationResult,
    SearchResult,
    StarRequest,
)
from doc_library.models.entities import Document, Folder, UserActivity
from doc_library.search.ranker import SearchService
from doc_library.stats.dashboard import DashboardService

router = APIRouter()


@router.get("/documents", response_model=list[Document], summary="List local documents")
async def list_documents(
    folder_id: Optional[str] = Query(None, alias="folderId"),
    service: DocumentService = Depends(get_document_service),
) -> list[Document]:
    return service.list_documents(folder_id)


@router.get("/documents/{document_id}", response_model=Document, summary="Fetch one document")
async def get_document(document_id: str, service: DocumentService = Depends(get_document_service)) -> Document:
    document = service.get_document(document_id)
    if document is None:
        raise HTTPException(status_code=404, detail="Document not found")
    return document


@router.put("/documents/{document_id}/move", response_model=OperationResult, summary="Move a document")
async def move_document(
    document_id: str,
    request: MoveDocumentRequest,
    service: DocumentService = Depends(get_document_service),
) -> OperationResult:
    _require_document(service, document_id)
    return _checked(service.move_document(document_id, request.folder_id), status_code=500)


@router.put("/documents/{document_id}/star", response_model=OperationResult, summary="Star or unstar a document")
async def star_document(
    document_id: str,
    request: StarRequest,
    service: DocumentService = Depends(get_document_service),
) -> OperationResult:
    _require_document(service, document_id)
    return _checked(service.set_starred(document_id, request.starred), status_code=500)


@router.delete("/documents/{document_id}", response_model=OperationResult, summary="Delete a local document")
async def delete_document(document_id: str, service: DocumentService = Depends(get_document_service)) -> OperationResult:
    _require_document(service, document_id)
    return _checked(service.delete_document(document_id), status_code=500)


@router.post("/documents/{document_id}/view", response_model=OperationResult, summary="Record a document view")
async def view_document(
    document_id: str,
    documents: DocumentService = Depends(get_document_service),
    recorder: ActivityRecorder = Depends(get_activity_recorder),
) -> OperationResult:
    _require_document(documents, document_id)
    return recorder.add_user_activity("view", {"documentId": document_id})


@router.post("/documents/{document_id}/download", response_model=OperationResult, summary="Record a document download")
async def download_document(
    document_id: str,
    documents: DocumentService = Depends(get_document_service),
    recorder: ActivityRecorder = Depends(get_activity_recorder),
) -> OperationResult:
    _require_document(documents, document_id)
    return recorder.add_user_activity("download", {"documentId": document_id})


@router.get("/folders", response_model=list[Folder], summary="List folders including root")
async def list_folders(service: FolderService = Depends(get_folder_service)) -> list[Folder]:
    return service.list_folders()


@router.post("/folders", response_model=OperationResult, summary="Create a folder")
async def create_folder(
    request: CreateFolderRequest,
    service: FolderService = Depends(get_folder_service),
) -> OperationResult:
    return _checked(service.create_folder(request.name, request.parent_id), status_code=400)


@router.delete("/folders/{folder_id}", response_model=OperationResult, summary="Delete an empty folder")
async def delete_folder(folder_id: str, service: FolderService = Depends(get_folder_service)) -> OperationResult:
    if service.get_folder(folder_id) is None:
        raise HTTPException(status_code=404, detail="Folder not found")
    return _checked(service.delete_folder(folder_id), status_code=400)


@router.get("/search", response_model=list[SearchResult], summary="Rank documents and folders")
async def search(
    q: str = Query(..., description="Free-text search term"),
    service: SearchService = Depends(get_search_service),
) -> list[SearchResult]:
    results = service.search_documents(q)
    service.record_search(q)
    return results


@router.get("/search/recent", response_model=list[str], summary="Recent distinct search terms")
async def recent_searches(service: SearchService = Depends(get_search_service)) -> list[str]:
    return service.recent_searches()


@router.get("/activities", response_model=list[UserActivity], summary="Newest-first activity log")
async def list_activities(
    limit: int = Query(50, ge=1, le=1000),
    recorder: ActivityRecorder = Depends(get_activity_recorder),
) -> list[UserActivity]:
    return recorder.store.get_user_activities()[:limit]


@router.post("/activities", response_model=OperationResult, summary="Record a user activity")
async def add_activity(
    request: ActivityRequest,
    recorder: ActivityRecorder = Depends(get_activity_recorder),
) -> OperationResult:
    return _checked(recorder.add_user_activity(request.type, request.data), status_code=400)


@router.get("/dashboard", response_model=DashboardStats, summary="Dashboard statistics")
async def dashboard(service: DashboardService = Depends(get_dashboard_service)) -> DashboardStats:
    return service.get_dashboard_stats()


def _require_document(service: DocumentService, document_id: str) -> None:
    if service.get_document(document_id) is None:
        raise HTTPException(status_code=404, detail="Document not found")


def _checked(result: OperationResult, status_code: int) -> OperationResult:
    if not result.success:
        raise HTTPException(status_code=status_code, detail=result.message)
    return result


__all__ = ["router"]
