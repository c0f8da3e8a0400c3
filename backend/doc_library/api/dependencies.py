"""Shared FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from doc_library.activity.recorder import ActivityRecorder
from doc_library.core.config import Settings, get_settings
from doc_library.db.sqlite import SQLiteDatabase
from doc_library.library.documents import DocumentService
from doc_library.library.folders import FolderService
from doc_library.logs.query import AuditLogService
from doc_library.reconcile.sync import ReconciliationService
from doc_library.remote.audit import AuditLogClient
from doc_library.remote.files import FileStorageClient
from doc_library.search.ranker import SearchService
from doc_library.stats.dashboard import DashboardService
from doc_library.stats.files import FileStatisticsService
from doc_library.store.backends import KeyValueBackend, MemoryKeyValueBackend, SQLiteKeyValueBackend
from doc_library.store.local_store import LocalStore

_DB: SQLiteDatabase | None = None
_STORE: LocalStore | None = None
_FILE_CLIENT: FileStorageClient | None = None
_AUDIT_CLIENT: AuditLogClient | None = None


@lru_cache(maxsize=1)
def get_app_settings() -> Settings:
    return get_settings()


def get_database() -> SQLiteDatabase:
    global _DB
    if _DB is None:
        settings = get_app_settings()
        db = SQLiteDatabase(settings.store_path)
        db.ensure_schema()
        _DB = db
    return _DB


def get_store() -> LocalStore:
    global _STORE
    if _STORE is None:
        settings = get_app_settings()
        backend: KeyValueBackend
        if settings.store_backend == "memory":
            backend = MemoryKeyValueBackend()
        else:
            backend = SQLiteKeyValueBackend(get_database())
        _STORE = LocalStore(backend)
    return _STORE


def get_file_client() -> FileStorageClient:
    global _FILE_CLIENT
    if _FILE_CLIENT is None:
        settings = get_app_settings()
        _FILE_CLIENT = FileStorageClient(settings.api_origin, timeout=settings.request_timeout)
    return _FILE_CLIENT


def get_audit_client() -> AuditLogClient:
    global _AUDIT_CLIENT
    if _AUDIT_CLIENT is None:
        settings = get_app_settings()
        _AUDIT_CLIENT = AuditLogClient(settings.api_origin, timeout=settings.request_timeout)
    return _AUDIT_CLIENT


def get_activity_recorder(store: LocalStore = Depends(get_store)) -> ActivityRecorder:
    return ActivityRecorder(store, retention=get_app_settings().activity_retention)


def get_search_service(store: LocalStore = Depends(get_store)) -> SearchService:
    return SearchService(store, recent_limit=get_app_settings().recent_searches_limit)


def get_dashboard_service(store: LocalStore = Depends(get_store)) -> DashboardService:
    settings = get_app_settings()
    return DashboardService(
        store,
        recent_documents=settings.recent_documents_limit,
        recent_activities=settings.recent_activities_limit,
    )


def get_folder_service(store: LocalStore = Depends(get_store)) -> FolderService:
    return FolderService(store)


def get_document_service(store: LocalStore = Depends(get_store)) -> DocumentService:
    return DocumentService(store)


def get_file_stats_service(client: FileStorageClient = Depends(get_file_client)) -> FileStatisticsService:
    return FileStatisticsService(client, default_uploader=get_app_settings().default_uploader)


def get_reconciliation_service(
    store: LocalStore = Depends(get_store),
    client: FileStorageClient = Depends(get_file_client),
) -> ReconciliationService:
    return ReconciliationService(store, client)


def get_audit_log_service(client: AuditLogClient = Depends(get_audit_client)) -> AuditLogService:
    return AuditLogService(client, page_size=get_app_settings().log_page_size)


async def close_clients() -> None:
    global _FILE_CLIENT, _AUDIT_CLIENT, _DB, _STORE
    if _FILE_CLIENT is not None:
        await _FILE_CLIENT.aclose()
        _FILE_CLIENT = None
    if _AUDIT_CLIENT is not None:
        await _AUDIT_CLIENT.aclose()
        _AUDIT_CLIENT = None
    if _DB is not None:
        _DB.close()
        _DB = None
    _STORE = None


__all__ = [
    "get_app_settings",
    "get_database",
    "get_store",
    "get_file_client",
    "get_audit_client",
    "get_activity_recorder",
    "get_search_service",
    "get_dashboard_service",
    "get_folder_service",
    "get_document_service",
    "get_file_stats_service",
    "get_reconciliation_service",
    "get_audit_log_service",
    "close_clients",
]
