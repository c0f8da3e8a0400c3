"""Reconciliation of local documents with the backend file listing.

``sync_real_documents`` overwrites the local document list with one document
per backend file; local-only documents are discarded. ``reset_to_production``
clears everything first and then always syncs, so a partial clear still
repopulates documents. A failed sync afterwards leaves the store empty: the two
steps are not rolled back as a unit.
"""

from __future__ import annotations

from typing import Sequence
from urllib.parse import quote

from doc_library.core.logging import get_logger
from doc_library.models.dto import DataOverview, OperationResult
from doc_library.models.entities import ROOT_FOLDER_ID, Document, DocumentFile, Permissions
from doc_library.remote.files import FileStorageClient
from doc_library.remote.types import RemoteFile
from doc_library.store.local_store import ALL_KEYS, LocalStore
from doc_library.utils.time import now_ms, to_iso, utc_now

logger = get_logger(__name__)

TEST_MARKER = "测试"
TEST_CATEGORY = "测试文档"

SYNCED_CATEGORY = "真实文档"
SYNCED_TAGS = ("同步", "真实")
SYNCED_DESCRIPTION = "Real document synchronized from the backend"
DOWNLOAD_PATH = "/api/files/download/"

FAILURE_BACKEND = "backend"
FAILURE_STORE = "store"


def failure_source(result: OperationResult) -> str | None:
    """Which side a failed result came from: ``backend`` or ``store``."""
    if isinstance(result.data, dict):
        return result.data.get("source")
    return None


def _failure(message: str, source: str) -> OperationResult:
    return OperationResult.fail(message, data={"source": source})


def detect_test_data(documents: Sequence[Document]) -> bool:
    """Heuristic: any title/description containing the test marker, or the test category."""
    return any(
        TEST_MARKER in (document.title or "")
        or TEST_MARKER in (document.description or "")
        or document.category == TEST_CATEGORY
        for document in documents
    )


def document_from_remote(remote: RemoteFile, index: int, stamp: int | None = None) -> Document:
    now = to_iso(utc_now())
    stamp = now_ms() if stamp is None else stamp
    return Document(
        id=f"real_doc_{stamp}_{index}",
        title=remote.display_name,
        description=SYNCED_DESCRIPTION,
        category=SYNCED_CATEGORY,
        tags=list(SYNCED_TAGS),
        files=[
            DocumentFile(
                name=remote.display_name,
                size=remote.size,
                type=remote.mime or "application/octet-stream",
                url=f"{DOWNLOAD_PATH}{quote(remote.name)}",
            )
        ],
        created_at=remote.mtime or remote.modified or remote.created or now,
        updated_at=now,
        views=0,
        downloads=0,
        starred=False,
        folder_id=ROOT_FOLDER_ID,
        permissions=Permissions(),
    )


class ReconciliationService:
    def __init__(self, store: LocalStore, client: FileStorageClient) -> None:
        self.store = store
        self.client = client

    async def sync_real_documents(self) -> OperationResult:
        listing = await self.client.list_files()
        if not listing.success:
            logger.error(
                "Document sync failed: %s",
                listing.message,
                extra={"ctx_status": listing.status_code},
            )
            return _failure(listing.message or "Unable to fetch the backend file list", FAILURE_BACKEND)

        stamp = now_ms()
        documents = [document_from_remote(remote, index, stamp) for index, remote in enumerate(listing.data)]
        if not self.store.save_documents(documents):
            return _failure("Synchronized documents could not be saved locally", FAILURE_STORE)
        logger.info(
            "Synchronized %s documents from backend",
            len(documents),
            extra={"ctx_documents": len(documents), "ctx_stamp": stamp},
        )
        return OperationResult.ok(f"Synchronized {len(documents)} real documents", data=documents)

    def clear_all_data(self) -> OperationResult:
        """Irreversibly erase documents, folders, activities and recent searches."""
        if not self.store.remove(ALL_KEYS):
            return _failure("Some local data could not be cleared", FAILURE_STORE)
        logger.info("Cleared all local data", extra={"ctx_keys": list(ALL_KEYS)})
        return OperationResult.ok("All local data cleared")

    async def reset_to_production(self) -> OperationResult:
        """Clear, then sync; the sync runs even when part of the clear failed.

        The result succeeds only if both steps did. A failed sync reports its
        own source; otherwise a partial clear is reported as a store failure.
        """
        cleared = self.clear_all_data()
        synced = await self.sync_real_documents()
        if cleared.success and synced.success:
            return OperationResult.ok(f"Reset to production data; {synced.message.lower()}", data=synced.data)

        clear_part = cleared.message if not cleared.success else "Local data cleared"
        sync_part = synced.message if synced.success else f"sync failed: {synced.message}"
        source = failure_source(synced) if not synced.success else FAILURE_STORE
        logger.warning(
            "Reset to production incomplete",
            extra={"ctx_cleared": cleared.success, "ctx_synced": synced.success},
        )
        return OperationResult.fail(f"{clear_part}; {sync_part}", data={"source": source})

    async def get_data_overview(self) -> DataOverview:
        documents = self.store.get_documents()
        backend_files = 0
        listing = await self.client.list_files()
        if listing.success:
            backend_files = len(listing.data)
        else:
            logger.warning("Unable to count backend files: %s", listing.message)
        return DataOverview(
            local_documents=len(documents),
            local_folders=len(self.store.get_folders()),
            local_activities=len(self.store.get_user_activities()),
            backend_files=backend_files,
            is_test_data=detect_test_data(documents),
        )


__all__ = [
    "ReconciliationService",
    "detect_test_data",
    "failure_source",
    "FAILURE_BACKEND",
    "FAILURE_STORE",
    "document_from_remote",
    "TEST_MARKER",
    "TEST_CATEGORY",
    "SYNCED_CATEGORY",
    "SYNCED_TAGS",
]
