"""Local document operations: listing, moves, starring and deletion."""

from __future__ import annotations

from typing import Any

from doc_library.core.logging import get_logger
from doc_library.models.dto import OperationResult
from doc_library.models.entities import Document
from doc_library.store.local_store import LocalStore
from doc_library.utils.time import to_iso, utc_now

logger = get_logger(__name__)


class DocumentService:
    def __init__(self, store: LocalStore) -> None:
        self.store = store

    def list_documents(self, folder_id: str | None = None) -> list[Document]:
        documents = self.store.get_documents()
        if folder_id is None:
            return documents
        return [document for document in documents if document.folder_id == folder_id]

    def get_document(self, document_id: str) -> Document | None:
        return next((document for document in self.store.get_documents() if document.id == document_id), None)

    def move_document(self, document_id: str, folder_id: str | None) -> OperationResult:
        """Folder ids are not checked; a missing folder leaves a dangling reference."""
        return self._update(document_id, "moved", folder_id=folder_id)

    def set_starred(self, document_id: str, starred: bool) -> OperationResult:
        return self._update(document_id, "starred" if starred else "unstarred", starred=starred)

    def delete_document(self, document_id: str) -> OperationResult:
        documents = self.store.get_documents()
        remaining = [document for document in documents if document.id != document_id]
        if len(remaining) == len(documents):
            return OperationResult.fail(f"Document {document_id} not found")
        if not self.store.save_documents(remaining):
            return OperationResult.fail("Document could not be deleted")
        logger.info("Deleted document %s", document_id)
        return OperationResult.ok("Document deleted")

    def _update(self, document_id: str, verb: str, **changes: Any) -> OperationResult:
        documents = self.store.get_documents()
        for index, document in enumerate(documents):
            if document.id == document_id:
                updated = document.model_copy(update={**changes, "updated_at": to_iso(utc_now())})
                documents[index] = updated
                if not self.store.save_documents(documents):
                    return OperationResult.fail("Document could not be saved")
                return OperationResult.ok(f"Document {verb}", data=updated)
        return OperationResult.fail(f"Document {document_id} not found")


__all__ = ["DocumentService"]
