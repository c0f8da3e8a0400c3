"""Typed accessors over the persisted key-value cache.

Every read and write of documents, folders, activities and recent searches goes
through :class:`LocalStore`. A missing, undecodable or non-list value reads as
an empty list; inside a list, records that fail validation are skipped one by
one. Writes are best-effort: failures are logged and counted, never raised. There is no compare-and-swap, so two read-modify-write cycles racing
each other resolve as last-writer-wins.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

import orjson
from pydantic import TypeAdapter, ValidationError

from doc_library.core.logging import get_logger
from doc_library.core.metrics import STORE_ERRORS
from doc_library.models.entities import Document, Folder, StoredRecord, UserActivity
from doc_library.store.backends import KeyValueBackend

logger = get_logger(__name__)

DOCUMENTS_KEY = "documents"
FOLDERS_KEY = "folders"
ACTIVITIES_KEY = "userActivities"
RECENT_SEARCHES_KEY = "recent_searches"

ALL_KEYS: tuple[str, ...] = (DOCUMENTS_KEY, ACTIVITIES_KEY, FOLDERS_KEY, RECENT_SEARCHES_KEY)

_DOCUMENT = TypeAdapter(Document)
_FOLDER = TypeAdapter(Folder)
_ACTIVITY = TypeAdapter(UserActivity)
_STRING = TypeAdapter(str)


class LocalStore:
    """Documents, folders, activities and recent searches over a KV backend."""

    def __init__(self, backend: KeyValueBackend) -> None:
        self.backend = backend

    # Documents ---------------------------------------------------------

    def get_documents(self) -> list[Document]:
        return self._read(DOCUMENTS_KEY, _DOCUMENT)

    def save_documents(self, documents: Sequence[Document]) -> bool:
        return self._write(DOCUMENTS_KEY, documents)

    # Folders -----------------------------------------------------------

    def get_folders(self) -> list[Folder]:
        return self._read(FOLDERS_KEY, _FOLDER)

    def save_folders(self, folders: Sequence[Folder]) -> bool:
        return self._write(FOLDERS_KEY, folders)

    # Activities --------------------------------------------------------

    def get_user_activities(self) -> list[UserActivity]:
        return self._read(ACTIVITIES_KEY, _ACTIVITY)

    def save_user_activities(self, activities: Sequence[UserActivity]) -> bool:
        return self._write(ACTIVITIES_KEY, activities)

    # Recent searches ---------------------------------------------------

    def get_recent_searches(self) -> list[str]:
        return self._read(RECENT_SEARCHES_KEY, _STRING)

    def save_recent_searches(self, terms: Sequence[str]) -> bool:
        return self._write(RECENT_SEARCHES_KEY, terms)

    # Removal -----------------------------------------------------------

    def remove(self, keys: Iterable[str] = ALL_KEYS) -> bool:
        """Remove each key; returns False if any removal failed."""
        ok = True
        for key in keys:
            try:
                self.backend.remove_item(key)
            except Exception as exc:
                logger.error("Failed to remove %s from local store: %s", key, exc)
                STORE_ERRORS.labels(key=key, operation="remove").inc()
                ok = False
        return ok

    # Internal helpers --------------------------------------------------

    def _read(self, key: str, adapter: TypeAdapter) -> list:
        """Decode ``key`` and validate each record; invalid records are skipped."""
        try:
            raw = self.backend.get_item(key)
            if raw is None:
                return []
            items = orjson.loads(raw)
        except Exception as exc:
            logger.error("Failed to read %s from local store: %s", key, exc)
            STORE_ERRORS.labels(key=key, operation="read").inc()
            return []
        if not isinstance(items, list):
            logger.error("Expected a list under %s, found %s", key, type(items).__name__)
            STORE_ERRORS.labels(key=key, operation="read").inc()
            return []

        records = []
        for index, item in enumerate(items):
            try:
                records.append(adapter.validate_python(item))
            except ValidationError as exc:
                logger.warning("Skipping invalid record %s in %s: %s", index, key, exc)
                STORE_ERRORS.labels(key=key, operation="validate").inc()
        return records

    def _write(self, key: str, records: Iterable[Any]) -> bool:
        try:
            payload = [_to_store(record) for record in records]
            self.backend.set_item(key, orjson.dumps(payload).decode("utf-8"))
        except Exception as exc:
            logger.error("Failed to write %s to local store: %s", key, exc)
            STORE_ERRORS.labels(key=key, operation="write").inc()
            return False
        return True


def _to_store(record: Any) -> Any:
    return record.to_store() if isinstance(record, StoredRecord) else record


__all__ = [
    "LocalStore",
    "DOCUMENTS_KEY",
    "FOLDERS_KEY",
    "ACTIVITIES_KEY",
    "RECENT_SEARCHES_KEY",
    "ALL_KEYS",
]
