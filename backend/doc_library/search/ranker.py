"""Relevance ranking of local documents and folders."""

from __future__ import annotations

from typing import Sequence

from doc_library.core.logging import get_logger
from doc_library.core.metrics import SEARCH_COUNT
from doc_library.models.dto import SearchResult
from doc_library.models.entities import Document, Folder
from doc_library.store.local_store import LocalStore
from doc_library.utils.time import to_iso, utc_now

logger = get_logger(__name__)

TITLE_WEIGHT = 50
DESCRIPTION_WEIGHT = 30
CATEGORY_WEIGHT = 20
TAG_WEIGHT = 25
FOLDER_NAME_WEIGHT = 40


def score_document(document: Document, term: str) -> int:
    """Additive field-match score; ``term`` must already be lowercased."""
    relevance = 0
    if term in document.title.lower():
        relevance += TITLE_WEIGHT
    if term in document.description.lower():
        relevance += DESCRIPTION_WEIGHT
    if term in document.category.lower():
        relevance += CATEGORY_WEIGHT
    if any(term in tag.lower() for tag in document.tags):
        relevance += TAG_WEIGHT
    return relevance


def score_folder(folder: Folder, term: str) -> int:
    return FOLDER_NAME_WEIGHT if term in folder.name.lower() else 0


def rank(documents: Sequence[Document], folders: Sequence[Folder], search_term: str) -> list[SearchResult]:
    """Score every record, drop zero scores and order by relevance.

    ``sorted`` is stable, so equal scores keep documents ahead of folders and
    each group in stored order.
    """
    term = search_term.lower()
    results: list[SearchResult] = []
    for document in documents:
        relevance = score_document(document, term)
        if relevance > 0:
            results.append(
                SearchResult(
                    id=document.id,
                    type="document",
                    title=document.title,
                    description=document.description,
                    content=document.description,
                    created_at=document.created_at,
                    tags=list(document.tags),
                    relevance=relevance,
                )
            )
    for folder in folders:
        relevance = score_folder(folder, term)
        if relevance > 0:
            results.append(
                SearchResult(
                    id=folder.id,
                    type="folder",
                    title=folder.name,
                    description="Folder",
                    created_at=folder.created_at or to_iso(utc_now()),
                    relevance=relevance,
                )
            )
    return sorted(results, key=lambda item: item.relevance, reverse=True)


class SearchService:
    """Runs searches against the local store and keeps the recent-search list."""

    def __init__(self, store: LocalStore, recent_limit: int = 5) -> None:
        self.store = store
        self.recent_limit = recent_limit

    def search_documents(self, search_term: str) -> list[SearchResult]:
        SEARCH_COUNT.inc()
        try:
            return rank(self.store.get_documents(), self.store.get_folders(), search_term)
        except Exception as exc:
            logger.error("Search for %r failed: %s", search_term, exc)
            return []

    def record_search(self, search_term: str) -> list[str]:
        term = search_term.strip()
        recent = self.store.get_recent_searches()
        if not term:
            return recent
        updated = [term, *(item for item in recent if item != term)][: self.recent_limit]
        self.store.save_recent_searches(updated)
        return updated

    def recent_searches(self) -> list[str]:
        return self.store.get_recent_searches()


__all__ = [
    "SearchService",
    "rank",
    "score_document",
    "score_folder",
    "TITLE_WEIGHT",
    "DESCRIPTION_WEIGHT",
    "CATEGORY_WEIGHT",
    "TAG_WEIGHT",
    "FOLDER_NAME_WEIGHT",
]
