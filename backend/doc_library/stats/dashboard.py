"""Dashboard metrics computed from the local store."""

from __future__ import annotations

from datetime import datetime, timedelta

from doc_library.core.logging import get_logger
from doc_library.models.dto import DashboardStats
from doc_library.models.entities import Document
from doc_library.store.local_store import LocalStore
from doc_library.utils.time import EPOCH, parse_timestamp

logger = get_logger(__name__)

WEEK = timedelta(days=7)


class DashboardService:
    def __init__(self, store: LocalStore, recent_documents: int = 5, recent_activities: int = 10) -> None:
        self.store = store
        self.recent_documents = recent_documents
        self.recent_activities = recent_activities

    def get_dashboard_stats(self, now: datetime | None = None) -> DashboardStats:
        """Counts, view windows and recents; a zeroed object on any failure.

        ``total_views``/``total_downloads`` sum the per-document counters and are
        not reconciled with the ``view`` activities behind the day/week windows.
        """
        try:
            return self._compute(now or datetime.now().astimezone())
        except Exception as exc:
            logger.error("Failed to compute dashboard stats: %s", exc)
            return DashboardStats()

    def _compute(self, now: datetime) -> DashboardStats:
        if now.tzinfo is None:
            now = now.astimezone()
        documents = self.store.get_documents()
        activities = self.store.get_user_activities()
        folders = self.store.get_folders()

        today = now.date()
        week_start = now - WEEK
        today_views = 0
        weekly_views = 0
        for activity in activities:
            if activity.type != "view":
                continue
            timestamp = parse_timestamp(activity.timestamp)
            if timestamp is None:
                continue
            # Calendar days follow the reader's local timezone.
            if timestamp.astimezone(now.tzinfo).date() == today:
                today_views += 1
            if timestamp >= week_start:
                weekly_views += 1

        recent = sorted(documents, key=_updated_at, reverse=True)[: self.recent_documents]
        return DashboardStats(
            total_documents=len(documents),
            total_folders=len(folders),
            today_views=today_views,
            weekly_views=weekly_views,
            total_views=sum(document.views for document in documents),
            total_downloads=sum(document.downloads for document in documents),
            starred_documents=sum(1 for document in documents if document.starred),
            recent_documents=recent,
            recent_activities=activities[: self.recent_activities],
        )


def _updated_at(document: Document) -> datetime:
    return parse_timestamp(document.updated_at) or EPOCH


__all__ = ["DashboardService"]
