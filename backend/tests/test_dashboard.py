"""Tests for dashboard statistics."""

from datetime import datetime, timedelta, timezone

from doc_library.models.entities import Folder, UserActivity
from doc_library.stats.dashboard import DashboardService
from doc_library.store.backends import MemoryKeyValueBackend
from doc_library.store.local_store import LocalStore
from doc_library.utils.time import to_iso

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def _view(offset: timedelta, index: int) -> UserActivity:
    return UserActivity(id=index, type="view", timestamp=to_iso(NOW - offset), data={"documentId": "d1"})


def test_empty_store_gives_zeroed_stats(store: LocalStore) -> None:
    stats = DashboardService(store).get_dashboard_stats(now=NOW)
    assert stats.total_documents == 0
    assert stats.total_folders == 0
    assert stats.today_views == 0
    assert stats.weekly_views == 0
    assert stats.recent_documents == []
    assert stats.recent_activities == []


def test_view_windows_and_document_totals(store: LocalStore, make_document) -> None:
    store.save_documents(
        [
            make_document("d1", views=10, downloads=2, starred=True),
            make_document("d2", views=5, downloads=1),
        ]
    )
    store.save_folders([Folder(id="f1", name="A")])
    store.save_user_activities(
        [
            _view(timedelta(hours=1), 1),
            _view(timedelta(days=3), 2),
            _view(timedelta(days=8), 3),
            UserActivity(id=4, type="download", timestamp=to_iso(NOW), data={"documentId": "d1"}),
        ]
    )

    stats = DashboardService(store).get_dashboard_stats(now=NOW)

    assert stats.total_documents == 2
    assert stats.total_folders == 1
    assert stats.today_views == 1
    assert stats.weekly_views == 2
    # Counters on documents are independent of recorded view activities.
    assert stats.total_views == 15
    assert stats.total_downloads == 3
    assert stats.starred_documents == 1


def test_recent_documents_sorted_by_updated_at(store: LocalStore, make_document) -> None:
    store.save_documents(
        [
            make_document(f"d{index}", updated_at=to_iso(NOW - timedelta(days=index)))
            for index in range(7)
        ]
        + [make_document("broken", updated_at="not a date")]
    )
    stats = DashboardService(store, recent_documents=5).get_dashboard_stats(now=NOW)
    assert [doc.id for doc in stats.recent_documents] == ["d0", "d1", "d2", "d3", "d4"]


def test_recent_activities_limited(store: LocalStore) -> None:
    store.save_user_activities([_view(timedelta(minutes=index), index) for index in range(15)])
    stats = DashboardService(store, recent_activities=10).get_dashboard_stats(now=NOW)
    assert [activity.id for activity in stats.recent_activities] == list(range(10))


def test_internal_failure_returns_empty_stats(make_document) -> None:
    class BrokenStore(LocalStore):
        def get_user_activities(self):
            raise RuntimeError("boom")

    store = BrokenStore(MemoryKeyValueBackend())
    store.save_documents([make_document("d1", views=3)])
    stats = DashboardService(store).get_dashboard_stats(now=NOW)
    assert stats.total_documents == 0
    assert stats.total_views == 0
