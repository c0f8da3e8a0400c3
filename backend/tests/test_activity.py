"""Tests for the activity recorder."""

from doc_library.activity.recorder import ActivityRecorder
from doc_library.models.entities import UserActivity
from doc_library.store.local_store import ACTIVITIES_KEY, LocalStore


def test_activities_are_prepended(store: LocalStore) -> None:
    recorder = ActivityRecorder(store)
    recorder.add_user_activity("visit", {"page": "/home"})
    result = recorder.add_user_activity("view", {"documentId": "d1"})

    assert result.success
    activities = store.get_user_activities()
    assert [activity.type for activity in activities] == ["view", "visit"]
    assert activities[0].data == {"documentId": "d1"}
    assert activities[0].timestamp.endswith("Z")


def test_retention_keeps_most_recent_thousand(store: LocalStore) -> None:
    seeded = [
        UserActivity(id=index, type="visit", timestamp="2024-01-01T00:00:00.000Z", data={"page": f"/p{index}"})
        for index in reversed(range(1000))
    ]
    store.save_user_activities(seeded)
    recorder = ActivityRecorder(store)
    for index in range(1000, 1005):
        recorder.add_user_activity("visit", {"page": f"/p{index}"})

    activities = store.get_user_activities()
    assert len(activities) == 1000
    assert activities[0].data["page"] == "/p1004"
    assert activities[-1].data["page"] == "/p5"


def test_ids_are_distinct_within_a_burst(store: LocalStore) -> None:
    recorder = ActivityRecorder(store, retention=50)
    for _ in range(50):
        recorder.add_user_activity("download", {"documentId": "d1"})
    ids = [activity.id for activity in store.get_user_activities()]
    assert len(set(ids)) == len(ids)


def test_unknown_type_is_rejected_without_touching_store(store: LocalStore) -> None:
    result = ActivityRecorder(store).add_user_activity("share", {"documentId": "d1"})
    assert result.success is False
    assert store.backend.get_item(ACTIVITIES_KEY) is None


def test_explicit_timestamp_is_kept(store: LocalStore) -> None:
    ActivityRecorder(store).add_user_activity("upload", {"fileName": "a.pdf"}, timestamp="2024-05-01T08:00:00.000Z")
    assert store.get_user_activities()[0].timestamp == "2024-05-01T08:00:00.000Z"
