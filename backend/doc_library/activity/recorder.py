"""Append-only user activity log with a retention cap."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from doc_library.core.logging import get_logger
from doc_library.core.metrics import ACTIVITY_COUNT
from doc_library.models.dto import OperationResult
from doc_library.models.entities import ACTIVITY_TYPES, UserActivity
from doc_library.store.local_store import LocalStore
from doc_library.utils.ids import activity_id
from doc_library.utils.time import to_iso, utc_now

logger = get_logger(__name__)

DEFAULT_RETENTION = 1000


class ActivityRecorder:
    """Prepends activities newest-first and truncates to ``retention`` records.

    Recording is telemetry: the returned result may be ignored, and nothing is
    ever raised to the caller.
    """

    def __init__(self, store: LocalStore, retention: int = DEFAULT_RETENTION) -> None:
        self.store = store
        self.retention = retention

    def add_user_activity(
        self,
        activity_type: str,
        data: dict[str, Any] | None = None,
        timestamp: str | None = None,
    ) -> OperationResult:
        if activity_type not in ACTIVITY_TYPES:
            logger.warning("Ignoring activity with unknown type %r", activity_type)
            return OperationResult.fail(f"Unknown activity type: {activity_type}")
        try:
            activity = UserActivity(
                id=activity_id(),
                type=activity_type,
                timestamp=timestamp or to_iso(utc_now()),
                data=data or {},
            )
        except ValidationError as exc:
            logger.error("Invalid activity payload: %s", exc)
            return OperationResult.fail("Invalid activity payload")

        activities = self.store.get_user_activities()
        activities.insert(0, activity)
        if not self.store.save_user_activities(activities[: self.retention]):
            return OperationResult.fail("Activity could not be persisted", data=activity)
        ACTIVITY_COUNT.labels(type=activity_type).inc()
        return OperationResult.ok("Activity recorded", data=activity)


__all__ = ["ActivityRecorder", "DEFAULT_RETENTION"]
