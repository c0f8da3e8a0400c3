"""Audit log queries, page navigation and CSV export."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from typing import Sequence

import orjson
from pydantic import ValidationError

from doc_library.core.logging import get_logger
from doc_library.models.dto import AuditLog, LogPage, LogPagination, LogQuery, OperationResult
from doc_library.remote.audit import AuditLogClient

logger = get_logger(__name__)

ACTION_LABELS: dict[str, str] = {
    "LOGIN": "Login",
    "LOGOUT": "Logout",
    "VIEW_FILE": "View file",
    "UPLOAD_FILE": "Upload file",
    "DOWNLOAD_FILE": "Download file",
    "DELETE_FILE": "Delete file",
    "MOVE_FILE": "Move file",
    "CREATE_FOLDER": "Create folder",
    "DELETE_FOLDER": "Delete folder",
    "UPDATE_FOLDER": "Update folder",
}

CSV_HEADER = ("ID", "User ID", "Username", "Action", "Timestamp", "IP", "Details")


def action_label(action: str) -> str:
    return ACTION_LABELS.get(action, action)


def export_csv(logs: Sequence[AuditLog]) -> str:
    """Header plus one row per log; details are compact JSON, quoted as needed."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for log in logs:
        writer.writerow(
            [
                log.id,
                log.user_id,
                log.username,
                action_label(log.action),
                log.timestamp,
                log.ip,
                orjson.dumps(log.details).decode("utf-8"),
            ]
        )
    return buffer.getvalue()


class AuditLogService:
    def __init__(self, client: AuditLogClient, page_size: int = 10) -> None:
        self.client = client
        self.page_size = page_size

    async def fetch(self, query: LogQuery | None = None) -> LogPage:
        query = query or LogQuery(page_size=self.page_size)
        result = await self.client.query_logs(query)
        if not result.success:
            logger.error("Failed to load audit logs: %s", result.message, extra={"ctx_status": result.status_code})
            return LogPage(success=False, message=result.message or "Failed to load logs")

        payload = result.data if isinstance(result.data, dict) else {}
        try:
            logs = [AuditLog.model_validate(item) for item in payload.get("logs") or []]
            pagination = LogPagination.model_validate(payload.get("pagination") or {})
        except ValidationError as exc:
            logger.error("Malformed audit log payload: %s", exc)
            return LogPage(success=False, message="Backend returned malformed log data")
        return LogPage(success=True, logs=logs, pagination=pagination)

    async def cleanup(self) -> OperationResult:
        """Ask the backend to drop entries past retention; ``data`` is the deleted count."""
        result = await self.client.cleanup()
        if not result.success:
            logger.error("Audit log cleanup failed: %s", result.message)
            return OperationResult.fail(result.message or "Failed to clean up logs")
        payload = result.data if isinstance(result.data, dict) else {}
        deleted = int(payload.get("deletedCount") or 0)
        logger.info("Cleaned up %s expired log files", deleted, extra={"ctx_deleted": deleted})
        return OperationResult.ok(result.message or f"Removed {deleted} expired log files", data=deleted)


@dataclass(slots=True)
class LogBrowser:
    """Currently loaded log page; failed loads leave it as it was.

    Without an explicit ``query`` the first page is sized by the service.
    """

    service: AuditLogService
    query: LogQuery | None = None
    logs: list[AuditLog] = field(default_factory=list)
    total: int = 0
    total_pages: int = 1

    def __post_init__(self) -> None:
        if self.query is None:
            self.query = LogQuery(page_size=self.service.page_size)

    @property
    def page(self) -> int:
        return self.query.page

    async def load(self, query: LogQuery | None = None) -> LogPage:
        target = query or self.query
        result = await self.service.fetch(target)
        if result.success:
            self.query = target
            self.logs = result.logs
            self.total = result.pagination.total
            self.total_pages = max(1, result.pagination.total_pages)
        return result

    async def apply_filters(self, **filters: str | None) -> LogPage:
        """Change filters and return to the first page."""
        query = self.query.model_copy(update={**filters, "page": 1})
        return await self.load(query)

    async def go_to(self, page: int) -> LogPage:
        clamped = min(max(1, page), self.total_pages)
        return await self.load(self.query.model_copy(update={"page": clamped}))

    async def next_page(self) -> LogPage:
        return await self.go_to(self.page + 1)

    async def previous_page(self) -> LogPage:
        return await self.go_to(self.page - 1)

    def export(self) -> OperationResult:
        if not self.logs:
            return OperationResult.fail("No logs to export")
        return OperationResult.ok(data=export_csv(self.logs))


__all__ = [
    "ACTION_LABELS",
    "CSV_HEADER",
    "AuditLogService",
    "LogBrowser",
    "action_label",
    "export_csv",
]
