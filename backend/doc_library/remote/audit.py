"""Client for the backend audit-log API."""

from __future__ import annotations

import httpx

from doc_library.models.dto import LogQuery
from doc_library.remote.base import BaseApiClient
from doc_library.remote.types import ApiResult

ADMIN_HEADERS = {"X-Admin-Access": "true"}


class AuditLogClient(BaseApiClient):
    """Paginated log queries and retention cleanup against ``/api/logs``."""

    def __init__(
        self,
        origin: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(f"{origin.rstrip('/')}/api/logs", timeout=timeout, transport=transport, client=client)

    async def query_logs(self, query: LogQuery) -> ApiResult:
        params: dict[str, str] = {
            "page": str(query.page),
            "limit": str(query.page_size),
            "admin": "true",
        }
        if query.search:
            params["search"] = query.search
        if query.action and query.action != "all":
            params["action"] = query.action
        if query.start_date:
            params["startDate"] = query.start_date
        if query.end_date:
            params["endDate"] = query.end_date
        return await self._request_json("GET", "", "logs", params=params, headers=ADMIN_HEADERS)

    async def cleanup(self) -> ApiResult:
        return await self._request_json("DELETE", "/cleanup", "logs_cleanup", headers=ADMIN_HEADERS)


__all__ = ["AuditLogClient", "ADMIN_HEADERS"]
