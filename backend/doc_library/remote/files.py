"""Client for the remote file-storage API."""

from __future__ import annotations

from urllib.parse import quote

import httpx

from doc_library.core.logging import get_logger
from doc_library.remote.base import BaseApiClient
from doc_library.remote.types import ApiResult, RemoteFile, StorageStats

logger = get_logger(__name__)


class FileStorageClient(BaseApiClient):
    """Listing, view counts, downloads and storage stats from ``/api/files``."""

    def __init__(
        self,
        origin: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.origin = origin.rstrip("/")
        super().__init__(f"{self.origin}/api/files", timeout=timeout, transport=transport, client=client)

    async def check_health(self) -> bool:
        outcome = await self._send("GET", f"{self.origin}/health", "health")
        return isinstance(outcome, httpx.Response) and outcome.is_success

    async def list_files(self) -> ApiResult:
        """``data`` is a list of :class:`RemoteFile` on success."""
        result = await self._request_json("GET", "/list", "list")
        if not result.success:
            return result
        data = result.data if isinstance(result.data, dict) else {}
        raw_files = data.get("files") or []
        files: list[RemoteFile] = []
        for payload in raw_files:
            try:
                files.append(RemoteFile.from_payload(payload))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed file entry %r: %s", payload, exc)
        return ApiResult(success=True, data=files, message=result.message, status_code=result.status_code)

    async def get_view_count(self, filename: str) -> ApiResult:
        """``data`` is the integer view counter for ``filename``."""
        result = await self._request_json("GET", f"/view/{_segment(filename)}", "view")
        if not result.success:
            return result
        data = result.data if isinstance(result.data, dict) else {}
        return ApiResult(success=True, data=int(data.get("viewCount") or 0), status_code=result.status_code)

    async def download_file(self, filename: str) -> ApiResult:
        return await self._request_bytes("GET", f"/download/{_segment(filename)}", "download")

    async def delete_file(self, filename: str) -> ApiResult:
        return await self._request_json("DELETE", f"/delete/{_segment(filename)}", "delete")

    async def move_file(self, file_id: str, folder_id: str) -> ApiResult:
        return await self._request_json("PUT", f"/move/{_segment(file_id)}", "move", json={"folderId": folder_id})

    async def file_exists(self, filename: str) -> ApiResult:
        result = await self._request_json("GET", f"/exists/{_segment(filename)}", "exists")
        if not result.success:
            return result
        data = result.data if isinstance(result.data, dict) else {}
        return ApiResult(success=True, data=bool(data.get("exists")), status_code=result.status_code)

    async def get_storage_stats(self) -> ApiResult:
        """``data`` is a :class:`StorageStats` on success."""
        result = await self._request_json("GET", "/storage/stats", "storage_stats")
        if not result.success:
            return result
        payload = result.data if isinstance(result.data, dict) else {}
        return ApiResult(success=True, data=StorageStats.from_payload(payload), status_code=result.status_code)


def _segment(value: str) -> str:
    return quote(value, safe="")


__all__ = ["FileStorageClient"]
