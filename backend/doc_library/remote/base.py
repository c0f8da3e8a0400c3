"""Shared async HTTP plumbing for backend clients."""

from __future__ import annotations

import time
from typing import Any

import httpx
import orjson

from doc_library.core.logging import bind, get_logger
from doc_library.core.metrics import BACKEND_LATENCY, BACKEND_REQUESTS
from doc_library.remote.types import ApiResult

logger = get_logger(__name__)


class BaseApiClient:
    """Wraps an ``httpx.AsyncClient`` and maps every outcome to an :class:`ApiResult`.

    The backend answers with ``{"success": bool, "message": str, "data": ...}``;
    transport errors, non-2xx statuses, undecodable bodies and explicit
    ``success: false`` replies all become failed results.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.log = bind(logger, base_url=self.base_url)
        self._client = client or httpx.AsyncClient(timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(self, method: str, url: str, endpoint: str, **kwargs: Any) -> httpx.Response | ApiResult:
        start = time.perf_counter()
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            self.log.warning(
                "Backend call %s %s failed: %s",
                method,
                url,
                exc,
                extra={"ctx_endpoint": endpoint, "ctx_method": method},
            )
            BACKEND_REQUESTS.labels(endpoint=endpoint, status="error").inc()
            return ApiResult(success=False, message=f"Cannot reach the backend service: {exc}")
        finally:
            BACKEND_LATENCY.labels(endpoint=endpoint).observe(time.perf_counter() - start)
        BACKEND_REQUESTS.labels(endpoint=endpoint, status=str(response.status_code)).inc()
        return response

    async def _request_json(self, method: str, path: str, endpoint: str, **kwargs: Any) -> ApiResult:
        outcome = await self._send(method, f"{self.base_url}{path}", endpoint, **kwargs)
        if isinstance(outcome, ApiResult):
            return outcome
        return _decode(outcome)

    async def _request_bytes(self, method: str, path: str, endpoint: str, **kwargs: Any) -> ApiResult:
        outcome = await self._send(method, f"{self.base_url}{path}", endpoint, **kwargs)
        if isinstance(outcome, ApiResult):
            return outcome
        if outcome.is_success:
            return ApiResult(success=True, data=outcome.content, status_code=outcome.status_code)
        return _decode(outcome)


def _decode(response: httpx.Response) -> ApiResult:
    status = response.status_code
    try:
        body = orjson.loads(response.content) if response.content else None
    except orjson.JSONDecodeError:
        body = None

    message = ""
    if isinstance(body, dict):
        message = str(body.get("message") or "")

    if not response.is_success:
        return ApiResult(
            success=False,
            message=message or f"Backend responded with HTTP {status}",
            status_code=status,
        )
    if not isinstance(body, dict):
        return ApiResult(success=False, message="Backend returned an unreadable response", status_code=status)
    if body.get("success") is False:
        return ApiResult(success=False, message=message or "Backend reported a failure", status_code=status)
    return ApiResult(success=True, data=body.get("data"), message=message, status_code=status)


__all__ = ["BaseApiClient"]
