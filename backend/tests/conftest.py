"""Test fixtures for the document library."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import httpx
import orjson
import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

BACKEND_ORIGIN = "http://backend.test"


@pytest.fixture(autouse=True)
def reset_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset global singletons and environment between tests."""
    monkeypatch.setenv("DOCLIB_STORE_PATH", str(tmp_path / "store.db"))
    monkeypatch.setenv("DOCLIB_STORE_BACKEND", "sqlite")
    monkeypatch.setenv("DOCLIB_API_ORIGIN", BACKEND_ORIGIN)
    monkeypatch.setenv("DOCLIB_CONFIG", str(tmp_path / "missing.yaml"))

    from doc_library.api import dependencies as deps
    from doc_library.app import app
    from doc_library.core.config import get_settings

    def _clear() -> None:
        get_settings.cache_clear()
        deps.get_app_settings.cache_clear()
        if deps._DB is not None:
            deps._DB.close()
        deps._DB = None
        deps._STORE = None
        deps._FILE_CLIENT = None
        deps._AUDIT_CLIENT = None
        app.dependency_overrides.clear()

    _clear()
    yield
    _clear()


@pytest.fixture
def store():
    from doc_library.store.backends import MemoryKeyValueBackend
    from doc_library.store.local_store import LocalStore

    return LocalStore(MemoryKeyValueBackend())


class FakeBackend:
    """In-process stand-in for the file-storage and audit-log HTTP APIs."""

    def __init__(self) -> None:
        self.files: list[dict[str, Any]] = []
        self.views: dict[str, int] = {}
        self.failing_views: set[str] = set()
        self.logs: list[dict[str, Any]] = []
        self.down = False
        self.list_fails = False
        self.requests: list[httpx.Request] = []

    def add_file(self, name: str, size: int = 100, views: int = 0, **extra: Any) -> dict[str, Any]:
        entry = {
            "name": name,
            "size": size,
            "created": "2024-01-01T00:00:00.000Z",
            "modified": "2024-01-02T00:00:00.000Z",
            **extra,
        }
        self.files.append(entry)
        self.views[name] = views
        return entry

    def add_log(self, log_id: str, action: str = "LOGIN", **extra: Any) -> dict[str, Any]:
        entry = {
            "id": log_id,
            "userId": "u1",
            "username": "alice",
            "action": action,
            "details": {},
            "timestamp": "2024-03-01T10:00:00.000Z",
            "ip": "127.0.0.1",
            **extra,
        }
        self.logs.append(entry)
        return entry

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.down:
            raise httpx.ConnectError("connection refused", request=request)
        path = request.url.path
        if path == "/health":
            return httpx.Response(200, json={"status": "ok"})
        if path == "/api/files/list":
            if self.list_fails:
                return _reply(500, {"success": False, "message": "storage offline"})
            return _reply(200, {"success": True, "data": {"files": self.files, "totalFiles": len(self.files)}})
        if path.startswith("/api/files/view/"):
            name = path[len("/api/files/view/") :]
            if name in self.failing_views:
                return _reply(500, {"success": False, "message": "counter unavailable"})
            return _reply(200, {"success": True, "data": {"viewCount": self.views.get(name, 0)}})
        if path == "/api/files/storage/stats":
            total = sum(int(item.get("size", 0)) for item in self.files)
            data = {"totalFiles": len(self.files), "totalFolders": 2, "totalSize": total, "storagePath": "/srv/files"}
            return _reply(200, {"success": True, "data": data})
        if path == "/api/logs/cleanup" and request.method == "DELETE":
            return _reply(200, {"success": True, "message": "Removed 3 expired log files", "data": {"deletedCount": 3}})
        if path == "/api/logs":
            page = int(request.url.params.get("page", "1"))
            limit = int(request.url.params.get("limit", "10"))
            window = self.logs[(page - 1) * limit : page * limit]
            total_pages = (len(self.logs) + limit - 1) // limit
            pagination = {"total": len(self.logs), "page": page, "limit": limit, "totalPages": total_pages}
            return _reply(200, {"success": True, "data": {"logs": window, "pagination": pagination}})
        return _reply(404, {"success": False, "message": "not found"})


def _reply(status: int, body: dict[str, Any]) -> httpx.Response:
    return httpx.Response(status, content=orjson.dumps(body), headers={"content-type": "application/json"})


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def file_client(fake_backend: FakeBackend):
    from doc_library.remote.files import FileStorageClient

    return FileStorageClient(BACKEND_ORIGIN, transport=fake_backend.transport())


@pytest.fixture
def audit_client(fake_backend: FakeBackend):
    from doc_library.remote.audit import AuditLogClient

    return AuditLogClient(BACKEND_ORIGIN, transport=fake_backend.transport())


@pytest.fixture
def make_document():
    from doc_library.models.entities import Document

    def _make(doc_id: str, **fields: Any) -> Document:
        fields.setdefault("created_at", "2024-01-01T00:00:00.000Z")
        fields.setdefault("updated_at", "2024-01-01T00:00:00.000Z")
        return Document(id=doc_id, **fields)

    return _make
