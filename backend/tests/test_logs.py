"""Tests for audit log queries and CSV export."""

import asyncio
import csv
import io

from doc_library.logs.query import CSV_HEADER, AuditLogService, LogBrowser, action_label, export_csv
from doc_library.models.dto import AuditLog, LogQuery


def _log(**fields) -> AuditLog:
    base = {"id": "1", "user_id": "u1", "username": "alice", "action": "LOGIN", "timestamp": "2024-03-01T10:00:00Z", "ip": "10.0.0.1"}
    base.update(fields)
    return AuditLog(**base)


def test_export_csv_quotes_commas_and_quotes() -> None:
    logs = [
        _log(username="Doe, Jane", details={"file": "a.pdf"}),
        _log(id="2", action="VIEW_FILE", username='say "hi"'),
    ]

    text = export_csv(logs)
    lines = text.split("\n")

    assert lines[0] == ",".join(CSV_HEADER)
    assert '"Doe, Jane"' in lines[1]
    assert '"say ""hi"""' in lines[2]
    rows = list(csv.reader(io.StringIO(text)))
    assert rows[1][2] == "Doe, Jane"
    assert rows[1][3] == "Login"
    assert rows[1][6] == '{"file":"a.pdf"}'
    assert rows[2][3] == "View file"


def test_unknown_action_label_passes_through() -> None:
    assert action_label("RENAME_FILE") == "RENAME_FILE"


def test_fetch_sends_filters(fake_backend, audit_client) -> None:
    fake_backend.add_log("1")
    service = AuditLogService(audit_client)
    query = LogQuery(page=2, page_size=20, search="alice", action="all", start_date="2024-01-01", end_date="2024-01-31")

    page = asyncio.run(service.fetch(query))

    assert page.success
    request = fake_backend.requests[-1]
    params = request.url.params
    assert params["page"] == "2"
    assert params["limit"] == "20"
    assert params["search"] == "alice"
    assert params["startDate"] == "2024-01-01"
    assert params["endDate"] == "2024-01-31"
    assert params["admin"] == "true"
    assert "action" not in params
    assert request.headers["X-Admin-Access"] == "true"


def test_browser_clamps_pages(fake_backend, audit_client) -> None:
    for index in range(25):
        fake_backend.add_log(str(index))
    browser = LogBrowser(AuditLogService(audit_client))

    async def scenario() -> None:
        await browser.load()
        assert browser.total == 25
        assert browser.total_pages == 3
        await browser.go_to(0)
        assert browser.page == 1
        await browser.go_to(8)
        assert browser.page == 3
        assert [log.id for log in browser.logs] == ["20", "21", "22", "23", "24"]
        await browser.previous_page()
        assert browser.page == 2

    asyncio.run(scenario())


def test_browser_first_page_uses_service_page_size(fake_backend, audit_client) -> None:
    for index in range(12):
        fake_backend.add_log(str(index))
    browser = LogBrowser(AuditLogService(audit_client, page_size=5))

    asyncio.run(browser.load())

    assert fake_backend.requests[-1].url.params["limit"] == "5"
    assert len(browser.logs) == 5
    assert browser.total_pages == 3


def test_failed_load_keeps_previous_state(fake_backend, audit_client) -> None:
    fake_backend.add_log("1")
    browser = LogBrowser(AuditLogService(audit_client))

    async def scenario() -> None:
        await browser.load()
        fake_backend.down = True
        result = await browser.go_to(1)
        assert result.success is False
        assert [log.id for log in browser.logs] == ["1"]

    asyncio.run(scenario())


def test_export_requires_loaded_logs(audit_client) -> None:
    browser = LogBrowser(AuditLogService(audit_client))
    assert browser.export().success is False


def test_cleanup_returns_deleted_count(audit_client) -> None:
    result = asyncio.run(AuditLogService(audit_client).cleanup())
    assert result.success
    assert result.data == 3
