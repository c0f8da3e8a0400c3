"""Tests for structured log output."""

from __future__ import annotations

import asyncio
import logging

import orjson
import pytest

from doc_library.core.logging import JsonFormatter, bind, configure_logging
from doc_library.remote.files import FileStorageClient


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("doc_library.test", logging.INFO, __file__, 1, "Synced %s", (3,), None)
    record.__dict__.update(extra)
    return record


def test_context_extras_are_nested_without_prefix() -> None:
    payload = orjson.loads(JsonFormatter().format(_record(ctx_documents=3, ctx_endpoint="files.list")))

    assert payload["message"] == "Synced 3"
    assert payload["level"] == "INFO"
    assert payload["context"] == {"documents": 3, "endpoint": "files.list"}


def test_records_without_context_have_no_context_key() -> None:
    payload = orjson.loads(JsonFormatter().format(_record()))
    assert "context" not in payload


def test_bound_context_merges_with_call_extras(caplog: pytest.LogCaptureFixture) -> None:
    log = bind(logging.getLogger("doc_library.test"), origin="http://backend.test")

    with caplog.at_level(logging.INFO, logger="doc_library.test"):
        log.info("hello", extra={"ctx_status": 503})

    record = caplog.records[-1]
    assert record.ctx_origin == "http://backend.test"
    assert record.ctx_status == 503


def test_backend_failures_carry_endpoint_context(fake_backend, caplog: pytest.LogCaptureFixture) -> None:
    fake_backend.down = True
    client = FileStorageClient("http://backend.test", transport=fake_backend.transport())

    with caplog.at_level(logging.WARNING, logger="doc_library.remote.base"):
        result = asyncio.run(client.list_files())

    assert result.success is False
    record = next(item for item in caplog.records if item.name == "doc_library.remote.base")
    assert record.ctx_base_url == "http://backend.test/api/files"
    assert record.ctx_endpoint == "list"
    assert record.ctx_method == "GET"
    assert "context" in JsonFormatter().format(record)


def test_configure_logging_reads_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    from doc_library.core.config import get_settings

    monkeypatch.setenv("DOCLIB_LOG_LEVEL", "warning")
    monkeypatch.setenv("DOCLIB_LOG_FORMAT", "text")
    get_settings.cache_clear()
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging()
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[0].formatter, JsonFormatter)
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)
