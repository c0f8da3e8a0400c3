"""CLI tests with the HTTP layer stubbed out."""

from __future__ import annotations

import pytest
import requests
from typer.testing import CliRunner

from doc_library.cli import main as cli

runner = CliRunner()


class _Response:
    def __init__(self, status_code: int, payload, text: str = "") -> None:
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._payload = payload
        self.text = text

    def json(self):
        return self._payload


@pytest.fixture
def calls(monkeypatch: pytest.MonkeyPatch) -> list[tuple[str, str, dict]]:
    recorded: list[tuple[str, str, dict]] = []
    replies: dict[str, _Response] = {
        "/search": _Response(200, [{"relevance": 50, "type": "document", "title": "Annual Report", "id": "d1"}]),
        "/data/clear": _Response(200, {"success": True, "message": "All local data cleared"}),
        "/data/reset": _Response(502, {"detail": "Local data cleared but sync failed: storage offline"}),
    }

    def fake_request(method: str, url: str, timeout: float, **kwargs) -> _Response:
        recorded.append((method, url, kwargs))
        path = url.split("127.0.0.1:9999", 1)[1]
        return replies[path]

    monkeypatch.setenv("DOCLIB_HOST", "http://127.0.0.1:9999/")
    monkeypatch.setattr(cli.requests, "request", fake_request)
    return recorded


def test_search_prints_ranked_results(calls) -> None:
    result = runner.invoke(cli.app, ["search", "report"])
    assert result.exit_code == 0
    assert "Annual Report" in result.output
    assert calls[0][2]["params"] == {"q": "report"}


def test_clear_requires_confirmation(calls) -> None:
    aborted = runner.invoke(cli.app, ["clear"], input="n\n")
    assert aborted.exit_code != 0
    assert calls == []

    confirmed = runner.invoke(cli.app, ["clear", "--yes"])
    assert confirmed.exit_code == 0
    assert calls[0][2]["params"] == {"confirm": "true"}


def test_failed_request_exits_with_detail(calls) -> None:
    result = runner.invoke(cli.app, ["reset", "--yes"])
    assert result.exit_code == 1
    assert "sync failed" in result.output


def test_unreachable_host(monkeypatch: pytest.MonkeyPatch) -> None:
    def refuse(*args, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(cli.requests, "request", refuse)
    result = runner.invoke(cli.app, ["dashboard", "--host", "http://127.0.0.1:1"])
    assert result.exit_code == 1


def test_serve_runs_the_api(monkeypatch: pytest.MonkeyPatch) -> None:
    launched: list[tuple[str, dict]] = []
    monkeypatch.setattr(cli.uvicorn, "run", lambda app_path, **kwargs: launched.append((app_path, kwargs)))

    result = runner.invoke(cli.app, ["serve", "--port", "9001"])

    assert result.exit_code == 0
    assert launched == [
        ("doc_library.app:app", {"host": "127.0.0.1", "port": 9001, "reload": False, "log_config": None})
    ]
