"""Tests for settings loading."""

from pathlib import Path

import pytest

from doc_library.core.config import Settings


def test_defaults_without_config_file(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DOCLIB_API_ORIGIN", raising=False)
    monkeypatch.delenv("DOCLIB_STORE_BACKEND", raising=False)
    settings = Settings.from_yaml()
    assert settings.api_origin == "http://localhost:3001"
    assert settings.store_backend == "sqlite"
    assert settings.activity_retention == 1000
    assert settings.log_page_size == 10


def test_yaml_nested_keys_and_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "config.yaml"
    config.write_text(
        "backend:\n"
        "  origin: http://files.internal:4000/\n"
        "  timeout: 5\n"
        "activity:\n"
        "  retention: 200\n"
        "store:\n"
        "  backend: memory\n"
    )
    monkeypatch.delenv("DOCLIB_STORE_BACKEND", raising=False)
    monkeypatch.delenv("DOCLIB_API_ORIGIN", raising=False)
    monkeypatch.setenv("DOCLIB_ACTIVITY_RETENTION", "50")

    settings = Settings.from_yaml(config)

    assert settings.api_origin == "http://files.internal:4000"
    assert settings.request_timeout == 5.0
    assert settings.store_backend == "memory"
    assert settings.activity_retention == 50


def test_store_path_is_expanded(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCLIB_STORE_PATH", "~/library/store.db")
    settings = Settings.from_yaml()
    assert settings.store_path == Path("~/library/store.db").expanduser()
