"""Application configuration handling."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, Mapping

import yaml
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "DOCLIB_"
DEFAULT_CONFIG_PATH = Path("~/.config/doc-library/config.yaml")

_YAML_KEY_MAP: Mapping[tuple[str, ...], str] = {
    ("store", "path"): "store_path",
    ("store", "backend"): "store_backend",
    ("backend", "origin"): "api_origin",
    ("backend", "timeout"): "request_timeout",
    ("activity", "retention"): "activity_retention",
    ("dashboard", "recent_documents"): "recent_documents_limit",
    ("dashboard", "recent_activities"): "recent_activities_limit",
    ("search", "recent_limit"): "recent_searches_limit",
    ("logs", "page_size"): "log_page_size",
    ("files", "default_uploader"): "default_uploader",
    ("logging", "level"): "log_level",
    ("logging", "format"): "log_format",
}


class Settings(BaseModel):
    """Runtime configuration loaded from YAML file and environment variables."""

    store_path: Path = Field(default=Path.home() / ".doc-library" / "store.db")
    store_backend: Literal["sqlite", "memory"] = "sqlite"
    api_origin: str = "http://localhost:3001"
    request_timeout: float = 30.0
    activity_retention: int = Field(default=1000, ge=1)
    recent_documents_limit: int = 5
    recent_activities_limit: int = 10
    recent_searches_limit: int = 5
    log_page_size: int = Field(default=10, ge=1)
    default_uploader: str = "System Administrator"
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    model_config = {
        "validate_assignment": True,
        "extra": "ignore",
    }

    @field_validator("store_path", mode="before")
    @classmethod
    def _expand_store_path(cls, value: Any) -> Path:
        if isinstance(value, Path):
            return value.expanduser()
        if isinstance(value, str):
            return Path(value).expanduser()
        raise TypeError("store_path must be a path or string")

    @field_validator("api_origin")
    @classmethod
    def _strip_origin(cls, value: str) -> str:
        return value.rstrip("/")

    @classmethod
    def from_yaml(cls, path: Path | None = None) -> "Settings":
        """Load YAML config and overlay env vars; fall back to defaults."""
        config_path = cls._resolve_config_path(path)
        data: dict[str, Any] = {}
        if config_path and config_path.exists():
            with config_path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
            data.update(_flatten_yaml(raw))
        data.update(_load_env_overrides())
        return cls(**data)

    @staticmethod
    def _resolve_config_path(path: Path | None) -> Path | None:
        if path is not None:
            return path.expanduser()
        env_path = os.environ.get(f"{ENV_PREFIX}CONFIG")
        if env_path:
            return Path(env_path).expanduser()
        resolved_default = DEFAULT_CONFIG_PATH.expanduser()
        return resolved_default if resolved_default.exists() else None


def _flatten_yaml(raw: Mapping[str, Any], prefix: tuple[str, ...] = ()) -> dict[str, Any]:
    """Flatten nested YAML configuration to Settings field names."""
    flat: dict[str, Any] = {}
    for key, value in raw.items():
        next_prefix = prefix + (key,)
        if isinstance(value, Mapping):
            flat.update(_flatten_yaml(value, prefix=next_prefix))
        else:
            mapped_key = _YAML_KEY_MAP.get(next_prefix)
            if mapped_key:
                flat[mapped_key] = value
            elif key in Settings.model_fields:
                flat[key] = value
    return flat


def _load_env_overrides() -> dict[str, Any]:
    """Map environment variables with DOCLIB_ prefix into Settings fields."""
    overrides: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        if field_name in Settings.model_fields:
            overrides[field_name] = value
    return overrides


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings accessor for dependency injection."""
    return Settings.from_yaml()


__all__ = ["Settings", "get_settings"]
