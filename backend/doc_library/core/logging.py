"""Structured logging for the document library.

Records are rendered as one JSON object per line. Extras whose names start
with ``ctx_`` are collected under a ``context`` object with the prefix
removed, so ``extra={"ctx_endpoint": "files.list"}`` shows up as
``"context": {"endpoint": "files.list"}``.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, MutableMapping

import orjson

CONTEXT_PREFIX = "ctx_"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, context extras nested."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S") + f".{int(record.msecs):03d}",
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        context = {
            key[len(CONTEXT_PREFIX) :]: value
            for key, value in record.__dict__.items()
            if key.startswith(CONTEXT_PREFIX)
        }
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info
        return orjson.dumps(payload, default=str).decode("utf-8")


class ContextAdapter(logging.LoggerAdapter):
    """Logger adapter that stamps bound context onto every record."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        bound = {f"{CONTEXT_PREFIX}{key}": value for key, value in (self.extra or {}).items()}
        kwargs["extra"] = {**bound, **kwargs.get("extra", {})}
        return msg, kwargs


def configure_logging(level: str | int | None = None, fmt: str | None = None) -> None:
    """Install a single stdout handler on the root logger.

    ``level`` and ``fmt`` default to the ``log_level`` and ``log_format``
    settings (``DOCLIB_LOG_LEVEL`` / ``DOCLIB_LOG_FORMAT``).
    """
    if level is None or fmt is None:
        from doc_library.core.config import get_settings

        settings = get_settings()
        level = settings.log_level if level is None else level
        fmt = settings.log_format if fmt is None else fmt

    logging.captureWarnings(True)
    root = logging.getLogger()
    root.setLevel(level.upper() if isinstance(level, str) else level)
    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.handlers = [handler]


def get_logger(name: str = "doc_library") -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging("INFO", "json")
    return logging.getLogger(name)


def bind(logger: logging.Logger, **context: Any) -> ContextAdapter:
    """Return ``logger`` with ``context`` attached to every record it emits."""
    return ContextAdapter(logger, context)


__all__ = ["CONTEXT_PREFIX", "ContextAdapter", "JsonFormatter", "bind", "configure_logging", "get_logger"]
