"""ID helpers."""

from __future__ import annotations

import random
import uuid

from doc_library.utils.time import now_ms


def new_id(prefix: str | None = None) -> str:
    """Generate a random UUID4 string with optional prefix."""
    base = uuid.uuid4().hex
    return f"{prefix}_{base}" if prefix else base


def activity_id() -> float:
    """Millisecond timestamp plus a random fraction so same-millisecond events differ."""
    return now_ms() + random.random()


__all__ = ["new_id", "activity_id"]
