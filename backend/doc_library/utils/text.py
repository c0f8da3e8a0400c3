"""Text processing helpers."""

from __future__ import annotations

import re


WHITESPACE_RE = re.compile(r"\s+")
_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def slugify(name: str) -> str:
    """Lowercase and turn each whitespace run into a single hyphen."""
    return WHITESPACE_RE.sub("-", name.lower())


def contains(haystack: str | None, needle: str) -> bool:
    """Case-insensitive substring test; None never matches."""
    if haystack is None:
        return False
    return needle.lower() in haystack.lower()


def format_file_size(size: int) -> str:
    """Render a byte count as e.g. ``1.5 KB``."""
    if size <= 0:
        return "0 Bytes"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    rendered = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{rendered} {_SIZE_UNITS[unit]}"


__all__ = ["slugify", "contains", "format_file_size"]
