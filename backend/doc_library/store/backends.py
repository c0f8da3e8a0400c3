"""Key-value backends behind the local store."""

from __future__ import annotations

from typing import Protocol

from doc_library.db.sqlite import SQLiteDatabase
from doc_library.utils.time import now_ms


class KeyValueBackend(Protocol):
    """String-keyed, string-valued persistence. Errors propagate to the caller."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryKeyValueBackend:
    """Process-local backend; contents vanish with the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class SQLiteKeyValueBackend:
    """Backend persisting each key as one row of ``kv_store``."""

    def __init__(self, db: SQLiteDatabase) -> None:
        self.db = db
        self.db.ensure_schema()

    def get_item(self, key: str) -> str | None:
        row = self.db.execute("SELECT value FROM kv_store WHERE key = ?", [key]).fetchone()
        return row["value"] if row else None

    def set_item(self, key: str, value: str) -> None:
        with self.db.transaction() as cursor:
            cursor.execute(
                """
                INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                [key, value, now_ms()],
            )

    def remove_item(self, key: str) -> None:
        with self.db.transaction() as cursor:
            cursor.execute("DELETE FROM kv_store WHERE key = ?", [key])


__all__ = ["KeyValueBackend", "MemoryKeyValueBackend", "SQLiteKeyValueBackend"]
