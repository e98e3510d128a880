"""SQLiteBackend — durable, single-file document storage using aiosqlite."""

from __future__ import annotations

import asyncio
import json
from typing import Any

try:
    import aiosqlite
except ImportError as exc:
    raise ImportError(
        "SQLiteBackend requires the 'aiosqlite' package. "
        "Install it with: pip install aiosqlite"
    ) from exc

from principal_store.backends.base import DocumentBackend, Snapshot, merge_documents
from principal_store.paths import SEPARATOR, DocumentPath

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS documents (
    path  TEXT NOT NULL PRIMARY KEY,
    value TEXT NOT NULL
)
"""


class SQLiteBackend(DocumentBackend):
    """Persistent backend storing one JSON document per row.

    Merge writes and field deletes are read-modify-write cycles; they and
    deletes run under one lock so a single backend instance never
    interleaves a delete with a merge.

    Parameters:
        db_path: Path to the SQLite database file.  Use ``":memory:"``
                 for an in-memory database (useful for testing).
    """

    def __init__(self, db_path: str = "principal_store.db") -> None:
        self._db_path = db_path
        self._db: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    async def _connect(self) -> aiosqlite.Connection:
        if self._db is None:
            self._db = await aiosqlite.connect(self._db_path)
            await self._db.execute(_CREATE_TABLE)
            await self._db.commit()
        return self._db

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    async def _read(self, db: aiosqlite.Connection, key: str) -> dict[str, Any] | None:
        cursor = await db.execute("SELECT value FROM documents WHERE path = ?", (key,))
        row = await cursor.fetchone()
        if row is None:
            return None
        result: dict[str, Any] = json.loads(row[0])
        return result

    async def _write(self, db: aiosqlite.Connection, key: str, value: dict[str, Any]) -> None:
        await db.execute(
            "INSERT OR REPLACE INTO documents (path, value) VALUES (?, ?)",
            (key, json.dumps(value)),
        )
        await db.commit()

    # ── DocumentBackend protocol ─────────────────────────────

    async def get(self, path: DocumentPath) -> Snapshot:
        db = await self._connect()
        doc = await self._read(db, str(path))
        if doc is None:
            return Snapshot.missing()
        return Snapshot(exists=True, value=doc)

    async def set(self, path: DocumentPath, value: dict[str, Any], *, merge: bool = False) -> None:
        db = await self._connect()
        key = str(path)
        async with self._lock:
            if merge:
                current = await self._read(db, key)
                if current is not None:
                    value = merge_documents(current, value)
            await self._write(db, key, value)

    async def delete(self, path: DocumentPath, *, recursive: bool = False) -> bool:
        db = await self._connect()
        key = str(path)
        async with self._lock:
            if recursive:
                prefix = key + SEPARATOR
                cursor = await db.execute(
                    "DELETE FROM documents WHERE path = ? OR substr(path, 1, ?) = ?",
                    (key, len(prefix), prefix),
                )
            else:
                cursor = await db.execute("DELETE FROM documents WHERE path = ?", (key,))
            await db.commit()
        return cursor.rowcount > 0

    async def update_field_delete(self, path: DocumentPath, field_name: str) -> bool:
        db = await self._connect()
        key = str(path)
        async with self._lock:
            current = await self._read(db, key)
            if current is None or field_name not in current:
                return False
            del current[field_name]
            await self._write(db, key, current)
        return True
