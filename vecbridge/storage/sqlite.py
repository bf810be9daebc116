"""Embedded single-file storage backend on SQLite."""

import asyncio
import sqlite3
import time
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, TypeVar

from vecbridge.exceptions import ErrorCode, StorageError
from vecbridge.logging_config import get_logger
from vecbridge.observability.metrics import track_storage_operation
from vecbridge.storage.base import (
    EmbeddingStore,
    decode_embedding,
    duplicate_key,
    encode_embedding,
    not_found,
)
from vecbridge.storage.models import StoredItem

logger = get_logger(__name__)

T = TypeVar("T")

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS items (
        id TEXT PRIMARY KEY,
        data TEXT NOT NULL,
        embedding BLOB,
        created_at TEXT NOT NULL,
        last_accessed TEXT NOT NULL
    )
"""


def _now() -> str:
    return datetime.now(UTC).isoformat()


class SQLiteStorage(EmbeddingStore):
    """SQLite-backed storage.

    The backend owns a single connection. Every statement, read or
    write, runs in a worker thread while holding ``self._lock``, so
    callers observe a total order of operations. ``create`` on an
    existing id raises DUPLICATE_KEY; it never overwrites.
    """

    backend_name = "sqlite"

    def __init__(self, db_path: str | Path) -> None:
        """Open (and if needed create) the database file.

        Args:
            db_path: Path to the database file, or ``":memory:"``.

        Raises:
            StorageError: CONNECTION_FAILURE if the file cannot be opened.
        """
        self.db_path = str(db_path)
        self._lock = asyncio.Lock()
        self._conn = self._connect()

    def _connect(self) -> sqlite3.Connection:
        try:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            conn.execute(_SCHEMA)
            conn.commit()
        except (OSError, sqlite3.Error) as e:
            raise StorageError(
                f"Failed to open SQLite database: {e}",
                code=ErrorCode.CONNECTION_FAILURE,
                details={"path": self.db_path},
            ) from e

        logger.debug(f"Connected to SQLite storage: {self.db_path}")
        return conn

    async def _run(self, operation: str, func: Callable[..., T], *args: Any) -> T:
        """Run a blocking statement under the connection lock.

        A worker thread cannot be interrupted, so if the caller is
        cancelled the lock stays held until the statement has finished.
        """
        start = time.perf_counter()
        success = False
        try:
            async with self._lock:
                task = asyncio.ensure_future(asyncio.to_thread(func, *args))
                try:
                    result = await asyncio.shield(task)
                except asyncio.CancelledError:
                    await asyncio.wait([task])
                    if not task.cancelled() and task.exception() is not None:
                        logger.warning(
                            f"SQLite {operation} failed after cancellation: {task.exception()}"
                        )
                    raise
            success = True
            return result
        except sqlite3.Error as e:
            logger.error(f"SQLite {operation} failed: {e}")
            raise StorageError(
                f"SQLite {operation} failed: {e}",
                code=ErrorCode.STORAGE_ERROR,
                details={"operation": operation},
            ) from e
        finally:
            track_storage_operation(
                backend=self.backend_name,
                operation=operation,
                duration=time.perf_counter() - start,
                success=success,
            )

    def _insert(self, id: str, data: str, blob: bytes | None) -> None:
        now = _now()
        try:
            with self._conn:
                self._conn.execute(
                    "INSERT INTO items (id, data, embedding, created_at, last_accessed) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (id, data, blob, now, now),
                )
        except sqlite3.IntegrityError as e:
            raise duplicate_key(id) from e

    def _select(self, id: str) -> sqlite3.Row:
        row = self._conn.execute(
            "SELECT id, data, embedding, created_at, last_accessed FROM items WHERE id = ?",
            (id,),
        ).fetchone()
        if row is None:
            raise not_found(id)
        return row

    def _modify(self, sql: str, params: tuple[Any, ...], id: str) -> None:
        with self._conn:
            cursor = self._conn.execute(sql, params)
        if cursor.rowcount == 0:
            raise not_found(id)

    async def create(self, id: str, data: str) -> None:
        """Create a new record."""
        await self._run("create", self._insert, id, data, None)

    async def read(self, id: str) -> str:
        """Read a record's text."""
        row = await self._run("read", self._select, id)
        return row["data"]

    async def update(self, id: str, data: str) -> None:
        """Replace a record's text."""
        await self._run(
            "update",
            self._modify,
            "UPDATE items SET data = ?, last_accessed = ? WHERE id = ?",
            (data, _now(), id),
            id,
        )

    async def delete(self, id: str) -> None:
        """Delete a record."""
        await self._run("delete", self._modify, "DELETE FROM items WHERE id = ?", (id,), id)

    async def create_with_embedding(
        self,
        id: str,
        data: str,
        embedding: Sequence[float],
    ) -> None:
        """Create a record together with its encoded embedding."""
        blob = encode_embedding(id, embedding)
        await self._run("create", self._insert, id, data, blob)

    async def set_embedding(self, id: str, embedding: Sequence[float]) -> None:
        """Bind an embedding to an existing record."""
        await self._run(
            "set_embedding",
            self._modify,
            "UPDATE items SET embedding = ?, last_accessed = ? WHERE id = ?",
            (encode_embedding(id, embedding), _now(), id),
            id,
        )

    async def read_embedding(self, id: str) -> list[float] | None:
        """Read and decode the embedding bound to a record."""
        row = await self._run("read_embedding", self._select, id)
        return decode_embedding(id, row["embedding"])

    async def get_item(self, id: str) -> StoredItem:
        """Read a full record."""
        row = await self._run("read", self._select, id)
        return StoredItem(
            id=row["id"],
            data=row["data"],
            embedding=decode_embedding(id, row["embedding"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            last_accessed=datetime.fromisoformat(row["last_accessed"]),
        )

    async def close(self) -> None:
        """Close the connection."""
        async with self._lock:
            self._conn.close()
        logger.debug(f"Closed SQLite storage: {self.db_path}")
