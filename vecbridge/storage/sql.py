"""Networked relational storage backend built on SQLAlchemy."""

import asyncio
import time
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import Any, TypeVar

from sqlalchemy import (
    Column,
    DateTime,
    Engine,
    LargeBinary,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    delete,
    insert,
    make_url,
    select,
    update,
)
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

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

metadata = MetaData()

items = Table(
    "items",
    metadata,
    Column("id", String(255), primary_key=True),
    Column("data", Text, nullable=False),
    Column("embedding", LargeBinary, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("last_accessed", DateTime(timezone=True), nullable=False),
)


class SQLStorage(EmbeddingStore):
    """Storage on a networked relational database (MySQL, PostgreSQL, ...).

    Each operation checks a connection out of the engine's pool and runs
    in its own transaction, so concurrent callers never share a handle
    and no process-level lock is taken. ``create`` on an existing id
    raises DUPLICATE_KEY; it never overwrites.
    """

    backend_name = "sql"

    def __init__(
        self,
        url: str | None = None,
        engine: Engine | None = None,
        pool_size: int = 5,
    ) -> None:
        """Initialize the backend and create the schema if missing.

        Args:
            url: SQLAlchemy database URL, e.g. ``mysql+pymysql://...``.
            engine: Existing engine (takes precedence over ``url``).
            pool_size: Pool size for non-SQLite engines.

        Raises:
            StorageError: CONNECTION_FAILURE if the database is unreachable.
        """
        if engine is None:
            if url is None:
                raise StorageError(
                    "Either a database URL or an engine is required",
                    code=ErrorCode.CONNECTION_FAILURE,
                )
            engine_kwargs: dict[str, Any] = {"pool_pre_ping": True}
            if make_url(url).get_backend_name() != "sqlite":
                engine_kwargs["pool_size"] = pool_size
            engine = create_engine(url, **engine_kwargs)

        self._engine = engine

        try:
            metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            raise StorageError(
                f"Failed to connect to database: {e}",
                code=ErrorCode.CONNECTION_FAILURE,
                details={"url": self._engine.url.render_as_string(hide_password=True)},
            ) from e

        logger.debug(
            "Connected to SQL storage",
            extra={"url": self._engine.url.render_as_string(hide_password=True)},
        )

    async def _run(self, operation: str, func: Callable[..., T], *args: Any) -> T:
        """Run a blocking statement in a worker thread."""
        start = time.perf_counter()
        success = False
        try:
            result = await asyncio.to_thread(func, *args)
            success = True
            return result
        except OperationalError as e:
            logger.error(f"SQL {operation} failed, database unreachable: {e}")
            raise StorageError(
                f"Database unreachable: {e}",
                code=ErrorCode.CONNECTION_FAILURE,
                details={"operation": operation},
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"SQL {operation} failed: {e}")
            raise StorageError(
                f"SQL {operation} failed: {e}",
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
        now = datetime.now(UTC)
        try:
            with self._engine.begin() as conn:
                conn.execute(
                    insert(items).values(
                        id=id,
                        data=data,
                        embedding=blob,
                        created_at=now,
                        last_accessed=now,
                    )
                )
        except IntegrityError as e:
            raise duplicate_key(id) from e

    def _select(self, id: str) -> Any:
        with self._engine.connect() as conn:
            row = conn.execute(select(items).where(items.c.id == id)).first()
        if row is None:
            raise not_found(id)
        return row

    def _modify(self, id: str, **values: Any) -> None:
        with self._engine.begin() as conn:
            result = conn.execute(
                update(items)
                .where(items.c.id == id)
                .values(last_accessed=datetime.now(UTC), **values)
            )
        if result.rowcount == 0:
            raise not_found(id)

    def _delete(self, id: str) -> None:
        with self._engine.begin() as conn:
            result = conn.execute(delete(items).where(items.c.id == id))
        if result.rowcount == 0:
            raise not_found(id)

    async def create(self, id: str, data: str) -> None:
        """Create a new record."""
        await self._run("create", self._insert, id, data, None)

    async def read(self, id: str) -> str:
        """Read a record's text."""
        row = await self._run("read", self._select, id)
        return row.data

    async def update(self, id: str, data: str) -> None:
        """Replace a record's text."""
        await self._run("update", lambda: self._modify(id, data=data))

    async def delete(self, id: str) -> None:
        """Delete a record."""
        await self._run("delete", self._delete, id)

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
        blob = encode_embedding(id, embedding)
        await self._run("set_embedding", lambda: self._modify(id, embedding=blob))

    async def read_embedding(self, id: str) -> list[float] | None:
        """Read and decode the embedding bound to a record."""
        row = await self._run("read_embedding", self._select, id)
        return decode_embedding(id, row.embedding)

    async def get_item(self, id: str) -> StoredItem:
        """Read a full record."""
        row = await self._run("read", self._select, id)
        return StoredItem(
            id=row.id,
            data=row.data,
            embedding=decode_embedding(id, row.embedding),
            created_at=row.created_at,
            last_accessed=row.last_accessed,
        )

    async def close(self) -> None:
        """Dispose of the connection pool."""
        await asyncio.to_thread(self._engine.dispose)
