"""Storage backend interfaces."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from vecbridge.exceptions import CodecError, ErrorCode, StorageError
from vecbridge.storage import codec
from vecbridge.storage.models import StoredItem


class StorageBackend(ABC):
    """Abstract base class for text storage backends.

    Every backend keys records by string id and exposes the same
    semantics: ``create`` rejects existing ids, the other operations
    reject missing ones.
    """

    @abstractmethod
    async def create(self, id: str, data: str) -> None:
        """Create a new record.

        Args:
            id: Record identifier.
            data: Text to store.

        Raises:
            StorageError: DUPLICATE_KEY if the id already exists.
        """
        ...

    @abstractmethod
    async def read(self, id: str) -> str:
        """Read a record's text.

        Args:
            id: Record identifier.

        Returns:
            The stored text.

        Raises:
            StorageError: NOT_FOUND if the id does not exist.
        """
        ...

    @abstractmethod
    async def update(self, id: str, data: str) -> None:
        """Replace a record's text.

        Args:
            id: Record identifier.
            data: New text.

        Raises:
            StorageError: NOT_FOUND if the id does not exist.
        """
        ...

    @abstractmethod
    async def delete(self, id: str) -> None:
        """Delete a record.

        Args:
            id: Record identifier.

        Raises:
            StorageError: NOT_FOUND if the id does not exist.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the backend's connections."""
        ...


class EmbeddingStore(StorageBackend):
    """Storage backend that can also bind embeddings to records.

    Embeddings are persisted with :mod:`vecbridge.storage.codec`.
    """

    @abstractmethod
    async def create_with_embedding(
        self,
        id: str,
        data: str,
        embedding: Sequence[float],
    ) -> None:
        """Create a record together with its embedding.

        Raises:
            StorageError: DUPLICATE_KEY if the id already exists.
        """
        ...

    @abstractmethod
    async def set_embedding(self, id: str, embedding: Sequence[float]) -> None:
        """Bind an embedding to an existing record.

        Raises:
            StorageError: NOT_FOUND if the id does not exist.
        """
        ...

    @abstractmethod
    async def read_embedding(self, id: str) -> list[float] | None:
        """Read the embedding bound to a record.

        Returns:
            The decoded vector, or None if the record has no embedding.

        Raises:
            StorageError: NOT_FOUND if the id does not exist,
                CORRUPT_EMBEDDING if the stored bytes cannot be decoded.
        """
        ...

    @abstractmethod
    async def get_item(self, id: str) -> StoredItem:
        """Read a full record.

        Raises:
            StorageError: NOT_FOUND if the id does not exist,
                CORRUPT_EMBEDDING if the stored bytes cannot be decoded.
        """
        ...


def not_found(id: str) -> StorageError:
    """Build the error raised for a missing record."""
    return StorageError(
        f"Item not found: {id}",
        code=ErrorCode.NOT_FOUND,
        details={"id": id},
    )


def duplicate_key(id: str) -> StorageError:
    """Build the error raised when creating an existing record."""
    return StorageError(
        f"Item already exists: {id}",
        code=ErrorCode.DUPLICATE_KEY,
        details={"id": id},
    )


def encode_embedding(id: str, embedding: Sequence[float]) -> bytes:
    """Encode an embedding for storage.

    Raises:
        StorageError: INVALID_EMBEDDING if a value cannot be stored as float32.
    """
    try:
        return codec.encode(embedding)
    except CodecError as e:
        raise StorageError(
            f"Embedding for {id} cannot be stored: {e.message}",
            code=ErrorCode.INVALID_EMBEDDING,
            details={"id": id},
        ) from e


def decode_embedding(id: str, blob: bytes | None) -> list[float] | None:
    """Decode a stored embedding blob.

    Raises:
        StorageError: CORRUPT_EMBEDDING if the blob is malformed.
    """
    if blob is None:
        return None
    try:
        return codec.decode(bytes(blob))
    except CodecError as e:
        raise StorageError(
            f"Stored embedding for {id} is corrupt: {e.message}",
            code=ErrorCode.CORRUPT_EMBEDDING,
            details={"id": id, "length": len(blob)},
        ) from e
