"""Indexing pipeline: load, chunk, embed, store, upsert."""

import asyncio
from collections.abc import Sequence
from pathlib import Path

from vecbridge.documents.chunker import Chunker, TokenBudgetChunker
from vecbridge.documents.loader import DEFAULT_LOADERS, DocumentLoader, load_document
from vecbridge.embeddings.service import EmbeddingService
from vecbridge.exceptions import ErrorCode, StorageError, VecBridgeError
from vecbridge.logging_config import get_logger
from vecbridge.pipeline.models import FileIndexingResult, IndexingResult, SearchHit
from vecbridge.storage.base import EmbeddingStore
from vecbridge.vectordb.client import VectorDBClient
from vecbridge.vectordb.models import QueryRequest, UpsertRequest, VectorRecord

logger = get_logger(__name__)


class IndexingPipeline:
    """Keeps the text store and the vector index in step.

    Chunk text goes to the storage backend together with its embedding;
    the vectors go to the index under the same ids, so query matches can
    be resolved back to text.
    """

    def __init__(
        self,
        embedder: EmbeddingService,
        storage: EmbeddingStore,
        vector_db: VectorDBClient,
        chunker: Chunker | None = None,
        loaders: Sequence[DocumentLoader] = DEFAULT_LOADERS,
    ) -> None:
        """Initialize the pipeline.

        Args:
            embedder: Embedding service.
            storage: Text and embedding store.
            vector_db: Vector index client.
            chunker: Text chunker. Defaults to a 500-token budget.
            loaders: File loaders tried in order by :meth:`index_files`.
        """
        self._embedder = embedder
        self._storage = storage
        self._vector_db = vector_db
        self._chunker = chunker or TokenBudgetChunker()
        self._loaders = loaders

    async def index_document(
        self,
        document_id: str,
        text: str,
        namespace: str | None = None,
        metadata: dict[str, str] | None = None,
    ) -> IndexingResult:
        """Chunk, embed, store and upsert a document.

        Every chunk is embedded before anything is written. If storing a
        chunk or the upsert fails, the chunks stored by this call are
        deleted again before the error is raised, so a retry starts clean.

        Args:
            document_id: Document identifier; chunks are ``{document_id}#{n}``.
            text: Document text.
            namespace: Index namespace.
            metadata: Metadata attached to every chunk vector.

        Returns:
            IndexingResult with the chunk ids.
        """
        chunks = self._chunker.chunk(text)
        if not chunks:
            logger.info(f"Nothing to index for {document_id}")
            return IndexingResult(document_id=document_id)

        records = [
            VectorRecord(
                id=f"{document_id}#{chunk.index}",
                values=await self._embedder.embed_text(chunk.content),
                metadata={**(metadata or {}), "document_id": document_id},
            )
            for chunk in chunks
        ]
        chunk_ids = [f"{document_id}#{chunk.index}" for chunk in chunks]

        stored: list[str] = []
        try:
            for chunk_id, chunk, record in zip(chunk_ids, chunks, records, strict=True):
                await self._storage.create_with_embedding(chunk_id, chunk.content, record.values)
                stored.append(chunk_id)

            response = await self._vector_db.upsert(
                UpsertRequest(vectors=records, namespace=namespace)
            )
        except Exception:
            await self._discard(document_id, stored)
            raise

        logger.info(
            "Indexed document",
            extra={"document_id": document_id, "chunks": len(records)},
        )

        return IndexingResult(
            document_id=document_id,
            chunk_ids=chunk_ids,
            upserted_count=response.upserted_count,
        )

    async def _discard(self, document_id: str, chunk_ids: list[str]) -> None:
        """Delete chunks stored by a failed indexing run."""
        for chunk_id in chunk_ids:
            try:
                await self._storage.delete(chunk_id)
            except StorageError as e:
                logger.error(
                    f"Could not remove chunk {chunk_id} after failed indexing: {e.message}",
                    extra={"document_id": document_id, "error_code": e.code.value},
                )
        if chunk_ids:
            logger.warning(
                "Rolled back partially indexed document",
                extra={"document_id": document_id, "chunks": len(chunk_ids)},
            )

    async def index_files(
        self,
        paths: Sequence[str | Path],
        namespace: str | None = None,
    ) -> list[FileIndexingResult]:
        """Load and index several files concurrently.

        Each file is indexed as its own document, keyed by its path. A file
        that fails to load or index is reported in its result and does not
        stop the others.

        Args:
            paths: Files to index.
            namespace: Index namespace for every file.

        Returns:
            One result per path, in the order given.
        """
        results = await asyncio.gather(*(self._index_file(path, namespace) for path in paths))
        failed = sum(1 for result in results if not result.ok)
        logger.info(
            "Indexed files",
            extra={"files": len(results), "failed": failed},
        )
        return list(results)

    async def _index_file(self, path: str | Path, namespace: str | None) -> FileIndexingResult:
        try:
            document = await asyncio.to_thread(load_document, path, self._loaders)
            result = await self.index_document(
                str(path),
                document.content,
                namespace=namespace,
                metadata={"source": document.source, "file_type": document.file_type},
            )
        except VecBridgeError as e:
            logger.warning(
                f"Failed to index {path}: {e.message}",
                extra={"path": str(path), "error_code": e.code.value},
            )
            return FileIndexingResult(path=str(path), error=e.message, error_code=e.code.value)
        return FileIndexingResult(path=str(path), result=result)

    async def search(
        self,
        text: str,
        top_k: int = 5,
        namespace: str | None = None,
    ) -> list[SearchHit]:
        """Find stored chunks similar to ``text``.

        Ranking is done by the index; matches are returned in its order.
        Matches whose text is no longer in storage are skipped.
        """
        embedding = await self._embedder.embed_text(text)
        response = await self._vector_db.query(
            QueryRequest(vector=embedding, top_k=top_k, namespace=namespace)
        )

        hits: list[SearchHit] = []
        for match in response.matches:
            try:
                content = await self._storage.read(match.id)
            except StorageError as e:
                if e.code != ErrorCode.NOT_FOUND:
                    raise
                logger.warning(f"Skipping match without stored text: {match.id}")
                continue
            hits.append(SearchHit(id=match.id, score=match.score, content=content))

        logger.debug(f"Search returned {len(hits)} hits")
        return hits
