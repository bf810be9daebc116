"""Indexing pipeline data models."""

from pydantic import BaseModel, Field


class IndexingResult(BaseModel):
    """Outcome of indexing one document.

    Attributes:
        document_id: The indexed document.
        chunk_ids: Ids of the stored and upserted chunks, in order.
        upserted_count: Vectors the index reports as written.
    """

    document_id: str = Field(description="Indexed document identifier")
    chunk_ids: list[str] = Field(default_factory=list, description="Chunk identifiers")
    upserted_count: int = Field(default=0, description="Vectors written to the index")


class SearchHit(BaseModel):
    """A stored chunk matching a search.

    Attributes:
        id: Chunk identifier.
        score: Similarity score reported by the index.
        content: Chunk text read back from storage.
    """

    id: str = Field(description="Chunk identifier")
    score: float = Field(description="Similarity score")
    content: str = Field(description="Chunk text")


class FileIndexingResult(BaseModel):
    """Outcome of indexing one file from a batch.

    Exactly one of ``result`` and ``error`` is set.

    Attributes:
        path: The file as given by the caller.
        result: Indexing outcome when the file was indexed.
        error: Failure message when it was not.
        error_code: Error code of the failure.
    """

    path: str = Field(description="File path")
    result: IndexingResult | None = Field(default=None, description="Indexing outcome")
    error: str | None = Field(default=None, description="Failure message")
    error_code: str | None = Field(default=None, description="Failure error code")

    @property
    def ok(self) -> bool:
        """Whether the file was indexed."""
        return self.error is None
