"""Vector database request and response models.

Requests are plain pydantic models whose optional fields default to
``None``. They can be built up freely; ``validate_request()`` enforces the
per-operation rules and must succeed before a request is dispatched.
On the wire, field names are camelCase and ``None`` fields are omitted.
"""

from typing import Any, Self

import httpx
from pydantic import BaseModel, ConfigDict, Field, RootModel
from pydantic.alias_generators import to_camel

from vecbridge.exceptions import (
    DeleteError,
    ErrorCode,
    FetchError,
    QueryError,
    UpdateError,
    UpsertError,
    VectorDBError,
)

MAX_ID_LENGTH = 512


class WireModel(BaseModel):
    """Base model for payloads exchanged with the vector database."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """Serialize with camelCase names, omitting unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class IntegerIds(RootModel[list[int]]):
    """Integer record ids. Not accepted by fetch or delete."""


class TextIds(RootModel[list[str]]):
    """String record ids."""


IdList = IntegerIds | TextIds


class VectorRecord(WireModel):
    """A dense vector with optional sparse positions and metadata.

    Attributes:
        id: Record identifier.
        values: Vector components.
        indices: Sparse positions, one per value.
        metadata: String metadata stored with the vector.
    """

    id: str | None = Field(default=None, description="Record identifier")
    values: list[float] = Field(description="Vector components")
    indices: list[int] | None = Field(default=None, description="Sparse positions")
    metadata: dict[str, str] = Field(default_factory=dict, description="Metadata")


class SparseVector(WireModel):
    """A sparse vector as parallel index/value lists."""

    indices: list[int] | None = Field(default=None, description="Non-zero positions")
    values: list[float] = Field(default_factory=list, description="Non-zero values")


def _fail(error_cls: type[VectorDBError], message: str) -> VectorDBError:
    return error_cls(message, code=ErrorCode.VECTOR_DB_VALIDATION)


class UpsertRequest(WireModel):
    """Insert or overwrite vectors."""

    vectors: list[VectorRecord] | None = None
    namespace: str | None = None

    def validate_request(self) -> Self:
        """Check the request can be sent.

        Raises:
            UpsertError: On the first violated rule.
        """
        if not self.vectors:
            raise _fail(UpsertError, "vectors cannot be empty")
        for position, vector in enumerate(self.vectors):
            if not vector.values:
                raise _fail(UpsertError, f"vectors[{position}].values cannot be empty")
            if vector.indices is not None and len(vector.indices) != len(vector.values):
                raise _fail(
                    UpsertError,
                    f"vectors[{position}].indices and values must have the same length",
                )
        return self


class QueryRequest(WireModel):
    """Similarity search around a query vector."""

    vector: list[float] | None = None
    top_k: int | None = None
    namespace: str | None = None
    id: str | None = None
    filter: dict[str, Any] | None = None
    include_metadata: bool | None = None
    include_values: bool | None = None
    sparse_vector: SparseVector | None = None

    def validate_request(self) -> Self:
        """Check the request can be sent.

        Raises:
            QueryError: On the first violated rule.
        """
        if self.vector is None:
            raise _fail(QueryError, "vector is required")
        if self.top_k is None:
            raise _fail(QueryError, "top_k is required")
        if self.top_k < 1:
            raise _fail(QueryError, f"top_k must be at least 1, got {self.top_k}")
        if self.id is not None and len(self.id) > MAX_ID_LENGTH:
            raise _fail(QueryError, f"id must be at most {MAX_ID_LENGTH} characters")
        if self.sparse_vector is not None:
            indices = self.sparse_vector.indices
            if indices is None:
                raise _fail(QueryError, "sparse_vector.indices is required")
            if not indices:
                raise _fail(QueryError, "sparse_vector.indices cannot be empty")
            if len(indices) != len(self.sparse_vector.values):
                raise _fail(
                    QueryError,
                    "sparse_vector.indices and sparse_vector.values must have the same length",
                )
        return self


class UpdateRequest(WireModel):
    """Update a single vector's sparse values or metadata."""

    id: str | None = None
    namespace: str | None = None
    set_metadata: dict[str, str] | None = None
    sparse_values: SparseVector | None = None

    def validate_request(self) -> Self:
        """Check the request can be sent.

        Raises:
            UpdateError: On the first violated rule.
        """
        if self.id is None:
            raise _fail(UpdateError, "id is required")
        if not 1 <= len(self.id) <= MAX_ID_LENGTH:
            raise _fail(UpdateError, f"id must be between 1 and {MAX_ID_LENGTH} characters")
        if self.sparse_values is None and self.set_metadata is None:
            raise _fail(UpdateError, "either sparse_values or set_metadata is required")
        if self.sparse_values is not None:
            indices = self.sparse_values.indices
            values = self.sparse_values.values
            if not indices or not values:
                raise _fail(
                    UpdateError,
                    "sparse_values.indices and sparse_values.values cannot be empty",
                )
            if len(indices) != len(values):
                raise _fail(
                    UpdateError,
                    "sparse_values.indices and sparse_values.values must have the same length",
                )
        return self


class FetchRequest(WireModel):
    """Fetch vectors by id."""

    ids: IdList | None = None
    namespace: str | None = None

    def validate_request(self) -> Self:
        """Check the request can be sent.

        Raises:
            FetchError: On the first violated rule.
        """
        if self.ids is None:
            raise _fail(FetchError, "ids is required")
        if not self.ids.root:
            raise _fail(FetchError, "ids cannot be empty")
        if not isinstance(self.ids, TextIds):
            raise _fail(FetchError, "ids must be text ids")
        return self

    def query_params(self) -> list[tuple[str, str]]:
        """Query string pairs: one ``ids`` entry per id, then the namespace."""
        params = [("ids", id) for id in self.ids.root] if isinstance(self.ids, TextIds) else []
        if self.namespace is not None:
            params.append(("namespace", self.namespace))
        return params

    def build_url(self, base_url: str) -> str:
        """Full fetch URL relative to the index base URL."""
        return f"{base_url.rstrip('/')}/vectors/fetch?{httpx.QueryParams(self.query_params())}"


class DeleteRequest(WireModel):
    """Delete vectors by id, or every vector in a namespace."""

    ids: IdList | None = None
    delete_all: bool | None = None
    namespace: str | None = None
    filter: dict[str, Any] | None = None

    def validate_request(self) -> Self:
        """Check the request can be sent.

        Raises:
            DeleteError: On the first violated rule.
        """
        if self.ids is None and not self.delete_all:
            raise _fail(DeleteError, "either ids or delete_all is required")
        if self.ids is not None:
            if not self.ids.root:
                raise _fail(DeleteError, "ids cannot be empty")
            if not isinstance(self.ids, TextIds):
                raise _fail(DeleteError, "ids must be text ids")
        return self


class UpsertResponse(WireModel):
    """Upsert result."""

    upserted_count: int = Field(default=0, description="Number of vectors written")


class ScoredVector(WireModel):
    """A query match."""

    id: str = Field(description="Record identifier")
    score: float = Field(default=0.0, description="Similarity score")
    values: list[float] = Field(default_factory=list, description="Vector components")
    sparse_values: SparseVector | None = Field(default=None, description="Sparse components")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Metadata")


class QueryResponse(WireModel):
    """Query result, best match first."""

    matches: list[ScoredVector] = Field(default_factory=list)
    namespace: str = ""


class FetchedVector(WireModel):
    """A vector returned by fetch."""

    id: str
    values: list[float] = Field(default_factory=list)
    sparse_values: SparseVector | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class FetchResponse(WireModel):
    """Fetch result keyed by id."""

    vectors: dict[str, FetchedVector] = Field(default_factory=dict)
    namespace: str = ""


class UpdateResponse(WireModel):
    """Update result (the service returns an empty object)."""


class DeleteResponse(WireModel):
    """Delete result (the service returns an empty object)."""
