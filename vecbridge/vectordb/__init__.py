"""Vector database module."""

from vecbridge.vectordb.client import VectorDBClient
from vecbridge.vectordb.models import (
    DeleteRequest,
    DeleteResponse,
    FetchedVector,
    FetchRequest,
    FetchResponse,
    IdList,
    IntegerIds,
    QueryRequest,
    QueryResponse,
    ScoredVector,
    SparseVector,
    TextIds,
    UpdateRequest,
    UpdateResponse,
    UpsertRequest,
    UpsertResponse,
    VectorRecord,
)

__all__ = [
    "DeleteRequest",
    "DeleteResponse",
    "FetchRequest",
    "FetchResponse",
    "FetchedVector",
    "IdList",
    "IntegerIds",
    "QueryRequest",
    "QueryResponse",
    "ScoredVector",
    "SparseVector",
    "TextIds",
    "UpdateRequest",
    "UpdateResponse",
    "UpsertRequest",
    "UpsertResponse",
    "VectorDBClient",
    "VectorRecord",
]
