"""Observability module for metrics."""

from vecbridge.observability.metrics import (
    get_metrics,
    track_embedding_request,
    track_llm_request,
    track_storage_operation,
    track_vectordb_operation,
    track_vectordb_rejection,
)

__all__ = [
    "get_metrics",
    "track_embedding_request",
    "track_llm_request",
    "track_storage_operation",
    "track_vectordb_operation",
    "track_vectordb_rejection",
]
