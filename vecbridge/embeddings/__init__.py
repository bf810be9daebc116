"""Embedding service module."""

from vecbridge.embeddings.models import Embedding, EmbeddingRequest, EmbeddingResponse
from vecbridge.embeddings.service import EmbeddingService, OpenAIEmbeddingService

__all__ = [
    "Embedding",
    "EmbeddingRequest",
    "EmbeddingResponse",
    "EmbeddingService",
    "OpenAIEmbeddingService",
]
