"""Document loading and chunking module."""

from vecbridge.documents.chunker import Chunk, Chunker, TokenBudgetChunker
from vecbridge.documents.loader import (
    DocumentLoader,
    PdfFileLoader,
    TextFileLoader,
    load_document,
)
from vecbridge.documents.models import Document

__all__ = [
    "Chunk",
    "Chunker",
    "Document",
    "DocumentLoader",
    "PdfFileLoader",
    "TextFileLoader",
    "TokenBudgetChunker",
    "load_document",
]
