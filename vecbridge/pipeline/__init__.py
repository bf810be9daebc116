"""Indexing pipeline module."""

from vecbridge.pipeline.indexer import IndexingPipeline
from vecbridge.pipeline.models import FileIndexingResult, IndexingResult, SearchHit

__all__ = ["FileIndexingResult", "IndexingPipeline", "IndexingResult", "SearchHit"]
