"""Text and embedding storage module."""

from vecbridge.storage.base import EmbeddingStore, StorageBackend
from vecbridge.storage.codec import decode, encode
from vecbridge.storage.factory import create_storage
from vecbridge.storage.models import StoredItem
from vecbridge.storage.sql import SQLStorage
from vecbridge.storage.sqlite import SQLiteStorage

__all__ = [
    "EmbeddingStore",
    "SQLStorage",
    "SQLiteStorage",
    "StorageBackend",
    "StoredItem",
    "create_storage",
    "decode",
    "encode",
]
