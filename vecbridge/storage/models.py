"""Storage data models."""

from datetime import datetime

from pydantic import BaseModel, Field


class StoredItem(BaseModel):
    """A text record with an optional embedding.

    Attributes:
        id: Unique record identifier.
        data: Stored text.
        embedding: Decoded embedding vector, if one is bound.
        created_at: When the record was created.
        last_accessed: When the record was last modified.
    """

    id: str = Field(description="Unique record identifier")
    data: str = Field(description="Stored text")
    embedding: list[float] | None = Field(default=None, description="Embedding vector")
    created_at: datetime | None = Field(default=None, description="Creation time")
    last_accessed: datetime | None = Field(default=None, description="Last modification time")
