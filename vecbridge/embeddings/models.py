"""Embedding data models."""

from typing import Any, Self

from pydantic import BaseModel, Field, model_validator

from vecbridge.llm.models import Usage


class EmbeddingRequest(BaseModel):
    """Embedding request body.

    Attributes:
        input: Text to embed.
        model: Embedding model identifier.
        user: Optional end-user identifier.
    """

    input: str = Field(description="Text to embed")
    model: str = Field(description="Embedding model")
    user: str | None = Field(default=None, description="End-user identifier")

    def to_payload(self) -> dict[str, Any]:
        """Serialize for the wire, omitting unset fields."""
        return self.model_dump(exclude_none=True)


class Embedding(BaseModel):
    """One embedding in a response.

    Attributes:
        embedding: The embedding vector.
        index: Position of the corresponding input.
        object: Object type reported by the service.
    """

    embedding: list[float] = Field(description="Embedding vector")
    index: int = Field(default=0, description="Input position")
    object: str = Field(default="embedding", description="Object type")


class EmbeddingResponse(BaseModel):
    """Embedding response body."""

    data: list[Embedding] = Field(default_factory=list)
    model: str
    object: str = "list"
    usage: Usage = Field(default_factory=Usage)

    @model_validator(mode="after")
    def check_dimensions(self) -> Self:
        """Validate all embeddings share one dimensionality."""
        dimensions = {len(item.embedding) for item in self.data}
        if len(dimensions) > 1:
            raise ValueError(f"embeddings have mixed dimensions: {sorted(dimensions)}")
        return self
