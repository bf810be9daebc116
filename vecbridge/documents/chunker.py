"""Token-budget text chunking."""

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from vecbridge.exceptions import ValidationError


class Chunk(BaseModel):
    """A chunk of text.

    Attributes:
        content: The text content of the chunk.
        index: Position of this chunk in the sequence.
        token_count: Whitespace-token count of the chunk.
    """

    content: str = Field(description="Text content of the chunk")
    index: int = Field(description="Chunk index in sequence")
    token_count: int = Field(description="Whitespace tokens in the chunk")


class Chunker(ABC):
    """Abstract base class for text chunkers."""

    @abstractmethod
    def chunk(self, text: str) -> list[Chunk]:
        """Split text into chunks.

        Args:
            text: The text to chunk.

        Returns:
            List of Chunk objects, in order.
        """
        ...


class TokenBudgetChunker(Chunker):
    """Group whole lines into chunks under a token budget.

    Tokens are whitespace-separated words. Lines are never split, so a
    single line longer than the budget becomes a chunk on its own.
    """

    def __init__(self, max_tokens: int = 500) -> None:
        """Initialize the chunker.

        Args:
            max_tokens: Token budget per chunk.

        Raises:
            ValidationError: If ``max_tokens`` is below 1.
        """
        if max_tokens < 1:
            raise ValidationError(
                f"max_tokens must be at least 1, got {max_tokens}",
                details={"max_tokens": max_tokens},
            )
        self.max_tokens = max_tokens

    def chunk(self, text: str) -> list[Chunk]:
        """Split text at line boundaries."""
        chunks: list[Chunk] = []
        current: list[str] = []
        token_count = 0

        for line in text.splitlines():
            line_tokens = len(line.split())

            if current and token_count + line_tokens > self.max_tokens:
                chunks.append(self._make_chunk(current, len(chunks), token_count))
                current = []
                token_count = 0

            current.append(line)
            token_count += line_tokens

        if current:
            chunks.append(self._make_chunk(current, len(chunks), token_count))

        return chunks

    @staticmethod
    def _make_chunk(lines: list[str], index: int, token_count: int) -> Chunk:
        return Chunk(
            content="".join(f"{line}\n" for line in lines),
            index=index,
            token_count=token_count,
        )
