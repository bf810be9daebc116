"""Document data models."""

from pathlib import Path

from pydantic import BaseModel, Field


class Document(BaseModel):
    """Text extracted from a source file.

    Attributes:
        content: Extracted text.
        source: Path the text was read from.
        file_type: MIME type of the source.
    """

    content: str = Field(description="Extracted text")
    source: str = Field(description="Source file path")
    file_type: str = Field(default="text/plain", description="MIME type of the source")

    @property
    def file_name(self) -> str:
        """Base name of the source file."""
        return Path(self.source).name
