"""Document loader interface and implementations."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from vecbridge.documents.models import Document
from vecbridge.exceptions import DocumentError, ErrorCode


class DocumentLoader(ABC):
    """Abstract base class for document loaders."""

    @abstractmethod
    def load(self, source: str | Path) -> Document:
        """Extract the text of a file.

        Args:
            source: Path to the file.

        Returns:
            Loaded Document instance.

        Raises:
            DocumentError: If the file is missing or cannot be read.
        """
        ...

    @abstractmethod
    def supports(self, source: str | Path) -> bool:
        """Check if this loader handles the file's extension."""
        ...


def _existing_file(source: str | Path) -> Path:
    path = Path(source)
    if not path.exists():
        raise DocumentError(
            f"File not found: {path}",
            code=ErrorCode.DOCUMENT_NOT_FOUND,
            details={"path": str(path)},
        )
    if not path.is_file():
        raise DocumentError(
            f"Not a file: {path}",
            code=ErrorCode.DOCUMENT_PARSE_ERROR,
            details={"path": str(path)},
        )
    return path


class TextFileLoader(DocumentLoader):
    """Loader for plain text and markup files."""

    SUPPORTED_EXTENSIONS = {".txt", ".md", ".markdown", ".rst", ".text"}

    def __init__(self, encoding: str = "utf-8") -> None:
        """Initialize the text file loader.

        Args:
            encoding: Text encoding to use when reading files.
        """
        self.encoding = encoding

    def load(self, source: str | Path) -> Document:
        """Read a text file."""
        path = _existing_file(source)
        try:
            content = path.read_text(encoding=self.encoding)
        except UnicodeDecodeError as e:
            raise DocumentError(
                f"Failed to decode file: {path}",
                code=ErrorCode.DOCUMENT_PARSE_ERROR,
                details={"path": str(path), "encoding": self.encoding, "error": str(e)},
            ) from e
        except OSError as e:
            raise DocumentError(
                f"Failed to read file: {path}",
                code=ErrorCode.DOCUMENT_PARSE_ERROR,
                details={"path": str(path), "error": str(e)},
            ) from e

        return Document(content=content, source=str(path))

    def supports(self, source: str | Path) -> bool:
        return Path(source).suffix.lower() in self.SUPPORTED_EXTENSIONS


class PdfFileLoader(DocumentLoader):
    """Loader that extracts the text layer of PDF files.

    Pages are joined with newlines. Pages without a text layer
    (scanned images) contribute nothing; no OCR is attempted.
    """

    SUPPORTED_EXTENSIONS = {".pdf"}

    def load(self, source: str | Path) -> Document:
        """Extract the text of every page."""
        path = _existing_file(source)
        try:
            reader = PdfReader(path)
            pages = [page.extract_text() or "" for page in reader.pages]
        except (PyPdfError, OSError, ValueError) as e:
            raise DocumentError(
                f"Failed to parse PDF: {path}",
                code=ErrorCode.DOCUMENT_PARSE_ERROR,
                details={"path": str(path), "error": str(e)},
            ) from e

        return Document(content="\n".join(pages), source=str(path), file_type="application/pdf")

    def supports(self, source: str | Path) -> bool:
        return Path(source).suffix.lower() in self.SUPPORTED_EXTENSIONS


DEFAULT_LOADERS: tuple[DocumentLoader, ...] = (TextFileLoader(), PdfFileLoader())


def load_document(
    source: str | Path,
    loaders: Sequence[DocumentLoader] = DEFAULT_LOADERS,
) -> Document:
    """Load a file with the first loader that supports its extension.

    Raises:
        DocumentError: UNSUPPORTED_DOCUMENT if no loader matches, or the
            loader's own error.
    """
    for loader in loaders:
        if loader.supports(source):
            return loader.load(source)
    raise DocumentError(
        f"No loader for file type: {Path(source).suffix or '(none)'}",
        code=ErrorCode.UNSUPPORTED_DOCUMENT,
        details={"path": str(source)},
    )
