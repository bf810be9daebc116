"""Tests for document loaders."""

from pathlib import Path

import pytest
from pypdf import PdfWriter

from vecbridge.documents import PdfFileLoader, TextFileLoader, load_document
from vecbridge.exceptions import DocumentError, ErrorCode


@pytest.fixture
def blank_pdf(tmp_path: Path) -> Path:
    """A one-page PDF with no text layer."""
    path = tmp_path / "blank.pdf"
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    with path.open("wb") as fh:
        writer.write(fh)
    return path


class TestTextFileLoader:
    """Tests for TextFileLoader."""

    def test_load(self, tmp_path: Path) -> None:
        """File content and source are returned."""
        path = tmp_path / "notes.md"
        path.write_text("# Title\nbody\n", encoding="utf-8")

        document = TextFileLoader().load(path)

        assert document.content == "# Title\nbody\n"
        assert document.source == str(path)
        assert document.file_name == "notes.md"
        assert document.file_type == "text/plain"

    def test_missing_file(self, tmp_path: Path) -> None:
        """Missing files are DOCUMENT_NOT_FOUND."""
        with pytest.raises(DocumentError) as exc_info:
            TextFileLoader().load(tmp_path / "missing.txt")
        assert exc_info.value.code == ErrorCode.DOCUMENT_NOT_FOUND

    def test_directory(self, tmp_path: Path) -> None:
        """Directories cannot be loaded."""
        with pytest.raises(DocumentError) as exc_info:
            TextFileLoader().load(tmp_path)
        assert exc_info.value.code == ErrorCode.DOCUMENT_PARSE_ERROR

    def test_undecodable(self, tmp_path: Path) -> None:
        """Bytes invalid in the encoding are a parse error."""
        path = tmp_path / "bad.txt"
        path.write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(DocumentError) as exc_info:
            TextFileLoader().load(path)

        assert exc_info.value.code == ErrorCode.DOCUMENT_PARSE_ERROR
        assert exc_info.value.details["encoding"] == "utf-8"

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("a.TXT", True), ("a.rst", True), ("a.pdf", False)],
    )
    def test_supports(self, name: str, expected: bool) -> None:
        """Support is decided by extension."""
        assert TextFileLoader().supports(name) is expected


class TestPdfFileLoader:
    """Tests for PdfFileLoader."""

    def test_page_without_text(self, blank_pdf: Path) -> None:
        """Pages without a text layer yield empty text."""
        document = PdfFileLoader().load(blank_pdf)

        assert document.content == ""
        assert document.file_type == "application/pdf"

    def test_empty_file(self, tmp_path: Path) -> None:
        """Files that are not PDFs are a parse error."""
        path = tmp_path / "empty.pdf"
        path.write_bytes(b"")

        with pytest.raises(DocumentError) as exc_info:
            PdfFileLoader().load(path)

        assert exc_info.value.code == ErrorCode.DOCUMENT_PARSE_ERROR

    def test_missing_file(self, tmp_path: Path) -> None:
        """Missing files are DOCUMENT_NOT_FOUND."""
        with pytest.raises(DocumentError) as exc_info:
            PdfFileLoader().load(tmp_path / "missing.pdf")
        assert exc_info.value.code == ErrorCode.DOCUMENT_NOT_FOUND


class TestLoadDocument:
    """Tests for load_document."""

    def test_dispatch_by_extension(self, tmp_path: Path, blank_pdf: Path) -> None:
        """Each file goes to the loader for its extension."""
        text = tmp_path / "a.txt"
        text.write_text("hello", encoding="utf-8")

        assert load_document(text).file_type == "text/plain"
        assert load_document(blank_pdf).file_type == "application/pdf"

    def test_unsupported(self, tmp_path: Path) -> None:
        """Unknown extensions are rejected before the file is read."""
        with pytest.raises(DocumentError) as exc_info:
            load_document(tmp_path / "image.png")
        assert exc_info.value.code == ErrorCode.UNSUPPORTED_DOCUMENT
