"""
End-to-end tests for the conversion entry points.
"""

import asyncio
import io
import pytest
import sys
from pathlib import Path
from unittest import mock

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pagerecon.converter import (
    convert_bytes_to_html,
    convert_document,
    convert_file_url_to_html,
    convert_path_to_html,
    extract_text
)
from pagerecon.exceptions import (
    UnsupportedFileTypeError,
    DocumentParseError,
    SourceUnavailableError
)
from pagerecon.utils.export import TABLE_START_MARKER, TABLE_END_MARKER


@pytest.fixture
def pdf_bytes():
    """Generate a one-page resume PDF in memory with PyMuPDF."""
    import fitz

    doc = fitz.open()
    page = doc.new_page(width=595, height=842)
    page.insert_text((220, 60), "Jane Doe", fontname="hebo", fontsize=20)
    page.insert_text((200, 85), "jane@example.com", fontname="helv", fontsize=11)
    page.insert_text((200, 100), "+1 555 123 4567", fontname="helv", fontsize=11)
    page.insert_text((50, 140), "Technical Skills", fontname="hebo", fontsize=14)
    page.insert_text((50, 165), "Programming Languages: Go, Rust", fontname="helv", fontsize=11)
    page.insert_text((50, 182), "Frameworks: React", fontname="helv", fontsize=11)
    page.insert_text((50, 210), "Built services used by many teams", fontname="helv", fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def two_page_pdf_bytes():
    import fitz

    doc = fitz.open()
    for text in ("First page text", "Second page text"):
        page = doc.new_page()
        page.insert_text((50, 100), text, fontname="helv", fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data


class TestUnsupportedType:
    """Unsupported types are rejected before any parsing."""

    @pytest.mark.parametrize("coro_factory", [
        lambda: convert_bytes_to_html(b"%PDF-garbage", "txt"),
        lambda: convert_file_url_to_html("http://example.invalid/x.txt", "txt"),
        lambda: extract_text(b"", "txt"),
    ])
    def test_rejects_txt(self, coro_factory):
        with pytest.raises(UnsupportedFileTypeError, match="Unsupported file type"):
            asyncio.run(coro_factory())

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            asyncio.run(convert_bytes_to_html(b"", "rtf"))

    def test_document_tree_is_pdf_only(self):
        with pytest.raises(UnsupportedFileTypeError):
            asyncio.run(convert_document(b"", "docx"))


class TestPdfConversion:
    """End-to-end PDF conversion through PyMuPDF."""

    def test_resume_html(self, pdf_bytes):
        html = asyncio.run(convert_bytes_to_html(pdf_bytes, "pdf"))

        assert html.startswith('<div class="pdf-content">')
        assert '<div class="pdf-title">' in html
        assert "Jane Doe" in html
        assert '<div class="pdf-contact-line">' in html
        assert '<h2 class="section-header">' in html
        assert TABLE_START_MARKER in html
        assert TABLE_END_MARKER in html
        assert "| Programming Languages | Go, Rust |" in html
        assert "| Frameworks | React |" in html
        assert '<p class="pdf-paragraph">' in html

    def test_bold_font_detected(self, pdf_bytes):
        html = asyncio.run(convert_bytes_to_html(pdf_bytes, "pdf"))
        assert "<strong>Jane Doe</strong>" in html

    def test_document_tree(self, pdf_bytes):
        doc = asyncio.run(convert_document(pdf_bytes, "pdf", source_file="cv.pdf"))
        assert doc.title == "Jane Doe"
        assert doc.metrics.tables_total == 1
        assert doc.metrics.table_rows_total == 2

    def test_pages_joined(self, two_page_pdf_bytes):
        html = asyncio.run(convert_bytes_to_html(two_page_pdf_bytes, "pdf"))
        assert html.count("<br/><br/>") == 1
        assert html.index("First page text") < html.index("Second page text")

    def test_extract_text(self, two_page_pdf_bytes):
        text = asyncio.run(extract_text(two_page_pdf_bytes, "pdf"))
        assert text == "First page text\n\nSecond page text"

    def test_invalid_pdf(self):
        with pytest.raises(DocumentParseError):
            asyncio.run(convert_bytes_to_html(b"this is not a pdf", "pdf"))

    def test_text_extraction_off_event_loop(self, pdf_bytes):
        from pagerecon.utils import pdf_source

        async def run():
            page = await pdf_source.FitzDocument(pdf_bytes).get_page(1)
            with mock.patch.object(
                pdf_source.asyncio, "to_thread", wraps=asyncio.to_thread
            ) as to_thread:
                runs = await page.get_glyph_runs()
            return runs, to_thread

        runs, to_thread = asyncio.run(run())
        assert "Jane Doe" in " ".join(r.text for r in runs)
        to_thread.assert_called_once()
        assert to_thread.call_args.args[1] == "dict"


class TestDocxConversion:
    """DOCX goes through the passthrough."""

    def test_docx_html(self):
        from docx import Document

        doc = Document()
        doc.add_paragraph("Hello world")
        buffer = io.BytesIO()
        doc.save(buffer)

        html = asyncio.run(convert_bytes_to_html(buffer.getvalue(), "DOCX"))
        assert html.startswith('<div class="docx-content">')
        assert "Hello world" in html


class TestSources:
    """Path and URL entry points."""

    def test_path_type_from_extension(self, pdf_bytes, tmp_path):
        path = tmp_path / "cv.pdf"
        path.write_bytes(pdf_bytes)
        html = asyncio.run(convert_path_to_html(path))
        assert "Jane Doe" in html

    def test_path_unknown_extension(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hi")
        with pytest.raises(UnsupportedFileTypeError):
            asyncio.run(convert_path_to_html(path))

    def test_missing_path(self, tmp_path):
        with pytest.raises(SourceUnavailableError):
            asyncio.run(convert_path_to_html(tmp_path / "missing.pdf"))

    def test_url_fetch(self, pdf_bytes):
        with mock.patch("pagerecon.converter.fetch_bytes", return_value=pdf_bytes) as fetch:
            html = asyncio.run(convert_file_url_to_html("https://example.com/cv.pdf", "pdf"))
        fetch.assert_called_once()
        assert "Jane Doe" in html

    def test_url_http_error(self):
        with mock.patch(
            "pagerecon.converter.fetch_bytes",
            side_effect=SourceUnavailableError("HTTP error 404")
        ):
            with pytest.raises(SourceUnavailableError, match="HTTP error 404"):
                asyncio.run(convert_file_url_to_html("https://example.com/cv.pdf", "pdf"))
