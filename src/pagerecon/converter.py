"""
High level conversion entry points.

Every function here is a coroutine; pages are processed one after another
and remote bytes are fetched in a worker thread.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Union

from .config import PipelineConfig, SUPPORTED_FILE_TYPES, get_config
from .exceptions import UnsupportedFileTypeError
from .utils.assembler import Document, DocumentAssembler, PageAssembler
from .utils.classify import LineClassifier
from .utils.docx_html import docx_to_html, docx_to_text
from .utils.export import HtmlExporter
from .utils.io import detect_input_type, fetch_bytes, load_bytes
from .utils.pdf_source import open_pdf

logger = logging.getLogger(__name__)


def check_file_type(file_type: Optional[str]) -> str:
    """Normalize a file type, raising UnsupportedFileTypeError for anything else."""
    normalized = (file_type or "").lower().lstrip(".")
    if normalized not in SUPPORTED_FILE_TYPES:
        raise UnsupportedFileTypeError(file_type)
    return normalized


async def convert_document(
    data: bytes,
    file_type: str = "pdf",
    source_file: str = "",
    config: Optional[PipelineConfig] = None
) -> Document:
    """
    Reconstruct a PDF into a Document tree.

    Raises:
        UnsupportedFileTypeError: If file_type is not "pdf"
        DocumentParseError: If the bytes are not a readable PDF
        PageParseError: If any page fails; no partial document is returned
    """
    if check_file_type(file_type) != "pdf":
        raise UnsupportedFileTypeError(file_type)

    config = config or get_config()
    assembler = DocumentAssembler(PageAssembler.from_config(config))

    pdf = await open_pdf(data)
    try:
        return await assembler.process_document(pdf, source_file=source_file, file_type="pdf")
    finally:
        pdf.close()


async def convert_bytes_to_html(
    data: bytes,
    file_type: str,
    config: Optional[PipelineConfig] = None
) -> str:
    """
    Convert document bytes to HTML.

    PDF output carries Markdown table regions between sentinel comments;
    DOCX output is a ``docx-content`` passthrough.

    Args:
        data: Document bytes
        file_type: "pdf" or "docx"
        config: Pipeline configuration (defaults to get_config())

    Returns:
        HTML string

    Raises:
        UnsupportedFileTypeError: Before any parsing, for other types
    """
    file_type = check_file_type(file_type)
    config = config or get_config()
    logger.info(f"Converting {len(data)} bytes of {file_type}")

    if file_type == "docx":
        return docx_to_html(data, classifier=LineClassifier.from_config(config.classifier))

    document = await convert_document(data, file_type, config=config)
    return HtmlExporter.from_config(config.html).to_html(document)


async def convert_file_url_to_html(
    url: str,
    file_type: str,
    config: Optional[PipelineConfig] = None
) -> str:
    """Fetch a document over HTTP and convert it to HTML."""
    check_file_type(file_type)
    config = config or get_config()
    data = await asyncio.to_thread(
        fetch_bytes, url, config.fetch.timeout, config.fetch.user_agent
    )
    return await convert_bytes_to_html(data, file_type, config=config)


async def convert_path_to_html(
    path: Union[str, Path],
    file_type: Optional[str] = None,
    config: Optional[PipelineConfig] = None
) -> str:
    """Convert a local file; the type is taken from the extension when omitted."""
    file_type = check_file_type(file_type or detect_input_type(path))
    data = load_bytes(path)
    return await convert_bytes_to_html(data, file_type, config=config)


async def extract_text(data: bytes, file_type: str) -> str:
    """
    Plain text of a document.

    PDF pages are their runs joined by spaces, pages separated by a blank
    line. DOCX is its paragraphs joined by newlines.
    """
    file_type = check_file_type(file_type)

    if file_type == "docx":
        return docx_to_text(data)

    pdf = await open_pdf(data)
    pages = []
    try:
        for page_number in range(1, pdf.num_pages + 1):
            page = await pdf.get_page(page_number)
            runs = await page.get_glyph_runs()
            pages.append(" ".join(run.text for run in runs))
    finally:
        pdf.close()
    return "\n\n".join(pages)
