"""
DOCX to HTML passthrough.

Walks the body of a Word document with python-docx and emits HTML with
``docx-*`` classes. Paragraphs that look like contact details or section
headings get the ``contact-info`` / ``section-header`` classes using the
same vocabulary as the PDF classifier.
"""

import html
import io
import logging
import re
from typing import List, Optional

from .classify import LineClassifier
from ..exceptions import DocumentParseError

logger = logging.getLogger(__name__)

HEADING_STYLE = re.compile(r"^Heading\s+(\d)$", re.IGNORECASE)


# ============================================================================
# Loading
# ============================================================================

def open_docx(data: bytes):
    """
    Open DOCX bytes with python-docx.

    Raises:
        DocumentParseError: If the buffer is not a readable DOCX package
    """
    try:
        from docx import Document as DocxDocument
    except ImportError:
        raise ImportError(
            "python-docx is required for DOCX support. "
            "Install with: pip install python-docx"
        )

    try:
        return DocxDocument(io.BytesIO(data))
    except Exception as e:
        raise DocumentParseError(f"Failed to parse DOCX: {e}") from e


def docx_to_text(data: bytes) -> str:
    """Raw text of a DOCX document, one paragraph per line."""
    doc = open_docx(data)
    return "\n".join(p.text for p in doc.paragraphs)


# ============================================================================
# HTML Conversion
# ============================================================================

class DocxHtmlConverter:
    """Convert a python-docx document to ``docx-*`` classed HTML."""

    def __init__(
        self,
        classifier: Optional[LineClassifier] = None,
        container_class: str = "docx-content"
    ):
        self.classifier = classifier or LineClassifier()
        self.container_class = container_class

    def convert(self, data: bytes) -> str:
        """
        Convert DOCX bytes to HTML.

        Args:
            data: DOCX file contents

        Returns:
            HTML wrapped in the docx container
        """
        from docx.table import Table

        doc = open_docx(data)
        parts: List[str] = []
        open_list: Optional[str] = None
        index = 0

        for item in doc.iter_inner_content():
            if isinstance(item, Table):
                open_list = self._close_list(parts, open_list)
                parts.append(self._table_to_html(item))
                continue

            text = item.text.strip()
            if not text:
                continue

            list_tag = self._list_tag(item)
            if list_tag != open_list:
                self._close_list(parts, open_list)
                if list_tag:
                    parts.append(f'<{list_tag} class="docx-list-{_list_kind(list_tag)}">')
                open_list = list_tag

            inner = self._inline_html(item)
            if list_tag:
                parts.append(f'<li class="docx-list-item">{inner}</li>')
            else:
                parts.append(self._block_html(item, text, inner, index))
            index += 1

        self._close_list(parts, open_list)
        logger.info(f"Converted DOCX: {index} paragraphs, {len(doc.tables)} tables")
        return f'<div class="{self.container_class}">{"".join(parts)}</div>'

    def _block_html(self, paragraph, text: str, inner: str, index: int) -> str:
        level = _heading_level(paragraph)
        classes = []
        if level:
            classes.append("docx-heading")
        else:
            classes.append("docx-paragraph")

        if index <= self.classifier.contact_max_index and self.classifier.matches_contact(text):
            classes.append("contact-info")
        elif self.classifier.matches_heading_text(text):
            classes.append("section-header")

        tag = f"h{level}" if level else "p"
        return f'<{tag} class="{" ".join(classes)}">{inner}</{tag}>'

    def _inline_html(self, paragraph) -> str:
        from docx.text.hyperlink import Hyperlink

        parts = []
        for item in paragraph.iter_inner_content():
            if isinstance(item, Hyperlink):
                label = "".join(_run_html(r) for r in item.runs) or html.escape(item.text)
                href = html.escape(item.url or item.address or "", quote=True)
                parts.append(f'<a class="docx-link" href="{href}">{label}</a>')
            else:
                parts.append(_run_html(item))
        return "".join(parts)

    def _list_tag(self, paragraph) -> Optional[str]:
        name = (paragraph.style.name if paragraph.style is not None else "") or ""
        if name.startswith("List Number"):
            return "ol"
        if name.startswith("List Bullet") or name.startswith("List Paragraph"):
            return "ul"
        return None

    def _close_list(self, parts: List[str], open_list: Optional[str]) -> None:
        if open_list:
            parts.append(f"</{open_list}>")
        return None

    def _table_to_html(self, table) -> str:
        rows = []
        for r, row in enumerate(table.rows):
            cell_tag, cell_class = ("th", "docx-table-header") if r == 0 else ("td", "docx-table-cell")
            cells = "".join(
                f'<{cell_tag} class="{cell_class}">{html.escape(cell.text.strip())}</{cell_tag}>'
                for cell in row.cells
            )
            rows.append(f'<tr class="docx-table-row">{cells}</tr>')
        return f'<table class="docx-table">{"".join(rows)}</table>'


def _heading_level(paragraph) -> int:
    name = (paragraph.style.name if paragraph.style is not None else "") or ""
    if name == "Title":
        return 1
    match = HEADING_STYLE.match(name)
    if match:
        return min(int(match.group(1)), 6)
    return 0


def _list_kind(tag: str) -> str:
    return "ordered" if tag == "ol" else "unordered"


def _run_html(run) -> str:
    content = html.escape(run.text, quote=False)
    if not content:
        return ""
    if run.bold:
        content = f'<strong class="docx-strong">{content}</strong>'
    if run.italic:
        content = f'<em class="docx-emphasis">{content}</em>'
    return content


def docx_to_html(data: bytes, classifier: Optional[LineClassifier] = None) -> str:
    """Convert DOCX bytes to ``docx-*`` classed HTML."""
    return DocxHtmlConverter(classifier=classifier).convert(data)
