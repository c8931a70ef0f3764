"""
Utility modules for the page reconstruction pipeline.
"""

from .io import load_bytes, fetch_bytes, save_json, ensure_dir, detect_input_type
from .layout import GlyphRun, Line, group_lines, baseline_font_size
from .classify import LineClassifier, LineRole, ClassifiedLine
from .tables import TableBuffer, TableResult, split_category
from .inline import InlineRenderer, TextSpan, Spacer
from .pdf_source import MemoryDocument, open_pdf
from .assembler import DocumentAssembler, PageAssembler, Document, Page
from .export import HtmlExporter, MarkdownExporter, Segment, split_segments, render_segments
from .docx_html import docx_to_html, docx_to_text

__all__ = [
    # IO
    "load_bytes", "fetch_bytes", "save_json", "ensure_dir", "detect_input_type",
    # Layout
    "GlyphRun", "Line", "group_lines", "baseline_font_size",
    # Classification
    "LineClassifier", "LineRole", "ClassifiedLine",
    # Tables
    "TableBuffer", "TableResult", "split_category",
    # Inline
    "InlineRenderer", "TextSpan", "Spacer",
    # Sources
    "MemoryDocument", "open_pdf",
    # Assembly
    "DocumentAssembler", "PageAssembler", "Document", "Page",
    # Export
    "HtmlExporter", "MarkdownExporter", "Segment", "split_segments", "render_segments",
    # DOCX
    "docx_to_html", "docx_to_text",
]
