"""
PDF Page Reconstruction
=======================

Rebuilds structured, styled HTML from the positioned text runs of a PDF.

Main components:
- Glyph run extraction (PyMuPDF adapter)
- Line grouping and reading order
- Line role classification (title, contact line, heading, table row, body)
- Category/details table accumulation
- Inline styling and spacing reconstruction
- HTML / Markdown / JSON export
- DOCX passthrough with class injection
"""

__version__ = "1.0.0"
__author__ = "Document Reconstruction Team"
