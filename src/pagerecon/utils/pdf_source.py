"""
Glyph run source for page reconstruction.

Provides:
- PageProxy / DocumentProxy: the contract the pipeline depends on
- PyMuPDF-backed implementation (lazily loaded, once per process)
- In-memory implementation for pre-extracted text items

PyMuPDF reports span origins with Y growing downward; runs are converted to
page space with Y growing upward so that "top of page" is the largest Y.
"""

import asyncio
import logging
import threading
from typing import List, Dict, Any, Sequence, Protocol

from .layout import GlyphRun
from ..exceptions import DocumentParseError, PageParseError

logger = logging.getLogger(__name__)


# ============================================================================
# Source Contract
# ============================================================================

class PageProxy(Protocol):
    """One page of a source document."""

    async def get_glyph_runs(self) -> List[GlyphRun]:
        ...


class DocumentProxy(Protocol):
    """A source document exposing positioned text per page."""

    @property
    def num_pages(self) -> int:
        ...

    async def get_page(self, page_number: int) -> PageProxy:
        """Return page ``page_number`` (1-indexed)."""
        ...


# ============================================================================
# PDF Engine Loader
# ============================================================================

_engine = None
_engine_lock = threading.Lock()


def load_pdf_engine():
    """
    Import the PDF parsing engine once per process.

    The first caller performs the import; concurrent callers wait on the
    same lock and receive the cached module.

    Raises:
        ImportError: If PyMuPDF is not installed
    """
    global _engine
    if _engine is not None:
        return _engine

    with _engine_lock:
        if _engine is None:
            try:
                import fitz
            except ImportError:
                raise ImportError(
                    "PyMuPDF is required for PDF support. Install with: pip install pymupdf"
                )
            logger.info(f"Loaded PDF engine PyMuPDF {getattr(fitz, 'VersionBind', '?')}")
            _engine = fitz
    return _engine


# ============================================================================
# PyMuPDF Implementation
# ============================================================================

def spans_to_glyph_runs(page_dict: Dict[str, Any], page_height: float) -> List[GlyphRun]:
    """
    Convert a PyMuPDF ``get_text("dict")`` page into glyph runs.

    Args:
        page_dict: Output of ``page.get_text("dict")``
        page_height: Page height used to flip Y upward

    Returns:
        Glyph runs in extraction order
    """
    runs = []
    for block in page_dict.get("blocks", []):
        if "lines" not in block:
            continue
        for line in block["lines"]:
            cos, sin = line.get("dir", (1.0, 0.0))
            for span in line.get("spans", []):
                size = float(span.get("size", 0.0))
                origin = span.get("origin") or (span["bbox"][0], span["bbox"][3])
                x0, y0, x1, y1 = span.get("bbox", (0.0, 0.0, 0.0, 0.0))
                runs.append(GlyphRun(
                    text=span.get("text", "") or "",
                    transform=(
                        size * cos, size * sin,
                        -size * sin, size * cos,
                        float(origin[0]), page_height - float(origin[1])
                    ),
                    font_name=span.get("font", "") or "",
                    width=float(x1 - x0),
                    height=float(y1 - y0)
                ))
    return runs


class FitzPage:
    """PageProxy over a PyMuPDF page."""

    def __init__(self, page, page_number: int):
        self._page = page
        self.page_number = page_number

    async def get_glyph_runs(self) -> List[GlyphRun]:
        try:
            page_dict = await asyncio.to_thread(self._page.get_text, "dict")
            return spans_to_glyph_runs(page_dict, float(self._page.rect.height))
        except Exception as e:
            raise PageParseError(self.page_number, str(e)) from e


class FitzDocument:
    """DocumentProxy over a PyMuPDF document opened from bytes."""

    def __init__(self, data: bytes):
        fitz = load_pdf_engine()
        try:
            self._doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            raise DocumentParseError(f"Failed to parse PDF: {e}") from e
        if self._doc.needs_pass:
            self._doc.close()
            raise DocumentParseError("Failed to parse PDF: document is encrypted")

    @property
    def num_pages(self) -> int:
        return self._doc.page_count

    async def get_page(self, page_number: int) -> FitzPage:
        if not 1 <= page_number <= self.num_pages:
            raise PageParseError(page_number, f"page out of range 1..{self.num_pages}")
        try:
            page = self._doc.load_page(page_number - 1)
        except Exception as e:
            raise PageParseError(page_number, str(e)) from e
        return FitzPage(page, page_number)

    def close(self):
        self._doc.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


async def open_pdf(data: bytes) -> FitzDocument:
    """Open PDF bytes as a DocumentProxy."""
    return FitzDocument(data)


# ============================================================================
# In-memory Implementation
# ============================================================================

class MemoryPage:
    """PageProxy over pre-built glyph runs."""

    def __init__(self, runs: Sequence[GlyphRun]):
        self._runs = list(runs)

    async def get_glyph_runs(self) -> List[GlyphRun]:
        return list(self._runs)


class MemoryDocument:
    """DocumentProxy over pre-built pages of glyph runs."""

    def __init__(self, pages: Sequence[Sequence[GlyphRun]]):
        self._pages = [MemoryPage(runs) for runs in pages]

    @property
    def num_pages(self) -> int:
        return len(self._pages)

    async def get_page(self, page_number: int) -> MemoryPage:
        if not 1 <= page_number <= self.num_pages:
            raise PageParseError(page_number, f"page out of range 1..{self.num_pages}")
        return self._pages[page_number - 1]

    @classmethod
    def from_items(cls, pages: Sequence[Sequence[Dict[str, Any]]]) -> 'MemoryDocument':
        """
        Build from loosely-typed text items, one list per page.

        Raises:
            PageParseError: If an item on a page is malformed
        """
        built = []
        for number, items in enumerate(pages, 1):
            try:
                built.append([GlyphRun.from_item(item) for item in items])
            except (ValueError, TypeError, AttributeError) as e:
                raise PageParseError(number, str(e)) from e
        return cls(built)
