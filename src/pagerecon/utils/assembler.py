"""
Document assembler module for page reconstruction.

Provides:
- Document tree (Document, Page, TextBlock, TableBlock)
- Per-page pipeline: grouping, classification, table accumulation, inline rendering
- Sequential multi-page orchestration
- Metrics calculation
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Dict, Any, Sequence, Union
import numpy as np

from .layout import GlyphRun, group_lines, baseline_font_size
from .classify import LineClassifier, LineRole
from .tables import TableBuffer, TableResult
from .inline import InlineRenderer, InlineNode, TextSpan
from .pdf_source import DocumentProxy

logger = logging.getLogger(__name__)


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class TextBlock:
    """A classified, rendered line."""
    role: LineRole
    css_class: str
    inlines: List[InlineNode]
    y: float
    index: int
    level: int = 0  # heading level, 0 for non-headings

    @property
    def text(self) -> str:
        return " ".join(n.text for n in self.inlines if isinstance(n, TextSpan))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.role.value,
            "css_class": self.css_class,
            "y": self.y,
            "index": self.index,
            "level": self.level,
            "text": self.text,
            "inlines": [n.to_dict() for n in self.inlines]
        }


@dataclass
class TableBlock:
    """A flushed category/details table."""
    table: TableResult

    @property
    def first_y(self) -> Optional[float]:
        return self.table.first_y

    @property
    def last_y(self) -> Optional[float]:
        return self.table.last_y

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "table",
            "first_y": self.first_y,
            "last_y": self.last_y,
            "table": self.table.to_dict()
        }


Block = Union[TextBlock, TableBlock]


@dataclass
class Page:
    """A reconstructed page."""
    page_number: int
    baseline_font_size: float
    blocks: List[Block] = field(default_factory=list)
    num_runs: int = 0
    num_lines: int = 0
    blank_lines: int = 0

    @property
    def text_blocks(self) -> List[TextBlock]:
        return [b for b in self.blocks if isinstance(b, TextBlock)]

    @property
    def table_blocks(self) -> List[TableBlock]:
        return [b for b in self.blocks if isinstance(b, TableBlock)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page_number": self.page_number,
            "baseline_font_size": self.baseline_font_size,
            "num_runs": self.num_runs,
            "num_lines": self.num_lines,
            "blank_lines": self.blank_lines,
            "blocks": [b.to_dict() for b in self.blocks]
        }


@dataclass
class DocumentMetrics:
    """Metrics about document reconstruction."""
    pages_processed: int = 0
    runs_total: int = 0
    lines_total: int = 0
    blank_lines_skipped: int = 0
    lines_by_role: Dict[str, int] = field(default_factory=dict)
    tables_total: int = 0
    table_rows_total: int = 0
    mean_baseline_font_size: float = 0.0
    processing_time_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pages_processed": self.pages_processed,
            "runs_total": self.runs_total,
            "lines": {
                "total": self.lines_total,
                "blank_skipped": self.blank_lines_skipped,
                "by_role": dict(self.lines_by_role)
            },
            "tables": {
                "total": self.tables_total,
                "rows": self.table_rows_total
            },
            "mean_baseline_font_size": round(self.mean_baseline_font_size, 2),
            "processing_time_seconds": round(self.processing_time_seconds, 3)
        }


@dataclass
class Document:
    """Complete reconstructed document."""
    task_id: str
    source_file: str
    file_type: str = "pdf"
    pages: List[Page] = field(default_factory=list)
    metrics: Optional[DocumentMetrics] = None
    created_at: str = ""
    schema_version: str = "1.0"

    def __post_init__(self):
        if not self.task_id:
            self.task_id = str(uuid.uuid4())
        if not self.created_at:
            self.created_at = datetime.now().isoformat()

    @property
    def title(self) -> Optional[str]:
        for page in self.pages:
            for block in page.text_blocks:
                if block.role == LineRole.TITLE:
                    return block.text
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task_id": self.task_id,
            "schema_version": self.schema_version,
            "source_file": self.source_file,
            "file_type": self.file_type,
            "created_at": self.created_at,
            "metadata": {
                "title": self.title
            },
            "pages": [p.to_dict() for p in self.pages],
            "metrics": self.metrics.to_dict() if self.metrics else {}
        }


# ============================================================================
# Page Assembler
# ============================================================================

class PageAssembler:
    """
    Runs the per-page pipeline.

    Grouper -> Classifier -> Table accumulator / Inline renderer.
    """

    def __init__(
        self,
        y_tolerance: float = 2.0,
        default_font_size: float = 12.0,
        classifier: Optional[LineClassifier] = None,
        renderer: Optional[InlineRenderer] = None,
        table_headers=("Category", "Details")
    ):
        self.y_tolerance = y_tolerance
        self.default_font_size = default_font_size
        self.classifier = classifier or LineClassifier()
        self.renderer = renderer or InlineRenderer()
        self.table_headers = tuple(table_headers)

    @classmethod
    def from_config(cls, config) -> 'PageAssembler':
        """Build from a PipelineConfig."""
        return cls(
            y_tolerance=config.lines.y_tolerance,
            default_font_size=config.lines.default_font_size,
            classifier=LineClassifier.from_config(config.classifier),
            renderer=InlineRenderer.from_config(config.inline),
            table_headers=config.html.table_headers
        )

    def process_page(
        self,
        runs: Sequence[GlyphRun],
        page_number: int = 1
    ) -> Page:
        """
        Reconstruct one page.

        Args:
            runs: Glyph runs in source order
            page_number: Page number (1-indexed)

        Returns:
            Page with blocks in top-to-bottom order
        """
        lines = group_lines(runs, tolerance=self.y_tolerance)
        baseline = baseline_font_size(runs, default=self.default_font_size)

        page = Page(
            page_number=page_number,
            baseline_font_size=baseline,
            num_runs=len(runs),
            num_lines=len(lines)
        )
        buffer = TableBuffer(headers=self.table_headers)
        index = 0

        for line in lines:
            if line.is_blank:
                page.blank_lines += 1
                continue

            classified = self.classifier.classify(line, index, baseline)
            index += 1

            if classified.is_table_row:
                buffer.add(line)
                continue

            table = buffer.flush()
            if table is not None:
                page.blocks.append(TableBlock(table=table))

            page.blocks.append(TextBlock(
                role=classified.role,
                css_class=classified.css_class,
                inlines=self.renderer.render(line.runs),
                y=line.y,
                index=classified.index,
                level=classified.level
            ))

        table = buffer.flush()
        if table is not None:
            page.blocks.append(TableBlock(table=table))

        logger.info(
            f"Page {page_number}: {len(lines)} lines, "
            f"{len(page.table_blocks)} tables (baseline {baseline:.1f})"
        )
        return page


# ============================================================================
# Document Assembler
# ============================================================================

class DocumentAssembler:
    """
    Orchestrates reconstruction of a whole document.

    Pages are fetched and processed strictly one after another; a failure on
    any page aborts the document.
    """

    def __init__(self, page_assembler: Optional[PageAssembler] = None):
        self.page_assembler = page_assembler or PageAssembler()

    async def process_document(
        self,
        source: DocumentProxy,
        source_file: str = "",
        file_type: str = "pdf"
    ) -> Document:
        """
        Process a complete document.

        Args:
            source: Document exposing glyph runs per page
            source_file: Original source name (for the envelope)
            file_type: Declared file type

        Returns:
            Document with one Page per source page, in order
        """
        start_time = time.time()

        doc = Document(
            task_id=str(uuid.uuid4()),
            source_file=source_file,
            file_type=file_type
        )

        for page_number in range(1, source.num_pages + 1):
            logger.info(f"Processing page {page_number}/{source.num_pages}")
            page_proxy = await source.get_page(page_number)
            runs = await page_proxy.get_glyph_runs()
            doc.pages.append(self.page_assembler.process_page(runs, page_number))

        elapsed = time.time() - start_time
        doc.metrics = self._calculate_metrics(doc, elapsed)

        return doc

    def _calculate_metrics(
        self,
        doc: Document,
        processing_time: float
    ) -> DocumentMetrics:
        """Calculate document-wide metrics."""
        metrics = DocumentMetrics()
        metrics.processing_time_seconds = processing_time
        metrics.pages_processed = len(doc.pages)

        baselines = []
        for page in doc.pages:
            baselines.append(page.baseline_font_size)
            metrics.runs_total += page.num_runs
            metrics.lines_total += page.num_lines
            metrics.blank_lines_skipped += page.blank_lines

            for block in page.blocks:
                if isinstance(block, TableBlock):
                    metrics.tables_total += 1
                    rows = len(block.table.data_rows)
                    metrics.table_rows_total += rows
                    key = LineRole.TABLE_ROW.value
                    metrics.lines_by_role[key] = metrics.lines_by_role.get(key, 0) + rows
                else:
                    key = block.role.value
                    metrics.lines_by_role[key] = metrics.lines_by_role.get(key, 0) + 1

        if baselines:
            metrics.mean_baseline_font_size = float(np.mean(baselines))

        return metrics
