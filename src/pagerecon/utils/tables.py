"""
Table accumulation module for page reconstruction.

Provides:
- Cell / TableResult: structured two-column tables rendered as Markdown
- TableBuffer: state machine buffering consecutive table-row lines
- Category/details splitting at the first colon
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Dict, Any

from .layout import Line

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = ("Category", "Details")


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class Cell:
    """A single table cell."""
    text: str
    row: int
    col: int
    is_header: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "row": self.row,
            "col": self.col,
            "is_header": self.is_header
        }


@dataclass
class TableResult:
    """A reconstructed table; row 0 is the header row."""
    cells: List[Cell]
    num_rows: int
    num_cols: int
    first_y: Optional[float] = None
    last_y: Optional[float] = None

    table_markdown: str = ""
    table_struct: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.table_struct:
            self.table_struct = self._build_struct()
        if not self.table_markdown:
            self.table_markdown = self._build_markdown()

    @property
    def headers(self) -> List[str]:
        return self.table_struct.get("headers", [])

    @property
    def data_rows(self) -> List[List[str]]:
        return self.table_struct.get("rows", [])[1:]

    def _build_struct(self) -> Dict[str, Any]:
        """Build structured representation."""
        grid = [["" for _ in range(self.num_cols)] for _ in range(self.num_rows)]

        for cell in self.cells:
            if 0 <= cell.row < self.num_rows and 0 <= cell.col < self.num_cols:
                grid[cell.row][cell.col] = cell.text

        return {
            "rows": grid,
            "num_rows": self.num_rows,
            "num_cols": self.num_cols,
            "headers": grid[0] if self.num_rows > 0 else []
        }

    def _build_markdown(self) -> str:
        """Build GitHub-flavored Markdown table representation."""
        if self.num_rows == 0 or self.num_cols == 0:
            return ""

        grid = self.table_struct.get("rows", [])
        if not grid:
            return ""

        lines = []
        lines.append("| " + " | ".join(self._escape_markdown(c) for c in grid[0]) + " |")
        lines.append("| " + " | ".join("---" for _ in range(self.num_cols)) + " |")
        for row in grid[1:]:
            lines.append("| " + " | ".join(self._escape_markdown(c) for c in row) + " |")

        return "\n".join(lines)

    def _escape_markdown(self, text: str) -> str:
        """Escape characters that would break a Markdown table row."""
        return str(text).replace('|', '\\|').replace('\n', ' ')

    def to_dict(self) -> Dict[str, Any]:
        return {
            "num_rows": self.num_rows,
            "num_cols": self.num_cols,
            "first_y": self.first_y,
            "last_y": self.last_y,
            "cells": [c.to_dict() for c in self.cells],
            "markdown": self.table_markdown,
            "struct": self.table_struct
        }


# ============================================================================
# Category / Details Tables
# ============================================================================

def split_category(text: str) -> Tuple[str, str]:
    """
    Split a row's text at the first colon.

    Returns:
        (category, details); category is empty when there is no colon
    """
    if ":" not in text:
        return "", text.strip()
    category, details = text.split(":", 1)
    return category.strip(), details.strip()


def build_category_table(
    rows: List[str],
    headers: Tuple[str, str] = DEFAULT_HEADERS,
    first_y: Optional[float] = None,
    last_y: Optional[float] = None
) -> TableResult:
    """Build a two-column category/details table from row texts."""
    cells = [
        Cell(text=headers[0], row=0, col=0, is_header=True),
        Cell(text=headers[1], row=0, col=1, is_header=True),
    ]
    for i, text in enumerate(rows, 1):
        category, details = split_category(text)
        cells.append(Cell(text=category, row=i, col=0))
        cells.append(Cell(text=details, row=i, col=1))

    return TableResult(
        cells=cells,
        num_rows=len(rows) + 1,
        num_cols=2,
        first_y=first_y,
        last_y=last_y
    )


# ============================================================================
# Table Buffer
# ============================================================================

class BufferState(Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"


class TableBuffer:
    """
    Accumulates consecutive table-row lines into one logical table.

    Owned by a single page's assembly; never shared across pages.
    """

    def __init__(self, headers: Tuple[str, str] = DEFAULT_HEADERS):
        self.headers = headers
        self.rows: List[Line] = []
        self.first_y: Optional[float] = None
        self.last_y: Optional[float] = None

    @property
    def state(self) -> BufferState:
        return BufferState.ACCUMULATING if self.rows else BufferState.IDLE

    def __len__(self) -> int:
        return len(self.rows)

    def add(self, line: Line):
        """Absorb a table-row line."""
        if not self.rows:
            self.first_y = line.y
        self.rows.append(line)
        self.last_y = line.y

    def flush(self) -> Optional[TableResult]:
        """
        Emit the buffered rows as a table and reset to idle.

        Returns:
            TableResult, or None when the buffer was empty
        """
        if not self.rows:
            return None

        table = build_category_table(
            [line.text for line in self.rows],
            headers=self.headers,
            first_y=self.first_y,
            last_y=self.last_y
        )
        logger.debug(f"Flushed table with {len(self.rows)} rows")

        self.rows = []
        self.first_y = None
        self.last_y = None
        return table
