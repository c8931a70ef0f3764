"""
Line layout module for page reconstruction.

Provides:
- GlyphRun: one positioned fragment of extracted text
- Line: glyph runs sharing a baseline
- Line grouping by Y proximity (first-fit, no rebalancing)
- Reading order (top-to-bottom, left-to-right)
- Page baseline font size
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Dict, Any, Iterable, Sequence
import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_Y_TOLERANCE = 2.0
DEFAULT_FONT_SIZE = 12.0


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class GlyphRun:
    """
    A fragment of shaped text as reported by the glyph source.

    The transform is the PDF text matrix ``(a, b, c, d, e, f)``; ``e``/``f``
    are the page-space origin with Y increasing upward.
    """
    text: str
    transform: Tuple[float, float, float, float, float, float]
    font_name: str = ""
    width: float = 0.0
    height: float = 0.0

    @property
    def origin_x(self) -> float:
        return self.transform[4]

    @property
    def origin_y(self) -> float:
        return self.transform[5]

    @property
    def font_size(self) -> float:
        return abs(self.transform[3])

    @property
    def right(self) -> float:
        return self.origin_x + self.width

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()

    @classmethod
    def at(
        cls,
        text: str,
        x: float,
        y: float,
        font_size: float = DEFAULT_FONT_SIZE,
        font_name: str = "",
        width: Optional[float] = None
    ) -> 'GlyphRun':
        """Build an unrotated run positioned at ``(x, y)``."""
        if width is None:
            width = len(text) * font_size * 0.5
        return cls(
            text=text,
            transform=(font_size, 0.0, 0.0, font_size, float(x), float(y)),
            font_name=font_name,
            width=float(width),
            height=float(font_size)
        )

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> 'GlyphRun':
        """
        Build a run from a loosely-typed text item record.

        Accepts the pdf.js ``getTextContent`` item shape:
        ``{"str", "transform", "fontName", "width", "height"}``.

        Raises:
            ValueError: If the transform is missing or malformed
        """
        transform = item.get("transform")
        if not isinstance(transform, (list, tuple)) or len(transform) < 6:
            raise ValueError(f"Text item has no 6-component transform: {transform!r}")
        try:
            matrix = tuple(float(v) for v in transform[:6])
        except (TypeError, ValueError):
            raise ValueError(f"Text item transform is not numeric: {transform!r}")

        text = item.get("str", item.get("text", "")) or ""
        return cls(
            text=str(text),
            transform=matrix,
            font_name=str(item.get("fontName", item.get("font_name", "")) or ""),
            width=float(item.get("width", 0.0) or 0.0),
            height=float(item.get("height", 0.0) or 0.0)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "transform": list(self.transform),
            "font_name": self.font_name,
            "width": self.width,
            "height": self.height
        }


@dataclass
class Line:
    """A set of glyph runs judged to share a baseline."""
    y: float
    runs: List[GlyphRun] = field(default_factory=list)

    @property
    def text(self) -> str:
        parts = [r.text.strip() for r in self.runs]
        return " ".join(p for p in parts if p)

    @property
    def is_blank(self) -> bool:
        return all(r.is_blank for r in self.runs)

    @property
    def first_run(self) -> Optional[GlyphRun]:
        for run in self.runs:
            if not run.is_blank:
                return run
        return self.runs[0] if self.runs else None

    def gaps(self) -> List[float]:
        """Horizontal gaps between consecutive non-blank runs."""
        visible = [r for r in self.runs if not r.is_blank]
        return [
            cur.origin_x - prev.right
            for prev, cur in zip(visible, visible[1:])
        ]

    def accepts(self, run: GlyphRun, tolerance: float) -> bool:
        return abs(run.origin_y - self.y) <= tolerance

    def to_dict(self) -> Dict[str, Any]:
        return {
            "y": self.y,
            "text": self.text,
            "runs": [r.to_dict() for r in self.runs]
        }


# ============================================================================
# Line Grouping
# ============================================================================

def group_lines(
    runs: Iterable[GlyphRun],
    tolerance: float = DEFAULT_Y_TOLERANCE
) -> List[Line]:
    """
    Cluster glyph runs into horizontal lines.

    Each run joins the first existing line whose anchor Y is within
    ``tolerance``; otherwise it opens a new line anchored at its own Y.
    Lines are never merged or split afterwards.

    Args:
        runs: Glyph runs in source order
        tolerance: Maximum vertical distance from a line's anchor

    Returns:
        Lines sorted top-to-bottom, runs in each sorted left-to-right
    """
    lines: List[Line] = []

    for run in runs:
        target = None
        for line in lines:
            if line.accepts(run, tolerance):
                target = line
                break
        if target is None:
            target = Line(y=run.origin_y)
            lines.append(target)
        target.runs.append(run)

    lines.sort(key=lambda l: -l.y)
    for line in lines:
        line.runs.sort(key=lambda r: r.origin_x)

    logger.debug(f"Grouped runs into {len(lines)} lines (tolerance={tolerance})")
    return lines


def baseline_font_size(
    runs: Sequence[GlyphRun],
    default: float = DEFAULT_FONT_SIZE
) -> float:
    """Median font size across a page's runs."""
    sizes = [r.font_size for r in runs]
    if not sizes:
        return default
    return float(np.median(sizes))
