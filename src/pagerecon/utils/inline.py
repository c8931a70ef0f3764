"""
Inline rendering for page reconstruction.

Turns the left-to-right glyph runs of one line into inline nodes:
- TextSpan: styled text (bold/italic inferred from the font name)
- Spacer: horizontal space reconstructed from the gap between runs
"""

import html
import logging
from dataclasses import dataclass
from typing import List, Dict, Any, Sequence, Union

from .layout import GlyphRun
from .fonts import is_bold_font, is_italic_font, BOLD_MARKERS, ITALIC_MARKERS

logger = logging.getLogger(__name__)


# ============================================================================
# Inline Nodes
# ============================================================================

@dataclass
class TextSpan:
    """A run of styled text."""
    text: str
    font_size: float
    bold: bool = False
    italic: bool = False

    @property
    def font_weight(self) -> int:
        return 700 if self.bold else 400

    def to_html(self) -> str:
        content = html.escape(self.text, quote=False)
        if self.bold:
            content = f"<strong>{content}</strong>"
        if self.italic:
            content = f"<em>{content}</em>"
        return (
            f'<span style="font-size:{_fmt(self.font_size)}px;'
            f'font-weight:{self.font_weight}">{content}</span>'
        )

    def to_markdown(self) -> str:
        text = self.text
        if self.bold:
            text = f"**{text}**"
        if self.italic:
            text = f"*{text}*"
        return text

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "text",
            "text": self.text,
            "font_size": self.font_size,
            "bold": self.bold,
            "italic": self.italic
        }


@dataclass
class Spacer:
    """Explicit horizontal space between two runs."""
    width: float

    def to_html(self) -> str:
        return (
            f'<span class="pdf-gap" style="display:inline-block;'
            f'width:{_fmt(self.width)}px"></span>'
        )

    def to_markdown(self) -> str:
        return " "

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "spacer", "width": self.width}


InlineNode = Union[TextSpan, Spacer]


def _fmt(value: float) -> str:
    """Format a CSS length without a trailing .0."""
    rounded = round(value, 2)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:g}"


# ============================================================================
# Inline Renderer
# ============================================================================

class InlineRenderer:
    """Converts a line's glyph runs into inline nodes."""

    def __init__(
        self,
        spacer_threshold: float = 2.0,
        spacer_cap: float = 20.0,
        min_font_size: float = 10.0,
        bold_markers: Sequence[str] = BOLD_MARKERS,
        italic_markers: Sequence[str] = ITALIC_MARKERS
    ):
        self.spacer_threshold = spacer_threshold
        self.spacer_cap = spacer_cap
        self.min_font_size = min_font_size
        self.bold_markers = tuple(bold_markers)
        self.italic_markers = tuple(italic_markers)

    @classmethod
    def from_config(cls, config) -> 'InlineRenderer':
        return cls(
            spacer_threshold=config.spacer_threshold,
            spacer_cap=config.spacer_cap,
            min_font_size=config.min_font_size,
            bold_markers=config.bold_markers,
            italic_markers=config.italic_markers
        )

    def spacer_for_gap(self, gap: float) -> Union[Spacer, None]:
        """Spacer for a horizontal gap, or None when natural spacing suffices."""
        if gap > self.spacer_threshold:
            return Spacer(width=min(gap, self.spacer_cap))
        return None

    def render(self, runs: Sequence[GlyphRun]) -> List[InlineNode]:
        """
        Build inline nodes for one line.

        Args:
            runs: Glyph runs already sorted left-to-right

        Returns:
            Ordered inline nodes; blank runs are skipped
        """
        nodes: List[InlineNode] = []
        previous = None

        for run in runs:
            text = run.text.strip()
            if not text:
                # Blank runs still advance the pen for the next gap
                previous = run
                continue

            if previous is not None and nodes:
                spacer = self.spacer_for_gap(run.origin_x - previous.right)
                if spacer is not None:
                    nodes.append(spacer)

            nodes.append(TextSpan(
                text=text,
                font_size=max(self.min_font_size, run.font_size),
                bold=is_bold_font(run.font_name, self.bold_markers),
                italic=is_italic_font(run.font_name, self.italic_markers)
            ))
            previous = run

        return nodes


def inlines_to_html(nodes: Sequence[InlineNode]) -> str:
    """Serialize inline nodes; adjacent text spans are separated by a space."""
    parts = []
    for i, node in enumerate(nodes):
        if i > 0 and isinstance(node, TextSpan) and isinstance(nodes[i - 1], TextSpan):
            parts.append(" ")
        parts.append(node.to_html())
    return "".join(parts)


def inlines_to_markdown(nodes: Sequence[InlineNode]) -> str:
    parts = []
    for i, node in enumerate(nodes):
        if i > 0 and isinstance(node, TextSpan) and isinstance(nodes[i - 1], TextSpan):
            parts.append(" ")
        parts.append(node.to_markdown())
    return "".join(parts).strip()
