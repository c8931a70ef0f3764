"""
Export module for page reconstruction.

Provides:
- HTML export (sentinel-marked fragment and standalone styled page)
- Markdown export
- Sentinel segment splitting and table-aware post-processing
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, List, Union

from .assembler import Document, Page, TextBlock, TableBlock
from .classify import LineRole
from .inline import inlines_to_html, inlines_to_markdown

logger = logging.getLogger(__name__)

TABLE_START_MARKER = "<!--MD_TABLE_START-->"
TABLE_END_MARKER = "<!--MD_TABLE_END-->"


ROLE_TAGS = {
    LineRole.TITLE: "div",
    LineRole.CONTACT_LINE: "div",
    LineRole.SECTION_HEADING: "h2",
    LineRole.BODY: "p",
}


DOCUMENT_CSS = """
body { font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; color: #333; line-height: 1.4; }
.document-content { background: white; padding: 20px; max-width: 800px; margin: 0 auto; }
.pdf-content div { display: block; margin: 0; padding: 0; }
.pdf-content .pdf-title { text-align: center; font-weight: 700; font-size: 28px; margin: 6px 0 10px; }
.pdf-content .pdf-contact-line { text-align: center; color: #374151; font-size: 13px; margin-bottom: 12px; }
.pdf-content .section-header { background-color: #ebf8ff; border-left: 4px solid #4299e1; padding: 12px 16px; margin: 16px 0; font-weight: 600; font-size: 1.1em; color: #2b6cb0; }
.pdf-content span { display: inline; color: #000000; }
.md-table table { border-collapse: collapse; width: 100%; margin: 16px 0; border: 2px solid #333; font-size: 12px; }
.md-table td, .md-table th { border: 1px solid #333; padding: 8px 12px; text-align: left; vertical-align: top; }
.md-table th { background-color: #4a5568; color: white; font-weight: 600; text-align: center; }
.md-table tr:nth-child(even) td { background-color: #f8f9fa; }
.docx-content .docx-paragraph { margin-bottom: 1em; line-height: 1.6; text-align: justify; }
.docx-content .docx-table { border-collapse: collapse; width: 100%; margin: 20px 0; border: 2px solid #2d3748; }
.docx-content .docx-table-cell, .docx-content .docx-table-header { border: 1px solid #cbd5e0; padding: 12px 16px; text-align: left; vertical-align: top; }
.docx-content .docx-table-header { background: #2d3748; color: white; font-weight: 600; }
.docx-content .contact-info { background-color: #e6fffa; border-left: 4px solid #38b2ac; padding: 12px 16px; margin: 16px 0; }
.docx-content .section-header { background-color: #ebf8ff; border-left: 4px solid #4299e1; padding: 12px 16px; margin: 16px 0; font-weight: 600; color: #2b6cb0; }
"""


# ============================================================================
# Sentinel Segments
# ============================================================================

@dataclass
class Segment:
    """A region of converted output: literal HTML or a Markdown table."""
    kind: str  # "html" or "md"
    content: str
    key: str = ""


def split_segments(
    html: str,
    start_marker: str = TABLE_START_MARKER,
    end_marker: str = TABLE_END_MARKER
) -> List[Segment]:
    """
    Split converted output into HTML and Markdown-table segments.

    A start marker without a matching end marker consumes the remainder.
    """
    if not html:
        return []
    if start_marker not in html:
        return [Segment(kind="html", content=html, key="html-0")]

    segments = []
    remaining = html
    index = 0
    while remaining:
        s_idx = remaining.find(start_marker)
        if s_idx == -1:
            segments.append(Segment("html", remaining, f"html-{index}"))
            index += 1
            break
        if s_idx > 0:
            segments.append(Segment("html", remaining[:s_idx], f"html-{index}"))
            index += 1

        after_start = remaining[s_idx + len(start_marker):]
        e_idx = after_start.find(end_marker)
        md_block = after_start if e_idx == -1 else after_start[:e_idx]
        segments.append(Segment("md", md_block.strip(), f"md-{index}"))
        index += 1
        remaining = "" if e_idx == -1 else after_start[e_idx + len(end_marker):]

    return segments


def render_segments(
    html: str,
    start_marker: str = TABLE_START_MARKER,
    end_marker: str = TABLE_END_MARKER
) -> str:
    """
    Replace Markdown-table regions with rendered HTML tables.

    HTML segments pass through verbatim; Markdown segments go through the
    ``markdown`` library with the ``tables`` extension.
    """
    import markdown as md_lib

    parts = []
    for segment in split_segments(html, start_marker, end_marker):
        if segment.kind == "md":
            rendered = md_lib.markdown(segment.content, extensions=["tables"])
            parts.append(f'<div class="md-table">{rendered}</div>')
        else:
            parts.append(segment.content)
    return "".join(parts)


# ============================================================================
# HTML Exporter
# ============================================================================

class HtmlExporter:
    """Serialize a Document tree to HTML."""

    def __init__(
        self,
        container_class: str = "pdf-content",
        page_separator: str = "<br/><br/>",
        table_start_marker: str = TABLE_START_MARKER,
        table_end_marker: str = TABLE_END_MARKER
    ):
        self.container_class = container_class
        self.page_separator = page_separator
        self.table_start_marker = table_start_marker
        self.table_end_marker = table_end_marker

    @classmethod
    def from_config(cls, config) -> 'HtmlExporter':
        return cls(
            container_class=config.container_class,
            page_separator=config.page_separator,
            table_start_marker=config.table_start_marker,
            table_end_marker=config.table_end_marker
        )

    def to_html(self, document: Document) -> str:
        """
        Build the sentinel-marked HTML string for a document.

        Pages are joined with the page separator and the whole result is
        wrapped in the content container.
        """
        pages = [self.page_to_html(page) for page in document.pages]
        body = self.page_separator.join(pages)
        return f'<div class="{self.container_class}">{body}</div>'

    def page_to_html(self, page: Page) -> str:
        return "".join(self._block_to_html(block) for block in page.blocks)

    def _block_to_html(self, block: Union[TextBlock, TableBlock]) -> str:
        if isinstance(block, TableBlock):
            return (
                f"{self.table_start_marker}\n"
                f"{block.table.table_markdown}\n"
                f"{self.table_end_marker}"
            )

        tag = ROLE_TAGS.get(block.role, "p")
        if block.role == LineRole.SECTION_HEADING and block.level:
            tag = f"h{block.level}"
        return f'<{tag} class="{block.css_class}">{inlines_to_html(block.inlines)}</{tag}>'

    def export(
        self,
        document: Document,
        output_path: Union[str, Path],
        standalone: bool = True
    ) -> Path:
        """
        Export document to an HTML file.

        Args:
            document: Document object
            output_path: Output file path
            standalone: Render table segments and wrap in a styled page

        Returns:
            Path to the generated HTML file
        """
        content = self.to_html(document)
        if standalone:
            content = standalone_page(
                content,
                title=document.title or document.source_file,
                start_marker=self.table_start_marker,
                end_marker=self.table_end_marker
            )
        return _write_text(output_path, content, "HTML")


def standalone_page(
    converted_html: str,
    title: str = "Document",
    start_marker: str = TABLE_START_MARKER,
    end_marker: str = TABLE_END_MARKER
) -> str:
    """Wrap converted output in a styled HTML page with tables rendered."""
    import html as html_lib

    body = render_segments(converted_html, start_marker, end_marker)
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{html_lib.escape(title or "Document")}</title>
    <style>{DOCUMENT_CSS}</style>
</head>
<body>
    <div class="document-content">
{body}
    </div>
</body>
</html>
"""


# ============================================================================
# Markdown Exporter
# ============================================================================

class MarkdownExporter:
    """Export document to Markdown format."""

    def __init__(self, include_page_breaks: bool = True):
        self.include_page_breaks = include_page_breaks

    def export(
        self,
        document: Document,
        output_path: Union[str, Path]
    ) -> Path:
        """Export document to a Markdown file."""
        return _write_text(output_path, self.to_markdown(document), "Markdown")

    def to_markdown(self, document: Document) -> str:
        """Generate Markdown from document structure."""
        lines = []

        for page in document.pages:
            if self.include_page_breaks and len(document.pages) > 1:
                lines.append("")
                lines.append("---")
                lines.append(f"*Page {page.page_number}*")
                lines.append("")

            for block in page.blocks:
                md = self._block_to_markdown(block)
                if md:
                    lines.append(md)
                    lines.append("")

        return "\n".join(lines).strip() + "\n"

    def _block_to_markdown(self, block: Union[TextBlock, TableBlock]) -> str:
        if isinstance(block, TableBlock):
            return block.table.table_markdown

        text = inlines_to_markdown(block.inlines)
        if not text:
            return ""

        if block.role == LineRole.TITLE:
            return f"# {block.text}"
        elif block.role == LineRole.SECTION_HEADING:
            return f"{'#' * (block.level or 2)} {block.text}"
        elif block.role == LineRole.CONTACT_LINE:
            return f"*{block.text}*"
        return text


# ============================================================================
# Convenience Exporter
# ============================================================================

def _write_text(output_path: Union[str, Path], content: str, label: str) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(content)

    logger.info(f"Exported {label} to: {output_path}")
    return output_path


class DocumentExporter:
    """Convenience class for exporting to multiple formats."""

    def __init__(
        self,
        output_dir: Union[str, Path],
        base_name: str = "document",
        html_exporter: Optional[HtmlExporter] = None
    ):
        self.output_dir = Path(output_dir)
        self.base_name = base_name
        self.html_exporter = html_exporter or HtmlExporter()
        self.markdown_exporter = MarkdownExporter()

    def export(
        self,
        document: Document,
        formats: List[str]
    ) -> Dict[str, Path]:
        """
        Export a document to the requested formats.

        Args:
            document: Document object
            formats: Any of "html", "fragment", "markdown", "json"

        Returns:
            Mapping of format name to written path
        """
        from .io import save_json

        results = {}
        base = self.output_dir / self.base_name

        if "html" in formats:
            results["html"] = self.html_exporter.export(document, base.with_suffix(".html"))

        if "fragment" in formats:
            results["fragment"] = self.html_exporter.export(
                document, self.output_dir / f"{self.base_name}.fragment.html", standalone=False
            )

        if "markdown" in formats:
            results["markdown"] = self.markdown_exporter.export(document, base.with_suffix(".md"))

        if "json" in formats:
            results["json"] = save_json(document.to_dict(), base.with_suffix(".json"))
            logger.info(f"Exported JSON to: {results['json']}")

        return results
