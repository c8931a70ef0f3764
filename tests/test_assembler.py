"""
Tests for page and document assembly.
"""

import asyncio
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pagerecon.utils.layout import GlyphRun
from pagerecon.utils.classify import LineRole
from pagerecon.utils.assembler import PageAssembler, DocumentAssembler, TableBlock
from pagerecon.utils.pdf_source import MemoryDocument
from pagerecon.exceptions import PageParseError


@pytest.fixture
def resume_runs():
    """A small resume page, top of page is the largest Y."""
    return [
        GlyphRun.at("Jane Doe", 200, 760, font_size=20, font_name="Helvetica-Bold"),
        GlyphRun.at("jane@example.com", 180, 740),
        GlyphRun.at("+1 555 123 4567", 190, 725),
        GlyphRun.at("Technical Skills", 50, 700, font_size=14, font_name="Helvetica-Bold"),
        GlyphRun.at("Programming Languages: Go, Rust", 50, 680),
        GlyphRun.at("Frameworks: React", 50, 665),
        GlyphRun.at("Worked on distributed systems", 50, 640),
    ]


class TestPageAssembler:
    """Tests for the per-page pipeline."""

    @pytest.fixture
    def assembler(self):
        return PageAssembler()

    def test_resume_page(self, assembler, resume_runs):
        page = assembler.process_page(resume_runs, 1)
        kinds = [
            "table" if isinstance(b, TableBlock) else b.role for b in page.blocks
        ]
        assert kinds == [
            LineRole.TITLE,
            LineRole.CONTACT_LINE,
            LineRole.CONTACT_LINE,
            LineRole.SECTION_HEADING,
            "table",
            LineRole.BODY,
        ]

        table = page.table_blocks[0].table
        assert len(table.data_rows) == 2
        assert table.data_rows[0] == ["Programming Languages", "Go, Rust"]
        assert table.data_rows[1] == ["Frameworks", "React"]

    def test_end_of_page_flush(self, assembler):
        runs = [
            GlyphRun.at("Some paragraph text here", 50, 700),
            GlyphRun.at("Tools: Git", 50, 680),
            GlyphRun.at("Databases: Postgres", 50, 665),
        ]
        page = assembler.process_page(runs, 1)
        assert isinstance(page.blocks[-1], TableBlock)
        assert len(page.blocks[-1].table.data_rows) == 2

    def test_blank_lines_are_elided(self, assembler):
        runs = [
            GlyphRun.at("   ", 50, 720),
            GlyphRun.at("Jane Doe", 50, 700),
        ]
        page = assembler.process_page(runs, 1)
        assert page.blank_lines == 1
        assert len(page.blocks) == 1
        # The blank line does not consume index 0
        assert page.blocks[0].index == 0
        assert page.blocks[0].role == LineRole.TITLE

    def test_blank_line_does_not_split_table(self, assembler):
        runs = [
            GlyphRun.at("Paragraph first", 50, 720),
            GlyphRun.at("Tools: Git", 50, 700),
            GlyphRun.at("  ", 50, 690),
            GlyphRun.at("Databases: Postgres", 50, 680),
        ]
        page = assembler.process_page(runs, 1)
        assert len(page.table_blocks) == 1
        assert len(page.table_blocks[0].table.data_rows) == 2

    def test_empty_page(self, assembler):
        page = assembler.process_page([], 3)
        assert page.blocks == []
        assert page.baseline_font_size == 12


class TestDocumentAssembler:
    """Tests for multi-page orchestration."""

    def test_pages_in_order(self, resume_runs):
        source = MemoryDocument([
            resume_runs,
            [GlyphRun.at("Second page body text", 50, 700)],
        ])
        doc = asyncio.run(DocumentAssembler().process_document(source, "cv.pdf"))

        assert [p.page_number for p in doc.pages] == [1, 2]
        assert doc.title == "Jane Doe"
        assert doc.metrics.pages_processed == 2
        assert doc.metrics.tables_total == 1
        assert doc.metrics.table_rows_total == 2

    def test_to_dict(self, resume_runs):
        doc = asyncio.run(DocumentAssembler().process_document(MemoryDocument([resume_runs])))
        d = doc.to_dict()
        assert d["metadata"]["title"] == "Jane Doe"
        assert d["pages"][0]["blocks"][0]["type"] == "title"
        assert d["metrics"]["tables"]["total"] == 1

    def test_malformed_item_raises_page_error(self):
        with pytest.raises(PageParseError) as exc_info:
            MemoryDocument.from_items([
                [{"str": "ok", "transform": [12, 0, 0, 12, 0, 0]}],
                [{"str": "bad"}],
            ])
        assert exc_info.value.page_number == 2
