"""
Tests for table accumulation module.
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pagerecon.utils.layout import GlyphRun, Line
from pagerecon.utils.tables import (
    TableBuffer,
    TableResult,
    BufferState,
    Cell,
    split_category,
    build_category_table
)


def make_line(text, y):
    return Line(y=y, runs=[GlyphRun.at(text, 50, y)])


class TestTableResult:
    """Tests for TableResult data class."""

    def test_empty_table(self):
        result = TableResult(cells=[], num_rows=0, num_cols=0)
        assert result.table_markdown == ""
        assert result.table_struct["rows"] == []
        assert result.headers == []

    def test_simple_table(self):
        cells = [
            Cell(text="A", row=0, col=0, is_header=True),
            Cell(text="B", row=0, col=1, is_header=True),
            Cell(text="1", row=1, col=0),
            Cell(text="2", row=1, col=1),
        ]
        result = TableResult(cells=cells, num_rows=2, num_cols=2)

        assert "| A | B |" in result.table_markdown
        assert "| 1 | 2 |" in result.table_markdown
        assert result.headers == ["A", "B"]
        assert result.data_rows == [["1", "2"]]
        assert set(result.to_dict()) == {
            "num_rows", "num_cols", "first_y", "last_y", "cells", "markdown", "struct"
        }

    def test_pipe_is_escaped(self):
        table = build_category_table(["Tools: a | b"])
        assert "a \\| b" in table.table_markdown


class TestSplitCategory:
    """Tests for splitting row text at the first colon."""

    def test_first_colon(self):
        assert split_category("Time: 10:30") == ("Time", "10:30")

    def test_no_colon(self):
        assert split_category("  Go, Rust ") == ("", "Go, Rust")


class TestTableBuffer:
    """Tests for the row accumulator."""

    @pytest.fixture
    def buffer(self):
        return TableBuffer()

    def test_round_trip(self, buffer):
        buffer.add(make_line("Programming Languages: Go, Rust", 400))
        buffer.add(make_line("Frameworks: React", 385))
        table = buffer.flush()

        assert table.headers == ["Category", "Details"]
        assert table.data_rows == [
            ["Programming Languages", "Go, Rust"],
            ["Frameworks", "React"],
        ]
        assert "| Programming Languages | Go, Rust |" in table.table_markdown
        assert "| Frameworks | React |" in table.table_markdown
        assert table.first_y == 400
        assert table.last_y == 385

    def test_flush_resets(self, buffer):
        assert buffer.state == BufferState.IDLE
        buffer.add(make_line("Tools: Git", 300))
        assert buffer.state == BufferState.ACCUMULATING
        assert len(buffer) == 1

        assert buffer.flush() is not None
        assert buffer.state == BufferState.IDLE
        assert buffer.flush() is None
        assert buffer.first_y is None

    def test_custom_headers(self):
        buffer = TableBuffer(headers=("Skill", "Level"))
        buffer.add(make_line("Go: expert", 10))
        assert buffer.flush().headers == ["Skill", "Level"]
