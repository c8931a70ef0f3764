"""
Tests for inline rendering module.
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pagerecon.utils.layout import GlyphRun
from pagerecon.utils.inline import (
    InlineRenderer,
    TextSpan,
    Spacer,
    inlines_to_html,
    inlines_to_markdown
)


class TestSpacerRule:
    """Tests for gap to spacer conversion."""

    @pytest.fixture
    def renderer(self):
        return InlineRenderer()

    @pytest.mark.parametrize("gap,expected", [
        (1.5, None),
        (2.0, None),
        (15, 15),
        (40, 20),
    ])
    def test_spacer_for_gap(self, renderer, gap, expected):
        spacer = renderer.spacer_for_gap(gap)
        if expected is None:
            assert spacer is None
        else:
            assert spacer.width == expected

    def test_render_inserts_spacer_between_runs(self, renderer):
        runs = [
            GlyphRun.at("Name", 0, 0, width=30),
            GlyphRun.at("2021", 45, 0, width=20),
        ]
        nodes = renderer.render(runs)
        assert [type(n) for n in nodes] == [TextSpan, Spacer, TextSpan]
        assert nodes[1].width == 15

    def test_no_spacer_for_small_gap(self, renderer):
        runs = [
            GlyphRun.at("Hello", 0, 0, width=30),
            GlyphRun.at("world", 31.5, 0, width=30),
        ]
        nodes = renderer.render(runs)
        assert all(isinstance(n, TextSpan) for n in nodes)

    def test_blank_runs_skipped(self, renderer):
        runs = [
            GlyphRun.at(" ", 0, 0, width=5),
            GlyphRun.at("Text", 10, 0, width=20),
        ]
        nodes = renderer.render(runs)
        assert len(nodes) == 1
        assert nodes[0].text == "Text"

    def test_gap_measured_from_blank_run(self, renderer):
        runs = [
            GlyphRun.at("A", 0, 0, width=10),
            GlyphRun.at(" ", 10, 0, width=30),
            GlyphRun.at("B", 45, 0, width=10),
        ]
        nodes = renderer.render(runs)
        assert [type(n) for n in nodes] == [TextSpan, Spacer, TextSpan]
        assert nodes[1].width == 5


class TestTextSpan:
    """Tests for styled text."""

    @pytest.fixture
    def renderer(self):
        return InlineRenderer()

    def test_bold_from_font_name(self, renderer):
        nodes = renderer.render([GlyphRun.at("Lead", 0, 0, font_name="ABCDEF+Calibri-Bold")])
        assert nodes[0].bold
        assert not nodes[0].italic
        assert "<strong>Lead</strong>" in nodes[0].to_html()
        assert "font-weight:700" in nodes[0].to_html()

    def test_italic_from_font_name(self, renderer):
        nodes = renderer.render([GlyphRun.at("note", 0, 0, font_name="Helvetica-Oblique")])
        assert nodes[0].italic
        assert "<em>note</em>" in nodes[0].to_html()

    def test_minimum_font_size(self, renderer):
        nodes = renderer.render([GlyphRun.at("tiny", 0, 0, font_size=6)])
        assert nodes[0].font_size == 10
        assert "font-size:10px" in nodes[0].to_html()

    def test_text_is_escaped(self):
        span = TextSpan(text="a < b & c", font_size=12)
        assert "a &lt; b &amp; c" in span.to_html()


class TestSerialization:
    """Tests for inline node serialization."""

    def test_html_spaces_adjacent_spans(self):
        nodes = [TextSpan("Hello", 12), TextSpan("world", 12)]
        html = inlines_to_html(nodes)
        assert "</span> <span" in html

    def test_spacer_html(self):
        html = inlines_to_html([TextSpan("a", 12), Spacer(15), TextSpan("b", 12)])
        assert 'class="pdf-gap"' in html
        assert "width:15px" in html

    def test_markdown(self):
        nodes = [TextSpan("Lead", 12, bold=True), TextSpan("dev", 12)]
        assert inlines_to_markdown(nodes) == "**Lead** dev"
