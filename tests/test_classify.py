"""
Tests for line role classification.
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pagerecon.utils.layout import GlyphRun, Line
from pagerecon.utils.classify import LineClassifier, LineRole


def make_line(text, y=500, font_size=12, font_name="Helvetica", x=50):
    return Line(y=y, runs=[GlyphRun.at(text, x, y, font_size=font_size, font_name=font_name)])


class TestLineClassifier:
    """Tests for the ordered rule list."""

    @pytest.fixture
    def classifier(self):
        return LineClassifier()

    def test_title_near_top(self, classifier):
        result = classifier.classify(make_line("Jane Doe"), 0, 12)
        assert result.role == LineRole.TITLE
        assert result.css_class == "pdf-title"

    def test_title_only_near_top(self, classifier):
        result = classifier.classify(make_line("Jane Doe"), 5, 12)
        assert result.role == LineRole.BODY

    def test_title_beats_heading(self, classifier):
        result = classifier.classify(make_line("Technical Skills"), 0, 12)
        assert result.role == LineRole.TITLE

    def test_heading_by_keyword(self, classifier):
        result = classifier.classify(make_line("Technical Skills"), 8, 12)
        assert result.role == LineRole.SECTION_HEADING
        assert result.css_class == "section-header"

    def test_heading_keyword_is_case_insensitive(self, classifier):
        result = classifier.classify(make_line("WORK EXPERIENCE"), 9, 12)
        assert result.role == LineRole.SECTION_HEADING

    def test_heading_by_font(self, classifier):
        line = make_line("about me and more", font_size=16, font_name="Arial-BoldMT")
        result = classifier.classify(line, 10, 11)
        assert result.role == LineRole.SECTION_HEADING

    def test_large_regular_font_is_not_heading(self, classifier):
        line = make_line("about me and more", font_size=16, font_name="ArialMT")
        assert classifier.classify(line, 10, 11).role == LineRole.BODY

    def test_long_keyword_line_is_heading(self, classifier):
        line = make_line("Led several Projects for enterprise clients at Acme")
        result = classifier.classify(line, 9, 12)
        assert result.role == LineRole.SECTION_HEADING
        assert result.level == 2

    def test_keyword_line_with_colon_is_table_row(self, classifier):
        result = classifier.classify(make_line("Soft Skills: Communication, Leadership"), 9, 12)
        assert result.role == LineRole.TABLE_ROW

    def test_word_cap_when_configured(self):
        classifier = LineClassifier(heading_max_words=5)
        line = make_line("Led several Projects for enterprise clients at Acme")
        assert classifier.classify(line, 9, 12).role == LineRole.BODY
        assert classifier.classify(make_line("Projects"), 9, 12).role == LineRole.SECTION_HEADING

    def test_display_size_is_level_one_heading(self, classifier):
        line = make_line("a quarterly overview", font_size=30, font_name="Helvetica")
        result = classifier.classify(line, 9, 10)
        assert result.role == LineRole.SECTION_HEADING
        assert result.css_class == "section-header"
        assert result.level == 1
        assert result.rule == "display_heading"

    def test_display_tier_needs_more_than_ratio(self, classifier):
        line = make_line("a quarterly overview", font_size=15, font_name="Helvetica")
        assert classifier.classify(line, 9, 10).role == LineRole.BODY

    def test_bold_heading_is_level_two(self, classifier):
        line = make_line("about me and more", font_size=16, font_name="Arial-BoldMT")
        assert classifier.classify(line, 10, 11).level == 2

    @pytest.mark.parametrize("text", [
        "jane@example.com",
        "+1 (555) 123-4567",
        "linkedin.com/in/jane | github.com/jane",
    ])
    def test_contact(self, classifier, text):
        result = classifier.classify(make_line(text), 1, 12)
        assert result.role == LineRole.CONTACT_LINE
        assert result.css_class == "pdf-contact-line"

    def test_contact_only_near_top(self, classifier):
        result = classifier.classify(make_line("jane@example.com"), 12, 12)
        assert result.role == LineRole.BODY

    def test_date_range_is_not_phone(self, classifier):
        result = classifier.classify(make_line("Intern, 2019 - 2023"), 3, 12)
        assert result.role == LineRole.BODY

    def test_table_row_by_label(self, classifier):
        result = classifier.classify(make_line("Programming Languages: Go, Rust"), 9, 12)
        assert result.role == LineRole.TABLE_ROW
        assert result.is_table_row

    def test_table_row_by_column_gap(self, classifier):
        line = Line(y=400, runs=[
            GlyphRun.at("Python", 50, 400, width=30),
            GlyphRun.at("5 years", 200, 400, width=30),
        ])
        assert classifier.classify(line, 9, 12).role == LineRole.TABLE_ROW

    def test_body_fallback(self, classifier):
        result = classifier.classify(make_line("built a thing that did stuff"), 9, 12)
        assert result.role == LineRole.BODY
        assert result.rule == "body"


class TestHelpers:
    """Tests for the public matching helpers."""

    @pytest.fixture
    def classifier(self):
        return LineClassifier(section_keywords=["Hobbies"], table_labels=["Stack"])

    def test_custom_vocabulary(self, classifier):
        assert classifier.matches_section("My Hobbies")
        assert not classifier.matches_section("Education")
        assert classifier.matches_label("stack: Django")
        assert not classifier.matches_label("Languages: Go")
