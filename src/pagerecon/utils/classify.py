"""
Line role classification for page reconstruction.

Every line on a page gets exactly one role from an ordered rule list; the
first rule that matches wins:

1. title            capitalized-words shape near the top of the page
2. contact line     e-mail, phone-like digit run or network name near the top
3. section heading  display-size first run (level 1), or section vocabulary or
                    a large bold first run (level 2)
4. table row        "Category:" prefix, or column-like horizontal spread
5. body             everything else
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Pattern, Sequence, Tuple

from ..config import ClassifierConfig
from .layout import Line
from .fonts import is_bold_font

logger = logging.getLogger(__name__)


# ============================================================================
# Data Classes and Enums
# ============================================================================

class LineRole(Enum):
    """Semantic role of a reconstructed line."""
    TITLE = "title"
    CONTACT_LINE = "contact_line"
    SECTION_HEADING = "section_heading"
    TABLE_ROW = "table_row"
    BODY = "body"


ROLE_CSS_CLASSES = {
    LineRole.TITLE: "pdf-title",
    LineRole.CONTACT_LINE: "pdf-contact-line",
    LineRole.SECTION_HEADING: "section-header",
    LineRole.TABLE_ROW: "pdf-table-row",
    LineRole.BODY: "pdf-paragraph",
}


@dataclass
class LineContext:
    """Everything a rule may look at for one line."""
    line: Line
    index: int
    baseline_font_size: float

    @property
    def text(self) -> str:
        return self.line.text


@dataclass
class ClassifiedLine:
    """A line tagged with its role."""
    line: Line
    index: int
    role: LineRole
    css_class: str
    rule: str = ""
    level: int = 0

    @property
    def text(self) -> str:
        return self.line.text

    @property
    def is_table_row(self) -> bool:
        return self.role == LineRole.TABLE_ROW


@dataclass(frozen=True)
class Rule:
    """A named predicate that assigns a role when it matches."""
    name: str
    role: LineRole
    predicate: Callable[[LineContext], bool]
    level: int = 0

    def matches(self, ctx: LineContext) -> bool:
        return self.predicate(ctx)


# ============================================================================
# Patterns
# ============================================================================

TITLE_PATTERN = re.compile(r"^[A-Z][\w.'\-]*(?:\s+[A-Z][\w.'\-]*){1,3}$")


def _phone_pattern(min_digits: int) -> Pattern:
    # At most two separator characters between digits, so "2019 - 2023" is not a phone
    return re.compile(r"\+?\d(?:[\s\-.()]{0,2}\d){%d,}" % (min_digits - 1))


def _keyword_pattern(words: Sequence[str]) -> Pattern:
    # Longest first so "Frameworks & Libraries" beats "Frameworks"
    ordered = sorted(words, key=len, reverse=True)
    return re.compile("|".join(re.escape(w) for w in ordered), re.IGNORECASE)


def _label_pattern(labels: Sequence[str]) -> Pattern:
    ordered = sorted(labels, key=len, reverse=True)
    alternation = "|".join(re.escape(l) for l in ordered)
    return re.compile(r"^\s*(?:%s)\s*:" % alternation, re.IGNORECASE)


# ============================================================================
# Line Classifier
# ============================================================================

class LineClassifier:
    """
    Ordered rule matcher assigning a LineRole to each line.

    Classification never raises; ambiguity is resolved by rule order.
    """

    def __init__(
        self,
        title_max_index: int = 2,
        contact_max_index: int = 6,
        min_phone_digits: int = 7,
        heading_size_ratio: float = 1.2,
        display_size_ratio: float = 1.5,
        heading_max_words: Optional[int] = None,
        column_gap_threshold: float = 40.0,
        network_tokens: Optional[Sequence[str]] = None,
        section_keywords: Optional[Sequence[str]] = None,
        table_labels: Optional[Sequence[str]] = None
    ):
        defaults = ClassifierConfig()

        self.title_max_index = title_max_index
        self.contact_max_index = contact_max_index
        self.heading_size_ratio = heading_size_ratio
        self.display_size_ratio = display_size_ratio
        self.heading_max_words = heading_max_words
        self.column_gap_threshold = column_gap_threshold

        self._phone = _phone_pattern(min_phone_digits)
        self._network = _keyword_pattern(network_tokens or defaults.network_tokens)
        self._sections = _keyword_pattern(section_keywords or defaults.section_keywords)
        self._labels = _label_pattern(table_labels or defaults.table_labels)

        self.rules: Tuple[Rule, ...] = (
            Rule("title", LineRole.TITLE, self._is_title),
            Rule("contact", LineRole.CONTACT_LINE, self._is_contact),
            Rule("display_heading", LineRole.SECTION_HEADING, self._is_display_heading, level=1),
            Rule("section_heading", LineRole.SECTION_HEADING, self._is_heading, level=2),
            Rule("table_row", LineRole.TABLE_ROW, self._is_table_row),
        )

    @classmethod
    def from_config(cls, config) -> 'LineClassifier':
        """Build a classifier from a ClassifierConfig."""
        return cls(
            title_max_index=config.title_max_index,
            contact_max_index=config.contact_max_index,
            min_phone_digits=config.min_phone_digits,
            heading_size_ratio=config.heading_size_ratio,
            display_size_ratio=config.display_size_ratio,
            heading_max_words=config.heading_max_words,
            column_gap_threshold=config.column_gap_threshold,
            network_tokens=config.network_tokens,
            section_keywords=config.section_keywords,
            table_labels=config.table_labels
        )

    def classify(
        self,
        line: Line,
        index: int,
        baseline_font_size: float
    ) -> ClassifiedLine:
        """
        Assign a role to one line.

        Args:
            line: The line to classify
            index: 0-based position among the page's non-blank lines
            baseline_font_size: Median font size of the page

        Returns:
            ClassifiedLine with role, CSS hint and matching rule name
        """
        ctx = LineContext(line=line, index=index, baseline_font_size=baseline_font_size)

        for rule in self.rules:
            if rule.matches(ctx):
                logger.debug(f"Line {index} '{ctx.text[:40]}' -> {rule.role.value} ({rule.name})")
                return ClassifiedLine(
                    line=line,
                    index=index,
                    role=rule.role,
                    css_class=ROLE_CSS_CLASSES[rule.role],
                    rule=rule.name,
                    level=rule.level
                )

        return ClassifiedLine(
            line=line,
            index=index,
            role=LineRole.BODY,
            css_class=ROLE_CSS_CLASSES[LineRole.BODY],
            rule="body"
        )

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _is_title(self, ctx: LineContext) -> bool:
        return ctx.index <= self.title_max_index and bool(TITLE_PATTERN.match(ctx.text))

    def _is_contact(self, ctx: LineContext) -> bool:
        if ctx.index > self.contact_max_index:
            return False
        return self.matches_contact(ctx.text)

    def _is_display_heading(self, ctx: LineContext) -> bool:
        first = ctx.line.first_run
        if first is None:
            return False
        return first.font_size > ctx.baseline_font_size * self.display_size_ratio

    def _is_heading(self, ctx: LineContext) -> bool:
        if self.matches_heading_text(ctx.text):
            return True

        first = ctx.line.first_run
        if first is None:
            return False
        return (
            first.font_size > ctx.baseline_font_size * self.heading_size_ratio
            and is_bold_font(first.font_name)
        )

    def _is_table_row(self, ctx: LineContext) -> bool:
        if self.matches_label(ctx.text):
            return True
        return any(g > self.column_gap_threshold for g in ctx.line.gaps())

    def matches_label(self, text: str) -> bool:
        """True when text starts with a known ``Category:`` label."""
        return bool(self._labels.match(text))

    def matches_section(self, text: str) -> bool:
        """True when text contains a section vocabulary word."""
        return bool(self._sections.search(text))

    def matches_contact(self, text: str) -> bool:
        """Contact test without the position constraint."""
        return "@" in text or bool(self._phone.search(text)) or bool(self._network.search(text))


    def matches_heading_text(self, text: str) -> bool:
        """
        Keyword heading test.

        Lines with a colon are left to the table-row rule so that
        ``Soft Skills: ...`` stays a table row.
        """
        if ":" in text:
            return False
        if self.heading_max_words is not None and len(text.split()) > self.heading_max_words:
            return False
        return self.matches_section(text)
