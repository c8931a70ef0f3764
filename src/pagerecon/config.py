"""
Configuration and constants for the page reconstruction pipeline.

This module provides:
- Line grouping, classification and inline rendering thresholds
- HTML output markers and container settings
- Remote fetch settings
- Environment overrides
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import logging

logger = logging.getLogger("pagerecon")


# ============================================================================
# Processing Configuration
# ============================================================================

@dataclass
class LineConfig:
    """Line grouping configuration."""
    y_tolerance: float = 2.0  # page units
    default_font_size: float = 12.0  # baseline when a page has no runs


@dataclass
class ClassifierConfig:
    """Line role classification configuration."""
    title_max_index: int = 2
    contact_max_index: int = 6
    min_phone_digits: int = 7
    heading_size_ratio: float = 1.2
    display_size_ratio: float = 1.5  # any weight, rendered as <h1>
    heading_max_words: Optional[int] = None  # no cap by default
    column_gap_threshold: float = 40.0
    network_tokens: List[str] = field(default_factory=lambda: [
        "linkedin", "github", "gitlab", "twitter", "behance",
        "dribbble", "stackoverflow", "leetcode",
    ])
    section_keywords: List[str] = field(default_factory=lambda: [
        "Work Experience", "Experience", "Projects", "Education",
        "Technical Skills", "Skills", "Summary", "Objective",
        "Certifications", "Achievements", "Awards", "Publications",
        "Leadership", "Activities", "Volunteer", "Interests",
    ])
    table_labels: List[str] = field(default_factory=lambda: [
        "Programming Languages", "Languages", "Frameworks & Libraries",
        "Frameworks", "Libraries", "Developer Tools", "Tools", "Databases",
        "Technologies", "Cloud", "Platforms", "Soft Skills", "Concepts",
        "Coursework",
    ])


@dataclass
class InlineConfig:
    """Inline rendering configuration."""
    spacer_threshold: float = 2.0
    spacer_cap: float = 20.0
    min_font_size: float = 10.0
    bold_markers: Tuple[str, ...] = ("bold", "black", "semibold")
    italic_markers: Tuple[str, ...] = ("italic", "oblique")


@dataclass
class HtmlConfig:
    """HTML serialization configuration."""
    container_class: str = "pdf-content"
    page_separator: str = "<br/><br/>"
    table_start_marker: str = "<!--MD_TABLE_START-->"
    table_end_marker: str = "<!--MD_TABLE_END-->"
    table_headers: Tuple[str, str] = ("Category", "Details")


@dataclass
class FetchConfig:
    """Remote source configuration."""
    timeout: float = 30.0
    user_agent: str = "pagerecon/1.0"


@dataclass
class PipelineConfig:
    """Main pipeline configuration."""
    lines: LineConfig = field(default_factory=LineConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    inline: InlineConfig = field(default_factory=InlineConfig)
    html: HtmlConfig = field(default_factory=HtmlConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)

    # Global settings
    debug_mode: bool = False


# ============================================================================
# Supported Inputs
# ============================================================================

SUPPORTED_FILE_TYPES = ("pdf", "docx")


# ============================================================================
# Default Configuration Instance
# ============================================================================

def get_config() -> PipelineConfig:
    """Get the default pipeline configuration with environment overrides."""
    config = PipelineConfig()

    if os.environ.get("PAGERECON_DEBUG", "").lower() == "true":
        config.debug_mode = True

    tolerance = os.environ.get("PAGERECON_LINE_TOLERANCE")
    if tolerance:
        try:
            config.lines.y_tolerance = float(tolerance)
        except ValueError:
            logger.warning(f"Ignoring invalid PAGERECON_LINE_TOLERANCE: {tolerance!r}")

    timeout = os.environ.get("PAGERECON_FETCH_TIMEOUT")
    if timeout:
        try:
            config.fetch.timeout = float(timeout)
        except ValueError:
            logger.warning(f"Ignoring invalid PAGERECON_FETCH_TIMEOUT: {timeout!r}")

    return config
