"""
Font style inference from font names.

PDF font names carry style only as substrings ("Helvetica-BoldOblique",
"ABCDEF+Calibri-Bold"), so emphasis is inferred by case-insensitive search.
"""

from typing import Sequence

BOLD_MARKERS = ("bold", "black", "semibold")
ITALIC_MARKERS = ("italic", "oblique")


def is_bold_font(font_name: str, markers: Sequence[str] = BOLD_MARKERS) -> bool:
    if not font_name:
        return False
    name = font_name.lower()
    return any(m in name for m in markers)


def is_italic_font(font_name: str, markers: Sequence[str] = ITALIC_MARKERS) -> bool:
    if not font_name:
        return False
    name = font_name.lower()
    return any(m in name for m in markers)
