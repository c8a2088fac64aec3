"""Common helpers shared by the builder and the PDF renderer."""
from __future__ import annotations

from typing import Optional

from reportlab.pdfbase.pdfmetrics import stringWidth

STANDARD_FONT = "Helvetica"
LEADING_FACTOR = 1.2


def resolve_leading(font_size: float, line_height: Optional[float] = None) -> float:
    """Return the distance between baselines of a multi-line text block."""
    if line_height is not None:
        return line_height
    return font_size * LEADING_FACTOR


def measure_text(content: str, font_size: float) -> float:
    """Width of the widest line of ``content`` in the standard font."""
    return max(stringWidth(line, STANDARD_FONT, font_size) for line in content.split("\n"))
