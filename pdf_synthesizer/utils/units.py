"""Unit conversion helpers for page geometry and file sizes."""
from __future__ import annotations

import math

BYTES_PER_KILOBYTE = 1024


def bytes_to_kilobytes(value: int) -> float:
    """Convert a byte count to kilobytes (1 KB = 1024 bytes)."""
    return value / BYTES_PER_KILOBYTE


def format_kilobytes(value: int) -> str:
    """Render a byte count as ``"<n>.<nn> KB"``."""
    return f"{bytes_to_kilobytes(value):.2f} KB"


def is_finite_number(value: object) -> bool:
    """Return True for int/float values that are neither NaN nor infinite."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
