"""
oralcheck.utils - Shared utility functions.

Contains common functions used across multiple modules to avoid duplication.
"""

from __future__ import annotations

import math
from collections.abc import Iterable


def format_duration(seconds: float) -> str:
    """Format seconds as HH:MM:SS or MM:SS.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string (HH:MM:SS if >= 1 hour, otherwise MM:SS)
    """
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half away from zero for positives, like a browser's Math.round.

    Python's round() uses banker's rounding, which would report 2 for 2.5.
    """
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def get_rating_style(rating: str) -> str:
    """Get the Rich style for a feedback rating.

    Args:
        rating: "good", "fair" or "poor"

    Returns:
        Rich color name
    """
    if rating == "good":
        return "green"
    elif rating == "fair":
        return "yellow"
    return "red"
