"""Numeric helpers shared by the progress and scoring logic."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (0.5 -> 1, 2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def percentage(part: int, total: int) -> int:
    """Whole-number percentage of ``part`` in ``total``; 0 when ``total`` is 0."""
    if total <= 0:
        return 0
    return round_half_up(100 * part / total)
