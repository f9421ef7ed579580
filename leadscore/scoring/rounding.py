"""
leadscore/scoring/rounding.py — clamping and rounding shared by the scoring stages.

Rounding is half away from zero (2.5 → 3, -2.5 → -3) rather than Python's
round-half-even, so a score never depends on which way a tie happens to fall.
"""

import math


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_away(value: float, ndigits: int = 0) -> float:
    scale = 10 ** ndigits
    return math.copysign(math.floor(abs(value) * scale + 0.5), value) / scale


def clamp_score(value: float) -> int:
    """Round a running total to an int score in [0, 100]."""
    return int(clamp(round_half_away(value), 0, 100))
