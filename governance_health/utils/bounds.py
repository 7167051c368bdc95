"""
Score bounding primitives shared by every scorer and the report assembler.

All health scores live in the closed integer range [0, 100].  Inputs are
never trusted to be in range, so every score passes through ``clamp`` and
``round_half_up`` before leaving the scoring package.
"""

from __future__ import annotations

import math

SCORE_MIN = 0.0
SCORE_MAX = 100.0


def clamp(value: float, lo: float = SCORE_MIN, hi: float = SCORE_MAX) -> float:
    """Limit ``value`` to ``[lo, hi]``.  Non-finite input maps to ``lo``.

    Integers are bounded before conversion, so counts too large for a float
    saturate at ``hi``.
    """
    if isinstance(value, int):
        return float(max(lo, min(hi, value)))
    if not math.isfinite(value):
        return hi if value == math.inf else lo
    return max(lo, min(hi, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ``.5`` rounding toward +infinity.

    Python's ``round()`` uses banker's rounding (``round(8.5) == 8``);
    scores use the conventional rule (8.5 -> 9).
    """
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    """Round half-up and clamp to an integer score in [0, 100]."""
    return int(clamp(float(round_half_up(clamp(value)))))
