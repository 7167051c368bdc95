"""
Presentation classifiers derived from scores.

Signal thresholds are inclusive lower bounds: a score exactly on a boundary
belongs to the higher tier (80 → STRONG_BUY, 60 → BUY, 40 → HOLD).

  score    investment signal   health band
  ≥ 80     STRONG_BUY          Excellent
  ≥ 60     BUY                 Good
  ≥ 40     HOLD                Fair
  < 40     AVOID               Poor

Governance maturity uses strict bounds (> 70 High, > 50 Medium, else Low).
"""

from __future__ import annotations

from governance_health.models.health import CategoryScores, InvestmentSignal

_SIGNAL_TIERS: tuple[tuple[int, InvestmentSignal], ...] = (
    (80, InvestmentSignal.STRONG_BUY),
    (60, InvestmentSignal.BUY),
    (40, InvestmentSignal.HOLD),
)

_HEALTH_BANDS: tuple[tuple[int, str], ...] = (
    (80, "Excellent"),
    (60, "Good"),
    (40, "Fair"),
)

HEALTH_BAND_DESCRIPTIONS: dict[str, str] = {
    "Excellent": "Outstanding governance health with strong participation and effectiveness.",
    "Good":      "Solid governance fundamentals with room for improvement.",
    "Fair":      "Moderate governance health requiring attention in several areas.",
    "Poor":      "Significant governance challenges that may impact protocol success.",
}

DIVERSIFICATION_THRESHOLD = 60


def classify_investment_signal(score: int) -> InvestmentSignal:
    for floor, signal in _SIGNAL_TIERS:
        if score >= floor:
            return signal
    return InvestmentSignal.AVOID


def classify_health_band(score: int) -> str:
    for floor, band in _HEALTH_BANDS:
        if score >= floor:
            return band
    return "Poor"


def classify_governance_maturity(score: int) -> str:
    if score > 70:
        return "High"
    if score > 50:
        return "Medium"
    return "Low"


def describe_diversification(category_scores: CategoryScores) -> str:
    if category_scores.decentralization > DIVERSIFICATION_THRESHOLD:
        return "Well distributed"
    return "Concentrated"


def top_strength(category_scores: CategoryScores) -> str:
    """Highest-scoring category; ties go to the earlier-declared category."""
    items = category_scores.as_items()
    best = max(score for _, score in items)
    return next(name for name, score in items if score == best)


def top_weakness(category_scores: CategoryScores) -> str:
    """Lowest-scoring category; ties go to the earlier-declared category."""
    items = category_scores.as_items()
    worst = min(score for _, score in items)
    return next(name for name, score in items if score == worst)
