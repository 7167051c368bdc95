"""
Governance health scoring core.

Pure, synchronous functions with no I/O and no shared mutable state:

  scoring/health_scorer.py   — five category scorers + overall aggregator.
  scoring/risk_detector.py   — ordered risk rule table + risk level.
  scoring/recommendations.py — ordered recommendation rule table.
  scoring/classification.py  — investment signal, health band, maturity.

Data flow::

    DAOMetrics ─┬─> compute_category_scores ─> compute_overall_score
                ├─> detect_risks ─────────────┐
                └─> generate_recommendations <┘
"""

from governance_health.scoring.classification import (
    classify_governance_maturity,
    classify_health_band,
    classify_investment_signal,
    describe_diversification,
    top_strength,
    top_weakness,
)
from governance_health.scoring.health_scorer import (
    CATEGORY_WEIGHTS,
    compute_category_scores,
    compute_overall_score,
)
from governance_health.scoring.recommendations import generate_recommendations
from governance_health.scoring.risk_detector import (
    RISK_RULES,
    classify_risk_level,
    detect_risks,
)

__all__ = [
    # health_scorer
    "CATEGORY_WEIGHTS",
    "compute_category_scores",
    "compute_overall_score",
    # risk_detector
    "RISK_RULES",
    "classify_risk_level",
    "detect_risks",
    # recommendations
    "generate_recommendations",
    # classification
    "classify_governance_maturity",
    "classify_health_band",
    "classify_investment_signal",
    "describe_diversification",
    "top_strength",
    "top_weakness",
]
