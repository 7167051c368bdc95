"""
Rule-based remediation recommendations.

Second ordered rule table, evaluated over ``(metrics, risks)``.  Output
order is rule order; an empty list means no rule fired (never ``None``).

Rules
-----
  1. avg_voter_turnout < 20        → voter incentive programs
  2. token_concentration > 50      → token diversification
  3. delegate_activity < 30        → delegate recognition
  4. any HIGH risk detected        → address high-priority risks
  5. proposal_success_rate < 40    → consensus-process review
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from governance_health.models.health import Risk
from governance_health.models.metrics import DAOMetrics
from governance_health.scoring.risk_detector import count_high_risks


@dataclass(frozen=True)
class RecommendationRule:
    predicate: Callable[[DAOMetrics, Sequence[Risk]], bool]
    text: str


RECOMMENDATION_RULES: tuple[RecommendationRule, ...] = (
    RecommendationRule(
        lambda m, _: m.avg_voter_turnout < 20,
        "Consider implementing voter incentive programs to increase participation",
    ),
    RecommendationRule(
        lambda m, _: m.token_concentration > 50,
        "Token distribution is concentrated - diversification would improve governance health",
    ),
    RecommendationRule(
        lambda m, _: m.delegate_activity < 30,
        "Delegate engagement is low - consider delegate recognition programs",
    ),
    RecommendationRule(
        lambda _, risks: count_high_risks(risks) > 0,
        "Address high-priority risks immediately to improve governance stability",
    ),
    RecommendationRule(
        lambda m, _: m.proposal_success_rate < 40,
        "Low proposal success rate indicates potential consensus issues",
    ),
)


def generate_recommendations(metrics: DAOMetrics, risks: Sequence[Risk]) -> list[str]:
    """Return the text of every firing rule, in rule order.

    Args:
        metrics: Normalized DAO metrics.
        risks: Output of ``detect_risks()`` for the same metrics.

    Returns:
        New list of recommendation strings (possibly empty).
    """
    return [rule.text for rule in RECOMMENDATION_RULES if rule.predicate(metrics, risks)]
