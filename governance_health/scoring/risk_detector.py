"""
Rule-based governance risk detection.

Risks come from a static, ordered rule table.  Every rule is evaluated on
every call (no short-circuit) and contributes at most one ``Risk``; the
output preserves rule-declaration order, not severity order.

Rules
-----
  #  condition                      type    category
  1  avg_voter_turnout < 10         HIGH    Participation
  2  token_concentration > 70       HIGH    Centralization
  3  total_proposals < 5            MEDIUM  Activity
  4  proposal_success_rate < 30     HIGH    Stability
  5  delegate_activity < 20         MEDIUM  Delegation

All comparisons are strict: turnout exactly 10 does not fire rule 1.

Adding a rule is a one-entry change to ``RISK_RULES``.  A predicate
receives the metrics and the category scores; current rules only read
metrics.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from governance_health.models.health import CategoryScores, Risk, RiskLevel, RiskType
from governance_health.models.metrics import DAOMetrics

RiskPredicate = Callable[[DAOMetrics, Optional[CategoryScores]], bool]


@dataclass(frozen=True)
class RiskRule:
    """A threshold rule and the risk record it emits when it fires."""

    predicate: RiskPredicate
    risk: Risk


RISK_RULES: tuple[RiskRule, ...] = (
    RiskRule(
        predicate=lambda m, _: m.avg_voter_turnout < 10,
        risk=Risk(
            type=RiskType.HIGH,
            category="Participation",
            description="Extremely low voter turnout indicates governance apathy",
            impact="Decisions may not represent community consensus",
            mitigation="Implement voter incentives and education programs",
        ),
    ),
    RiskRule(
        predicate=lambda m, _: m.token_concentration > 70,
        risk=Risk(
            type=RiskType.HIGH,
            category="Centralization",
            description="High token concentration among few holders",
            impact="Risk of governance capture and manipulation",
            mitigation="Encourage token distribution and delegate diversity",
        ),
    ),
    RiskRule(
        predicate=lambda m, _: m.total_proposals < 5,
        risk=Risk(
            type=RiskType.MEDIUM,
            category="Activity",
            description="Low governance activity may indicate disengagement",
            impact="Important decisions may be delayed or ignored",
            mitigation="Stimulate governance participation with clear processes",
        ),
    ),
    RiskRule(
        predicate=lambda m, _: m.proposal_success_rate < 30,
        risk=Risk(
            type=RiskType.HIGH,
            category="Stability",
            description="Very low proposal success rate indicates governance dysfunction",
            impact="Inability to make necessary protocol changes",
            mitigation="Review proposal processes and consensus mechanisms",
        ),
    ),
    RiskRule(
        predicate=lambda m, _: m.delegate_activity < 20,
        risk=Risk(
            type=RiskType.MEDIUM,
            category="Delegation",
            description="Low delegate activity may create governance bottlenecks",
            impact="Reduced governance efficiency and representation",
            mitigation="Implement delegate accountability and incentive systems",
        ),
    ),
)


def detect_risks(
    metrics: DAOMetrics,
    category_scores: Optional[CategoryScores] = None,
) -> list[Risk]:
    """Evaluate every rule in ``RISK_RULES`` against one metrics record.

    Args:
        metrics: Normalized DAO metrics.
        category_scores: Scores for the same metrics; available to rules.

    Returns:
        New list of risks in rule order (possibly empty).
    """
    return [rule.risk for rule in RISK_RULES if rule.predicate(metrics, category_scores)]


def count_high_risks(risks: Sequence[Risk]) -> int:
    return sum(1 for r in risks if r.type == RiskType.HIGH)


def classify_risk_level(risks: Sequence[Risk]) -> RiskLevel:
    """Aggregate risk level from risk counts.

    Rules (evaluated in order — first match wins):
        1. CRITICAL : more than 2 HIGH risks
        2. HIGH     : at least one HIGH risk
        3. MEDIUM   : more than 3 risks in total
        4. LOW      : everything else
    """
    high = count_high_risks(risks)
    if high > 2:
        return RiskLevel.CRITICAL
    if high > 0:
        return RiskLevel.HIGH
    if len(risks) > 3:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW
