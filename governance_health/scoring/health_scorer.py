"""
Category scorers and the overall score aggregator.

Each scorer maps a ``DAOMetrics`` record to an integer in [0, 100].  Every
input term is clamped before weighting and the result is clamped again, so
negative or huge metrics can never push a score out of range.

Category formulas
-----------------
participation (0–100):
    0.4 * clamp(turnout * 2)            # 50% turnout already counts as full
  + 0.3 * clamp(delegate_activity)
  + 0.3 * clamp(community_engagement)

decentralization (0–100):
    0.7 * clamp(100 - token_concentration)   # concentration is inverted
  + 0.3 * clamp(delegate_activity)

activity (0–100):
    0.4 * clamp(total_proposals / 12 * 20)   # proposal frequency term
  + 0.3 * clamp(active_proposals * 25)       # saturates at 4 open proposals
  + 0.3 * clamp(proposal_success_rate)

transparency (0–100):
    0.6 * (80 if total_proposals > 10 else 50)
  + 0.4 * (70 if avg_proposal_duration > 3 else 40)

stability (0–100):
    0.4 * clamp(proposal_success_rate)
  + 0.3 * clamp(treasury_health)
  + 0.3 * clamp(avg_proposal_duration * 10)  # saturates at 10 days

Overall score
-------------
    round_half_up(sum(category_score * CATEGORY_WEIGHTS[category]))

Rounded once after summation; never per term.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Mapping

from governance_health.models.health import CATEGORY_NAMES, CategoryScores
from governance_health.models.metrics import DAOMetrics
from governance_health.utils.bounds import clamp, clamp_score, round_half_up

CATEGORY_WEIGHTS: Mapping[str, float] = MappingProxyType({
    "participation":    0.25,
    "decentralization": 0.25,
    "activity":         0.20,
    "transparency":     0.15,
    "stability":        0.15,
})

if set(CATEGORY_WEIGHTS) != set(CATEGORY_NAMES):
    raise RuntimeError(
        "CATEGORY_WEIGHTS must cover exactly the CategoryScores fields: "
        f"{sorted(CATEGORY_NAMES)}"
    )


# ── Category scorers ──────────────────────────────────────────────────────────


def score_participation(metrics: DAOMetrics) -> int:
    turnout_score    = clamp(metrics.avg_voter_turnout * 2)
    delegate_score   = clamp(metrics.delegate_activity)
    engagement_score = clamp(metrics.community_engagement)
    return clamp_score(
        turnout_score      * 0.4
        + delegate_score   * 0.3
        + engagement_score * 0.3
    )


def score_decentralization(metrics: DAOMetrics) -> int:
    concentration_score = clamp(100 - metrics.token_concentration)
    delegate_score      = clamp(metrics.delegate_activity)
    return clamp_score(concentration_score * 0.7 + delegate_score * 0.3)


def score_activity(metrics: DAOMetrics) -> int:
    frequency_score = clamp(clamp(metrics.total_proposals, 0, 60) / 12 * 20)
    active_score    = clamp(clamp(metrics.active_proposals, 0, 4) * 25)
    success_score   = clamp(metrics.proposal_success_rate)
    return clamp_score(
        frequency_score * 0.4
        + active_score  * 0.3
        + success_score * 0.3
    )


def score_transparency(metrics: DAOMetrics) -> int:
    # Coarse two-tier signals; Tally exposes nothing richer.
    proposal_score = 80 if metrics.total_proposals > 10 else 50
    duration_score = 70 if metrics.avg_proposal_duration > 3 else 40
    return clamp_score(proposal_score * 0.6 + duration_score * 0.4)


def score_stability(metrics: DAOMetrics) -> int:
    success_score  = clamp(metrics.proposal_success_rate)
    treasury_score = clamp(metrics.treasury_health)
    duration_score = clamp(metrics.avg_proposal_duration * 10)
    return clamp_score(
        success_score    * 0.4
        + treasury_score * 0.3
        + duration_score * 0.3
    )


CATEGORY_SCORERS: Mapping[str, Callable[[DAOMetrics], int]] = MappingProxyType({
    "participation":    score_participation,
    "decentralization": score_decentralization,
    "activity":         score_activity,
    "transparency":     score_transparency,
    "stability":        score_stability,
})


# ── Public API ────────────────────────────────────────────────────────────────


def compute_category_scores(metrics: DAOMetrics) -> CategoryScores:
    """Score all five categories for one metrics record.

    Args:
        metrics: Normalized DAO metrics.

    Returns:
        Fresh ``CategoryScores`` with every field in [0, 100].
    """
    return CategoryScores(
        **{name: CATEGORY_SCORERS[name](metrics) for name in CATEGORY_NAMES}
    )


def compute_overall_score(category_scores: CategoryScores) -> int:
    """Weighted aggregate of already-computed category scores.

    Args:
        category_scores: Output of ``compute_category_scores()``.

    Returns:
        Integer overall score in [0, 100].
    """
    total = sum(
        score * CATEGORY_WEIGHTS[name] for name, score in category_scores.as_items()
    )
    return int(clamp(round_half_up(total)))
