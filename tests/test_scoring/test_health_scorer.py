"""
Tests for governance_health.scoring.health_scorer.

Covers:
  - Each category scorer on the reference healthy DAO
  - Clamping of out-of-range and negative metrics
  - Transparency two-tier thresholds (strict)
  - Zero-proposal DAO (activity frequency term is 0)
  - Integer counts too large for a float saturate instead of raising
  - Participation never falls as turnout rises; decentralization never
    rises as concentration rises
  - compute_overall_score(): weights, single rounding after summation
  - CATEGORY_WEIGHTS covers exactly the five categories and sums to 1
"""

from __future__ import annotations

import pytest

from governance_health.models.health import CATEGORY_NAMES, CategoryScores
from governance_health.scoring.health_scorer import (
    CATEGORY_WEIGHTS,
    compute_category_scores,
    compute_overall_score,
    score_activity,
    score_decentralization,
    score_participation,
    score_stability,
    score_transparency,
)


def _scores(p=0, d=0, a=0, t=0, s=0) -> CategoryScores:
    return CategoryScores(
        participation=p, decentralization=d, activity=a, transparency=t, stability=s
    )


# ── Category scorers ───────────────────────────────────────────────────────────

class TestCategoryScorers:
    def test_participation(self, healthy_metrics):
        # 0.4*80 + 0.3*60 + 0.3*50
        assert score_participation(healthy_metrics) == 65

    def test_decentralization(self, healthy_metrics):
        # 0.7*70 + 0.3*60
        assert score_decentralization(healthy_metrics) == 67

    def test_activity_rounds_half_up(self, healthy_metrics):
        # 0.4*41.67 + 0.3*75 + 0.3*75 = 61.67
        assert score_activity(healthy_metrics) == 62

    def test_transparency(self, healthy_metrics):
        assert score_transparency(healthy_metrics) == 76

    def test_stability(self, healthy_metrics):
        # 0.4*75 + 0.3*80 + 0.3*50
        assert score_stability(healthy_metrics) == 69

    def test_compute_category_scores_matches_individual_scorers(self, healthy_metrics):
        cs = compute_category_scores(healthy_metrics)
        assert cs.as_items() == [
            ("participation", 65),
            ("decentralization", 67),
            ("activity", 62),
            ("transparency", 76),
            ("stability", 69),
        ]


class TestClamping:
    def test_turnout_above_fifty_saturates(self, metrics_factory):
        low = score_participation(metrics_factory(avg_voter_turnout=50))
        high = score_participation(metrics_factory(avg_voter_turnout=95))
        assert low == high

    def test_delegate_activity_above_100_is_capped(self, metrics_factory):
        m = metrics_factory(delegate_activity=250, avg_voter_turnout=100, community_engagement=100)
        assert score_participation(m) == 100

    def test_concentration_above_100_does_not_go_negative(self, metrics_factory):
        m = metrics_factory(token_concentration=180, delegate_activity=0)
        assert score_decentralization(m) == 0

    def test_negative_metrics_floor_at_zero(self, metrics_factory):
        m = metrics_factory(
            total_proposals=-5,
            active_proposals=-2,
            avg_voter_turnout=-50,
            delegate_activity=-10,
            community_engagement=-1,
            proposal_success_rate=-20,
            treasury_health=-30,
            avg_proposal_duration=-4,
        )
        cs = compute_category_scores(m)
        assert cs.participation == 0
        assert cs.activity == 0
        assert cs.stability == 0

    def test_huge_metrics_cap_at_100(self, metrics_factory):
        m = metrics_factory(
            total_proposals=10_000,
            active_proposals=400,
            proposal_success_rate=1_000,
            treasury_health=1_000,
            avg_proposal_duration=1_000,
        )
        assert score_activity(m) == 100
        assert score_stability(m) == 100

    def test_integer_counts_beyond_float_range_saturate(self, metrics_factory):
        m = metrics_factory(total_proposals=10**400, active_proposals=10**400)
        # 0.4*100 + 0.3*100 + 0.3*75
        assert score_activity(m) == 93
        assert score_transparency(m) == 76

    def test_negative_integer_counts_beyond_float_range_floor(self, metrics_factory):
        m = metrics_factory(total_proposals=-(10**400), active_proposals=-(10**400))
        # 0.3*75
        assert score_activity(m) == 23

    @pytest.mark.parametrize("active,expected", [(0, 0), (2, 15), (4, 30), (9, 30)])
    def test_active_proposals_saturate_at_four(self, metrics_factory, active, expected):
        m = metrics_factory(total_proposals=0, proposal_success_rate=0, active_proposals=active)
        assert score_activity(m) == expected

    def test_all_scores_within_bounds(self, healthy_metrics, distressed_metrics):
        for m in (healthy_metrics, distressed_metrics):
            for _, value in compute_category_scores(m).as_items():
                assert 0 <= value <= 100


class TestMonotonicity:
    TURNOUTS = [0, 5, 10, 15, 20, 25, 30, 35, 40, 45, 50, 60, 80, 100]
    CONCENTRATIONS = [0, 10, 20, 30, 40, 50, 60, 70, 80, 90, 100, 120]

    @pytest.mark.parametrize("lower,higher", list(zip(TURNOUTS, TURNOUTS[1:])))
    def test_participation_non_decreasing_in_turnout(self, metrics_factory, lower, higher):
        assert score_participation(metrics_factory(avg_voter_turnout=lower)) <= score_participation(
            metrics_factory(avg_voter_turnout=higher)
        )

    def test_participation_saturates_at_fifty_percent_turnout(self, metrics_factory):
        scores = {score_participation(metrics_factory(avg_voter_turnout=t)) for t in (50, 60, 80, 100)}
        assert len(scores) == 1

    @pytest.mark.parametrize("lower,higher", list(zip(CONCENTRATIONS, CONCENTRATIONS[1:])))
    def test_decentralization_non_increasing_in_concentration(
        self, metrics_factory, lower, higher
    ):
        assert score_decentralization(
            metrics_factory(token_concentration=higher)
        ) <= score_decentralization(metrics_factory(token_concentration=lower))

    def test_concentration_sweep_spans_full_range(self, metrics_factory):
        m_low = metrics_factory(token_concentration=0, delegate_activity=0)
        m_high = metrics_factory(token_concentration=100, delegate_activity=0)
        assert score_decentralization(m_low) == 70
        assert score_decentralization(m_high) == 0


class TestTransparencyTiers:
    @pytest.mark.parametrize(
        "total,duration,expected",
        [
            (11, 3.1, 76),   # 0.6*80 + 0.4*70
            (10, 3.1, 58),   # 0.6*50 + 0.4*70
            (11, 3.0, 64),   # 0.6*80 + 0.4*40
            (10, 3.0, 46),   # 0.6*50 + 0.4*40
        ],
    )
    def test_thresholds_are_strict(self, metrics_factory, total, duration, expected):
        m = metrics_factory(total_proposals=total, avg_proposal_duration=duration)
        assert score_transparency(m) == expected


class TestZeroProposals:
    def test_frequency_term_is_zero(self, metrics_factory):
        m = metrics_factory(total_proposals=0, active_proposals=0, proposal_success_rate=0)
        assert score_activity(m) == 0

    def test_default_metrics_score_without_error(self, metrics_factory):
        from governance_health.models.metrics import DAOMetrics

        cs = compute_category_scores(DAOMetrics(name="Empty"))
        assert cs.activity == 0
        assert cs.transparency == 46
        assert cs.decentralization == 70


# ── Overall aggregator ─────────────────────────────────────────────────────────

class TestOverallScore:
    def test_healthy_reference(self, healthy_metrics):
        cs = compute_category_scores(healthy_metrics)
        # 16.25 + 16.75 + 12.4 + 11.4 + 10.35 = 67.15
        assert compute_overall_score(cs) == 67

    def test_distressed_reference_is_poor(self, distressed_metrics):
        cs = compute_category_scores(distressed_metrics)
        assert compute_overall_score(cs) < 40

    def test_all_hundred(self):
        assert compute_overall_score(_scores(100, 100, 100, 100, 100)) == 100

    def test_all_zero(self):
        assert compute_overall_score(_scores()) == 0

    def test_rounds_once_after_summation(self):
        # 0.2*2 + 0.15*3 = 0.85 -> 1; rounding each term first would give 0.
        assert compute_overall_score(_scores(a=2, t=3)) == 1

    def test_single_category_weights(self):
        assert compute_overall_score(_scores(p=100)) == 25
        assert compute_overall_score(_scores(d=100)) == 25
        assert compute_overall_score(_scores(a=100)) == 20
        assert compute_overall_score(_scores(t=100)) == 15
        assert compute_overall_score(_scores(s=100)) == 15


class TestCategoryWeights:
    def test_covers_every_category(self):
        assert set(CATEGORY_WEIGHTS) == set(CATEGORY_NAMES)

    def test_sums_to_one(self):
        assert sum(CATEGORY_WEIGHTS.values()) == pytest.approx(1.0)

    def test_is_read_only(self):
        with pytest.raises(TypeError):
            CATEGORY_WEIGHTS["participation"] = 0.5  # type: ignore[index]
