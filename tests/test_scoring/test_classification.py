"""
Tests for governance_health.scoring.classification.
"""

from __future__ import annotations

import pytest

from governance_health.models.health import CategoryScores, InvestmentSignal
from governance_health.scoring.classification import (
    HEALTH_BAND_DESCRIPTIONS,
    classify_governance_maturity,
    classify_health_band,
    classify_investment_signal,
    describe_diversification,
    top_strength,
    top_weakness,
)


class TestInvestmentSignal:
    @pytest.mark.parametrize(
        "score,signal",
        [
            (100, InvestmentSignal.STRONG_BUY),
            (80, InvestmentSignal.STRONG_BUY),
            (79, InvestmentSignal.BUY),
            (60, InvestmentSignal.BUY),
            (59, InvestmentSignal.HOLD),
            (40, InvestmentSignal.HOLD),
            (39, InvestmentSignal.AVOID),
            (0, InvestmentSignal.AVOID),
        ],
    )
    def test_boundaries_inclusive(self, score, signal):
        assert classify_investment_signal(score) == signal


class TestHealthBand:
    @pytest.mark.parametrize(
        "score,band",
        [(80, "Excellent"), (79, "Good"), (60, "Good"), (59, "Fair"), (40, "Fair"), (39, "Poor")],
    )
    def test_bands(self, score, band):
        assert classify_health_band(score) == band

    def test_every_band_has_description(self):
        for score in (90, 70, 50, 10):
            assert classify_health_band(score) in HEALTH_BAND_DESCRIPTIONS


class TestMaturityAndDiversification:
    @pytest.mark.parametrize("score,label", [(71, "High"), (70, "Medium"), (51, "Medium"), (50, "Low")])
    def test_maturity_strict_bounds(self, score, label):
        assert classify_governance_maturity(score) == label

    def test_diversification(self):
        well = CategoryScores(
            participation=0, decentralization=61, activity=0, transparency=0, stability=0
        )
        conc = CategoryScores(
            participation=0, decentralization=60, activity=0, transparency=0, stability=0
        )
        assert describe_diversification(well) == "Well distributed"
        assert describe_diversification(conc) == "Concentrated"


class TestStrengthWeakness:
    def test_reference_dao(self):
        cs = CategoryScores(
            participation=65, decentralization=67, activity=62, transparency=76, stability=69
        )
        assert top_strength(cs) == "transparency"
        assert top_weakness(cs) == "activity"

    def test_ties_go_to_first_declared(self):
        cs = CategoryScores(
            participation=50, decentralization=50, activity=50, transparency=50, stability=50
        )
        assert top_strength(cs) == "participation"
        assert top_weakness(cs) == "participation"
