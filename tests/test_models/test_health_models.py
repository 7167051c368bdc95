"""
Tests for governance_health.models — DAOMetrics and analysis result models.

Covers:
  - DAOMetrics defaults, camelCase aliases, non-finite rejection
  - CategoryScores bounds and declaration order
  - Frozen models (no mutation after construction)
  - camelCase JSON output for GovernanceHealth
"""

from __future__ import annotations

import math
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from governance_health.analyzer import analyze_metrics
from governance_health.models.health import CATEGORY_NAMES, CategoryScores
from governance_health.models.metrics import DAOMetrics

FIXED_NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


class TestDAOMetrics:
    def test_defaults_are_zero(self):
        m = DAOMetrics(name="Empty")
        assert m.total_proposals == 0
        assert m.avg_voter_turnout == 0.0
        assert m.symbol == ""

    def test_accepts_camel_case_aliases(self):
        m = DAOMetrics.model_validate(
            {"name": "Compound", "totalProposals": 12, "avgVoterTurnout": 22.5}
        )
        assert m.total_proposals == 12
        assert m.avg_voter_turnout == 22.5

    def test_accepts_snake_case_names(self):
        m = DAOMetrics(name="Compound", token_concentration=44.0)
        assert m.token_concentration == 44.0

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_rejects_non_finite(self, bad):
        with pytest.raises(ValidationError):
            DAOMetrics(name="X", proposal_success_rate=bad)

    def test_out_of_range_is_not_rejected(self):
        m = DAOMetrics(name="X", delegate_activity=140.0, token_concentration=-3.0)
        assert m.delegate_activity == 140.0

    def test_frozen(self, healthy_metrics):
        with pytest.raises(ValidationError):
            healthy_metrics.total_proposals = 99


class TestCategoryScores:
    def test_rejects_out_of_range(self):
        with pytest.raises(ValidationError):
            CategoryScores(
                participation=101, decentralization=0, activity=0, transparency=0, stability=0
            )

    def test_as_items_order(self):
        cs = CategoryScores(
            participation=1, decentralization=2, activity=3, transparency=4, stability=5
        )
        assert [name for name, _ in cs.as_items()] == list(CATEGORY_NAMES)
        assert [v for _, v in cs.as_items()] == [1, 2, 3, 4, 5]


class TestGovernanceHealthJson:
    def test_camel_case_dump(self, distressed_metrics):
        health = analyze_metrics(distressed_metrics, FIXED_NOW)
        data = health.model_dump(by_alias=True, mode="json")
        assert set(data) == {
            "dao", "overallScore", "categoryScores", "risks", "recommendations", "lastUpdated",
        }
        assert data["risks"][0]["type"] == "HIGH"
        assert data["lastUpdated"].startswith("2026-01-15T12:00:00")

    def test_frozen(self, healthy_metrics):
        health = analyze_metrics(healthy_metrics, FIXED_NOW)
        with pytest.raises(ValidationError):
            health.overall_score = 1
