"""
Shared pytest fixtures for the Governance Health test suite.

Provides:
  - ``healthy_metrics`` / ``distressed_metrics``: two reference DAOs, one
    comfortably in the "Good" band and one tripping every risk rule.
  - ``FakeProvider``: in-memory metrics provider that records calls.
  - ``app_config`` / ``analyzer``: an analyzer wired to the fake provider
    with a fixed clock and a fresh cache.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import pytest

from governance_health.analyzer import GovernanceAnalyzer
from governance_health.config import AppConfig
from governance_health.ingestion.tally_client import OrganizationSummary
from governance_health.models.metrics import DAOMetrics
from governance_health.utils.cache import TTLCache

FIXED_NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


# ── Metrics fixtures ──────────────────────────────────────────────────────────

def make_metrics(**overrides) -> DAOMetrics:
    """A healthy baseline record with selected fields overridden."""
    values = dict(
        name="Uniswap",
        symbol="UNI",
        total_proposals=25,
        active_proposals=3,
        avg_voter_turnout=40,
        token_concentration=30,
        delegate_activity=60,
        proposal_success_rate=75,
        avg_proposal_duration=5,
        treasury_health=80,
        community_engagement=50,
    )
    values.update(overrides)
    return DAOMetrics(**values)


@pytest.fixture
def metrics_factory():
    """``make_metrics`` as a fixture: ``metrics_factory(total_proposals=0)``."""
    return make_metrics


@pytest.fixture
def healthy_metrics() -> DAOMetrics:
    """Scores 65/67/62/76/69, overall 67, no risks."""
    return make_metrics()


@pytest.fixture
def distressed_metrics() -> DAOMetrics:
    """Every risk and recommendation rule fires."""
    return make_metrics(
        name="Ghost DAO",
        symbol="GHOST",
        total_proposals=2,
        active_proposals=0,
        avg_voter_turnout=5,
        token_concentration=85,
        delegate_activity=10,
        proposal_success_rate=15,
        avg_proposal_duration=1,
        treasury_health=20,
        community_engagement=5,
    )


# ── Provider / analyzer fixtures ──────────────────────────────────────────────

class FakeProvider:
    """Metrics provider backed by a dict; unknown identifiers return None."""

    def __init__(
        self,
        metrics: dict[str, DAOMetrics],
        failures: Optional[dict[str, Exception]] = None,
        orgs: Optional[list[OrganizationSummary]] = None,
    ) -> None:
        self.metrics = metrics
        self.failures = failures or {}
        self.orgs = orgs or []
        self.calls: list[str] = []

    def get_dao_metrics(self, identifier: str) -> Optional[DAOMetrics]:
        self.calls.append(identifier)
        if identifier in self.failures:
            raise self.failures[identifier]
        return self.metrics.get(identifier)

    def list_popular_daos(self, limit: Optional[int] = None) -> list[OrganizationSummary]:
        return self.orgs[:limit] if limit else list(self.orgs)


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def fake_provider(healthy_metrics, distressed_metrics) -> FakeProvider:
    return FakeProvider(
        {"uniswap": healthy_metrics, "ghost": distressed_metrics},
        orgs=[
            OrganizationSummary(
                name="Uniswap",
                slug="uniswap",
                description="Decentralized exchange protocol",
                delegates_votes_count=1_234_567,
                token_owners_count=380_000,
                active_governors_count=1,
            ),
            OrganizationSummary(name="ENS", slug="ens"),
        ],
    )


@pytest.fixture
def analyzer(fake_provider, app_config) -> GovernanceAnalyzer:
    return GovernanceAnalyzer(
        fake_provider,
        app_config,
        cache=TTLCache(default_ttl=1800),
        clock=lambda: FIXED_NOW,
    )
