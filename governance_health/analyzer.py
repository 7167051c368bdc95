"""
Governance analysis service.

``GovernanceAnalyzer`` sits between the presentation layers (MCP tools, CLI)
and the pure scoring core:

  Step 1 — Validate:  Reject unsupported platforms before any I/O.
  Step 2 — Cache:     Serve a cached ``GovernanceHealth`` when one is fresh.
  Step 3 — Fetch:     Ask the metrics provider for ``DAOMetrics``.
  Step 4 — Score:     ``analyze_metrics`` runs the core pipeline.
  Step 5 — Store:     Write the result through to the cache.

Failure isolation
-----------------
- Single analysis:  Errors propagate (``DAONotFoundError``, ``TallyAPIError``,
                    ``httpx.HTTPError``) for the caller to render.
- Comparison:       Each identifier is fetched in its own worker; failures
                    are logged and skipped.  ``NoDAOsAnalyzedError`` is raised
                    only when every identifier failed.

The analyzer is safe to share between threads: its only mutable state is the
cache, which locks internally.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Optional, Protocol, Sequence

from governance_health.config import AppConfig
from governance_health.exceptions import (
    DAONotFoundError,
    NoDAOsAnalyzedError,
    UnsupportedPlatformError,
)
from governance_health.models.health import (
    DAOComparison,
    DAORanking,
    GovernanceHealth,
    Risk,
    RiskLevel,
)
from governance_health.models.metrics import DAOMetrics
from governance_health.reporting.formatters import assemble_report
from governance_health.scoring import (
    classify_investment_signal,
    classify_risk_level,
    compute_category_scores,
    compute_overall_score,
    detect_risks,
    generate_recommendations,
    top_strength,
    top_weakness,
)
from governance_health.utils.cache import TTLCache, cache_key
from governance_health.utils.time_utils import utc_now

logger = logging.getLogger(__name__)


class MetricsProvider(Protocol):
    """Anything that can turn a DAO identifier into ``DAOMetrics``."""

    def get_dao_metrics(self, identifier: str) -> Optional[DAOMetrics]: ...

    def list_popular_daos(self, limit: Optional[int] = None) -> list: ...


# ── Core pipeline ─────────────────────────────────────────────────────────────


def analyze_metrics(metrics: DAOMetrics, last_updated: datetime) -> GovernanceHealth:
    """Score one metrics record.

    Order is fixed: category scores → overall score → risks →
    recommendations (which read the risk list).

    Args:
        metrics: Prepared governance metrics.
        last_updated: Analysis timestamp recorded on the result.

    Returns:
        Frozen ``GovernanceHealth``.
    """
    category_scores = compute_category_scores(metrics)
    overall = compute_overall_score(category_scores)
    risks = detect_risks(metrics, category_scores)
    recommendations = generate_recommendations(metrics, risks)
    return GovernanceHealth(
        dao=metrics.name,
        overall_score=overall,
        category_scores=category_scores,
        risks=risks,
        recommendations=recommendations,
        last_updated=last_updated,
    )


def build_comparison(analyses: Sequence[GovernanceHealth]) -> DAOComparison:
    """Rank analyses by overall score, best first.

    Ties keep input order (``sorted`` is stable).
    """
    ordered = sorted(analyses, key=lambda h: h.overall_score, reverse=True)
    rankings = [
        DAORanking(
            rank=index,
            dao=health.dao,
            score=health.overall_score,
            investment_signal=classify_investment_signal(health.overall_score),
            top_strength=top_strength(health.category_scores),
            top_weakness=top_weakness(health.category_scores),
            risk_level=classify_risk_level(health.risks),
        )
        for index, health in enumerate(ordered, start=1)
    ]
    if not rankings:
        return DAOComparison(rankings=[], summary="")

    best, worst = rankings[0], rankings[-1]
    summary = f"{best.dao} leads with a governance score of {best.score}/100."
    if len(rankings) > 1:
        summary += (
            f" {worst.dao} trails at {worst.score}/100"
            f" (spread of {best.score - worst.score} points)."
        )
    return DAOComparison(rankings=rankings, summary=summary)


# ── Service ───────────────────────────────────────────────────────────────────


class GovernanceAnalyzer:
    """Fetch, score and cache governance analyses.

    Args:
        provider: Metrics provider (normally ``TallyClient``).
        config: Application configuration.
        cache: Optional result cache; analyses are not cached when ``None``.
        clock: Source of ``last_updated`` timestamps (defaults to ``utc_now``).
    """

    def __init__(
        self,
        provider: MetricsProvider,
        config: AppConfig,
        cache: Optional[TTLCache] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.provider = provider
        self.config = config
        self.cache = cache
        self._clock = clock or utc_now

    def _check_platform(self, platform: Optional[str]) -> str:
        platform = (platform or self.config.analysis.default_platform).lower()
        supported = self.config.analysis.supported_platforms
        if platform not in supported:
            raise UnsupportedPlatformError(platform, supported)
        return platform

    def analyze_dao(self, identifier: str, platform: Optional[str] = None) -> GovernanceHealth:
        """Analyse one DAO, serving from cache when fresh.

        Raises:
            UnsupportedPlatformError: For a platform outside the supported list.
            DAONotFoundError: If the provider cannot resolve ``identifier``.
        """
        platform = self._check_platform(platform)
        key = cache_key("analysis", platform, identifier)

        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Analyzer: cache hit for %s", key)
                return cached

        metrics = self.provider.get_dao_metrics(identifier)
        if metrics is None:
            raise DAONotFoundError(identifier)

        health = analyze_metrics(metrics, self._clock())
        logger.info(
            "Analyzed %s: score=%d risks=%d", health.dao, health.overall_score, len(health.risks)
        )

        if self.cache is not None:
            self.cache.set(key, health, ttl=self.config.cache.analysis_ttl_seconds)
        return health

    def compare_daos(
        self,
        identifiers: Sequence[str],
        platform: Optional[str] = None,
    ) -> DAOComparison:
        """Analyse several DAOs in parallel and rank them.

        Duplicate identifiers are analysed once; only the first
        ``max_compare`` distinct identifiers are used.

        Raises:
            UnsupportedPlatformError: For a platform outside the supported list.
            NoDAOsAnalyzedError: If no identifier could be analysed.
        """
        platform = self._check_platform(platform)
        unique = list(dict.fromkeys(i.strip() for i in identifiers if i and i.strip()))
        limit = self.config.analysis.max_compare
        if len(unique) > limit:
            logger.warning(
                "compare_daos: %d identifiers given, using the first %d", len(unique), limit
            )
            unique = unique[:limit]
        if not unique:
            raise NoDAOsAnalyzedError(identifiers)

        workers = min(self.config.analysis.compare_workers, len(unique))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="compare") as pool:
            futures = [
                (identifier, pool.submit(self.analyze_dao, identifier, platform))
                for identifier in unique
            ]
            analyses: list[GovernanceHealth] = []
            for identifier, future in futures:
                try:
                    analyses.append(future.result())
                except Exception as exc:
                    logger.warning("compare_daos: skipping '%s': %s", identifier, exc)

        if not analyses:
            raise NoDAOsAnalyzedError(unique)
        return build_comparison(analyses)

    def identify_risks(
        self,
        identifier: str,
        platform: Optional[str] = None,
    ) -> tuple[str, list[Risk], RiskLevel]:
        """Return ``(dao name, risks, risk level)`` for one DAO."""
        health = self.analyze_dao(identifier, platform)
        return health.dao, list(health.risks), classify_risk_level(health.risks)

    def get_detailed_report(self, identifier: str, platform: Optional[str] = None) -> str:
        """Return the Markdown report for one DAO."""
        return assemble_report(self.analyze_dao(identifier, platform))

    def list_popular_daos(self, platform: Optional[str] = None, limit: Optional[int] = None) -> list:
        """Return popular organizations from the provider."""
        self._check_platform(platform)
        return self.provider.list_popular_daos(limit)
