"""
Markdown formatters for analysis results.

All formatters accept already-computed models and return plain multi-line
strings suitable for an MCP text result or ``typer.echo()``.  They never
score anything themselves; classifiers come from ``governance_health.scoring``.

Detailed report layout
----------------------
::

    # Uniswap Governance Health Report

    ## Executive Summary
    **Overall Score: 67/100**
    **Investment Signal: BUY**
    **Health Assessment: Good**

    ## Category Breakdown
    - **participation**: 65/100
    ...

    ## Risk Assessment
    **Total Risks Identified: 0**

    ### High Priority Risks
    None identified

    ### Medium Priority Risks
    None identified

    ## Investment Recommendations

    ## Key Metrics Summary
    - **Risk Level**: LOW
    - **Governance Maturity**: Medium
    - **Diversification**: Well distributed

    ---
    *Report generated on 2026-01-15T12:00:00Z*

Empty risk sections render ``None identified``; an empty recommendation
list leaves the section header with no bullets.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from governance_health.models.health import (
    DAOComparison,
    GovernanceHealth,
    Risk,
    RiskLevel,
    RiskType,
)
from governance_health.scoring.classification import (
    HEALTH_BAND_DESCRIPTIONS,
    classify_governance_maturity,
    classify_health_band,
    classify_investment_signal,
    describe_diversification,
)
from governance_health.scoring.risk_detector import classify_risk_level
from governance_health.utils.bounds import clamp_score
from governance_health.utils.time_utils import to_iso_utc

if TYPE_CHECKING:
    from governance_health.ingestion.tally_client import OrganizationSummary

NONE_IDENTIFIED = "None identified"


# ── Helpers ───────────────────────────────────────────────────────────────────


def _risk_lines(risks: Sequence[Risk], risk_type: RiskType) -> str:
    lines = [
        f"- **{r.category}**: {r.description}" for r in risks if r.type == risk_type
    ]
    return "\n".join(lines) or NONE_IDENTIFIED


def _bullets(items: Sequence[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def _fmt_count(value: int | None) -> str:
    return f"{value:,}" if value is not None else "N/A"


# ── Detailed report ───────────────────────────────────────────────────────────


def assemble_report(health: GovernanceHealth) -> str:
    """Render the detailed governance report for one analysis.

    Args:
        health: Completed analysis; its ``last_updated`` is the report timestamp.

    Returns:
        Markdown report string.
    """
    score = clamp_score(health.overall_score)
    band  = classify_health_band(score)

    category_lines = "\n".join(
        f"- **{name}**: {clamp_score(value)}/100"
        for name, value in health.category_scores.as_items()
    )

    sections = [
        f"# {health.dao} Governance Health Report",
        "",
        "## Executive Summary",
        f"**Overall Score: {score}/100**",
        f"**Investment Signal: {classify_investment_signal(score).value}**",
        f"**Health Assessment: {band}**",
        "",
        "## Category Breakdown",
        category_lines,
        "",
        "## Risk Assessment",
        f"**Total Risks Identified: {len(health.risks)}**",
        "",
        "### High Priority Risks",
        _risk_lines(health.risks, RiskType.HIGH),
        "",
        "### Medium Priority Risks",
        _risk_lines(health.risks, RiskType.MEDIUM),
        "",
        "## Investment Recommendations",
        _bullets(health.recommendations),
        "",
        "## Key Metrics Summary",
        f"- **Risk Level**: {classify_risk_level(health.risks).value}",
        f"- **Governance Maturity**: {classify_governance_maturity(score)}",
        f"- **Diversification**: {describe_diversification(health.category_scores)}",
        "",
        "---",
        f"*Report generated on {to_iso_utc(health.last_updated)}*",
    ]
    return "\n".join(sections)


def format_health_summary(health: GovernanceHealth) -> str:
    """Short plain-text summary used by the ``analyze`` CLI command."""
    score = clamp_score(health.overall_score)
    band  = classify_health_band(score)
    lines = [
        "",
        f"=== {health.dao} ===",
        f"  Overall score:     {score}/100 ({band})",
        f"  Investment signal: {classify_investment_signal(score).value}",
        f"  Risk level:        {classify_risk_level(health.risks).value}",
        f"  Assessment:        {HEALTH_BAND_DESCRIPTIONS[band]}",
        "",
        "  Categories:",
    ]
    for name, value in health.category_scores.as_items():
        lines.append(f"    {name:<18} {clamp_score(value):>3}/100")
    if health.recommendations:
        lines.append("")
        lines.append("  Recommendations:")
        lines.extend(f"    - {rec}" for rec in health.recommendations)
    return "\n".join(lines)


# ── Risk analysis ─────────────────────────────────────────────────────────────


def format_risk_analysis(dao: str, risks: Sequence[Risk], risk_level: RiskLevel) -> str:
    """Render the risk-only view for one DAO."""
    lines = [
        f"# Governance Risk Analysis: {dao}",
        "",
        f"## Risk Level: {risk_level.value}",
        "",
        "## Identified Risks",
    ]
    if not risks:
        lines.append("")
        lines.append(NONE_IDENTIFIED)
    for risk in risks:
        lines.extend([
            "",
            f"### {risk.category} ({risk.type.value})",
            f"**Description**: {risk.description}",
            f"**Impact**: {risk.impact}",
            f"**Mitigation**: {risk.mitigation}",
        ])
    return "\n".join(lines)


# ── Comparison ────────────────────────────────────────────────────────────────


def format_comparison(comparison: DAOComparison) -> str:
    """Render a ranked comparison as a Markdown table plus summary."""
    lines = ["# DAO Governance Comparison", ""]
    if not comparison.rankings:
        lines.append("(no DAOs could be compared)")
        return "\n".join(lines)

    lines.append("| Rank | DAO | Score | Signal | Top Strength | Top Weakness | Risk Level |")
    lines.append("|---:|---|---:|---|---|---|---|")
    for r in comparison.rankings:
        lines.append(
            f"| {r.rank} | {r.dao} | {r.score}/100 | {r.investment_signal.value} "
            f"| {r.top_strength} | {r.top_weakness} | {r.risk_level.value} |"
        )
    if comparison.summary:
        lines.append("")
        lines.append("## Summary")
        lines.append(comparison.summary)
    return "\n".join(lines)


# ── Popular DAOs ──────────────────────────────────────────────────────────────


def format_popular_daos(orgs: Sequence["OrganizationSummary"]) -> str:
    """Render the popular-organization list with slugs for follow-up calls."""
    lines = ["# Popular DAOs by Governance Activity", ""]
    if not orgs:
        lines.append("(no organizations returned)")
        return "\n".join(lines)

    for index, org in enumerate(orgs, start=1):
        lines.extend([
            f"{index}. **{org.name}** ({org.slug})",
            f"   - Delegates: {_fmt_count(org.delegates_votes_count)}",
            f"   - Token Holders: {_fmt_count(org.token_owners_count)}",
            f"   - Active Governors: {org.active_governors_count or 0}",
            f"   - {org.description or 'No description available'}",
            "",
        ])
    lines.append("*Use the slug (in parentheses) to analyze specific DAOs*")
    return "\n".join(lines)
