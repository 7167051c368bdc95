"""
Tests for governance_health.reporting.formatters.

Covers:
  - assemble_report(): section order, exact headline lines, empty sections
  - Distressed report lists HIGH and MEDIUM risks separately
  - format_risk_analysis(), format_comparison(), format_popular_daos()
"""

from __future__ import annotations

from datetime import datetime, timezone

from governance_health.analyzer import analyze_metrics, build_comparison
from governance_health.ingestion.tally_client import OrganizationSummary
from governance_health.models.health import RiskLevel
from governance_health.reporting.formatters import (
    NONE_IDENTIFIED,
    assemble_report,
    format_comparison,
    format_health_summary,
    format_popular_daos,
    format_risk_analysis,
)

_NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


class TestAssembleReport:
    def test_healthy_report_headlines(self, healthy_metrics):
        report = assemble_report(analyze_metrics(healthy_metrics, _NOW))
        lines = report.splitlines()
        assert lines[0] == "# Uniswap Governance Health Report"
        assert "**Overall Score: 67/100**" in lines
        assert "**Investment Signal: BUY**" in lines
        assert "**Health Assessment: Good**" in lines
        assert "**Total Risks Identified: 0**" in lines

    def test_category_breakdown_lines(self, healthy_metrics):
        report = assemble_report(analyze_metrics(healthy_metrics, _NOW))
        for line in (
            "- **participation**: 65/100",
            "- **decentralization**: 67/100",
            "- **activity**: 62/100",
            "- **transparency**: 76/100",
            "- **stability**: 69/100",
        ):
            assert line in report

    def test_section_order(self, healthy_metrics):
        report = assemble_report(analyze_metrics(healthy_metrics, _NOW))
        headers = [
            "## Executive Summary",
            "## Category Breakdown",
            "## Risk Assessment",
            "### High Priority Risks",
            "### Medium Priority Risks",
            "## Investment Recommendations",
            "## Key Metrics Summary",
        ]
        positions = [report.index(h) for h in headers]
        assert positions == sorted(positions)

    def test_empty_risk_sections_say_none_identified(self, healthy_metrics):
        report = assemble_report(analyze_metrics(healthy_metrics, _NOW))
        assert report.count(NONE_IDENTIFIED) == 2

    def test_key_metrics_and_footer(self, healthy_metrics):
        report = assemble_report(analyze_metrics(healthy_metrics, _NOW))
        assert "- **Risk Level**: LOW" in report
        assert "- **Governance Maturity**: Medium" in report
        assert "- **Diversification**: Well distributed" in report
        assert report.endswith("---\n*Report generated on 2026-01-15T12:00:00Z*")

    def test_distressed_report(self, distressed_metrics):
        report = assemble_report(analyze_metrics(distressed_metrics, _NOW))
        assert "**Investment Signal: AVOID**" in report
        assert "**Health Assessment: Poor**" in report
        assert "**Total Risks Identified: 5**" in report
        assert NONE_IDENTIFIED not in report
        high_section = report.split("### High Priority Risks")[1].split("### Medium")[0]
        assert "- **Participation**:" in high_section
        assert "- **Activity**:" not in high_section
        assert "- **Risk Level**: CRITICAL" in report
        assert "- **Diversification**: Concentrated" in report
        assert "- Address high-priority risks immediately" in report

    def test_deterministic(self, healthy_metrics):
        health = analyze_metrics(healthy_metrics, _NOW)
        assert assemble_report(health) == assemble_report(health)


class TestOtherFormatters:
    def test_health_summary(self, healthy_metrics):
        text = format_health_summary(analyze_metrics(healthy_metrics, _NOW))
        assert "=== Uniswap ===" in text
        assert "67/100 (Good)" in text
        assert "Recommendations:" not in text

    def test_risk_analysis_lists_each_risk(self, distressed_metrics):
        health = analyze_metrics(distressed_metrics, _NOW)
        text = format_risk_analysis(health.dao, health.risks, RiskLevel.CRITICAL)
        assert text.startswith("# Governance Risk Analysis: Ghost DAO")
        assert "## Risk Level: CRITICAL" in text
        assert text.count("**Mitigation**:") == 5
        assert "### Centralization (HIGH)" in text

    def test_risk_analysis_without_risks(self):
        text = format_risk_analysis("Uniswap", [], RiskLevel.LOW)
        assert NONE_IDENTIFIED in text

    def test_comparison_table(self, healthy_metrics, distressed_metrics):
        comparison = build_comparison([
            analyze_metrics(distressed_metrics, _NOW),
            analyze_metrics(healthy_metrics, _NOW),
        ])
        text = format_comparison(comparison)
        rows = [line for line in text.splitlines() if line.startswith("| 1 ") or line.startswith("| 2 ")]
        assert rows[0].startswith("| 1 | Uniswap | 67/100 | BUY")
        assert rows[1].startswith("| 2 | Ghost DAO")
        assert "## Summary" in text

    def test_popular_daos(self):
        orgs = [
            OrganizationSummary(
                name="Uniswap",
                slug="uniswap",
                description="DEX",
                delegates_votes_count=1_234_567,
                token_owners_count=None,
                active_governors_count=2,
            )
        ]
        text = format_popular_daos(orgs)
        assert "1. **Uniswap** (uniswap)" in text
        assert "Delegates: 1,234,567" in text
        assert "Token Holders: N/A" in text
        assert "Active Governors: 2" in text
        assert text.endswith("*Use the slug (in parentheses) to analyze specific DAOs*")

    def test_popular_daos_empty(self):
        assert "(no organizations returned)" in format_popular_daos([])
