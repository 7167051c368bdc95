"""
governance_health.reporting — Markdown rendering of analysis results.

This package only formats already-computed models; it performs no scoring
and no I/O.

Modules:
  formatters — detailed report, risk analysis, comparison, popular DAO list.
"""
