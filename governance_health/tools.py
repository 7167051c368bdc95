"""
Tool handlers — the operations exposed to AI assistants.

Each handler takes a ``GovernanceAnalyzer`` plus the tool arguments and
returns the text payload of a tool result.  They are plain functions so the
CLI, the MCP server and the tests can call them without a protocol session.

  analyze_dao_health   JSON ``GovernanceHealth`` (camelCase keys)
  compare_daos         JSON ``DAOComparison``
  get_detailed_report  Markdown report
  identify_risks       JSON ``{"dao", "riskLevel", "risks"}``
  list_popular_daos    Markdown list

User-facing failures (``GovernanceHealthError``) and HTTP failures are
returned as ``"Error: <message>"`` text rather than raised, so an assistant
sees the message instead of a protocol error.
"""

from __future__ import annotations

import functools
import json
import logging
from typing import Callable, Optional, Sequence

import httpx
from pydantic import BaseModel

from governance_health.analyzer import GovernanceAnalyzer
from governance_health.exceptions import GovernanceHealthError
from governance_health.reporting.formatters import format_popular_daos

logger = logging.getLogger(__name__)

TOOL_DESCRIPTIONS: dict[str, str] = {
    "analyze_dao_health":  "Analyze the governance health of a DAO using comprehensive metrics",
    "compare_daos":        "Compare governance health between multiple DAOs",
    "get_detailed_report": "Generate comprehensive governance health reports with investment recommendations",
    "identify_risks":      "Identify specific governance risks and vulnerabilities for a DAO",
    "list_popular_daos":   "List popular DAOs with basic governance information",
}


def _to_json(model: BaseModel) -> str:
    return json.dumps(model.model_dump(by_alias=True, mode="json"), indent=2)


def tool_errors(func: Callable[..., str]) -> Callable[..., str]:
    """Render user-facing failures as ``Error: ...`` text."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> str:
        try:
            return func(*args, **kwargs)
        except (GovernanceHealthError, httpx.HTTPError) as exc:
            logger.warning("%s failed: %s", func.__name__, exc)
            return f"Error: {exc}"

    return wrapper


# ── Handlers ──────────────────────────────────────────────────────────────────


@tool_errors
def analyze_dao_health(
    analyzer: GovernanceAnalyzer,
    dao_identifier: str,
    platform: Optional[str] = None,
) -> str:
    return _to_json(analyzer.analyze_dao(dao_identifier, platform))


@tool_errors
def compare_daos(
    analyzer: GovernanceAnalyzer,
    dao_identifiers: Sequence[str],
    platform: Optional[str] = None,
) -> str:
    return _to_json(analyzer.compare_daos(dao_identifiers, platform))


@tool_errors
def get_detailed_report(
    analyzer: GovernanceAnalyzer,
    dao_identifier: str,
    platform: Optional[str] = None,
) -> str:
    return analyzer.get_detailed_report(dao_identifier, platform)


@tool_errors
def identify_risks(
    analyzer: GovernanceAnalyzer,
    dao_identifier: str,
    platform: Optional[str] = None,
) -> str:
    dao, risks, risk_level = analyzer.identify_risks(dao_identifier, platform)
    payload = {
        "dao": dao,
        "riskLevel": risk_level.value,
        "risks": [r.model_dump(by_alias=True, mode="json") for r in risks],
    }
    return json.dumps(payload, indent=2)


@tool_errors
def list_popular_daos(
    analyzer: GovernanceAnalyzer,
    platform: Optional[str] = None,
    limit: Optional[int] = None,
) -> str:
    return format_popular_daos(analyzer.list_popular_daos(platform, limit))
