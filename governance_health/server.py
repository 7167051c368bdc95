"""
MCP server exposing the governance tools over stdio.

stdout carries the protocol stream, so logging is configured to stderr
(see ``utils/logging.py``) before the server starts.

Usage::

    governance-health serve
    # or, from an MCP client config:
    #   {"command": "governance-health", "args": ["serve"]}
"""

from __future__ import annotations

import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP

from governance_health import tools
from governance_health.analyzer import GovernanceAnalyzer
from governance_health.config import AppConfig

logger = logging.getLogger(__name__)


def create_server(analyzer: GovernanceAnalyzer, config: AppConfig) -> FastMCP:
    """Build a FastMCP server with the five governance tools registered.

    Args:
        analyzer: Shared analyzer; tool calls run concurrently against it.
        config: Application configuration (server identity, default platform).
    """
    server = FastMCP(config.server.name)
    default_platform = config.analysis.default_platform

    @server.tool(name="analyze_dao_health", description=tools.TOOL_DESCRIPTIONS["analyze_dao_health"])
    def analyze_dao_health(dao_identifier: str, platform: str = default_platform) -> str:
        return tools.analyze_dao_health(analyzer, dao_identifier, platform)

    @server.tool(name="compare_daos", description=tools.TOOL_DESCRIPTIONS["compare_daos"])
    def compare_daos(dao_identifiers: list[str], platform: str = default_platform) -> str:
        return tools.compare_daos(analyzer, dao_identifiers, platform)

    @server.tool(name="get_detailed_report", description=tools.TOOL_DESCRIPTIONS["get_detailed_report"])
    def get_detailed_report(dao_identifier: str, platform: str = default_platform) -> str:
        return tools.get_detailed_report(analyzer, dao_identifier, platform)

    @server.tool(name="identify_risks", description=tools.TOOL_DESCRIPTIONS["identify_risks"])
    def identify_risks(dao_identifier: str, platform: str = default_platform) -> str:
        return tools.identify_risks(analyzer, dao_identifier, platform)

    @server.tool(name="list_popular_daos", description=tools.TOOL_DESCRIPTIONS["list_popular_daos"])
    def list_popular_daos(platform: str = default_platform, limit: Optional[int] = None) -> str:
        return tools.list_popular_daos(analyzer, platform, limit)

    logger.debug("MCP server '%s' created", config.server.name)
    return server


def run(analyzer: GovernanceAnalyzer, config: AppConfig) -> None:
    """Serve over stdio until the client disconnects."""
    server = create_server(analyzer, config)
    logger.info("Governance Health MCP server %s running on stdio", config.server.version)
    server.run(transport="stdio")
