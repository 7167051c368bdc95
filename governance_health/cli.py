"""
Governance Health — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging (stderr).
  3. Build the analyzer (Tally client + in-memory cache).
  4. Execute the analysis.
  5. Report result to stdout; errors go to stderr with exit code 1.

Install and run::

    pip install -e .
    governance-health --help
    governance-health validate-config
    governance-health analyze uniswap
    governance-health compare uniswap compound aave
    governance-health report arbitrum
    governance-health risks ens --json
    governance-health list-daos --limit 5
    governance-health serve
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer

app = typer.Typer(
    name="governance-health",
    help="DAO governance health analytics — CLI and MCP server.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from governance_health.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from governance_health.utils.logging import configure_logging
    configure_logging(config.logging)


def _build_analyzer(config):
    """Wire the Tally client, cache and analyzer from config."""
    from governance_health.analyzer import GovernanceAnalyzer
    from governance_health.ingestion.tally_client import TallyClient
    from governance_health.utils.cache import TTLCache

    cache = None
    if config.cache.enabled:
        cache = TTLCache(
            default_ttl=config.cache.analysis_ttl_seconds,
            max_entries=config.cache.max_entries,
        )
    client = TallyClient(
        config.tally,
        cache=cache,
        cache_ttl_seconds=config.cache.api_ttl_seconds,
    )
    return GovernanceAnalyzer(client, config, cache=cache)


def _setup(config_path: Optional[str]):
    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    return config, _build_analyzer(config)


def _fail(exc: Exception) -> None:
    typer.echo(f"[ERROR] {exc}", err=True)
    raise typer.Exit(code=1)


def _user_errors() -> tuple[type[Exception], ...]:
    import httpx

    from governance_health.exceptions import GovernanceHealthError
    return (GovernanceHealthError, httpx.HTTPError)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.  The API key is
    reported as set/missing, never printed.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Tally API URL:    {config.tally.api_url}")
    typer.echo(f"  Tally API key:    {'set' if config.tally.api_key else 'MISSING'}")
    typer.echo(f"  Chain:            {config.tally.chain_id}")
    typer.echo(f"  Platforms:        {', '.join(config.analysis.supported_platforms)}")
    typer.echo(f"  Cache enabled:    {config.cache.enabled}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        dumped = config.model_dump()
        if dumped["tally"].get("api_key"):
            dumped["tally"]["api_key"] = "***"
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(dumped, indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config is valid.")


@app.command("analyze")
def analyze(
    dao: str = typer.Argument(..., help="DAO name or slug (e.g. uniswap)."),
    platform: Optional[str] = typer.Option(None, "--platform", help="Governance platform."),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Score one DAO's governance health."""
    from governance_health.reporting.formatters import format_health_summary

    _, analyzer = _setup(config_path)
    try:
        health = analyzer.analyze_dao(dao, platform)
    except _user_errors() as exc:
        _fail(exc)

    if as_json:
        typer.echo(json.dumps(health.model_dump(by_alias=True, mode="json"), indent=2))
    else:
        typer.echo(format_health_summary(health))


@app.command("compare")
def compare(
    daos: List[str] = typer.Argument(..., help="Two or more DAO names or slugs."),
    platform: Optional[str] = typer.Option(None, "--platform", help="Governance platform."),
    as_json: bool = typer.Option(False, "--json", help="Print the comparison as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Rank several DAOs by governance score."""
    from governance_health.reporting.formatters import format_comparison

    _, analyzer = _setup(config_path)
    try:
        comparison = analyzer.compare_daos(daos, platform)
    except _user_errors() as exc:
        _fail(exc)

    if as_json:
        typer.echo(json.dumps(comparison.model_dump(by_alias=True, mode="json"), indent=2))
    else:
        typer.echo(format_comparison(comparison))


@app.command("report")
def report(
    dao: str = typer.Argument(..., help="DAO name or slug."),
    platform: Optional[str] = typer.Option(None, "--platform", help="Governance platform."),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        help="Write the Markdown report to this file instead of stdout.",
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Print the detailed Markdown governance report."""
    _, analyzer = _setup(config_path)
    try:
        text = analyzer.get_detailed_report(dao, platform)
    except _user_errors() as exc:
        _fail(exc)

    if output:
        out_path = Path(output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text + "\n", encoding="utf-8")
        typer.echo(f"[OK] Report written to {out_path}")
    else:
        typer.echo(text)


@app.command("risks")
def risks(
    dao: str = typer.Argument(..., help="DAO name or slug."),
    platform: Optional[str] = typer.Option(None, "--platform", help="Governance platform."),
    as_json: bool = typer.Option(False, "--json", help="Print risks as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """List detected governance risks and the aggregate risk level."""
    from governance_health.reporting.formatters import format_risk_analysis

    _, analyzer = _setup(config_path)
    try:
        name, found, level = analyzer.identify_risks(dao, platform)
    except _user_errors() as exc:
        _fail(exc)

    if as_json:
        payload = {
            "dao": name,
            "riskLevel": level.value,
            "risks": [r.model_dump(by_alias=True, mode="json") for r in found],
        }
        typer.echo(json.dumps(payload, indent=2))
    else:
        typer.echo(format_risk_analysis(name, found, level))


@app.command("list-daos")
def list_daos(
    limit: Optional[int] = typer.Option(None, "--limit", min=1, help="Number of DAOs to list."),
    platform: Optional[str] = typer.Option(None, "--platform", help="Governance platform."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """List popular DAOs with their slugs."""
    from governance_health.reporting.formatters import format_popular_daos

    _, analyzer = _setup(config_path)
    try:
        orgs = analyzer.list_popular_daos(platform, limit)
    except _user_errors() as exc:
        _fail(exc)

    typer.echo(format_popular_daos(orgs))


@app.command("serve")
def serve(
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Run the MCP server on stdio."""
    from governance_health.server import run

    config, analyzer = _setup(config_path)
    if not config.tally.api_key:
        typer.echo("[WARN] TALLY_API_KEY is not set; tool calls will fail.", err=True)
    run(analyzer, config)


if __name__ == "__main__":
    app()
