"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``TALLY_API_KEY`` and ``GOVERNANCE_HEALTH_*``

Entry point: ``load_config(config_path=None) -> AppConfig``

The CLI, the MCP server and the analyzer receive an ``AppConfig`` instance —
never raw dicts or individual env var lookups scattered through the codebase.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class TallyConfig(BaseModel):
    """Tally GraphQL API settings."""

    model_config = ConfigDict(frozen=True)

    api_url: str = "https://api.tally.xyz/query"
    api_key: Optional[str] = None
    chain_id: str = "eip155:1"
    timeout_seconds: float = 30.0
    max_retries: int = 2
    backoff_base_seconds: float = 0.5
    search_limit: int = 10
    proposal_limit: int = 20
    vote_limit: int = 50
    popular_limit: int = 10

    @field_validator("timeout_seconds", "backoff_base_seconds")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"Value must be >= 0, got {v}.")
        return v

    @field_validator("max_retries")
    @classmethod
    def validate_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"max_retries must be >= 0, got {v}.")
        return v

    @field_validator("search_limit", "proposal_limit", "vote_limit", "popular_limit")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Page sizes must be >= 1, got {v}.")
        return v


class CacheConfig(BaseModel):
    """In-memory write-through cache settings."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    analysis_ttl_seconds: float = 1800.0   # 30 minutes per analysis
    api_ttl_seconds: float = 300.0         # 5 minutes per Tally lookup
    max_entries: int = 512

    @field_validator("analysis_ttl_seconds", "api_ttl_seconds")
    @classmethod
    def validate_ttl(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Cache TTL must be > 0 seconds, got {v}.")
        return v

    @field_validator("max_entries")
    @classmethod
    def validate_max_entries(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_entries must be >= 1, got {v}.")
        return v


class AnalysisConfig(BaseModel):
    """Analysis service behaviour."""

    model_config = ConfigDict(frozen=True)

    default_platform: str = "tally"
    supported_platforms: list[str] = ["tally"]
    max_compare: int = 10
    compare_workers: int = 4

    @model_validator(mode="after")
    def validate_default_platform(self) -> "AnalysisConfig":
        if self.default_platform not in self.supported_platforms:
            raise ValueError(
                f"default_platform '{self.default_platform}' must be one of "
                f"{self.supported_platforms}."
            )
        return self

    @field_validator("max_compare", "compare_workers")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Value must be >= 1, got {v}.")
        return v


class ServerConfig(BaseModel):
    """MCP server identity."""

    model_config = ConfigDict(frozen=True)

    name: str = "governance-health-mcp"
    version: str = "1.0.0"


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    tally: TallyConfig = TallyConfig()
    cache: CacheConfig = CacheConfig()
    analysis: AnalysisConfig = AnalysisConfig()
    server: ServerConfig = ServerConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``; when that default file
            is absent (e.g. a wheel install) the built-in defaults are used.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If an explicit ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    raw: dict[str, Any] = {}
    if config_path is None:
        config_path = root / "config" / "default.toml"
        if config_path.exists():
            raw = _read_toml(config_path)
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                "Create it from config/default.toml or omit --config."
            )
        raw = _read_toml(config_path)

    # Also merge local.toml if present (gitignored local overrides)
    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        raw = _deep_merge(raw, _read_toml(local_config_path))

    # 3. Apply environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variables to the raw config dict.

    Supported overrides:
      TALLY_API_KEY                  → raw["tally"]["api_key"]
      GOVERNANCE_HEALTH_API_URL      → raw["tally"]["api_url"]
      GOVERNANCE_HEALTH_LOG_LEVEL    → raw["logging"]["level"]
      GOVERNANCE_HEALTH_DEBUG        → raw["debug"]
    """
    if api_key := os.environ.get("TALLY_API_KEY"):
        raw.setdefault("tally", {})["api_key"] = api_key

    if api_url := os.environ.get("GOVERNANCE_HEALTH_API_URL"):
        raw.setdefault("tally", {})["api_url"] = api_url

    if log_level := os.environ.get("GOVERNANCE_HEALTH_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("GOVERNANCE_HEALTH_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        tally=TallyConfig(**raw.get("tally", {})),
        cache=CacheConfig(**raw.get("cache", {})),
        analysis=AnalysisConfig(**raw.get("analysis", {})),
        server=ServerConfig(**raw.get("server", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
