"""
User-facing error types.

Every failure that should reach an end user as a descriptive message derives
from ``GovernanceHealthError``.  The tool layer and the CLI catch this base
class and render ``str(exc)``; anything else is treated as a bug and allowed
to propagate.

The scoring core never raises any of these: it is total over numeric input.
"""

from __future__ import annotations

from typing import Iterable

# Shown to users when an identifier cannot be resolved.
SUGGESTED_DAOS: tuple[str, ...] = (
    "uniswap", "compound", "aave", "makerdao", "curve", "yearn",
    "sushi", "arbitrum", "optimism", "ens", "balancer",
)


class GovernanceHealthError(RuntimeError):
    """Base class for failures surfaced to the end user."""


class DAONotFoundError(GovernanceHealthError):
    """Raised when no governance matches an identifier.

    Attributes:
        identifier: The DAO name or slug that could not be resolved.
    """

    def __init__(self, identifier: str, suggestions: Iterable[str] = SUGGESTED_DAOS) -> None:
        self.identifier = identifier
        super().__init__(
            f"DAO '{identifier}' not found. Try: {', '.join(suggestions)}"
        )


class TallyAPIError(GovernanceHealthError):
    """Raised when the Tally API answers with GraphQL errors or a malformed body.

    Attributes:
        errors: The raw ``errors`` payload (or a short description).
    """

    def __init__(self, errors: object) -> None:
        self.errors = errors
        super().__init__(f"API Error: {errors}")


class UnsupportedPlatformError(GovernanceHealthError):
    """Raised for a governance platform other than the supported ones."""

    def __init__(self, platform: str, supported: Iterable[str] = ("tally",)) -> None:
        self.platform = platform
        super().__init__(
            f"Platform '{platform}' not supported. "
            f"Supported platforms: {', '.join(supported)}"
        )


class NoDAOsAnalyzedError(GovernanceHealthError):
    """Raised when every identifier of a comparison failed."""

    def __init__(self, identifiers: Iterable[str]) -> None:
        self.identifiers = list(identifiers)
        super().__init__(
            "No DAOs could be analyzed. Check the identifiers: "
            + ", ".join(self.identifiers)
        )


class MissingAPIKeyError(GovernanceHealthError):
    """Raised when a Tally call is attempted without an API key."""

    def __init__(self) -> None:
        super().__init__(
            "TALLY_API_KEY must be set in .env or the environment "
            "(or [tally] api_key in config/local.toml)."
        )
