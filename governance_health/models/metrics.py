"""
Normalized DAO governance metrics — the sole input of the scoring core.

``DAOMetrics`` is produced by a metrics provider (see
``governance_health/ingestion/metrics_builder.py``) and consumed unchanged by
every scorer, the risk detector and the recommendation generator.

Range conventions
-----------------
Percentage-like fields are nominally in [0, 100] but are NOT validated or
clamped here: upstream data occasionally exceeds the nominal range
(``delegate_activity`` is a blend that can pass 100).  Scorers clamp.

Missing values default to 0.  A provider must turn "no data" (e.g. no
decided proposals) into 0 before constructing the model; non-finite floats
are rejected.

JSON shape
----------
Fields are snake_case in Python and camelCase on the wire
(``avgVoterTurnout``); both spellings are accepted on input.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class DAOMetrics(BaseModel):
    """Governance metrics for one DAO at analysis time.

    Attributes:
        name: Display name of the governance (e.g. ``"Uniswap"``).
        symbol: Governance token symbol, ``""`` if unknown.
        total_proposals: Proposals ever created.
        active_proposals: Proposals currently open for voting.
        avg_voter_turnout: Mean share (%) of delegated voting power cast per proposal.
        token_concentration: Share (%) of cast voting power held by the largest voters.
        delegate_activity: Blended delegate participation metric (nominally 0–100+).
        proposal_success_rate: Share (%) of decided proposals that passed.
        avg_proposal_duration: Mean voting period in days.
        treasury_health: Execution follow-through (%) of passed proposals.
        community_engagement: Share (%) of proposals drawing meaningful turnout.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    name: str
    symbol: str = ""
    total_proposals: int = 0
    active_proposals: int = 0
    avg_voter_turnout: float = 0.0
    token_concentration: float = 0.0
    delegate_activity: float = 0.0
    proposal_success_rate: float = 0.0
    avg_proposal_duration: float = 0.0
    treasury_health: float = 0.0
    community_engagement: float = 0.0

    @field_validator(
        "avg_voter_turnout",
        "token_concentration",
        "delegate_activity",
        "proposal_success_rate",
        "avg_proposal_duration",
        "treasury_health",
        "community_engagement",
    )
    @classmethod
    def validate_finite(cls, v: float) -> float:
        if v != v or v in (float("inf"), float("-inf")):
            raise ValueError(f"Metric values must be finite numbers, got {v}.")
        return v
