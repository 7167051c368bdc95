"""
Metric preparation: Tally governance record → ``DAOMetrics``.

Pure and deterministic — no I/O, no clock.  Everything is derived from the
governance stats plus the recent proposals (and their first vote page)
fetched by ``TallyClient``.

Derivations
-----------
  total / active proposals   stats; fallback to counts over recent proposals
  proposal_success_rate      passed-like / decided recent proposals × 100
  avg_voter_turnout          mean over proposals of Σ vote weight / delegated votes × 100
  token_concentration        weight share of the 10 largest voters × 100
  delegate_activity          ½ (avg votes per proposal / page × 100)
                             + ½ (unique voters / page × 100)
  avg_proposal_duration      mean(end − start) in days
  treasury_health            executed / passed recent proposals × 100
  community_engagement       share of proposals with ≥ 10 votes × 100

A voter's weight is the largest weight they cast on any recent proposal
(their voting power snapshot), not the sum across proposals.

Anything that cannot be computed (no proposals, zero delegated votes,
missing timestamps) becomes 0.  Non-finite intermediate values also become 0
so the model validator never sees NaN or infinity.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterable

from governance_health.models.metrics import DAOMetrics

if TYPE_CHECKING:
    from governance_health.ingestion.tally_client import TallyGovernance, TallyProposal

PASSED_STATUSES: frozenset[str] = frozenset({
    "succeeded", "queued", "executed", "crosschainexecuted", "passed",
})
FAILED_STATUSES: frozenset[str] = frozenset({
    "defeated", "expired", "vetoed",
})
EXECUTED_STATUSES: frozenset[str] = frozenset({"executed", "crosschainexecuted"})
ACTIVE_STATUSES: frozenset[str] = frozenset({"active", "pending", "extended"})

TOP_VOTERS = 10
ENGAGED_VOTE_COUNT = 10
SECONDS_PER_DAY = 86_400.0
DEFAULT_VOTE_PAGE_SIZE = 50


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def _pct(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    return _finite(numerator / denominator * 100.0)


def _mean(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        return 0.0
    return _finite(sum(values) / len(values))


# ── Individual metrics ────────────────────────────────────────────────────────


def success_rate(proposals: list["TallyProposal"]) -> float:
    passed = sum(1 for p in proposals if p.status in PASSED_STATUSES)
    failed = sum(1 for p in proposals if p.status in FAILED_STATUSES)
    return _pct(passed, passed + failed)


def voter_turnout(proposals: list["TallyProposal"], delegated_votes: float) -> float:
    if delegated_votes <= 0 or not proposals:
        return 0.0
    return _mean(
        _pct(sum(v.weight for v in p.votes), delegated_votes) for p in proposals
    )


def token_concentration(proposals: list["TallyProposal"], top_n: int = TOP_VOTERS) -> float:
    """Share of observed voting power held by the ``top_n`` largest voters."""
    power: dict[str, float] = {}
    for proposal in proposals:
        for vote in proposal.votes:
            if vote.weight > power.get(vote.voter, 0.0):
                power[vote.voter] = vote.weight
    total = sum(power.values())
    top = sum(sorted(power.values(), reverse=True)[:top_n])
    return _pct(top, total)


def delegate_activity(
    proposals: list["TallyProposal"],
    vote_page_size: int = DEFAULT_VOTE_PAGE_SIZE,
) -> float:
    """Blend of votes-per-proposal and distinct voters, both relative to one vote page.

    Not capped: a DAO whose distinct voters across proposals exceed one page
    scores above 100 here; the activity scorer clamps.
    """
    if not proposals or vote_page_size <= 0:
        return 0.0
    avg_votes = _mean(len(p.votes) for p in proposals)
    unique_voters = len({v.voter for p in proposals for v in p.votes})
    return _finite(
        0.5 * _pct(avg_votes, vote_page_size) + 0.5 * _pct(unique_voters, vote_page_size)
    )


def proposal_duration_days(proposals: list["TallyProposal"]) -> float:
    durations = [
        (p.end_at - p.start_at).total_seconds() / SECONDS_PER_DAY
        for p in proposals
        if p.start_at is not None and p.end_at is not None and p.end_at >= p.start_at
    ]
    return _mean(durations)


def treasury_health(proposals: list["TallyProposal"]) -> float:
    passed = sum(1 for p in proposals if p.status in PASSED_STATUSES)
    executed = sum(1 for p in proposals if p.status in EXECUTED_STATUSES)
    return _pct(executed, passed)


def community_engagement(
    proposals: list["TallyProposal"],
    min_votes: int = ENGAGED_VOTE_COUNT,
) -> float:
    engaged = sum(1 for p in proposals if len(p.votes) >= min_votes)
    return _pct(engaged, len(proposals))


# ── Entry point ───────────────────────────────────────────────────────────────


def build_metrics(
    governance: "TallyGovernance",
    vote_page_size: int = DEFAULT_VOTE_PAGE_SIZE,
) -> DAOMetrics:
    """Derive ``DAOMetrics`` from a fetched governance record.

    Args:
        governance: Governance with recent proposals and votes.
        vote_page_size: Vote page limit used when fetching; the reference
            scale for ``delegate_activity``.

    Returns:
        Frozen ``DAOMetrics`` with every field finite.
    """
    proposals = governance.proposals

    total = governance.total_proposals
    if total is None:
        total = len(proposals)
    active = governance.active_proposals
    if active is None:
        active = sum(1 for p in proposals if p.status in ACTIVE_STATUSES)

    return DAOMetrics(
        name=governance.name or governance.slug,
        symbol=governance.token_symbol,
        total_proposals=max(total, 0),
        active_proposals=max(active, 0),
        avg_voter_turnout=voter_turnout(proposals, governance.delegated_votes),
        token_concentration=token_concentration(proposals),
        delegate_activity=delegate_activity(proposals, vote_page_size),
        proposal_success_rate=success_rate(proposals),
        avg_proposal_duration=proposal_duration_days(proposals),
        treasury_health=treasury_health(proposals),
        community_engagement=community_engagement(proposals),
    )
