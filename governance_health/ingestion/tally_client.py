"""
Tally GraphQL API client — the metrics provider for the ``tally`` platform.

API:   https://api.tally.xyz/query
Docs:  https://docs.tally.xyz/tally-features/tally-api

Credential setup (.env, gitignored):
  TALLY_API_KEY=your_key_here

Every request is a POST of ``{"query": ..., "variables": ...}`` with the
``Api-Key`` header.  A response carrying a top-level ``errors`` array is
treated as a failed call (``TallyAPIError``) even when the HTTP status is 200.

Identifier resolution (``get_dao_by_identifier``)
-------------------------------------------------
  1. Map well-known names to Tally slugs (``maker`` → ``makerdao``); any other
     identifier is lower-cased and used as the slug directly.
  2. Fetch the governance by slug.
  3. If nothing is found, run a name search and fetch the first hit in full.
  4. Otherwise return ``None`` — the caller raises ``DAONotFoundError``.

Retries
-------
Transport errors, 429 and 5xx gateway responses are retried ``max_retries``
times with exponential backoff (``backoff_base_seconds * 2**attempt``).  Other
status errors and GraphQL errors are not retried.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, ClassVar, Optional

import httpx

from governance_health.config import TallyConfig
from governance_health.exceptions import MissingAPIKeyError, TallyAPIError
from governance_health.ingestion.metrics_builder import build_metrics
from governance_health.models.metrics import DAOMetrics
from governance_health.utils.cache import TTLCache, cache_key
from governance_health.utils.time_utils import parse_iso_utc

logger = logging.getLogger(__name__)

PLATFORM = "tally"

RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({429, 500, 502, 503, 504})


# ── Response types ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TallyVote:
    """A single token vote on a proposal."""

    voter: str
    support: str        # "FOR" | "AGAINST" | "ABSTAIN"
    weight: float       # voting power in token base units


@dataclass
class TallyProposal:
    """A recent proposal and the votes fetched for it."""

    id: str
    title: str = ""
    status: str = ""
    created_at: Optional[datetime] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    votes: list[TallyVote] = field(default_factory=list)


@dataclass
class TallyGovernance:
    """Typed container for one Tally governance (governor) record."""

    id: str
    name: str
    slug: str
    chain_id: str = ""
    organization_name: str = ""
    token_symbol: str = ""
    token_supply: float = 0.0
    total_proposals: Optional[int] = None
    active_proposals: Optional[int] = None
    voters_count: Optional[int] = None
    delegated_votes: float = 0.0
    proposals: list[TallyProposal] = field(default_factory=list)


@dataclass(frozen=True)
class OrganizationSummary:
    """One entry of the popular-organizations listing."""

    name: str
    slug: str
    description: str = ""
    delegates_votes_count: Optional[int] = None
    token_owners_count: Optional[int] = None
    active_governors_count: Optional[int] = None
    chain_ids: tuple[str, ...] = ()


# ── GraphQL documents ──────────────────────────────────────────────────────────

_TIMESTAMP_FRAGMENT = "... on Block { timestamp } ... on BlocklessTimestamp { timestamp }"

GOVERNANCE_QUERY = f"""
query Governance($input: GovernanceInput!, $proposalLimit: Int!, $voteLimit: Int!) {{
  governance(input: $input) {{
    id
    name
    slug
    chainId
    organization {{ name slug }}
    tokens {{ id name symbol supply }}
    stats {{
      proposals {{ total active }}
      tokens {{ voters delegatedVotes }}
    }}
    proposals(input: {{
      sort: {{ isDescending: true, sortBy: CREATED_AT }}
      page: {{ limit: $proposalLimit }}
    }}) {{
      nodes {{
        id
        title
        status
        createdAt
        start {{ {_TIMESTAMP_FRAGMENT} }}
        end {{ {_TIMESTAMP_FRAGMENT} }}
        votes(input: {{ page: {{ limit: $voteLimit }} }}) {{
          nodes {{
            ... on TokenVote {{
              id
              support
              weight
              voter {{ address name }}
            }}
          }}
        }}
      }}
    }}
  }}
}}
"""

SEARCH_QUERY = """
query Governances($input: GovernancesInput!) {
  governances(input: $input) {
    nodes {
      id
      name
      slug
      chainId
      organization { name slug }
      tokens { id name symbol supply }
      stats { proposals { total } }
    }
  }
}
"""

ORGANIZATIONS_QUERY = """
query Organizations($input: OrganizationsInput!) {
  organizations(input: $input) {
    nodes {
      name
      slug
      metadata { description }
      chainIds
      delegatesVotesCount
      tokenOwnersCount
      activeGovernorsCount
    }
  }
}
"""


# ── Parsing helpers ────────────────────────────────────────────────────────────

def _to_float(value: Any) -> float:
    """Tally returns big integers as strings; anything unparseable → 0.0."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _to_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _timestamp(node: Optional[dict]) -> Optional[datetime]:
    if not node:
        return None
    return parse_iso_utc(node.get("timestamp"))


# ── Client ─────────────────────────────────────────────────────────────────────

class TallyClient:
    """Client for the Tally GraphQL API.

    Usage::

        from governance_health.config import load_config
        config = load_config()
        with TallyClient(config.tally) as client:
            metrics = client.get_dao_metrics("uniswap")

    Attributes:
        config: Tally section of ``AppConfig``.
        cache:  Optional TTL cache for governance lookups.
    """

    KNOWN_SLUGS: ClassVar[dict[str, str]] = {
        "uniswap":               "uniswap",
        "compound":              "compound",
        "aave":                  "aave",
        "makerdao":              "makerdao",
        "maker":                 "makerdao",
        "curve":                 "curve-dao",
        "yearn":                 "yearn-finance",
        "sushi":                 "sushiswap",
        "sushiswap":             "sushiswap",
        "arbitrum":              "arbitrum-dao",
        "optimism":              "optimism-collective",
        "polygon":               "polygon-ecosystem-dao",
        "ens":                   "ens",
        "ethereum-name-service": "ens",
        "balancer":              "balancer",
        "gitcoin":               "gitcoin",
        "bankless":              "banklessdao",
        "nouns":                 "nouns-dao",
        "apecoin":               "apecoin-dao",
    }

    def __init__(
        self,
        config: TallyConfig,
        cache: Optional[TTLCache] = None,
        cache_ttl_seconds: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialise the Tally client.

        Args:
            config: Tally API settings (URL, key, limits, retries).
            cache: Optional cache for governance lookups.
            cache_ttl_seconds: TTL for cached lookups (cache default if None).
            http_client: Pre-built ``httpx.Client``; one is created if omitted.
            sleep: Backoff sleep function; injectable for tests.
        """
        self.config = config
        self.cache = cache
        self._cache_ttl = cache_ttl_seconds
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(timeout=config.timeout_seconds)
        self._sleep = sleep

    def __enter__(self) -> "TallyClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    # ── Identifier resolution ──────────────────────────────────────────────────

    def resolve_slug(self, identifier: str) -> str:
        """Map a DAO name to its Tally slug (lower-cased passthrough otherwise)."""
        key = identifier.strip().lower()
        return self.KNOWN_SLUGS.get(key, key)

    def get_dao_by_identifier(self, identifier: str) -> Optional[TallyGovernance]:
        """Resolve a DAO name or slug to a full governance record.

        Returns:
            ``TallyGovernance`` or ``None`` when neither slug lookup nor
            search finds a match.
        """
        slug = self.resolve_slug(identifier)
        governance = self.get_governance_by_slug(slug)
        if governance is not None:
            return governance

        results = self.search_governances(identifier)
        if results:
            logger.info(
                "Tally: '%s' resolved via search to slug '%s'", identifier, results[0].slug
            )
            return self.get_governance_by_slug(results[0].slug)
        return None

    def get_dao_metrics(self, identifier: str) -> Optional[DAOMetrics]:
        """Fetch a governance and prepare its ``DAOMetrics``.

        Returns:
            ``DAOMetrics`` or ``None`` if the DAO cannot be found.
        """
        governance = self.get_dao_by_identifier(identifier)
        if governance is None:
            return None
        return build_metrics(governance, vote_page_size=self.config.vote_limit)

    # ── API calls ──────────────────────────────────────────────────────────────

    def get_governance_by_slug(
        self,
        slug: str,
        chain_id: Optional[str] = None,
    ) -> Optional[TallyGovernance]:
        """Fetch one governance with its recent proposals and votes.

        GraphQL errors are logged and reported as "not found" (``None``) so
        the caller can fall back to search; transport failures propagate.
        """
        key = cache_key("governance", PLATFORM, slug)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Tally: cache hit for %s", key)
                return cached

        variables = {
            "input": {"filters": {"slug": slug, "chainId": chain_id or self.config.chain_id}},
            "proposalLimit": self.config.proposal_limit,
            "voteLimit": self.config.vote_limit,
        }
        try:
            data = self._post(GOVERNANCE_QUERY, variables)
        except TallyAPIError as exc:
            logger.warning("Tally: governance lookup for '%s' failed: %s", slug, exc)
            return None

        node = data.get("governance")
        if not node:
            return None

        governance = self._parse_governance(node)
        if self.cache is not None:
            self.cache.set(key, governance, ttl=self._cache_ttl)
        return governance

    def search_governances(self, query: str) -> list[TallyGovernance]:
        """Search governances by name, most proposals first."""
        variables = {
            "input": {
                "filters": {"search": query, "chainId": self.config.chain_id},
                "sort": {"isDescending": True, "sortBy": "PROPOSAL_COUNT"},
                "page": {"limit": self.config.search_limit},
            }
        }
        try:
            data = self._post(SEARCH_QUERY, variables)
        except TallyAPIError as exc:
            logger.warning("Tally: search for '%s' failed: %s", query, exc)
            return []

        nodes = (data.get("governances") or {}).get("nodes") or []
        return [self._parse_governance(n) for n in nodes if n and n.get("slug")]

    def list_popular_daos(self, limit: Optional[int] = None) -> list[OrganizationSummary]:
        """List organizations ordered by delegated voting power.

        Raises:
            TallyAPIError: On GraphQL errors (no fallback exists for listings).
        """
        page_size = limit or self.config.popular_limit
        variables = {
            "input": {
                "sort": {"isDescending": True, "sortBy": "DELEGATES_VOTES_COUNT"},
                "page": {"limit": page_size},
            }
        }
        data = self._post(ORGANIZATIONS_QUERY, variables)
        nodes = (data.get("organizations") or {}).get("nodes") or []
        return [
            OrganizationSummary(
                name=n.get("name", ""),
                slug=n.get("slug", ""),
                description=(n.get("metadata") or {}).get("description") or "",
                delegates_votes_count=_to_int(n.get("delegatesVotesCount")),
                token_owners_count=_to_int(n.get("tokenOwnersCount")),
                active_governors_count=_to_int(n.get("activeGovernorsCount")),
                chain_ids=tuple(n.get("chainIds") or ()),
            )
            for n in nodes[:page_size]
        ]

    # ── Transport ──────────────────────────────────────────────────────────────

    def _post(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """POST a GraphQL document and return its ``data`` object.

        Raises:
            MissingAPIKeyError: If no API key is configured.
            TallyAPIError: On GraphQL errors, non-retryable status, or malformed body.
            httpx.HTTPError: When retryable failures persist past ``max_retries``.
        """
        if not self.config.api_key:
            raise MissingAPIKeyError()

        headers = {"Api-Key": self.config.api_key, "Content-Type": "application/json"}
        attempt = 0
        while True:
            try:
                resp = self._http.post(
                    self.config.api_url,
                    json={"query": query, "variables": variables},
                    headers=headers,
                    timeout=self.config.timeout_seconds,
                )
                resp.raise_for_status()
                break
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                if status not in RETRYABLE_STATUS_CODES:
                    raise TallyAPIError(f"HTTP {status}: {exc.response.text[:200]}") from exc
                if attempt >= self.config.max_retries:
                    raise
            except httpx.TransportError:
                if attempt >= self.config.max_retries:
                    raise
            delay = self.config.backoff_base_seconds * (2 ** attempt)
            attempt += 1
            logger.warning(
                "Tally: request failed, retry %d/%d in %.1fs",
                attempt, self.config.max_retries, delay,
            )
            self._sleep(delay)

        try:
            body = resp.json()
        except ValueError as exc:
            raise TallyAPIError("response body is not valid JSON") from exc

        if not isinstance(body, dict):
            raise TallyAPIError("response body is not a JSON object")
        if body.get("errors"):
            raise TallyAPIError(body["errors"])
        data = body.get("data")
        if not isinstance(data, dict):
            raise TallyAPIError("response has no 'data' object")
        return data

    # ── Response parsers ───────────────────────────────────────────────────────

    def _parse_governance(self, node: dict) -> TallyGovernance:
        """Parse a ``governance`` / ``governances.nodes[]`` object."""
        tokens = node.get("tokens") or []
        token = tokens[0] if tokens else {}
        stats = node.get("stats") or {}
        proposal_stats = stats.get("proposals") or {}
        token_stats = stats.get("tokens") or {}
        organization = node.get("organization") or {}

        proposals = [
            self._parse_proposal(p)
            for p in ((node.get("proposals") or {}).get("nodes") or [])
            if p
        ]

        return TallyGovernance(
            id=str(node.get("id", "")),
            name=node.get("name") or organization.get("name") or node.get("slug", ""),
            slug=node.get("slug", ""),
            chain_id=node.get("chainId") or "",
            organization_name=organization.get("name") or "",
            token_symbol=token.get("symbol") or "",
            token_supply=_to_float(token.get("supply")),
            total_proposals=_to_int(proposal_stats.get("total")),
            active_proposals=_to_int(proposal_stats.get("active")),
            voters_count=_to_int(token_stats.get("voters")),
            delegated_votes=_to_float(token_stats.get("delegatedVotes")),
            proposals=proposals,
        )

    def _parse_proposal(self, node: dict) -> TallyProposal:
        votes = []
        for v in (node.get("votes") or {}).get("nodes") or []:
            if not v:
                continue
            voter = (v.get("voter") or {}).get("address")
            if not voter:
                continue
            votes.append(
                TallyVote(
                    voter=voter.lower(),
                    support=str(v.get("support", "")).upper(),
                    weight=_to_float(v.get("weight")),
                )
            )
        return TallyProposal(
            id=str(node.get("id", "")),
            title=node.get("title") or "",
            status=str(node.get("status") or "").lower(),
            created_at=parse_iso_utc(node.get("createdAt")),
            start_at=_timestamp(node.get("start")),
            end_at=_timestamp(node.get("end")),
            votes=votes,
        )
