"""
Analysis output models: category scores, risks, health results, comparisons.

All models are frozen — an analysis result is created once per call and
may be shared (cached) between callers, so it must never be mutated.

``CategoryScores`` is a closed record with exactly five fields.  The
aggregator's weight table is checked against ``CATEGORY_NAMES`` at import
time, so a category cannot be added here without being weighted.

JSON output uses camelCase aliases (``overallScore``, ``categoryScores``);
call ``model_dump(by_alias=True)`` / ``model_dump_json(by_alias=True)``.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_FROZEN_CAMEL = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


# ── Enumerations ──────────────────────────────────────────────────────────────


class RiskType(str, Enum):
    """Severity of a detected governance risk."""

    HIGH   = "HIGH"
    MEDIUM = "MEDIUM"
    LOW    = "LOW"


class InvestmentSignal(str, Enum):
    """Coarse presentation signal derived from the overall score."""

    STRONG_BUY = "STRONG_BUY"
    BUY        = "BUY"
    HOLD       = "HOLD"
    AVOID      = "AVOID"


class RiskLevel(str, Enum):
    """Aggregate risk level derived from risk counts (not from score)."""

    CRITICAL = "CRITICAL"
    HIGH     = "HIGH"
    MEDIUM   = "MEDIUM"
    LOW      = "LOW"


# ── Scores ────────────────────────────────────────────────────────────────────

CATEGORY_NAMES: tuple[str, ...] = (
    "participation",
    "decentralization",
    "activity",
    "transparency",
    "stability",
)


class CategoryScores(BaseModel):
    """The five health dimensions, each an integer in [0, 100]."""

    model_config = _FROZEN_CAMEL

    participation:    int = Field(..., ge=0, le=100)
    decentralization: int = Field(..., ge=0, le=100)
    activity:         int = Field(..., ge=0, le=100)
    transparency:     int = Field(..., ge=0, le=100)
    stability:        int = Field(..., ge=0, le=100)

    def as_items(self) -> list[tuple[str, int]]:
        """``(category, score)`` pairs in declaration order."""
        return [(name, getattr(self, name)) for name in CATEGORY_NAMES]


# ── Risks ─────────────────────────────────────────────────────────────────────


class Risk(BaseModel):
    """A structured governance vulnerability finding."""

    model_config = _FROZEN_CAMEL

    type: RiskType
    category: str
    description: str
    impact: str
    mitigation: str


# ── Results ───────────────────────────────────────────────────────────────────


class GovernanceHealth(BaseModel):
    """Result of one DAO analysis.

    Attributes:
        dao: DAO display name (from the metrics record).
        overall_score: Weighted aggregate of ``category_scores``, 0–100.
        category_scores: The five category scores.
        risks: Detected risks in rule-declaration order.
        recommendations: Remediation strings; empty when no rule fired.
        last_updated: Caller-supplied analysis timestamp (UTC).
    """

    model_config = _FROZEN_CAMEL

    dao: str
    overall_score: int = Field(..., ge=0, le=100)
    category_scores: CategoryScores
    risks: list[Risk] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    last_updated: datetime


class DAORanking(BaseModel):
    """One row of a multi-DAO comparison."""

    model_config = _FROZEN_CAMEL

    rank: int = Field(..., ge=1)
    dao: str
    score: int = Field(..., ge=0, le=100)
    investment_signal: InvestmentSignal
    top_strength: str
    top_weakness: str
    risk_level: RiskLevel


class DAOComparison(BaseModel):
    """Ranked comparison of several analyses, best score first."""

    model_config = _FROZEN_CAMEL

    rankings: list[DAORanking] = Field(default_factory=list)
    summary: str = ""
