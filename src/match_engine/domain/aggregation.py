"""Combine factor scores into a bounded total, a breakdown and reasons.

Usage example:
    from match_engine.domain.aggregation import aggregate
    from match_engine.domain.profiles import Factor
    from match_engine.domain.weights import DEFAULT_JOB_WEIGHTS

    scores = {factor: 1.0 for factor in DEFAULT_JOB_WEIGHTS.factors}
    result = aggregate(scores, {}, DEFAULT_JOB_WEIGHTS)
    assert result.total == 100.0
    assert result.tier == "excellent"
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType

from .factors import NEUTRAL_SCORE
from .flags import MatchFlag, Recommendation
from .profiles import Factor, MatchDomain
from .weights import RECOMMENDED_THRESHOLD, WEIGHT_TOTAL, WeightTable


def _empty_mapping() -> MappingProxyType[str, float]:
    return MappingProxyType({})


@dataclass(frozen=True)
class Aggregate:
    """Weighted outcome of one pair before identity and skills are attached."""

    total: float
    bonus: float
    breakdown: Mapping[Factor, float]
    bonus_breakdown: Mapping[str, float]
    reasons: tuple[str, ...]
    tier: str
    recommended: bool


@dataclass(frozen=True)
class MatchResult:
    """Score, breakdown and explanation for one subject/target pair."""

    subject_id: str
    target_id: str
    domain: MatchDomain
    total: float
    bonus: float
    breakdown: Mapping[Factor, float]
    factor_scores: Mapping[Factor, float]
    bonus_breakdown: Mapping[str, float] = field(default_factory=_empty_mapping)
    matched_skills: tuple[str, ...] = ()
    missing_skills: tuple[str, ...] = ()
    reasons: tuple[str, ...] = ()
    tier: str = "possible"
    recommended: bool = False
    flags: tuple[MatchFlag, ...] = ()
    green_flags: tuple[MatchFlag, ...] = ()
    recommendations: tuple[Recommendation, ...] = ()
    capacity: float | None = None
    posted_at: datetime | None = None
    # Set by the ranker when the preference bonus decided the order.
    bonus_applied: bool = False

    def effective_score(self, *, include_bonus: bool | None = None) -> float:
        """Total plus bonus when requested; by default, as the ranker ordered it."""
        if include_bonus is None:
            include_bonus = self.bonus_applied
        return self.total + self.bonus if include_bonus else self.total


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def aggregate(
    factor_scores: Mapping[Factor, float],
    bonus_scores: Mapping[str, float],
    table: WeightTable,
) -> Aggregate:
    """Weight factor scores into a 0–100 total plus capped bonus points.

    Factors missing from ``factor_scores`` count as neutral. Bonus scores are
    fractions in [0, 1] of each rule's cap; unknown bonus names are ignored.
    """
    breakdown: dict[Factor, float] = {}
    for factor, weight in table.weights.items():
        score = _clamp(factor_scores.get(factor, NEUTRAL_SCORE))
        breakdown[factor] = weight * score
    total = min(float(WEIGHT_TOTAL), sum(breakdown.values()))

    bonus_breakdown: dict[str, float] = {}
    for rule in table.bonuses:
        bonus_breakdown[rule.name] = rule.cap * _clamp(bonus_scores.get(rule.name, 0.0))
    bonus = sum(bonus_breakdown.values())

    reasons: list[str] = []
    for factor, disclosure in table.disclosures.items():
        if factor_scores.get(factor, NEUTRAL_SCORE) >= disclosure.threshold:
            reasons.append(disclosure.reason)
    for rule in table.bonuses:
        if bonus_breakdown[rule.name] > 0:
            reasons.append(rule.reason)

    return Aggregate(
        total=total,
        bonus=bonus,
        breakdown=MappingProxyType(breakdown),
        bonus_breakdown=MappingProxyType(bonus_breakdown),
        reasons=tuple(reasons),
        tier=table.tiers.tier_for(total),
        recommended=total >= RECOMMENDED_THRESHOLD,
    )
