"""Tabular views over ranked matches: export frames, summaries and comparisons.

Usage example:
    from match_engine.application.reporting import results_to_frame, summarise_matches

    frame = results_to_frame(results)
    summary = summarise_matches(results)
    print(summary.tier_counts)
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

import pandas as pd

from ..domain.aggregation import MatchResult
from ..domain.profiles import Factor
from ..domain.weights import TIER_NAMES
from ..io_contracts import MatchRowIO
from ..observability import get_logger
from ..protocols import FileSystem

MATCH_COLUMNS: tuple[str, ...] = tuple(MatchRowIO.__annotations__)
POINTS_PREFIX = "points_"
_LIST_SEPARATOR = "; "


@dataclass(frozen=True)
class MatchSummary:
    """Aggregate view of one ranked list."""

    count: int
    tier_counts: Mapping[str, int]
    mean_total: float | None
    recommended_count: int
    flagged_count: int
    top_target_id: str | None
    bonus_applied: bool = False


@dataclass(frozen=True)
class MatchComparison:
    """Side-by-side outcome of two matches for the same subject.

    ``winner_id`` and each per-factor winner are ``None`` on a tie.
    """

    first_id: str
    second_id: str
    winner_id: str | None
    score_gap: float
    factor_winners: Mapping[Factor, str | None]


def result_to_row(
    result: MatchResult, rank: int, *, include_bonus: bool | None = None
) -> MatchRowIO:
    """Flatten one result; ``effective`` follows the ranker unless overridden."""
    return {
        "rank": rank,
        "subject_id": result.subject_id,
        "target_id": result.target_id,
        "domain": str(result.domain),
        "total": round(result.total, 2),
        "bonus": round(result.bonus, 2),
        "effective": round(result.effective_score(include_bonus=include_bonus), 2),
        "tier": result.tier,
        "recommended": result.recommended,
        "matched_skills": _LIST_SEPARATOR.join(result.matched_skills),
        "missing_skills": _LIST_SEPARATOR.join(result.missing_skills),
        "reasons": _LIST_SEPARATOR.join(result.reasons),
        "flags": _LIST_SEPARATOR.join(flag.id for flag in result.flags),
        "green_flags": _LIST_SEPARATOR.join(flag.id for flag in result.green_flags),
        "recommendations": _LIST_SEPARATOR.join(step.message for step in result.recommendations),
    }


def results_to_frame(
    results: Sequence[MatchResult], *, include_bonus: bool | None = None
) -> pd.DataFrame:
    """Flatten ranked results into one row each, in rank order.

    Weighted points per factor follow the fixed columns as ``points_<factor>``.
    """
    if not results:
        return pd.DataFrame(columns=list(MATCH_COLUMNS))

    rows = [
        result_to_row(result, rank, include_bonus=include_bonus)
        for rank, result in enumerate(results, start=1)
    ]
    frame = pd.DataFrame(rows, columns=list(MATCH_COLUMNS))
    points = pd.DataFrame([_points_row(result) for result in results]).fillna(0.0)
    return pd.concat([frame, points], axis=1)


def _points_row(result: MatchResult) -> dict[str, float]:
    return {
        f"{POINTS_PREFIX}{factor}": round(points, 2)
        for factor, points in result.breakdown.items()
    }


def summarise_matches(results: Sequence[MatchResult]) -> MatchSummary:
    frame = results_to_frame(results)
    tier_counts = {tier: 0 for tier in TIER_NAMES}
    if frame.empty:
        return MatchSummary(
            count=0,
            tier_counts=MappingProxyType(tier_counts),
            mean_total=None,
            recommended_count=0,
            flagged_count=0,
            top_target_id=None,
        )

    for tier, count in frame["tier"].value_counts().items():
        tier_counts[str(tier)] = int(count)
    return MatchSummary(
        count=len(frame),
        tier_counts=MappingProxyType(tier_counts),
        mean_total=round(float(frame["total"].mean()), 2),
        recommended_count=int(frame["recommended"].sum()),
        flagged_count=int((frame["flags"] != "").sum()),
        top_target_id=str(frame.iloc[0]["target_id"]),
        bonus_applied=any(result.bonus_applied for result in results),
    )


def compare_matches(first: MatchResult, second: MatchResult) -> MatchComparison:
    """Compare two results factor by factor."""
    factor_winners: dict[Factor, str | None] = {}
    for factor in dict.fromkeys((*first.breakdown, *second.breakdown)):
        left = first.breakdown.get(factor, 0.0)
        right = second.breakdown.get(factor, 0.0)
        factor_winners[factor] = _winner(first.target_id, left, second.target_id, right)

    return MatchComparison(
        first_id=first.target_id,
        second_id=second.target_id,
        winner_id=_winner(first.target_id, first.total, second.target_id, second.total),
        score_gap=round(abs(first.total - second.total), 2),
        factor_winners=MappingProxyType(factor_winners),
    )


def _winner(left_id: str, left: float, right_id: str, right: float) -> str | None:
    if left > right:
        return left_id
    if right > left:
        return right_id
    return None


def write_matches_csv(
    results: Sequence[MatchResult],
    path: Path,
    fs: FileSystem,
    *,
    include_bonus: bool | None = None,
) -> Path:
    """Write ranked results as CSV and return the path written."""
    logger = get_logger("match_engine.reporting")
    frame = results_to_frame(results, include_bonus=include_bonus)
    fs.write_csv(frame, path)
    logger.info("Matches: %s (%s rows)", path, len(frame))
    return path
