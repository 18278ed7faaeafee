"""Shared ranker for both matching domains.

A ``Ranker`` is built once per ``MatchStrategy`` (domain, weight table,
eligibility rule and bonus qualifier) and holds no per-request state, so one
instance can serve concurrent requests.

Usage example:
    from datetime import UTC, datetime

    from match_engine.application.job_matching import job_strategy
    from match_engine.application.ranker import RankOptions, Ranker

    ranker = Ranker(job_strategy())
    results = ranker.rank(
        {"id": "c-1", "skills": ["python"]},
        [{"id": "j-1", "requiredSkills": ["python"]}],
        RankOptions(limit=10),
        now=datetime.now(UTC),
    )
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

from ..domain.aggregation import MatchResult
from ..domain.normalisation import (
    DEFAULT_MENTOR_CAPACITY,
    RawRecord,
    normalise_subject,
    normalise_target,
)
from ..domain.profiles import MatchDomain, SubjectProfile, TargetProfile
from ..domain.scoring import score_pair
from ..domain.weights import TIER_NAMES, WeightTable
from ..exceptions import InvalidWeightTableError
from ..observability import get_logger

type EligibilityRule = Callable[[TargetProfile], bool]
type BonusQualifier = Callable[[SubjectProfile], bool]

DEFAULT_LIMIT = 20
DEFAULT_MAX_WORKERS = 8


@dataclass(frozen=True)
class RankOptions:
    """Per-request ranking options.

    ``limit`` and ``min_score`` fall back to the ranker's defaults when unset.
    ``prioritize`` only takes effect when the subject qualifies for the
    strategy's bonus category. ``tier`` keeps only results in that
    compatibility tier.
    """

    limit: int | None = None
    offset: int = 0
    min_score: float | None = None
    exclude_ids: frozenset[str] = field(default_factory=frozenset)
    prioritize: bool = False
    tier: str | None = None

    def __post_init__(self) -> None:
        if self.limit is not None and self.limit < 1:
            raise ValueError("limit must be a positive integer.")
        if self.offset < 0:
            raise ValueError("offset must not be negative.")
        if self.min_score is not None and not 0.0 <= self.min_score <= 100.0:
            raise ValueError("min_score must be between 0 and 100.")
        if self.tier is not None and self.tier not in TIER_NAMES:
            raise ValueError(f"tier must be one of: {', '.join(TIER_NAMES)}.")
        object.__setattr__(self, "exclude_ids", frozenset(self.exclude_ids))


@dataclass(frozen=True)
class MatchStrategy:
    """Everything that distinguishes one matching domain from another."""

    domain: MatchDomain
    weights: WeightTable
    default_min_score: float
    is_eligible: EligibilityRule
    qualifies_for_bonus: BonusQualifier
    default_capacity: int = DEFAULT_MENTOR_CAPACITY

    def __post_init__(self) -> None:
        if self.weights.domain is not self.domain:
            raise InvalidWeightTableError(
                self.weights.name,
                f"table is for {self.weights.domain}, strategy is for {self.domain}",
            )


def _sort_key(result: MatchResult, *, include_bonus: bool) -> tuple[float, float, float, str]:
    capacity = result.capacity if result.capacity is not None else 0.0
    posted = result.posted_at.timestamp() if result.posted_at is not None else -math.inf
    effective = result.effective_score(include_bonus=include_bonus)
    return (-effective, -capacity, -posted, result.target_id)


class Ranker:
    """Normalise, filter, score and order a pool of targets for one subject."""

    def __init__(
        self,
        strategy: MatchStrategy,
        *,
        max_workers: int = DEFAULT_MAX_WORKERS,
        default_limit: int = DEFAULT_LIMIT,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be a positive integer.")
        if default_limit < 1:
            raise ValueError("default_limit must be a positive integer.")
        self.strategy = strategy
        self.max_workers = max_workers
        self.default_limit = default_limit
        self._logger = get_logger(f"match_engine.ranker.{strategy.domain}")

    def score(
        self, subject: SubjectProfile, target: TargetProfile, *, now: datetime
    ) -> MatchResult:
        """Score one already-normalised pair with this ranker's weight table."""
        return score_pair(subject, target, self.strategy.weights, now=now)

    def rank(
        self,
        subject_raw: RawRecord,
        pool_raw: Iterable[RawRecord],
        options: RankOptions | None = None,
        *,
        now: datetime | None = None,
    ) -> list[MatchResult]:
        """Return the ranked page of matches for one subject.

        Ineligible and excluded targets are dropped before any scorer runs.
        An empty result is valid and never an error.

        Args:
            subject_raw: Raw subject record.
            pool_raw: Raw target records; duplicates by id keep the first.
            options: Ranking options; defaults apply when omitted.
            now: Reference instant for recency and timezone offsets. Pass the
                same value to get identical output on identical input.
        """
        opts = options or RankOptions()
        at = now or datetime.now(UTC)
        if at.tzinfo is None:
            at = at.replace(tzinfo=UTC)
        strategy = self.strategy

        subject = normalise_subject(subject_raw, strategy.domain, now=at)
        targets = self._eligible_targets(pool_raw, opts.exclude_ids, at)
        results = self._score_all(subject, targets, at)

        min_score = opts.min_score if opts.min_score is not None else strategy.default_min_score
        kept = [result for result in results if result.total >= min_score]
        if opts.tier is not None:
            kept = [result for result in kept if result.tier == opts.tier]

        include_bonus = opts.prioritize and strategy.qualifies_for_bonus(subject)
        if include_bonus:
            kept = [replace(result, bonus_applied=True) for result in kept]
        kept.sort(key=lambda result: _sort_key(result, include_bonus=include_bonus))

        limit = opts.limit if opts.limit is not None else self.default_limit
        page = kept[opts.offset : opts.offset + limit]
        self._logger.info(
            "Ranked subject %s: %s eligible, %s above %.1f, returning %s",
            subject.id,
            len(targets),
            len(kept),
            min_score,
            len(page),
        )
        return page

    def _eligible_targets(
        self,
        pool_raw: Iterable[RawRecord],
        exclude_ids: frozenset[str],
        now: datetime,
    ) -> list[TargetProfile]:
        strategy = self.strategy
        seen: set[str] = set()
        duplicates = 0
        pool_size = 0
        targets: list[TargetProfile] = []
        for raw in pool_raw:
            pool_size += 1
            target = normalise_target(
                raw, strategy.domain, now=now, default_capacity=strategy.default_capacity
            )
            if target.id in seen:
                duplicates += 1
                continue
            seen.add(target.id)
            if target.id in exclude_ids or not strategy.is_eligible(target):
                continue
            targets.append(target)

        if duplicates:
            self._logger.warning("Ignored %s duplicate target ids in pool", duplicates)
        self._logger.info("Pool: %s targets, %s eligible", pool_size, len(targets))
        return targets

    def _score_all(
        self,
        subject: SubjectProfile,
        targets: Sequence[TargetProfile],
        now: datetime,
    ) -> list[MatchResult]:
        weights = self.strategy.weights

        def score_one(target: TargetProfile) -> MatchResult:
            return score_pair(subject, target, weights, now=now)

        workers = min(self.max_workers, len(targets))
        if workers <= 1:
            return [score_one(target) for target in targets]
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="match-score") as pool:
            return list(pool.map(score_one, targets))
