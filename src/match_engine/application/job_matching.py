"""Job-matching facade: candidates ranked against job listings.

Usage example:
    from match_engine.application.job_matching import build_job_matcher
    from match_engine.config import MatchingConfig

    matcher = build_job_matcher(provider, MatchingConfig())
    matches = matcher.find_job_matches("candidate-1")
"""

from __future__ import annotations

from datetime import datetime

from ..config import MatchingConfig
from ..domain.aggregation import MatchResult
from ..domain.profiles import MatchDomain, SubjectProfile, TargetProfile
from ..domain.weights import DEFAULT_JOB_WEIGHTS, WeightTable
from ..protocols import PoolProvider
from .matching import MatchService
from .ranker import MatchStrategy, RankOptions, Ranker

DEFAULT_JOB_MIN_SCORE = 30.0


def is_open_listing(target: TargetProfile) -> bool:
    return target.active


def qualifies_for_employer_bonus(subject: SubjectProfile) -> bool:
    """Only Indigenous candidates can ask for Indigenous employers to rank first."""
    return subject.is_indigenous


def job_strategy(
    weights: WeightTable = DEFAULT_JOB_WEIGHTS,
    *,
    min_score: float = DEFAULT_JOB_MIN_SCORE,
) -> MatchStrategy:
    return MatchStrategy(
        domain=MatchDomain.JOB,
        weights=weights,
        default_min_score=min_score,
        is_eligible=is_open_listing,
        qualifies_for_bonus=qualifies_for_employer_bonus,
    )


class JobMatcher(MatchService):
    """Rank open job listings for a candidate."""

    def find_job_matches(
        self,
        candidate_id: str,
        options: RankOptions | None = None,
        *,
        now: datetime | None = None,
    ) -> list[MatchResult]:
        return self.find_matches(candidate_id, options, now=now)


def build_job_matcher(
    provider: PoolProvider,
    config: MatchingConfig,
    weights: WeightTable = DEFAULT_JOB_WEIGHTS,
) -> JobMatcher:
    ranker = Ranker(
        job_strategy(weights, min_score=config.job_min_score),
        max_workers=config.max_workers,
        default_limit=config.default_limit,
    )
    return JobMatcher(ranker, provider, config)
