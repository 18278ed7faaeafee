"""Mentorship facade: mentees ranked against mentors.

Mentors are eligible only while active and below capacity. Among equal
scores, mentors with more free capacity rank first.

Usage example:
    from match_engine.application.mentor_matching import build_mentor_matcher
    from match_engine.config import MatchingConfig

    matcher = build_mentor_matcher(provider, MatchingConfig())
    matches = matcher.find_mentor_matches("mentee-1")
"""

from __future__ import annotations

from datetime import datetime

from ..config import MatchingConfig
from ..domain.aggregation import MatchResult
from ..domain.normalisation import DEFAULT_MENTOR_CAPACITY
from ..domain.profiles import MatchDomain, SubjectProfile, TargetProfile
from ..domain.weights import DEFAULT_MENTORSHIP_WEIGHTS, WeightTable
from ..protocols import PoolProvider
from .matching import MatchService
from .ranker import MatchStrategy, RankOptions, Ranker

DEFAULT_MENTOR_MIN_SCORE = 50.0


def is_available_mentor(target: TargetProfile) -> bool:
    return target.active and target.has_capacity


def qualifies_for_elder_bonus(subject: SubjectProfile) -> bool:
    return subject.seeking_elder


def mentor_strategy(
    weights: WeightTable = DEFAULT_MENTORSHIP_WEIGHTS,
    *,
    min_score: float = DEFAULT_MENTOR_MIN_SCORE,
    default_capacity: int = DEFAULT_MENTOR_CAPACITY,
) -> MatchStrategy:
    return MatchStrategy(
        domain=MatchDomain.MENTORSHIP,
        weights=weights,
        default_min_score=min_score,
        is_eligible=is_available_mentor,
        qualifies_for_bonus=qualifies_for_elder_bonus,
        default_capacity=default_capacity,
    )


class MentorMatcher(MatchService):
    """Rank available mentors for a mentee."""

    def find_mentor_matches(
        self,
        mentee_id: str,
        options: RankOptions | None = None,
        *,
        now: datetime | None = None,
    ) -> list[MatchResult]:
        return self.find_matches(mentee_id, options, now=now)


def build_mentor_matcher(
    provider: PoolProvider,
    config: MatchingConfig,
    weights: WeightTable = DEFAULT_MENTORSHIP_WEIGHTS,
) -> MentorMatcher:
    ranker = Ranker(
        mentor_strategy(
            weights,
            min_score=config.mentor_min_score,
            default_capacity=config.mentor_default_capacity,
        ),
        max_workers=config.max_workers,
        default_limit=config.default_limit,
    )
    return MentorMatcher(ranker, provider, config)
