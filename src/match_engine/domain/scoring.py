"""Score one subject/target pair into a ``MatchResult``.

Only the factors weighted by the table are computed, so a table that drops a
factor also skips its scorer.

Usage example:
    from datetime import UTC, datetime

    from match_engine.domain.profiles import MatchDomain, SubjectProfile, TargetProfile
    from match_engine.domain.scoring import score_pair
    from match_engine.domain.weights import DEFAULT_JOB_WEIGHTS

    subject = SubjectProfile(id="c-1", domain=MatchDomain.JOB, skills=("py", "postgresql"))
    job = TargetProfile(id="j-1", domain=MatchDomain.JOB, required_skills=("python", "sql"))
    result = score_pair(subject, job, DEFAULT_JOB_WEIGHTS, now=datetime.now(UTC))
    assert result.missing_skills == ()
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import datetime
from types import MappingProxyType

from .aggregation import MatchResult, aggregate
from .factors import (
    score_availability,
    score_capacity,
    score_cultural,
    score_experience,
    score_industry,
    score_location,
    score_recency,
    score_reputation,
    score_skills,
)
from .flags import detect_flags, detect_green_flags, recommend
from .profiles import Factor, MatchDomain, SubjectProfile, TargetProfile
from .skills import skills_synonymous
from .weights import ELDER_BONUS, INDIGENOUS_EMPLOYER_BONUS, WeightTable

type BonusScorer = Callable[[TargetProfile], float]

UNVERIFIED_AFFILIATION_SHARE = 0.5

_GOAL_WORD_RE = re.compile(r"[a-z0-9+#./-]+")


def _indigenous_employer_bonus(target: TargetProfile) -> float:
    if not target.is_indigenous:
        return 0.0
    return 1.0 if target.is_verified else UNVERIFIED_AFFILIATION_SHARE


def _elder_bonus(target: TargetProfile) -> float:
    return 1.0 if target.is_elder else 0.0


BONUS_SCORERS: MappingProxyType[str, BonusScorer] = MappingProxyType(
    {
        INDIGENOUS_EMPLOYER_BONUS: _indigenous_employer_bonus,
        ELDER_BONUS: _elder_bonus,
    }
)


def _factor_scores(
    subject: SubjectProfile,
    target: TargetProfile,
    factors: tuple[Factor, ...],
    skills_score: float,
    now: datetime,
) -> dict[Factor, float]:
    scores: dict[Factor, float] = {}
    for factor in factors:
        match factor:
            case Factor.SKILLS:
                scores[factor] = skills_score
            case Factor.EXPERIENCE:
                scores[factor] = score_experience(subject, target)
            case Factor.LOCATION:
                scores[factor] = score_location(subject, target)
            case Factor.INDUSTRY:
                scores[factor] = score_industry(subject, target)
            case Factor.CULTURAL:
                scores[factor] = score_cultural(subject, target)
            case Factor.REPUTATION:
                scores[factor] = score_reputation(target)
            case Factor.AVAILABILITY:
                scores[factor] = score_availability(subject, target, now=now)
            case Factor.RECENCY:
                scores[factor] = score_recency(target, now=now)
    return scores


def goal_alignment(subject: SubjectProfile, target: TargetProfile) -> str | None:
    """Return the first subject goal that mentions one of the target's skills.

    Single words must equal a skill or share its synonym group. Substring
    containment is too loose for free text.
    """
    skills = target.required_skills + target.preferred_skills
    for goal in subject.goals:
        text = goal.lower()
        words = _GOAL_WORD_RE.findall(text)
        for skill in skills:
            # Multi-word skills are matched as phrases.
            if " " in skill and skill in text:
                return goal
            if any(skills_synonymous(word, skill) for word in words):
                return goal
    return None


def score_pair(
    subject: SubjectProfile,
    target: TargetProfile,
    table: WeightTable,
    *,
    now: datetime,
) -> MatchResult:
    """Run every weighted scorer for one pair and aggregate the outcome."""
    skill_match = score_skills(subject, target)
    factor_scores = _factor_scores(subject, target, table.factors, skill_match.score, now)
    bonus_scores = {
        rule.name: BONUS_SCORERS[rule.name](target)
        for rule in table.bonuses
        if rule.name in BONUS_SCORERS
    }
    outcome = aggregate(factor_scores, bonus_scores, table)

    flags = detect_flags(subject, target, skill_match.missing)
    reasons = list(outcome.reasons)
    goal = goal_alignment(subject, target)
    if goal is not None:
        reasons.append(f"Aligned with goal: {goal}")

    return MatchResult(
        subject_id=subject.id,
        target_id=target.id,
        domain=table.domain,
        total=outcome.total,
        bonus=outcome.bonus,
        breakdown=outcome.breakdown,
        factor_scores=MappingProxyType(factor_scores),
        bonus_breakdown=outcome.bonus_breakdown,
        matched_skills=skill_match.matched,
        missing_skills=skill_match.missing,
        reasons=tuple(reasons),
        tier=outcome.tier,
        recommended=outcome.recommended,
        flags=flags,
        green_flags=detect_green_flags(subject),
        recommendations=recommend(flags, skill_match.missing, table.domain),
        capacity=score_capacity(target) if table.domain is MatchDomain.MENTORSHIP else None,
        posted_at=target.posted_at,
    )
