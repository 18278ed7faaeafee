"""Factor scorers: one pure function per scoring dimension.

Every scorer is total. It never raises, returns a value in [0, 1], and falls
back to ``NEUTRAL_SCORE`` when the data it needs is missing, so incomplete
profiles dilute a match rather than disqualify it.

Usage example:
    from datetime import UTC, datetime

    from match_engine.domain.factors import score_experience
    from match_engine.domain.profiles import MatchDomain, SubjectProfile, TargetProfile

    subject = SubjectProfile(id="c-1", domain=MatchDomain.JOB, experience_years=9.0)
    job = TargetProfile(id="j-1", domain=MatchDomain.JOB, experience_min=5, experience_max=8)
    assert score_experience(subject, job) == 0.8
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .profiles import (
    MINUTES_PER_DAY,
    MatchDomain,
    SubjectProfile,
    TargetProfile,
    TimeSlot,
)
from .skills import SkillMatch, interest_coverage, skill_set_score

NEUTRAL_SCORE = 0.5

MINUTES_PER_WEEK = 7 * MINUTES_PER_DAY
FULL_AVAILABILITY_OVERLAP_MINUTES = 3 * 60

# Job experience: (years over max, score); beyond the last band scores the floor.
OVER_QUALIFIED_BANDS: tuple[tuple[float, float], ...] = ((3.0, 0.8),)
OVER_QUALIFIED_FLOOR = 0.5
# Job experience: (years short of min, score).
UNDER_QUALIFIED_BANDS: tuple[tuple[float, float], ...] = ((1.0, 0.7), (2.0, 0.5))
UNDER_QUALIFIED_FLOOR = 0.3

# Mentorship experience gap (mentor years minus mentee years).
IDEAL_MENTOR_GAP = (5.0, 15.0)
# (lower bound of gap, score) for gaps below the ideal window, highest first.
NARROW_GAP_BANDS: tuple[tuple[float, float], ...] = ((3.0, 0.8), (1.0, 0.6), (0.0, 0.4))
NEGATIVE_GAP_SCORE = 0.2
# (upper bound of gap, score) for gaps above the ideal window.
WIDE_GAP_BANDS: tuple[tuple[float, float], ...] = ((20.0, 0.8),)
WIDE_GAP_FLOOR = 0.6

# Recency: (max age in days, score).
RECENCY_BANDS: tuple[tuple[int, float], ...] = ((7, 1.0), (14, 0.7), (30, 0.4))
STALE_SCORE = 0.0

REMOTE_TARGET_SCORES = {"remote": 1.0, "flexible": 1.0, "hybrid": 0.85, "onsite": 0.7}
HYBRID_LOCAL_MISMATCHED_MODE = 0.6
HYBRID_ELSEWHERE = 0.5
ONSITE_ELSEWHERE = {"flexible": 0.4, "onsite": 0.3, "hybrid": 0.3, "remote": 0.2}

CULTURAL_BASELINE = 0.5
AFFILIATION_CREDIT = 0.3
SAME_BACKGROUND_CREDIT = 0.2
SAME_REGION_CREDIT = 0.1
INTEREST_OVERLAP_CREDIT = 0.2

# Nations grouped by the state or territory they are usually associated with.
NATION_REGIONS: dict[str, tuple[str, ...]] = {
    "nsw": ("wiradjuri", "dharug", "gamilaroi", "bundjalung", "yuin"),
    "vic": ("wurundjeri", "boon wurrung", "gunditjmara", "yorta yorta"),
    "qld": ("yugambeh", "turrbal", "kalkadoon", "yidinji", "kuku yalanji"),
    "wa": ("noongar", "yamatji", "martu", "bardi"),
    "sa": ("kaurna", "ngarrindjeri", "adnyamathanha"),
    "nt": ("larrakia", "yolngu", "arrernte", "warlpiri"),
    "tas": ("palawa", "pakana"),
    "act": ("ngunnawal", "ngambri"),
}

_WORD_RE = re.compile(r"[a-z0-9]+")


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def score_skills(subject: SubjectProfile, target: TargetProfile) -> SkillMatch:
    """Skill coverage in the direction that matters for the domain.

    Jobs measure how many of the listing's requirements the candidate meets.
    Mentoring measures how many of the mentee's interests the mentor's
    expertise covers; an empty list on either side is unknown, not a miss.
    """
    if target.domain is MatchDomain.MENTORSHIP:
        if not subject.skills or not target.required_skills:
            return SkillMatch(score=NEUTRAL_SCORE, matched=(), missing=(), matched_preferred=())
        return interest_coverage(subject.skills, target.required_skills)
    return skill_set_score(subject.skills, target.required_skills, target.preferred_skills)


def score_experience(subject: SubjectProfile, target: TargetProfile) -> float:
    if target.domain is MatchDomain.MENTORSHIP:
        return _score_mentor_gap(subject.experience_years, target.experience_years)
    return _score_experience_range(
        subject.experience_years, target.experience_min, target.experience_max
    )


def _score_experience_range(
    years: float, minimum: float | None, maximum: float | None
) -> float:
    if minimum is None and maximum is None:
        return NEUTRAL_SCORE
    low = max(0.0, minimum or 0.0)
    high = maximum if maximum is not None else float("inf")
    if high < low:
        low, high = high, low

    if low <= years <= high:
        return 1.0
    if years > high:
        over = years - high
        for limit, score in OVER_QUALIFIED_BANDS:
            if over <= limit:
                return score
        return OVER_QUALIFIED_FLOOR
    short = low - years
    for limit, score in UNDER_QUALIFIED_BANDS:
        if short <= limit:
            return score
    return UNDER_QUALIFIED_FLOOR


def _score_mentor_gap(mentee_years: float, mentor_years: float | None) -> float:
    if mentor_years is None:
        return NEUTRAL_SCORE
    gap = mentor_years - mentee_years
    ideal_low, ideal_high = IDEAL_MENTOR_GAP
    if ideal_low <= gap <= ideal_high:
        return 1.0
    if gap > ideal_high:
        for limit, score in WIDE_GAP_BANDS:
            if gap <= limit:
                return score
        return WIDE_GAP_FLOOR
    for lower, score in NARROW_GAP_BANDS:
        if gap >= lower:
            return score
    return NEGATIVE_GAP_SCORE


def locations_match(left: str, right: str) -> bool | None:
    """Compare two location strings; ``None`` when either is unknown.

    Case-insensitive containment first, then any shared comma-separated part
    (city or state).
    """
    a = left.strip().lower()
    b = right.strip().lower()
    if not a or not b:
        return None
    if a in b or b in a:
        return True
    parts_a = {part.strip() for part in a.split(",") if part.strip()}
    parts_b = {part.strip() for part in b.split(",") if part.strip()}
    return not parts_a.isdisjoint(parts_b)


def score_location(subject: SubjectProfile, target: TargetProfile) -> float:
    preference = subject.remote_preference
    if target.work_mode == "remote":
        return REMOTE_TARGET_SCORES[preference]

    same_place = locations_match(subject.location, target.location)
    if same_place is None:
        return NEUTRAL_SCORE

    if target.work_mode == "hybrid":
        if same_place and preference in {"hybrid", "flexible"}:
            return 1.0
        return HYBRID_LOCAL_MISMATCHED_MODE if same_place else HYBRID_ELSEWHERE

    if same_place:
        return 1.0
    return ONSITE_ELSEWHERE[preference]


def score_industry(subject: SubjectProfile, target: TargetProfile) -> float:
    if not subject.industries or not target.industry:
        return NEUTRAL_SCORE
    wanted = target.industry.strip().lower()
    return 1.0 if any(industry == wanted for industry in subject.industries) else 0.0


def region_of(background: str) -> str | None:
    """Resolve a nation or state mention to its state/territory code."""
    text = background.strip().lower()
    if not text:
        return None
    words = set(_WORD_RE.findall(text))
    for region, nations in NATION_REGIONS.items():
        if region in words or any(nation in text for nation in nations):
            return region
    return None


def score_cultural(subject: SubjectProfile, target: TargetProfile) -> float:
    score = CULTURAL_BASELINE
    if subject.is_indigenous and target.is_indigenous:
        score += AFFILIATION_CREDIT
    if subject.seeking_elder and target.is_elder:
        score += AFFILIATION_CREDIT

    subject_background = subject.cultural_background.strip().lower()
    target_background = target.cultural_background.strip().lower()
    if subject_background and target_background:
        if subject_background == target_background:
            score += SAME_BACKGROUND_CREDIT
        else:
            region = region_of(subject_background)
            if region is not None and region == region_of(target_background):
                score += SAME_REGION_CREDIT

    if subject.cultural_interests and target.cultural_elements:
        shared = set(subject.cultural_interests) & set(target.cultural_elements)
        score += INTEREST_OVERLAP_CREDIT * len(shared) / len(subject.cultural_interests)

    return _clamp(score)


def score_reputation(target: TargetProfile) -> float:
    if target.rating is None:
        return NEUTRAL_SCORE
    return _clamp(target.rating / 5.0)


def utc_offset_minutes(timezone: str, at: datetime) -> int | None:
    """UTC offset of an IANA zone at an instant, or ``None`` if unknown."""
    name = timezone.strip()
    if not name:
        return None
    try:
        zone = ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return None
    offset = at.astimezone(zone).utcoffset()
    if offset is None:
        return None
    return int(offset.total_seconds() // 60)


def _week_intervals(slots: Iterable[TimeSlot], shift: int) -> list[tuple[int, int]]:
    """Project slots onto the minute-of-week circle, splitting at the week edge."""
    intervals: list[tuple[int, int]] = []
    for slot in slots:
        minute_of_week = slot.day_of_week * MINUTES_PER_DAY + slot.start_minute
        start = (minute_of_week + shift) % MINUTES_PER_WEEK
        end = start + slot.duration_minutes
        if end <= MINUTES_PER_WEEK:
            intervals.append((start, end))
        else:
            intervals.append((start, MINUTES_PER_WEEK))
            intervals.append((0, end - MINUTES_PER_WEEK))
    return intervals


def availability_overlap_minutes(
    subject_slots: Iterable[TimeSlot],
    target_slots: Iterable[TimeSlot],
    *,
    shift_minutes: int = 0,
) -> int:
    """Total pairwise overlap after moving target slots into subject local time."""
    own = _week_intervals(subject_slots, 0)
    theirs = _week_intervals(target_slots, shift_minutes)
    total = 0
    for start_a, end_a in own:
        for start_b, end_b in theirs:
            total += max(0, min(end_a, end_b) - max(start_a, start_b))
    return total


def score_availability(
    subject: SubjectProfile,
    target: TargetProfile,
    *,
    now: datetime,
) -> float:
    if not subject.availability or not target.availability:
        return NEUTRAL_SCORE
    subject_offset = utc_offset_minutes(subject.timezone, now)
    target_offset = utc_offset_minutes(target.timezone, now)
    # Without both zones there is nothing to convert between.
    shift = 0
    if subject_offset is not None and target_offset is not None:
        shift = subject_offset - target_offset
    minutes = availability_overlap_minutes(
        subject.availability, target.availability, shift_minutes=shift
    )
    return _clamp(minutes / FULL_AVAILABILITY_OVERLAP_MINUTES)


def score_recency(target: TargetProfile, *, now: datetime) -> float:
    if target.posted_at is None:
        return NEUTRAL_SCORE
    age = now - target.posted_at
    if age < timedelta(0):
        return 1.0
    for max_days, score in RECENCY_BANDS:
        if age <= timedelta(days=max_days):
            return score
    return STALE_SCORE


def score_capacity(target: TargetProfile) -> float:
    """Remaining capacity share; a ranking nudge, never part of the total."""
    if target.max_capacity is None or target.max_capacity <= 0:
        return NEUTRAL_SCORE
    return _clamp(1.0 - target.current_load / target.max_capacity)
