"""Profile normaliser: raw records into canonical profiles.

Raw records come from the storage layer as plain mappings. Keys may be
camelCase (as stored by the web application) or snake_case. Every optional
field degrades to a neutral default instead of raising, because downstream
scorers treat missing data as neutral rather than disqualifying.

Usage example:
    from datetime import UTC, datetime

    from match_engine.domain.normalisation import normalise_subject
    from match_engine.domain.profiles import MatchDomain

    subject = normalise_subject(
        {"id": "c-1", "skills": ["Python", "python", "SQL"], "experienceYears": 4},
        MatchDomain.JOB,
        now=datetime(2026, 1, 1, tzinfo=UTC),
    )
    assert subject.skills == ("python", "sql")
    assert subject.experience_tier == "mid"
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from datetime import UTC, date, datetime

from .profiles import (
    MINUTES_PER_DAY,
    REMOTE_PREFERENCES,
    WORK_MODES,
    CompensationRange,
    MatchDomain,
    RemotePreference,
    SubjectProfile,
    TargetProfile,
    TimeSlot,
    WorkInterval,
    WorkMode,
)

type RawRecord = Mapping[str, object]

# (upper bound in years, tier); first bound the value falls under wins.
JOB_EXPERIENCE_TIERS: tuple[tuple[float, str], ...] = (
    (1.0, "entry"),
    (3.0, "junior"),
    (5.0, "mid"),
    (8.0, "senior"),
    (12.0, "lead"),
)
JOB_TOP_TIER = "executive"

MENTORSHIP_EXPERIENCE_TIERS: tuple[tuple[float, str], ...] = (
    (2.0, "entry"),
    (5.0, "mid"),
    (10.0, "senior"),
)
MENTORSHIP_TOP_TIER = "expert"

DEFAULT_MENTOR_CAPACITY = 5

_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")
_DAY_NAMES = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")


def normalise_subject(
    raw: RawRecord,
    domain: MatchDomain,
    *,
    now: datetime,
) -> SubjectProfile:
    """Build a ``SubjectProfile`` from a candidate or mentee record."""
    experience = _as_float(_field(raw, "experienceYears", "experience_years", "yearsExperience"))
    if experience is None:
        experience = experience_years_from_history(
            _parse_work_history(_field(raw, "workHistory", "work_history")),
            today=now.date(),
        )
    experience = max(0.0, experience)

    return SubjectProfile(
        id=_as_str(_field(raw, "id", "userId", "user_id")),
        domain=domain,
        skills=normalise_skills(_field(raw, "skills")),
        experience_years=experience,
        experience_tier=experience_tier(experience, domain),
        location=_as_str(_field(raw, "location")),
        remote_preference=_remote_preference(
            _field(raw, "remotePreference", "remote_preference")
        ),
        compensation=_compensation(
            _field(raw, "expectedSalaryMin", "salary_min", "rateMin", "rate_min"),
            _field(raw, "expectedSalaryMax", "salary_max", "rateMax", "rate_max"),
        ),
        industries=_lowered(
            _as_str_list(_field(raw, "industries", "preferredIndustries", "industry"))
        ),
        is_indigenous=_as_bool(_field(raw, "isIndigenous", "is_indigenous")),
        seeking_elder=_as_bool(_field(raw, "seekingElderMentor", "seeking_elder")),
        cultural_background=_as_str(
            _field(raw, "culturalBackground", "cultural_background", "mobNation", "country")
        ),
        cultural_interests=_lowered(
            _as_str_list(_field(raw, "culturalInterests", "cultural_interests"))
        ),
        goals=tuple(_as_str_list(_field(raw, "goals"))),
        availability=_parse_slots(_field(raw, "availability", "preferredTimes")),
        timezone=_as_str(_field(raw, "timezone", "timeZone")),
        languages=_lowered(_as_str_list(_field(raw, "languages"))),
        available_from=_as_date(_field(raw, "availableFrom", "available_from")),
        is_verified=_as_bool(_field(raw, "verified", "isVerified", "is_verified"))
        or _as_bool(_field(raw, "elderVerified", "elder_verified")),
        referred_by=_as_str(_field(raw, "referredBy", "referred_by")),
        mentorship_sessions=_count(_field(raw, "mentorshipSessions", "mentorship_sessions")),
        completed_courses=_count(_field(raw, "completedCourses", "completed_courses")),
        forum_posts=_count(_field(raw, "forumPosts", "forum_posts")),
        badge_count=_count(_field(raw, "badges", "badgeCount", "badge_count")),
    )


def normalise_target(
    raw: RawRecord,
    domain: MatchDomain,
    *,
    now: datetime,
    default_capacity: int = DEFAULT_MENTOR_CAPACITY,
) -> TargetProfile:
    """Build a ``TargetProfile`` from a job listing or mentor record."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    location = _as_str(_field(raw, "location"))
    max_capacity: int | None = None
    if domain is MatchDomain.MENTORSHIP:
        max_capacity = _as_int(_field(raw, "maxCapacity", "max_capacity"))
        if max_capacity is None:
            max_capacity = default_capacity

    posted_at = _as_datetime(_field(raw, "postedAt", "posted_at", "createdAt"))
    if posted_at is not None and posted_at > now:
        posted_at = now

    return TargetProfile(
        id=_as_str(_field(raw, "id")),
        domain=domain,
        required_skills=normalise_skills(
            _field(raw, "requiredSkills", "required_skills", "expertise")
        ),
        preferred_skills=normalise_skills(_field(raw, "preferredSkills", "preferred_skills")),
        experience_min=_as_float(_field(raw, "experienceMin", "minExperience", "experience_min")),
        experience_max=_as_float(_field(raw, "experienceMax", "maxExperience", "experience_max")),
        experience_years=_as_float(
            _field(raw, "experienceYears", "experience_years", "yearsExperience")
        ),
        location=location,
        work_mode=_work_mode(
            _field(raw, "workMode", "work_mode"),
            remote_flag=_field(raw, "remote"),
            location=location,
            domain=domain,
        ),
        compensation=_compensation(
            _field(raw, "salaryMin", "salary_min", "rateMin", "rate_min"),
            _field(raw, "salaryMax", "salary_max", "rateMax", "rate_max"),
        ),
        industry=_as_str(_field(raw, "industry")).lower(),
        is_indigenous=_as_bool(
            _field(raw, "isIndigenous", "is_indigenous", "indigenousOwned", "rapCommitted")
        ),
        is_elder=_as_bool(_field(raw, "isElder", "is_elder")),
        is_verified=_as_bool(_field(raw, "verified", "isVerified", "is_verified")),
        cultural_background=_as_str(
            _field(raw, "culturalBackground", "cultural_background", "mobNation", "country")
        ),
        cultural_elements=_lowered(
            _as_str_list(_field(raw, "culturalElements", "cultural_elements"))
        ),
        rating=_rating(_field(raw, "rating")),
        rating_count=max(0, _as_int(_field(raw, "ratingCount", "rating_count")) or 0),
        current_load=max(
            0, _as_int(_field(raw, "currentLoad", "current_load", "activeMatches")) or 0
        ),
        max_capacity=max_capacity,
        active=_as_bool(_field(raw, "active", "isActive"), default=True),
        posted_at=posted_at,
        start_date=_as_date(_field(raw, "startDate", "start_date")),
        availability=_parse_slots(_field(raw, "availability", "availabilitySlots")),
        timezone=_as_str(_field(raw, "timezone", "timeZone")),
        languages=_lowered(_as_str_list(_field(raw, "languages"))),
    )


def normalise_skills(value: object) -> tuple[str, ...]:
    """Lower-case, trim and de-duplicate skill tokens, keeping first-seen order."""
    tokens: list[str] = []
    if isinstance(value, str):
        tokens = value.split(",")
    elif isinstance(value, Iterable) and not isinstance(value, Mapping):
        for item in value:
            if isinstance(item, Mapping):
                tokens.append(_as_str(item.get("name")))
            elif isinstance(item, str):
                tokens.append(item)
    seen: dict[str, None] = {}
    for token in tokens:
        cleaned = " ".join(token.lower().split())
        if cleaned:
            seen.setdefault(cleaned, None)
    return tuple(seen)


def experience_years_from_history(intervals: Iterable[WorkInterval], *, today: date) -> float:
    """Sum whole months across work intervals and convert to years (1 d.p.).

    Overlapping intervals are summed as-is, so concurrent roles both count.
    """
    total_months = 0
    for interval in intervals:
        end = interval.end or today
        months = (end.year - interval.start.year) * 12 + (end.month - interval.start.month)
        total_months += max(0, months)
    return round(total_months / 12, 1)


def experience_tier(years: float, domain: MatchDomain) -> str:
    if domain is MatchDomain.MENTORSHIP:
        bands, top = MENTORSHIP_EXPERIENCE_TIERS, MENTORSHIP_TOP_TIER
    else:
        bands, top = JOB_EXPERIENCE_TIERS, JOB_TOP_TIER
    for upper, tier in bands:
        if years < upper:
            return tier
    return top


def parse_clock(value: object) -> int | None:
    """Parse ``HH:MM`` into minutes after midnight (``24:00`` allowed)."""
    if not isinstance(value, str):
        return None
    match = _TIME_RE.match(value)
    if match is None:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes >= 60:
        return None
    total = hours * 60 + minutes
    if total > MINUTES_PER_DAY:
        return None
    return total


def _field(raw: RawRecord, *keys: str) -> object:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def _as_str(value: object) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    return ""


def _as_str_list(value: object) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, Iterable) and not isinstance(value, Mapping):
        return [text for text in (_as_str(item) for item in value) if text]
    return []


def _lowered(values: list[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for value in values:
        seen.setdefault(value.lower(), None)
    return tuple(seen)


def _as_float(value: object) -> float | None:
    """Parse a finite number; infinities and NaN count as missing."""
    if isinstance(value, bool):
        return None
    if not isinstance(value, int | float | str):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _as_int(value: object) -> int | None:
    number = _as_float(value)
    return None if number is None else int(number)


def _count(value: object) -> int:
    """Count list items, or read a non-negative number."""
    if isinstance(value, list | tuple):
        return len(value)
    return max(0, _as_int(value) or 0)


def _as_bool(value: object, *, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in {"1", "true", "yes", "y", "on"}:
            return True
        if text in {"0", "false", "no", "n", "off"}:
            return False
    if isinstance(value, int | float):
        return value != 0
    return default


def _as_datetime(value: object) -> datetime | None:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _as_date(value: object) -> date | None:
    parsed = _as_datetime(value)
    return None if parsed is None else parsed.date()


def _rating(value: object) -> float | None:
    rating = _as_float(value)
    if rating is None:
        return None
    return max(0.0, min(5.0, rating))


def _compensation(minimum: object, maximum: object) -> CompensationRange | None:
    low = _as_float(minimum)
    high = _as_float(maximum)
    if low is None and high is None:
        return None
    return CompensationRange(minimum=low, maximum=high)


def _remote_preference(value: object) -> RemotePreference:
    text = _as_str(value).lower()
    if text in REMOTE_PREFERENCES:
        return text  # type: ignore[return-value]
    return "flexible"


def _work_mode(
    value: object,
    *,
    remote_flag: object,
    location: str,
    domain: MatchDomain,
) -> WorkMode:
    text = _as_str(value).lower()
    if text in WORK_MODES:
        return text  # type: ignore[return-value]
    if _as_bool(remote_flag) or "remote" in location.lower():
        return "remote"
    # Mentoring can always happen over video; listings default to on-site.
    return "remote" if domain is MatchDomain.MENTORSHIP else "onsite"


def _parse_work_history(value: object) -> list[WorkInterval]:
    if not isinstance(value, Iterable) or isinstance(value, str | Mapping):
        return []
    intervals: list[WorkInterval] = []
    for item in value:
        if not isinstance(item, Mapping):
            continue
        start = _as_date(_field(item, "start", "startDate", "start_date"))
        if start is None:
            continue
        end = _as_date(_field(item, "end", "endDate", "end_date"))
        intervals.append(WorkInterval(start=start, end=end))
    return intervals


def _parse_day(value: object) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value if 0 <= value <= 6 else None
    if isinstance(value, str):
        text = value.strip().lower()
        if text.isdigit():
            return _parse_day(int(text))
        for index, name in enumerate(_DAY_NAMES):
            if text.startswith(name):
                return index
    return None


def _parse_slots(value: object) -> tuple[TimeSlot, ...]:
    if not isinstance(value, Iterable) or isinstance(value, str | Mapping):
        return ()
    slots: list[TimeSlot] = []
    for item in value:
        if not isinstance(item, Mapping):
            continue
        day = _parse_day(_field(item, "dayOfWeek", "day_of_week", "day"))
        start = parse_clock(_field(item, "startTime", "start_time", "start"))
        end = parse_clock(_field(item, "endTime", "end_time", "end"))
        if day is None or start is None or end is None or end <= start:
            continue
        slots.append(TimeSlot(day_of_week=day, start_minute=start, end_minute=end))
    return tuple(dict.fromkeys(slots))
