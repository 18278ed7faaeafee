"""Canonical profile types shared by both matching domains.

Profiles are read-only snapshots built per request by the normaliser. Scorers
receive them as immutable inputs, so the same profile can be shared across
worker threads.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Literal

RemotePreference = Literal["remote", "hybrid", "onsite", "flexible"]
WorkMode = Literal["remote", "hybrid", "onsite"]

REMOTE_PREFERENCES: frozenset[str] = frozenset({"remote", "hybrid", "onsite", "flexible"})
WORK_MODES: frozenset[str] = frozenset({"remote", "hybrid", "onsite"})

MINUTES_PER_DAY = 24 * 60


class MatchDomain(StrEnum):
    """Which instantiation of the engine a profile belongs to."""

    JOB = "job"
    MENTORSHIP = "mentorship"


class Factor(StrEnum):
    """Independent scoring dimensions, each normalised to [0, 1]."""

    SKILLS = "skills"
    EXPERIENCE = "experience"
    LOCATION = "location"
    INDUSTRY = "industry"
    CULTURAL = "cultural"
    REPUTATION = "reputation"
    AVAILABILITY = "availability"
    RECENCY = "recency"


@dataclass(frozen=True)
class TimeSlot:
    """A weekly slot in local time (minutes after midnight)."""

    day_of_week: int  # 0 = Sunday … 6 = Saturday
    start_minute: int
    end_minute: int

    @property
    def duration_minutes(self) -> int:
        return self.end_minute - self.start_minute


@dataclass(frozen=True)
class WorkInterval:
    """One entry of a work history; ``end`` is ``None`` for a current role."""

    start: date
    end: date | None = None


@dataclass(frozen=True)
class CompensationRange:
    """Salary or hourly-rate range; either bound may be unknown."""

    minimum: float | None = None
    maximum: float | None = None


@dataclass(frozen=True)
class SubjectProfile:
    """A candidate (job domain) or mentee (mentorship domain)."""

    id: str
    domain: MatchDomain
    skills: tuple[str, ...] = ()
    experience_years: float = 0.0
    experience_tier: str = "entry"
    location: str = ""
    remote_preference: RemotePreference = "flexible"
    compensation: CompensationRange | None = None
    industries: tuple[str, ...] = ()
    is_indigenous: bool = False
    seeking_elder: bool = False
    cultural_background: str = ""
    cultural_interests: tuple[str, ...] = ()
    goals: tuple[str, ...] = ()
    availability: tuple[TimeSlot, ...] = ()
    timezone: str = ""
    languages: tuple[str, ...] = ()
    available_from: date | None = None
    # Engagement signals surfaced as green flags.
    is_verified: bool = False
    referred_by: str = ""
    mentorship_sessions: int = 0
    completed_courses: int = 0
    forum_posts: int = 0
    badge_count: int = 0


@dataclass(frozen=True)
class TargetProfile:
    """A job listing (job domain) or mentor (mentorship domain)."""

    id: str
    domain: MatchDomain
    required_skills: tuple[str, ...] = ()
    preferred_skills: tuple[str, ...] = ()
    experience_min: float | None = None
    experience_max: float | None = None
    experience_years: float | None = None
    location: str = ""
    work_mode: WorkMode = "onsite"
    compensation: CompensationRange | None = None
    industry: str = ""
    is_indigenous: bool = False
    is_elder: bool = False
    is_verified: bool = False
    cultural_background: str = ""
    cultural_elements: tuple[str, ...] = ()
    rating: float | None = None
    rating_count: int = 0
    current_load: int = 0
    max_capacity: int | None = None
    active: bool = True
    posted_at: datetime | None = None
    start_date: date | None = None
    availability: tuple[TimeSlot, ...] = ()
    timezone: str = ""
    languages: tuple[str, ...] = ()

    @property
    def has_capacity(self) -> bool:
        if self.max_capacity is None:
            return True
        return self.current_load < self.max_capacity
