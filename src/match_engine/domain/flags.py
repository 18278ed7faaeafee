"""Red flags, green flags and follow-up recommendations for a scored pair.

Flags are informational: they explain a weak factor (or a strong signal on the
subject's profile) to whoever reviews the match and never change the score.
Recommendations turn red flags into next steps.
"""

from __future__ import annotations

from dataclasses import dataclass

from .factors import locations_match
from .profiles import MatchDomain, SubjectProfile, TargetProfile

OVERQUALIFIED_MARGIN_YEARS = 5.0
UNDERQUALIFIED_MARGIN_YEARS = 2.0
SALARY_TOLERANCE = 1.2
DELAYED_START_DAYS = 30
COMMUNITY_POSTS_THRESHOLD = 5
# Larger gaps are a mismatch rather than something training can close.
TRAINABLE_SKILL_GAP = 2


@dataclass(frozen=True)
class MatchFlag:
    """A named concern or positive signal attached to a match result."""

    id: str
    label: str
    severity: str  # "info", "warning" or "positive"
    detail: str


@dataclass(frozen=True)
class Recommendation:
    """A suggested next step for whoever reviews the match."""

    kind: str
    message: str


def detect_flags(
    subject: SubjectProfile,
    target: TargetProfile,
    missing_skills: tuple[str, ...],
) -> tuple[MatchFlag, ...]:
    flags: list[MatchFlag] = []

    if target.domain is MatchDomain.JOB:
        years = subject.experience_years
        if (
            target.experience_max is not None
            and years > target.experience_max + OVERQUALIFIED_MARGIN_YEARS
        ):
            flags.append(
                MatchFlag(
                    id="overqualified",
                    label="May be overqualified",
                    severity="warning",
                    detail=f"{years:g} years vs {target.experience_max:g} max preferred",
                )
            )
        if (
            target.experience_min is not None
            and target.experience_min - years > UNDERQUALIFIED_MARGIN_YEARS
        ):
            flags.append(
                MatchFlag(
                    id="underqualified",
                    label="Experience below range",
                    severity="info",
                    detail=f"{years:g} years vs {target.experience_min:g} minimum",
                )
            )

    if missing_skills:
        flags.append(
            MatchFlag(
                id="skills_gap",
                label="Skills gap detected",
                severity="info",
                detail=", ".join(missing_skills),
            )
        )

    if target.work_mode != "remote" and locations_match(subject.location, target.location) is False:
        flags.append(
            MatchFlag(
                id="location_mismatch",
                label="Location consideration",
                severity="info",
                detail=f"{subject.location} vs {target.location}",
            )
        )

    if subject.available_from is not None and target.start_date is not None:
        delay = (subject.available_from - target.start_date).days
        if delay > DELAYED_START_DAYS:
            flags.append(
                MatchFlag(
                    id="delayed_start",
                    label="Delayed availability",
                    severity="info",
                    detail=f"Available {delay} days after preferred start",
                )
            )

    expected = subject.compensation.minimum if subject.compensation else None
    budget = target.compensation.maximum if target.compensation else None
    if expected is not None and budget is not None and expected > budget * SALARY_TOLERANCE:
        flags.append(
            MatchFlag(
                id="salary_mismatch",
                label="Pay expectations",
                severity="warning",
                detail=f"expects {expected:,.0f}, budget {budget:,.0f}",
            )
        )

    if subject.languages and target.languages and not set(subject.languages) & set(
        target.languages
    ):
        flags.append(
            MatchFlag(
                id="no_shared_language",
                label="No shared language",
                severity="warning",
                detail=f"{', '.join(subject.languages)} vs {', '.join(target.languages)}",
            )
        )

    return tuple(flags)


def detect_green_flags(subject: SubjectProfile) -> tuple[MatchFlag, ...]:
    """Positive signals from the subject's engagement with the platform."""
    signals = (
        (
            subject.mentorship_sessions > 0,
            "mentorship_active",
            "Active Mentee",
            f"{subject.mentorship_sessions} mentorship sessions",
        ),
        (
            subject.completed_courses > 0,
            "training_complete",
            "Training Completed",
            f"{subject.completed_courses} courses completed",
        ),
        (
            subject.forum_posts >= COMMUNITY_POSTS_THRESHOLD,
            "community_engaged",
            "Community Member",
            f"{subject.forum_posts} forum posts",
        ),
        (
            subject.badge_count > 0,
            "badge_holder",
            "Credential Holder",
            f"{subject.badge_count} badges",
        ),
        (subject.is_verified, "verified_profile", "Verified Profile", "Profile verified"),
        (
            bool(subject.referred_by),
            "referral",
            "Internal Referral",
            f"Referred by {subject.referred_by}",
        ),
    )
    return tuple(
        MatchFlag(id=flag_id, label=label, severity="positive", detail=detail)
        for present, flag_id, label, detail in signals
        if present
    )


def recommend(
    flags: tuple[MatchFlag, ...],
    missing_skills: tuple[str, ...],
    domain: MatchDomain,
) -> tuple[Recommendation, ...]:
    """Derive follow-up steps from a job match's red flags.

    Mentorship matches get none: their gaps are the mentee's learning goals.
    """
    if domain is not MatchDomain.JOB:
        return ()
    steps: list[Recommendation] = []
    if 0 < len(missing_skills) <= TRAINABLE_SKILL_GAP:
        steps.append(
            Recommendation(
                kind="training",
                message=(
                    f"Consider if candidate can develop {', '.join(missing_skills)} "
                    "skills through training"
                ),
            )
        )
    flag_ids = {flag.id for flag in flags}
    if "overqualified" in flag_ids:
        steps.append(
            Recommendation(
                kind="interview",
                message="Discuss career goals to understand interest in this role level",
            )
        )
    if "location_mismatch" in flag_ids:
        steps.append(
            Recommendation(
                kind="discussion",
                message="Clarify relocation willingness or remote work arrangements",
            )
        )
    if "salary_mismatch" in flag_ids:
        steps.append(
            Recommendation(
                kind="negotiation",
                message=(
                    "Discuss total compensation package including benefits "
                    "and growth opportunities"
                ),
            )
        )
    return tuple(steps)
