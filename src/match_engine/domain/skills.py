"""Fuzzy skill matching over a small, curated vocabulary.

Two tokens denote the same competency when they are equal, when one contains
the other, or when both belong to the same synonym group. There is no edit
distance or embedding similarity: the vocabulary is small enough that a
hand-maintained table is more predictable.

Usage example:
    from match_engine.domain.skills import skill_set_score, skills_equivalent

    assert skills_equivalent("js", "javascript")
    result = skill_set_score(("py", "postgresql"), ("python", "sql"), ())
    assert result.score == 1.0
    assert result.missing == ()
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

REQUIRED_SHARE = 0.7
PREFERRED_SHARE = 0.3
# Mentee interests beyond this many do not raise the bar for full coverage.
INTEREST_SATURATION = 3

# Shorter tokens are only matched exactly or through the synonym table.
_MIN_CONTAINMENT_LENGTH = 3

SYNONYM_GROUPS: tuple[frozenset[str], ...] = (
    frozenset({"javascript", "js", "ecmascript", "es6"}),
    frozenset({"typescript", "ts"}),
    frozenset({"python", "py", "python3"}),
    frozenset({"node", "nodejs", "node.js"}),
    frozenset({"react", "reactjs", "react.js"}),
    frozenset({"vue", "vuejs", "vue.js"}),
    frozenset({"postgresql", "postgres", "psql"}),
    frozenset({"sql", "postgresql", "mysql", "sqlite", "t-sql", "tsql"}),
    frozenset({"mongodb", "mongo"}),
    frozenset({"aws", "amazon web services"}),
    frozenset({"gcp", "google cloud", "google cloud platform"}),
    frozenset({"azure", "microsoft azure"}),
    frozenset({"kubernetes", "k8s"}),
    frozenset({"machine learning", "ml"}),
    frozenset({"artificial intelligence", "ai"}),
    frozenset({"c#", "csharp", "c sharp"}),
    frozenset({"c++", "cpp"}),
    frozenset({"golang", "go"}),
    frozenset({"ci/cd", "cicd", "continuous integration"}),
    frozenset({"ux", "user experience"}),
    frozenset({"ui", "user interface"}),
    frozenset({"excel", "microsoft excel", "spreadsheets"}),
    frozenset({"first aid", "first aid certificate", "cpr"}),
    frozenset({"forklift", "forklift licence", "forklift license"}),
    frozenset({"customer service", "customer support", "client service"}),
    frozenset({"project management", "pm", "project coordination"}),
)


def _build_index(groups: Iterable[frozenset[str]]) -> dict[str, frozenset[int]]:
    index: dict[str, set[int]] = {}
    for position, group in enumerate(groups):
        for token in group:
            index.setdefault(token, set()).add(position)
    return {token: frozenset(positions) for token, positions in index.items()}


_SYNONYM_INDEX = _build_index(SYNONYM_GROUPS)


@dataclass(frozen=True)
class SkillMatch:
    """Outcome of comparing a subject's skills with a target's requirements."""

    score: float
    matched: tuple[str, ...]
    missing: tuple[str, ...]
    matched_preferred: tuple[str, ...]


def skills_synonymous(a: str, b: str) -> bool:
    """Return True when two tokens are equal or share a synonym group.

    Stricter than ``skills_equivalent``: no substring containment, so free-text
    words such as "and" never line up with "android".
    """
    left = a.strip().lower()
    right = b.strip().lower()
    if not left or not right:
        return False
    if left == right:
        return True
    left_groups = _SYNONYM_INDEX.get(left)
    right_groups = _SYNONYM_INDEX.get(right)
    if left_groups is None or right_groups is None:
        return False
    return not left_groups.isdisjoint(right_groups)


def skills_equivalent(a: str, b: str) -> bool:
    """Return True when two skill tokens denote the same competency."""
    left = a.strip().lower()
    right = b.strip().lower()
    if not left or not right:
        return False
    if min(len(left), len(right)) >= _MIN_CONTAINMENT_LENGTH and (left in right or right in left):
        return True
    return skills_synonymous(left, right)


def _covered(skill: str, subject_skills: Sequence[str]) -> bool:
    return any(skills_equivalent(skill, own) for own in subject_skills)


def skill_set_score(
    subject_skills: Sequence[str],
    required_skills: Sequence[str],
    preferred_skills: Sequence[str],
) -> SkillMatch:
    """Score requirement coverage: 70% required, 30% preferred.

    An empty requirement list counts as fully covered so listings without
    explicit requirements are not penalised.
    """
    matched = tuple(skill for skill in required_skills if _covered(skill, subject_skills))
    missing = tuple(skill for skill in required_skills if skill not in matched)
    matched_preferred = tuple(
        skill for skill in preferred_skills if _covered(skill, subject_skills)
    )

    required_coverage = len(matched) / len(required_skills) if required_skills else 1.0
    preferred_coverage = (
        len(matched_preferred) / len(preferred_skills) if preferred_skills else 1.0
    )
    score = REQUIRED_SHARE * required_coverage + PREFERRED_SHARE * preferred_coverage
    return SkillMatch(
        score=max(0.0, min(1.0, score)),
        matched=matched,
        missing=missing,
        matched_preferred=matched_preferred,
    )


def interest_coverage(
    subject_skills: Sequence[str],
    expertise: Sequence[str],
    *,
    saturation: int = INTEREST_SATURATION,
) -> SkillMatch:
    """Score how much of a mentee's interests a mentor's expertise covers.

    Coverage is measured against the mentee's list, capped at ``saturation``
    interests, so extra expertise the mentee did not ask about never lowers the
    score. The caller decides what an empty list on either side means.
    """
    matched = tuple(skill for skill in subject_skills if _covered(skill, expertise))
    missing = tuple(skill for skill in subject_skills if skill not in matched)
    wanted = min(len(subject_skills), saturation)
    score = len(matched) / wanted if wanted else 0.0
    return SkillMatch(
        score=min(1.0, score),
        matched=matched,
        missing=missing,
        matched_preferred=(),
    )
