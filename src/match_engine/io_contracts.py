"""Boundary-neutral IO contracts for pool files and exported results.

Usage example:
    from match_engine.io_contracts import PoolFileIO

    pool: PoolFileIO = {
        "schema_version": 1,
        "candidates": [{"id": "c-1", "skills": ["python"]}],
        "jobs": [{"id": "j-1", "requiredSkills": ["python"], "active": True}],
        "mentees": [],
        "mentors": [],
    }
"""

from __future__ import annotations

from typing import TypedDict

POOL_SCHEMA_VERSION = 1


class PoolFileIO(TypedDict):
    """JSON pool file payload shape; records stay raw until normalised."""

    schema_version: int
    candidates: list[dict[str, object]]
    jobs: list[dict[str, object]]
    mentees: list[dict[str, object]]
    mentors: list[dict[str, object]]


class MatchRowIO(TypedDict):
    """Flat row shape for one ranked match in reports and CSV exports."""

    rank: int
    subject_id: str
    target_id: str
    domain: str
    total: float
    bonus: float
    effective: float
    tier: str
    recommended: bool
    matched_skills: str
    missing_skills: str
    reasons: str
    flags: str
    green_flags: str
    recommendations: str
