"""Tests for raw record normalisation."""

from datetime import UTC, date, datetime

from match_engine.domain.normalisation import (
    experience_tier,
    experience_years_from_history,
    normalise_skills,
    normalise_subject,
    normalise_target,
    parse_clock,
)
from match_engine.domain.profiles import MatchDomain, TimeSlot, WorkInterval
from tests.support.profiles import raw_candidate, raw_job, raw_mentor

NOW = datetime(2026, 3, 4, 12, 0, tzinfo=UTC)


class TestNormaliseSkills:
    """Tests for skill token cleaning."""

    def test_lowercases_trims_and_deduplicates_in_order(self) -> None:
        assert normalise_skills(["Python", " python ", "SQL", "Machine   Learning"]) == (
            "python",
            "sql",
            "machine learning",
        )

    def test_accepts_comma_separated_string(self) -> None:
        assert normalise_skills("React, TypeScript,,") == ("react", "typescript")

    def test_accepts_named_skill_objects(self) -> None:
        assert normalise_skills([{"name": "Go"}, {"level": "expert"}, "Rust"]) == ("go", "rust")

    def test_unknown_shapes_give_empty_tuple(self) -> None:
        assert normalise_skills(None) == ()
        assert normalise_skills(42) == ()
        assert normalise_skills({"name": "python"}) == ()


class TestExperience:
    """Tests for experience derivation and tiering."""

    def test_sums_whole_months_across_history(self) -> None:
        intervals = [
            WorkInterval(start=date(2020, 3, 1), end=date(2022, 3, 1)),
            WorkInterval(start=date(2025, 3, 1)),
        ]

        assert experience_years_from_history(intervals, today=date(2026, 3, 4)) == 3.0

    def test_overlapping_intervals_are_both_counted(self) -> None:
        intervals = [
            WorkInterval(start=date(2024, 1, 1), end=date(2025, 1, 1)),
            WorkInterval(start=date(2024, 1, 1), end=date(2025, 1, 1)),
        ]

        assert experience_years_from_history(intervals, today=date(2026, 3, 4)) == 2.0

    def test_end_before_start_contributes_nothing(self) -> None:
        intervals = [WorkInterval(start=date(2024, 6, 1), end=date(2023, 1, 1))]

        assert experience_years_from_history(intervals, today=date(2026, 3, 4)) == 0.0

    def test_job_tiers(self) -> None:
        assert experience_tier(0.5, MatchDomain.JOB) == "entry"
        assert experience_tier(1.0, MatchDomain.JOB) == "junior"
        assert experience_tier(4.0, MatchDomain.JOB) == "mid"
        assert experience_tier(11.9, MatchDomain.JOB) == "lead"
        assert experience_tier(12.0, MatchDomain.JOB) == "executive"

    def test_mentorship_tiers(self) -> None:
        assert experience_tier(1.0, MatchDomain.MENTORSHIP) == "entry"
        assert experience_tier(6.0, MatchDomain.MENTORSHIP) == "senior"
        assert experience_tier(10.0, MatchDomain.MENTORSHIP) == "expert"


class TestParseClock:
    """Tests for HH:MM parsing."""

    def test_valid_times(self) -> None:
        assert parse_clock("09:30") == 570
        assert parse_clock("9:05") == 545
        assert parse_clock("24:00") == 1440

    def test_invalid_times(self) -> None:
        assert parse_clock("24:01") is None
        assert parse_clock("09:60") is None
        assert parse_clock("half nine") is None
        assert parse_clock(930) is None


class TestNormaliseSubject:
    """Tests for candidate and mentee normalisation."""

    def test_candidate_record(self) -> None:
        subject = normalise_subject(
            raw_candidate(
                isIndigenous="yes",
                goals=["Lead a data team"],
                languages=["English", "english"],
            ),
            MatchDomain.JOB,
            now=NOW,
        )

        assert subject.id == "cand-1"
        assert subject.domain is MatchDomain.JOB
        assert subject.skills == ("python", "sql")
        assert subject.experience_years == 4.0
        assert subject.experience_tier == "mid"
        assert subject.industries == ("technology",)
        assert subject.is_indigenous is True
        assert subject.goals == ("Lead a data team",)
        assert subject.languages == ("english",)

    def test_experience_falls_back_to_work_history(self) -> None:
        record = raw_candidate(
            experienceYears=None,
            workHistory=[
                {"startDate": "2021-03-01", "endDate": "2024-03-01"},
                {"startDate": "not a date"},
                "ignored",
            ],
        )

        subject = normalise_subject(record, MatchDomain.JOB, now=NOW)

        assert subject.experience_years == 3.0
        assert subject.experience_tier == "mid"

    def test_missing_fields_degrade_to_defaults(self) -> None:
        subject = normalise_subject({}, MatchDomain.MENTORSHIP, now=NOW)

        assert subject.id == ""
        assert subject.skills == ()
        assert subject.experience_years == 0.0
        assert subject.remote_preference == "flexible"
        assert subject.compensation is None
        assert subject.availability == ()

    def test_unknown_remote_preference_is_flexible(self) -> None:
        subject = normalise_subject(
            raw_candidate(remotePreference="sometimes"), MatchDomain.JOB, now=NOW
        )

        assert subject.remote_preference == "flexible"

    def test_negative_experience_is_clamped(self) -> None:
        subject = normalise_subject(raw_candidate(experienceYears=-3), MatchDomain.JOB, now=NOW)

        assert subject.experience_years == 0.0

    def test_non_finite_experience_falls_back_to_history(self) -> None:
        record = raw_candidate(
            experienceYears="inf",
            workHistory=[{"startDate": "2021-03-01", "endDate": "2024-03-01"}],
        )

        subject = normalise_subject(record, MatchDomain.JOB, now=NOW)
        unknown = normalise_subject(
            raw_candidate(experienceYears=float("nan")), MatchDomain.JOB, now=NOW
        )

        assert subject.experience_years == 3.0
        assert unknown.experience_years == 0.0

    def test_engagement_signals(self) -> None:
        subject = normalise_subject(
            raw_candidate(
                elderVerified=True,
                referredBy="Aunty June",
                mentorshipSessions="3",
                completedCourses=2,
                forumPosts=-4,
                badges=["first-aid", "white-card"],
                availableFrom="2026-05-01",
            ),
            MatchDomain.JOB,
            now=NOW,
        )

        assert subject.is_verified is True
        assert subject.referred_by == "Aunty June"
        assert subject.mentorship_sessions == 3
        assert subject.completed_courses == 2
        assert subject.forum_posts == 0
        assert subject.badge_count == 2
        assert subject.available_from == date(2026, 5, 1)

    def test_availability_slots(self) -> None:
        record = raw_candidate(
            availability=[
                {"dayOfWeek": "Monday", "startTime": "09:00", "endTime": "12:00"},
                {"dayOfWeek": 1, "startTime": "09:00", "endTime": "12:00"},
                {"dayOfWeek": 2, "startTime": "14:00", "endTime": "13:00"},
                {"dayOfWeek": 9, "startTime": "09:00", "endTime": "10:00"},
            ],
            timezone="Australia/Sydney",
        )

        subject = normalise_subject(record, MatchDomain.JOB, now=NOW)

        assert subject.availability == (TimeSlot(day_of_week=1, start_minute=540, end_minute=720),)
        assert subject.timezone == "Australia/Sydney"


class TestNormaliseTarget:
    """Tests for job listing and mentor normalisation."""

    def test_job_record(self) -> None:
        target = normalise_target(
            raw_job("job-1", salaryMin="90000", salaryMax=110000, indigenousOwned=True),
            MatchDomain.JOB,
            now=NOW,
        )

        assert target.required_skills == ("python", "sql")
        assert target.experience_min == 3.0
        assert target.experience_max == 6.0
        assert target.work_mode == "onsite"
        assert target.industry == "technology"
        assert target.is_indigenous is True
        assert target.compensation is not None
        assert target.compensation.minimum == 90000.0
        assert target.compensation.maximum == 110000.0
        assert target.max_capacity is None
        assert target.has_capacity is True

    def test_future_posted_date_is_clamped_to_now(self) -> None:
        target = normalise_target(
            raw_job("job-1", postedAt="2026-04-01T00:00:00Z"), MatchDomain.JOB, now=NOW
        )

        assert target.posted_at == NOW

    def test_unparseable_posted_date_is_unknown(self) -> None:
        target = normalise_target(raw_job("job-1", postedAt="yesterday"), MatchDomain.JOB, now=NOW)

        assert target.posted_at is None

    def test_work_mode_falls_back_to_remote_hints(self) -> None:
        flagged = normalise_target(
            raw_job("job-1", workMode=None, remote=True), MatchDomain.JOB, now=NOW
        )
        by_location = normalise_target(
            raw_job("job-2", workMode=None, location="Remote (Australia)"),
            MatchDomain.JOB,
            now=NOW,
        )
        plain = normalise_target(raw_job("job-3", workMode=None), MatchDomain.JOB, now=NOW)

        assert flagged.work_mode == "remote"
        assert by_location.work_mode == "remote"
        assert plain.work_mode == "onsite"

    def test_mentor_record(self) -> None:
        target = normalise_target(
            raw_mentor("mentor-1", rating=7, isElder="true"),
            MatchDomain.MENTORSHIP,
            now=NOW,
        )

        assert target.required_skills == ("leadership", "public speaking")
        assert target.experience_years == 12.0
        assert target.rating == 5.0
        assert target.is_elder is True
        assert target.current_load == 1
        assert target.max_capacity == 5
        assert target.work_mode == "remote"

    def test_mentor_capacity_defaults(self) -> None:
        record = raw_mentor("mentor-1", maxCapacity=None)

        target = normalise_target(record, MatchDomain.MENTORSHIP, now=NOW, default_capacity=3)

        assert target.max_capacity == 3

    def test_mentor_at_capacity_has_no_capacity(self) -> None:
        target = normalise_target(
            raw_mentor("mentor-1", currentLoad=5, maxCapacity=5),
            MatchDomain.MENTORSHIP,
            now=NOW,
        )

        assert target.has_capacity is False

    def test_non_finite_numbers_are_treated_as_missing(self) -> None:
        record = raw_mentor(
            "mentor-1",
            rating="nan",
            ratingCount="inf",
            currentLoad="nan",
            maxCapacity=1e400,
            rateMax=float("-inf"),
        )

        target = normalise_target(record, MatchDomain.MENTORSHIP, now=NOW)

        assert target.rating is None
        assert target.rating_count == 0
        assert target.current_load == 0
        assert target.max_capacity == 5
        assert target.compensation is None

    def test_huge_integer_count_is_ignored(self) -> None:
        target = normalise_target(
            raw_mentor("mentor-1", ratingCount=10**400), MatchDomain.MENTORSHIP, now=NOW
        )

        assert target.rating_count == 0

    def test_job_start_date(self) -> None:
        target = normalise_target(
            raw_job("job-1", startDate="2026-04-01T00:00:00Z"), MatchDomain.JOB, now=NOW
        )

        assert target.start_date == date(2026, 4, 1)

    def test_active_defaults_to_true(self) -> None:
        record = raw_job("job-1")
        del record["active"]

        closed = normalise_target(raw_job("job-2", active="no"), MatchDomain.JOB, now=NOW)

        assert normalise_target(record, MatchDomain.JOB, now=NOW).active is True
        assert closed.active is False

    def test_snake_case_keys_are_accepted(self) -> None:
        record = {
            "id": "job-9",
            "required_skills": ["Java"],
            "experience_min": 2,
            "work_mode": "hybrid",
        }

        target = normalise_target(record, MatchDomain.JOB, now=NOW)

        assert target.required_skills == ("java",)
        assert target.experience_min == 2.0
        assert target.work_mode == "hybrid"
