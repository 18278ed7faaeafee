"""Tests for scoring a single subject/target pair."""

from datetime import UTC, datetime, timedelta

import pytest

from match_engine.domain.aggregation import MatchResult
from match_engine.domain.profiles import Factor, MatchDomain, SubjectProfile, TargetProfile
from match_engine.domain.scoring import BONUS_SCORERS, goal_alignment, score_pair
from match_engine.domain.weights import (
    DEFAULT_JOB_WEIGHTS,
    DEFAULT_MENTORSHIP_WEIGHTS,
    WeightTable,
)
from tests.support.profiles import make_candidate, make_job, make_mentee, make_mentor

NOW = datetime(2026, 3, 4, 12, 0, tzinfo=UTC)


class TestScorePairJobs:
    """Tests for job pairs under the default table."""

    def test_strong_match(self) -> None:
        subject = make_candidate(industries=("technology",))

        result = score_pair(subject, make_job(), DEFAULT_JOB_WEIGHTS, now=NOW)

        # Cultural, recency and availability have no data and score neutral.
        assert result.total == pytest.approx(90.0)
        assert result.tier == "excellent"
        assert result.recommended is True
        assert result.domain is MatchDomain.JOB
        assert result.matched_skills == ("python", "sql")
        assert result.missing_skills == ()
        assert result.reasons == (
            "Strong skills match",
            "Experience fits the role",
            "Location and work mode suit you",
            "In your preferred industry",
        )
        assert result.flags == ()
        assert result.capacity is None

    def test_breakdown_sums_to_total(self) -> None:
        result = score_pair(make_candidate(), make_job(), DEFAULT_JOB_WEIGHTS, now=NOW)

        assert sum(result.breakdown.values()) == pytest.approx(result.total)
        assert set(result.factor_scores) == set(DEFAULT_JOB_WEIGHTS.factors)

    def test_verified_indigenous_employer_earns_full_bonus(self) -> None:
        job = make_job(is_indigenous=True, is_verified=True)

        result = score_pair(make_candidate(), job, DEFAULT_JOB_WEIGHTS, now=NOW)

        assert result.bonus == pytest.approx(5.0)
        assert result.reasons[-1] == "Indigenous-owned or RAP-committed employer"

    def test_unverified_indigenous_employer_earns_half_bonus(self) -> None:
        job = make_job(is_indigenous=True)

        result = score_pair(make_candidate(), job, DEFAULT_JOB_WEIGHTS, now=NOW)

        assert result.bonus == pytest.approx(2.5)

    def test_bonus_never_changes_total(self) -> None:
        plain = score_pair(make_candidate(), make_job(), DEFAULT_JOB_WEIGHTS, now=NOW)
        owned = score_pair(
            make_candidate(),
            make_job(is_indigenous=True, is_verified=True),
            DEFAULT_JOB_WEIGHTS,
            now=NOW,
        )

        assert owned.total == pytest.approx(plain.total)

    def test_flags_and_posted_at_are_attached(self) -> None:
        posted = NOW - timedelta(days=2)
        job = make_job(required_skills=("python", "docker"), posted_at=posted)

        result = score_pair(make_candidate(), job, DEFAULT_JOB_WEIGHTS, now=NOW)

        assert result.missing_skills == ("docker",)
        assert [flag.id for flag in result.flags] == ["skills_gap"]
        assert result.posted_at == posted
        assert "Recently posted" in result.reasons

    def test_only_weighted_factors_are_scored(self) -> None:
        table = WeightTable(
            name="skills-only",
            domain=MatchDomain.JOB,
            weights={Factor.SKILLS: 100},
        )

        result = score_pair(make_candidate(), make_job(), table, now=NOW)

        assert set(result.factor_scores) == {Factor.SKILLS}
        assert result.total == pytest.approx(100.0)

    def test_scoring_is_deterministic(self) -> None:
        first = score_pair(make_candidate(), make_job(), DEFAULT_JOB_WEIGHTS, now=NOW)
        second = score_pair(make_candidate(), make_job(), DEFAULT_JOB_WEIGHTS, now=NOW)

        assert first == second


class TestScorePairMentorship:
    """Tests for mentorship pairs under the default table."""

    def test_elder_bonus_and_capacity(self) -> None:
        mentor = make_mentor(is_elder=True, current_load=1, max_capacity=4)

        result = score_pair(
            make_mentee(seeking_elder=True), mentor, DEFAULT_MENTORSHIP_WEIGHTS, now=NOW
        )

        assert result.bonus == pytest.approx(5.0)
        assert "Community Elder" in result.reasons
        assert result.capacity == pytest.approx(0.75)

    def test_elder_bonus_depends_on_the_mentor(self) -> None:
        result = score_pair(
            make_mentee(seeking_elder=True), make_mentor(), DEFAULT_MENTORSHIP_WEIGHTS, now=NOW
        )

        assert result.bonus == 0.0

    def test_mentor_expertise_counts_as_skills(self) -> None:
        result = score_pair(make_mentee(), make_mentor(), DEFAULT_MENTORSHIP_WEIGHTS, now=NOW)

        assert result.matched_skills == ("leadership",)
        assert "Expertise matches your interests" in result.reasons
        assert "Well-placed experience gap" in result.reasons


class TestGoalAlignment:
    """Tests for goal-based reasons."""

    def test_goal_mentioning_a_required_skill(self) -> None:
        subject = make_candidate(goals=("Become a senior Python developer",))

        assert goal_alignment(subject, make_job()) == "Become a senior Python developer"

    def test_goal_reason_is_added(self) -> None:
        subject = make_candidate(goals=("Get better at SQL",))

        result = score_pair(subject, make_job(), DEFAULT_JOB_WEIGHTS, now=NOW)

        assert result.reasons[-1] == "Aligned with goal: Get better at SQL"

    def test_multi_word_skill_is_matched_as_phrase(self) -> None:
        mentee = make_mentee(goals=("Grow confidence in public speaking",))
        mentor = make_mentor(required_skills=("public speaking",))

        assert goal_alignment(mentee, mentor) == "Grow confidence in public speaking"

    def test_goal_words_need_exact_or_synonym_match(self) -> None:
        subject = make_candidate(goals=("Build and deploy apps",))
        job = make_job(required_skills=("android",))

        assert goal_alignment(subject, job) is None

    def test_goal_word_matches_through_synonyms(self) -> None:
        subject = make_candidate(goals=("Learn js properly",))
        job = make_job(required_skills=("javascript",))

        assert goal_alignment(subject, job) == "Learn js properly"

    def test_no_matching_goal(self) -> None:
        subject = make_candidate(goals=("Travel more",))

        assert goal_alignment(subject, make_job()) is None


class TestBonusScorers:
    """Tests for the bonus scorer registry."""

    def test_registry_names(self) -> None:
        assert set(BONUS_SCORERS) == {"indigenous_employer", "elder"}

    def test_scorers_ignore_unrelated_targets(self) -> None:
        for scorer in BONUS_SCORERS.values():
            assert scorer(make_job()) == 0.0


class TestResultExtras:
    """Tests for green flags and recommendations on a result."""

    def test_job_result_carries_recommendations(self) -> None:
        job = make_job(required_skills=("python", "sql", "docker"), location="Perth, WA")

        result = score_pair(make_candidate(), job, DEFAULT_JOB_WEIGHTS, now=NOW)

        assert [step.kind for step in result.recommendations] == ["training", "discussion"]

    def test_green_flags_come_from_the_subject(self) -> None:
        subject = make_candidate(completed_courses=2, referred_by="emp-7")

        result = score_pair(subject, make_job(), DEFAULT_JOB_WEIGHTS, now=NOW)

        assert [flag.id for flag in result.green_flags] == ["training_complete", "referral"]
        assert result.total == pytest.approx(
            score_pair(make_candidate(), make_job(), DEFAULT_JOB_WEIGHTS, now=NOW).total
        )


SKILL_POOL = ("python", "sql", "docker", "aws", "react", "excel", "welding")

VARIED_JOB_PAIRS = [
    (make_candidate(), make_job()),
    (make_candidate(skills=()), make_job(required_skills=SKILL_POOL)),
    (
        make_candidate(experience_years=30.0, location="Darwin, NT", remote_preference="onsite"),
        make_job(location="Hobart, TAS", industry="mining", posted_at=NOW - timedelta(days=90)),
    ),
    (
        make_candidate(skills=SKILL_POOL, industries=("technology",), is_indigenous=True),
        make_job(
            preferred_skills=("docker",),
            is_indigenous=True,
            is_verified=True,
            posted_at=NOW - timedelta(days=1),
        ),
    ),
    (make_candidate(experience_years=0.0), make_job(required_skills=(), work_mode="remote")),
]

VARIED_MENTOR_PAIRS = [
    (make_mentee(), make_mentor()),
    (make_mentee(skills=SKILL_POOL), make_mentor(required_skills=("welding",), rating=0.0)),
    (
        make_mentee(seeking_elder=True, cultural_background="Wiradjuri"),
        make_mentor(is_elder=True, cultural_background="Wiradjuri", rating=5.0),
    ),
    (make_mentee(experience_years=20.0), make_mentor(experience_years=1.0, current_load=5)),
]


class TestScoreBounds:
    """Totals and per-factor points stay inside their weights."""

    @pytest.mark.parametrize(("subject", "target"), VARIED_JOB_PAIRS)
    def test_job_pairs(self, subject: SubjectProfile, target: TargetProfile) -> None:
        self._assert_bounded(score_pair(subject, target, DEFAULT_JOB_WEIGHTS, now=NOW))

    @pytest.mark.parametrize(("subject", "target"), VARIED_MENTOR_PAIRS)
    def test_mentor_pairs(self, subject: SubjectProfile, target: TargetProfile) -> None:
        self._assert_bounded(score_pair(subject, target, DEFAULT_MENTORSHIP_WEIGHTS, now=NOW))

    @staticmethod
    def _assert_bounded(result: MatchResult) -> None:
        weights = (
            DEFAULT_JOB_WEIGHTS if result.domain is MatchDomain.JOB else DEFAULT_MENTORSHIP_WEIGHTS
        ).weights
        assert 0.0 <= result.total <= 100.0
        for factor, points in result.breakdown.items():
            assert 0.0 <= points <= weights[factor]


class TestSkillsMonotonicity:
    """Meeting one more required skill never lowers a score."""

    @pytest.mark.parametrize("held", [(), ("python",), ("python", "sql")])
    def test_adding_a_required_skill(self, held: tuple[str, ...]) -> None:
        job = make_job(required_skills=("python", "sql", "docker"), preferred_skills=("aws",))
        before = score_pair(make_candidate(skills=held), job, DEFAULT_JOB_WEIGHTS, now=NOW)
        after = score_pair(
            make_candidate(skills=(*held, "docker")), job, DEFAULT_JOB_WEIGHTS, now=NOW
        )

        assert after.factor_scores[Factor.SKILLS] > before.factor_scores[Factor.SKILLS]
        assert after.total >= before.total

    def test_adding_a_synonym_of_a_missing_skill(self) -> None:
        job = make_job(required_skills=("javascript", "sql"))
        before = score_pair(make_candidate(skills=("sql",)), job, DEFAULT_JOB_WEIGHTS, now=NOW)
        after = score_pair(make_candidate(skills=("sql", "js")), job, DEFAULT_JOB_WEIGHTS, now=NOW)

        assert after.total > before.total
        assert after.missing_skills == ()
