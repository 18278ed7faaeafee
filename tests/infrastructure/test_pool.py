"""Tests for the JSON-file pool provider."""

from pathlib import Path

import pytest

from match_engine.domain.profiles import MatchDomain
from match_engine.exceptions import PoolFileError
from match_engine.infrastructure import JsonPoolProvider
from match_engine.protocols import PoolFilters, PoolProvider
from tests.fakes import InMemoryFileSystem

POOL_PATH = Path("data/pool.json")


def _provider(payload: dict[str, object]) -> JsonPoolProvider:
    fs = InMemoryFileSystem()
    fs.write_json(payload, POOL_PATH)
    return JsonPoolProvider(path=POOL_PATH, fs=fs)


def _pool() -> dict[str, object]:
    return {
        "schema_version": 1,
        "candidates": [{"id": "c-1"}, {"id": "c-2"}],
        "jobs": [{"id": "j-1"}, {"id": "j-2"}, {"id": "j-3"}],
        "mentees": [{"id": 7}],
        "mentors": [{"id": "m-1"}],
    }


class TestJsonPoolProvider:
    """Tests for subject lookup and target filtering."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(_provider(_pool()), PoolProvider)

    def test_fetch_subject_by_domain(self) -> None:
        provider = _provider(_pool())

        assert provider.fetch_subject("c-2", MatchDomain.JOB) == {"id": "c-2"}
        assert provider.fetch_subject("c-2", MatchDomain.MENTORSHIP) is None
        assert provider.fetch_subject("7", MatchDomain.MENTORSHIP) == {"id": 7}

    def test_fetch_eligible_targets_applies_filters(self) -> None:
        provider = _provider(_pool())
        filters = PoolFilters(domain=MatchDomain.JOB, exclude_ids=frozenset({"j-1"}), limit=1)

        targets = provider.fetch_eligible_targets({"id": "c-1"}, filters)

        assert list(targets) == [{"id": "j-2"}]

    def test_fetch_eligible_targets_for_mentorship(self) -> None:
        provider = _provider(_pool())

        targets = provider.fetch_eligible_targets(
            {"id": "7"}, PoolFilters(domain=MatchDomain.MENTORSHIP)
        )

        assert list(targets) == [{"id": "m-1"}]

    def test_missing_collections_are_empty(self) -> None:
        provider = _provider({"schema_version": 1, "candidates": [{"id": "c-1"}]})

        assert provider.fetch_eligible_targets({}, PoolFilters(domain=MatchDomain.JOB)) == []

    def test_missing_file(self) -> None:
        provider = JsonPoolProvider(path=POOL_PATH, fs=InMemoryFileSystem())

        with pytest.raises(PoolFileError, match="file not found"):
            provider.fetch_subject("c-1", MatchDomain.JOB)

    def test_invalid_payload(self) -> None:
        provider = _provider({"schema_version": 3})

        with pytest.raises(PoolFileError, match="schema_version 3"):
            provider.fetch_subject("c-1", MatchDomain.JOB)

    def test_file_is_read_once(self) -> None:
        fs = InMemoryFileSystem()
        fs.write_json(_pool(), POOL_PATH)
        provider = JsonPoolProvider(path=POOL_PATH, fs=fs)

        provider.fetch_subject("c-1", MatchDomain.JOB)
        fs.write_json({"schema_version": 1}, POOL_PATH)

        assert provider.fetch_subject("c-1", MatchDomain.JOB) == {"id": "c-1"}
