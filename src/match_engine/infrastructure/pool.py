"""JSON-file pool provider.

Stands in for the storage layer when the engine is driven from the CLI or
from fixtures. The file is read and validated once, on first use.

Usage example:
    from pathlib import Path

    from match_engine.domain.profiles import MatchDomain
    from match_engine.infrastructure.io.filesystem import LocalFileSystem
    from match_engine.infrastructure.pool import JsonPoolProvider
    from match_engine.protocols import PoolFilters

    provider = JsonPoolProvider(path=Path("data/pool.json"), fs=LocalFileSystem())
    candidate = provider.fetch_subject("c-1", MatchDomain.JOB)
    jobs = provider.fetch_eligible_targets(candidate or {}, PoolFilters(MatchDomain.JOB))
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import override

from ..domain.profiles import MatchDomain
from ..exceptions import PoolFileError
from ..io_contracts import PoolFileIO
from ..protocols import FileSystem, PoolFilters, PoolProvider, RawRecord
from .io.validation import parse_pool_file

_SUBJECT_KEYS = {MatchDomain.JOB: "candidates", MatchDomain.MENTORSHIP: "mentees"}
_TARGET_KEYS = {MatchDomain.JOB: "jobs", MatchDomain.MENTORSHIP: "mentors"}


def _record_id(record: RawRecord) -> str:
    value = record.get("id")
    return str(value).strip() if value is not None else ""


@dataclass
class JsonPoolProvider(PoolProvider):
    """Serve subjects and targets from a single JSON pool file."""

    path: Path
    fs: FileSystem
    _pool: PoolFileIO | None = field(default=None, init=False, repr=False)

    def _load(self) -> PoolFileIO:
        if self._pool is None:
            if not self.fs.exists(self.path):
                raise PoolFileError(str(self.path), "file not found")
            try:
                self._pool = parse_pool_file(self.fs.read_json(self.path))
            except ValueError as exc:
                raise PoolFileError(str(self.path), str(exc)) from exc
        return self._pool

    @override
    def fetch_subject(self, subject_id: str, domain: MatchDomain) -> RawRecord | None:
        records = self._load()[_SUBJECT_KEYS[domain]]
        for record in records:
            if _record_id(record) == subject_id:
                return record
        return None

    @override
    def fetch_eligible_targets(
        self, subject: RawRecord, filters: PoolFilters
    ) -> Sequence[RawRecord]:
        records = [
            record
            for record in self._load()[_TARGET_KEYS[filters.domain]]
            if _record_id(record) not in filters.exclude_ids
        ]
        if filters.limit is not None:
            records = records[: filters.limit]
        return records
