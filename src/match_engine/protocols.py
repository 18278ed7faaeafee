"""Protocol definitions for dependency injection.

These protocols define the abstract interfaces that the matching engine depends
on, so the storage layer can be swapped for in-memory fakes in tests.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .domain.profiles import MatchDomain

if TYPE_CHECKING:
    import pandas as pd

type RawRecord = Mapping[str, object]


@dataclass(frozen=True)
class PoolFilters:
    """Business-rule filters passed to the pool provider.

    ``limit`` caps the fetched pool; the engine re-applies exclusions after the
    fetch, so providers may treat ``exclude_ids`` as an optimisation hint.
    """

    domain: MatchDomain
    exclude_ids: frozenset[str] = frozenset()
    limit: int | None = None


@runtime_checkable
class PoolProvider(Protocol):
    """Abstract data-access boundary owned by the storage layer."""

    def fetch_subject(self, subject_id: str, domain: MatchDomain) -> RawRecord | None:
        """Return the raw subject record, or None when the id is unknown.

        Raises:
            Exception: Any upstream I/O failure; the engine maps it to
                ``PoolFetchFailedError``.
        """
        ...

    def fetch_eligible_targets(
        self, subject: RawRecord, filters: PoolFilters
    ) -> Sequence[RawRecord]:
        """Return raw target records a subject could in principle match."""
        ...


@runtime_checkable
class FileSystem(Protocol):
    """Abstract filesystem for reading pools and writing reports."""

    def read_json(self, path: Path) -> dict[str, object]:
        """Read JSON file."""
        ...

    def write_json(self, data: Mapping[str, object], path: Path) -> None:
        """Write JSON file."""
        ...

    def read_text(self, path: Path) -> str:
        """Read text file."""
        ...

    def write_text(self, content: str, path: Path) -> None:
        """Write text file."""
        ...

    def write_csv(self, df: pd.DataFrame, path: Path) -> None:
        """Write DataFrame to CSV file."""
        ...

    def read_csv(self, path: Path) -> pd.DataFrame:
        """Read CSV file into DataFrame."""
        ...

    def exists(self, path: Path) -> bool:
        """Check if path exists."""
        ...

    def mkdir(self, path: Path, parents: bool = True) -> None:
        """Create directory."""
        ...
