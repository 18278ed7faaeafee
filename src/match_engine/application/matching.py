"""Request flow shared by the job and mentorship facades.

A request resolves the subject, fetches the eligible pool as one bounded call
and hands both to the domain's ``Ranker``. The fetch is the only I/O on the
path, and the only place a timeout applies.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime

from ..config import MatchingConfig
from ..domain.aggregation import MatchResult
from ..domain.profiles import MatchDomain
from ..exceptions import PoolFetchFailedError, PoolFetchTimeoutError, SubjectNotFoundError
from ..observability import get_logger
from ..protocols import PoolFilters, PoolProvider, RawRecord
from .ranker import RankOptions, Ranker

logger = get_logger("match_engine.matching")


@dataclass(frozen=True)
class FetchedPool:
    """Raw subject record and its eligible targets, as returned upstream."""

    subject: RawRecord
    targets: tuple[RawRecord, ...]


def _fetch(provider: PoolProvider, subject_id: str, filters: PoolFilters) -> FetchedPool:
    subject = provider.fetch_subject(subject_id, filters.domain)
    if subject is None:
        raise SubjectNotFoundError(subject_id, filters.domain)
    targets = provider.fetch_eligible_targets(subject, filters)
    return FetchedPool(subject=subject, targets=tuple(targets))


def fetch_pool(
    provider: PoolProvider,
    subject_id: str,
    filters: PoolFilters,
    *,
    timeout_seconds: float,
) -> FetchedPool:
    """Fetch the subject and its pool within ``timeout_seconds``.

    There are no retries; retry policy belongs to the caller.

    Raises:
        SubjectNotFoundError: The provider has no record for ``subject_id``.
        PoolFetchTimeoutError: The fetch did not complete in time.
        PoolFetchFailedError: The provider raised any other error.
    """
    domain = filters.domain
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pool-fetch")
    try:
        future = executor.submit(_fetch, provider, subject_id, filters)
        try:
            return future.result(timeout=timeout_seconds)
        except TimeoutError as exc:
            future.cancel()
            logger.error(
                "Pool fetch for %s subject %s timed out after %ss",
                domain,
                subject_id,
                timeout_seconds,
            )
            raise PoolFetchTimeoutError(domain, timeout_seconds) from exc
        except SubjectNotFoundError:
            logger.error("No %s subject found for id %s", domain, subject_id)
            raise
        except Exception as exc:
            logger.error("Pool fetch for %s subject %s failed: %s", domain, subject_id, exc)
            raise PoolFetchFailedError(domain, f"{type(exc).__name__}: {exc}") from exc
    finally:
        # A timed-out provider call keeps running in its thread; do not wait for it.
        executor.shutdown(wait=False, cancel_futures=True)


class MatchService:
    """Resolve a subject, fetch its pool and rank it with one strategy."""

    def __init__(self, ranker: Ranker, provider: PoolProvider, config: MatchingConfig) -> None:
        self.ranker = ranker
        self.provider = provider
        self.config = config

    @property
    def domain(self) -> MatchDomain:
        return self.ranker.strategy.domain

    def find_matches(
        self,
        subject_id: str,
        options: RankOptions | None = None,
        *,
        now: datetime | None = None,
    ) -> list[MatchResult]:
        opts = options or RankOptions()
        filters = PoolFilters(
            domain=self.domain,
            exclude_ids=opts.exclude_ids,
            limit=self.config.pool_fetch_limit,
        )
        fetched = fetch_pool(
            self.provider,
            subject_id,
            filters,
            timeout_seconds=self.config.pool_fetch_timeout_seconds,
        )
        return self.ranker.rank(fetched.subject, fetched.targets, opts, now=now)
