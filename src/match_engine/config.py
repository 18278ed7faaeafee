"""Centralised, injectable configuration for the matching engine."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Self

from dotenv import load_dotenv

from .config_file import MatchingConfigFile


class PositiveIntegerEnvVarError(ValueError):
    """Raised when an environment variable must be a positive integer."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a positive integer.")


class PositiveNumberEnvVarError(ValueError):
    """Raised when an environment variable must be a positive number."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a positive number.")


class ScoreEnvVarError(ValueError):
    """Raised when an environment variable must be a score between 0 and 100."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a number between 0 and 100.")


@dataclass(frozen=True)
class MatchingConfig:
    """Immutable configuration object for both matching facades.

    Load from environment with `MatchingConfig.from_env()` or construct directly for testing.
    """

    # Ranking defaults
    job_min_score: float = 30.0
    mentor_min_score: float = 50.0  # mentor pools are smaller and curated
    default_limit: int = 20
    max_workers: int = 8

    # Pool fetch
    pool_fetch_timeout_seconds: float = 10.0
    pool_fetch_limit: int = 300
    mentor_default_capacity: int = 5

    # Weight tables
    weights_catalog_path: str = ""
    job_weights_name: str = ""
    mentor_weights_name: str = ""

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> Self:
        """Load configuration from environment variables.

        Args:
            dotenv_path: Optional path to .env file. If None, uses default .env discovery.

        Returns:
            MatchingConfig instance populated from environment.
        """
        load_dotenv(dotenv_path)

        return cls(
            job_min_score=_parse_score(
                os.getenv("JOB_MIN_SCORE", ""), env_name="JOB_MIN_SCORE", default=30.0
            ),
            mentor_min_score=_parse_score(
                os.getenv("MENTOR_MIN_SCORE", ""), env_name="MENTOR_MIN_SCORE", default=50.0
            ),
            default_limit=_parse_positive_int(
                os.getenv("MATCH_DEFAULT_LIMIT", ""), env_name="MATCH_DEFAULT_LIMIT", default=20
            ),
            max_workers=_parse_positive_int(
                os.getenv("MATCH_MAX_WORKERS", ""), env_name="MATCH_MAX_WORKERS", default=8
            ),
            pool_fetch_timeout_seconds=_parse_positive_float(
                os.getenv("POOL_FETCH_TIMEOUT_SECONDS", ""),
                env_name="POOL_FETCH_TIMEOUT_SECONDS",
                default=10.0,
            ),
            pool_fetch_limit=_parse_positive_int(
                os.getenv("POOL_FETCH_LIMIT", ""), env_name="POOL_FETCH_LIMIT", default=300
            ),
            mentor_default_capacity=_parse_positive_int(
                os.getenv("MENTOR_DEFAULT_CAPACITY", ""),
                env_name="MENTOR_DEFAULT_CAPACITY",
                default=5,
            ),
            weights_catalog_path=os.getenv("WEIGHTS_CATALOG_PATH", "").strip(),
            job_weights_name=os.getenv("JOB_WEIGHTS_NAME", "").strip(),
            mentor_weights_name=os.getenv("MENTOR_WEIGHTS_NAME", "").strip(),
        )

    def with_overrides(
        self,
        *,
        job_min_score: float | None = None,
        mentor_min_score: float | None = None,
        default_limit: int | None = None,
        max_workers: int | None = None,
        weights_catalog_path: str | None = None,
        job_weights_name: str | None = None,
        mentor_weights_name: str | None = None,
    ) -> Self:
        """Return a new config with specified overrides (for CLI options)."""
        return replace(
            self,
            job_min_score=self.job_min_score if job_min_score is None else job_min_score,
            mentor_min_score=self.mentor_min_score
            if mentor_min_score is None
            else mentor_min_score,
            default_limit=self.default_limit if default_limit is None else default_limit,
            max_workers=self.max_workers if max_workers is None else max_workers,
            weights_catalog_path=self.weights_catalog_path
            if weights_catalog_path is None
            else weights_catalog_path.strip(),
            job_weights_name=self.job_weights_name
            if job_weights_name is None
            else job_weights_name.strip(),
            mentor_weights_name=self.mentor_weights_name
            if mentor_weights_name is None
            else mentor_weights_name.strip(),
        )

    def with_file_overrides(self, file_config: MatchingConfigFile) -> Self:
        """Return a new config with config-file values overriding env/default values."""
        return replace(
            self,
            job_min_score=self.job_min_score
            if file_config.job_min_score is None
            else file_config.job_min_score,
            mentor_min_score=self.mentor_min_score
            if file_config.mentor_min_score is None
            else file_config.mentor_min_score,
            default_limit=self.default_limit
            if file_config.default_limit is None
            else file_config.default_limit,
            max_workers=self.max_workers
            if file_config.max_workers is None
            else file_config.max_workers,
            pool_fetch_timeout_seconds=self.pool_fetch_timeout_seconds
            if file_config.pool_fetch_timeout_seconds is None
            else file_config.pool_fetch_timeout_seconds,
            pool_fetch_limit=self.pool_fetch_limit
            if file_config.pool_fetch_limit is None
            else file_config.pool_fetch_limit,
            mentor_default_capacity=self.mentor_default_capacity
            if file_config.mentor_default_capacity is None
            else file_config.mentor_default_capacity,
            weights_catalog_path=self.weights_catalog_path
            if file_config.weights_catalog_path is None
            else file_config.weights_catalog_path,
            job_weights_name=self.job_weights_name
            if file_config.job_weights_name is None
            else file_config.job_weights_name,
            mentor_weights_name=self.mentor_weights_name
            if file_config.mentor_weights_name is None
            else file_config.mentor_weights_name,
        )


def _parse_positive_int(value: str, *, env_name: str, default: int) -> int:
    """Parse a positive integer from an environment variable, or use the default."""
    text = value.strip()
    if not text:
        return default
    try:
        parsed = int(text)
    except ValueError as exc:
        raise PositiveIntegerEnvVarError(env_name) from exc
    if parsed < 1:
        raise PositiveIntegerEnvVarError(env_name)
    return parsed


def _parse_positive_float(value: str, *, env_name: str, default: float) -> float:
    text = value.strip()
    if not text:
        return default
    try:
        parsed = float(text)
    except ValueError as exc:
        raise PositiveNumberEnvVarError(env_name) from exc
    if parsed <= 0.0:
        raise PositiveNumberEnvVarError(env_name)
    return parsed


def _parse_score(value: str, *, env_name: str, default: float) -> float:
    """Parse a 0–100 score threshold from an environment variable."""
    text = value.strip()
    if not text:
        return default
    try:
        parsed = float(text)
    except ValueError as exc:
        raise ScoreEnvVarError(env_name) from exc
    if not 0.0 <= parsed <= 100.0:
        raise ScoreEnvVarError(env_name)
    return parsed
