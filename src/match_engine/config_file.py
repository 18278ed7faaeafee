"""Typed parsing and validation for matching config files."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .exceptions import ConfigFileNotFoundError, ConfigFileParseError, ConfigFileValidationError
from .protocols import FileSystem

_SCHEMA_VERSION = 1


@dataclass(frozen=True)
class MatchingConfigFile:
    """Validated matching config values loaded from a TOML file."""

    job_min_score: float | None = None
    mentor_min_score: float | None = None
    default_limit: int | None = None
    max_workers: int | None = None
    pool_fetch_timeout_seconds: float | None = None
    pool_fetch_limit: int | None = None
    mentor_default_capacity: int | None = None
    weights_catalog_path: str | None = None
    job_weights_name: str | None = None
    mentor_weights_name: str | None = None


class _MatchingSectionModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    job_min_score: float | None = None
    mentor_min_score: float | None = None
    default_limit: int | None = None
    max_workers: int | None = None
    pool_fetch_timeout_seconds: float | None = None
    pool_fetch_limit: int | None = None
    mentor_default_capacity: int | None = None
    weights_catalog_path: str | None = None
    job_weights_name: str | None = None
    mentor_weights_name: str | None = None

    @field_validator("weights_catalog_path", "job_weights_name", "mentor_weights_name")
    @classmethod
    def _validate_non_empty_text(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        if not text:
            raise ValueError
        return text

    @field_validator("default_limit", "max_workers", "pool_fetch_limit", "mentor_default_capacity")
    @classmethod
    def _validate_positive_int(cls, value: int | None) -> int | None:
        if value is None:
            return None
        if value < 1:
            raise ValueError
        return value

    @field_validator("job_min_score", "mentor_min_score")
    @classmethod
    def _validate_score_range(cls, value: float | None) -> float | None:
        if value is None:
            return None
        if value < 0.0 or value > 100.0:
            raise ValueError
        return value

    @field_validator("pool_fetch_timeout_seconds")
    @classmethod
    def _validate_positive_seconds(cls, value: float | None) -> float | None:
        if value is None:
            return None
        if value <= 0.0:
            raise ValueError
        return value


class _ConfigFileModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: int
    matching: _MatchingSectionModel

    @field_validator("schema_version")
    @classmethod
    def _validate_schema_version(cls, value: int) -> int:
        if value != _SCHEMA_VERSION:
            raise ValueError
        return value


def _format_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ("<root>",)))
    message = str(first.get("msg", "invalid value"))
    return f"{location}: {message}"


def load_matching_config_file(*, path: Path, fs: FileSystem) -> MatchingConfigFile:
    """Load and validate a matching TOML config file."""
    if not fs.exists(path):
        raise ConfigFileNotFoundError(str(path))

    raw_payload = fs.read_text(path)
    try:
        payload: object = tomllib.loads(raw_payload)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigFileParseError(str(path), str(exc)) from exc

    try:
        model = _ConfigFileModel.model_validate(payload)
    except ValidationError as exc:
        raise ConfigFileValidationError(str(path), _format_validation_error(exc)) from exc

    section = model.matching
    return MatchingConfigFile(
        job_min_score=section.job_min_score,
        mentor_min_score=section.mentor_min_score,
        default_limit=section.default_limit,
        max_workers=section.max_workers,
        pool_fetch_timeout_seconds=section.pool_fetch_timeout_seconds,
        pool_fetch_limit=section.pool_fetch_limit,
        mentor_default_capacity=section.mentor_default_capacity,
        weights_catalog_path=section.weights_catalog_path,
        job_weights_name=section.job_weights_name,
        mentor_weights_name=section.mentor_weights_name,
    )
