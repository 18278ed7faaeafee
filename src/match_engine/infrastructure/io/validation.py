"""Pydantic-based validation helpers for inbound IO payloads."""

from __future__ import annotations

from typing import TypedDict

from pydantic import TypeAdapter, ValidationError

from ...io_contracts import POOL_SCHEMA_VERSION, PoolFileIO


class IncomingDataError(ValueError):
    """Raised when inbound data fails validation."""


class PoolFileInput(TypedDict, total=False):
    schema_version: int
    candidates: list[dict[str, object]] | None
    jobs: list[dict[str, object]] | None
    mentees: list[dict[str, object]] | None
    mentors: list[dict[str, object]] | None


def validate_as[SchemaT](schema: type[SchemaT], payload: object) -> SchemaT:
    try:
        return TypeAdapter(schema).validate_python(payload)
    except ValidationError as exc:
        message = f"Invalid payload for {schema}."
        raise IncomingDataError(message) from exc


def validate_json_as[SchemaT](schema: type[SchemaT], payload: str | bytes | bytearray) -> SchemaT:
    try:
        return TypeAdapter(schema).validate_json(payload)
    except ValidationError as exc:
        message = f"Invalid JSON payload for {schema}."
        raise IncomingDataError(message) from exc


def parse_pool_file(payload: object) -> PoolFileIO:
    """Validate a pool file payload; missing collections become empty lists."""
    pool = validate_as(PoolFileInput, payload)
    version = pool.get("schema_version", POOL_SCHEMA_VERSION)
    if version != POOL_SCHEMA_VERSION:
        raise IncomingDataError(
            f"Unsupported pool schema_version {version}; expected {POOL_SCHEMA_VERSION}."
        )
    return {
        "schema_version": version,
        "candidates": list(pool.get("candidates") or []),
        "jobs": list(pool.get("jobs") or []),
        "mentees": list(pool.get("mentees") or []),
        "mentors": list(pool.get("mentors") or []),
    }
