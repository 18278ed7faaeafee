"""Custom exceptions for the matching engine.

Per-pair scoring never raises; these exceptions cover request-level failures
(unresolvable subject, upstream pool fetch) and configuration errors that must
surface at construction time.
"""

from __future__ import annotations


class MatchingError(Exception):
    """Base exception for all matching engine errors."""

    pass


class SubjectNotFoundError(MatchingError):
    """Raised when the subject of a ranking request cannot be resolved.

    This is fatal for the request - there is nothing to rank against.
    """

    def __init__(self, subject_id: str, domain: str) -> None:
        self.subject_id = subject_id
        self.domain = domain
        super().__init__(f"No {domain} subject found for id '{subject_id}'.")


class PoolFetchFailedError(MatchingError):
    """Raised when the upstream data layer fails to supply a subject or pool.

    Never treated as an empty pool: a partial pool would bias rankings.
    """

    def __init__(self, domain: str, detail: str) -> None:
        self.domain = domain
        self.detail = detail
        super().__init__(f"Failed to fetch {domain} pool: {detail}")


class PoolFetchTimeoutError(PoolFetchFailedError):
    """Raised when the pool fetch does not finish within its timeout."""

    def __init__(self, domain: str, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(domain, f"timed out after {timeout_seconds:g}s")


class InvalidWeightTableError(MatchingError):
    """Raised when a weight table is inconsistent.

    Weight tables are validated on construction so that a bad table stops the
    process at start-up rather than on the first request.
    """

    def __init__(self, table_name: str, detail: str) -> None:
        self.table_name = table_name
        self.detail = detail
        super().__init__(f"Invalid weight table '{table_name}': {detail}")


class WeightCatalogFileNotFoundError(MatchingError):
    """Raised when a configured weight catalogue file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Weight catalogue not found: {path}\n"
            "Set WEIGHTS_CATALOG_PATH to a valid JSON file or leave it empty "
            "to use the built-in tables."
        )


class WeightCatalogValidationError(MatchingError):
    """Raised when a weight catalogue fails schema validation."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Invalid weight catalogue {path}: {detail}")


class WeightProfileSelectionError(MatchingError):
    """Raised when a requested weight table name is not in the catalogue."""

    def __init__(self, name: str, available: tuple[str, ...]) -> None:
        options = ", ".join(available) or "<none>"
        super().__init__(f"Unknown weight table '{name}'. Available: {options}")


class ConfigFileNotFoundError(MatchingError):
    """Raised when a TOML config file path does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Config file not found: {path}")


class ConfigFileParseError(MatchingError):
    """Raised when a TOML config file cannot be parsed."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Config file {path} is not valid TOML: {detail}")


class ConfigFileValidationError(MatchingError):
    """Raised when a TOML config file fails schema validation."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Config file {path} failed validation: {detail}")


class PoolFileError(MatchingError):
    """Raised when a JSON pool file is missing or malformed."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Pool file {path}: {detail}")
