"""Loading and strict validation for weight table catalogues."""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from ..domain.profiles import Factor, MatchDomain
from ..domain.scoring import BONUS_SCORERS
from ..domain.weights import (
    BonusRule,
    Disclosure,
    TierThresholds,
    WeightCatalog,
    WeightTable,
    default_weights,
)
from ..exceptions import (
    WeightCatalogFileNotFoundError,
    WeightCatalogValidationError,
    WeightProfileSelectionError,
)
from ..protocols import FileSystem

_SCHEMA_VERSION = 1


class _BonusRuleModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    cap: float
    reason: str

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        name = value.strip()
        if name not in BONUS_SCORERS:
            raise ValueError
        return name

    @field_validator("cap")
    @classmethod
    def _validate_cap(cls, value: float) -> float:
        if value < 0.0:
            raise ValueError
        return value


class _DisclosureModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    threshold: float
    reason: str

    @field_validator("threshold")
    @classmethod
    def _validate_threshold(cls, value: float) -> float:
        if value < 0.0 or value > 1.0:
            raise ValueError
        return value

    @field_validator("reason")
    @classmethod
    def _validate_reason(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError
        return text


class _TierThresholdsModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    excellent: float = 80.0
    good: float = 60.0
    fair: float = 45.0

    @model_validator(mode="after")
    def _validate_order(self) -> _TierThresholdsModel:
        if not 100.0 >= self.excellent > self.good > self.fair >= 0.0:
            raise ValueError
        return self


class _WeightTableModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    domain: MatchDomain
    weights: dict[Factor, int]
    bonuses: tuple[_BonusRuleModel, ...] = ()
    disclosures: dict[Factor, _DisclosureModel] = {}
    tiers: _TierThresholdsModel = _TierThresholdsModel()

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError
        return text


class _WeightCatalogModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: int
    default_tables: dict[MatchDomain, str] = {}
    tables: tuple[_WeightTableModel, ...]

    @field_validator("schema_version")
    @classmethod
    def _validate_schema_version(cls, value: int) -> int:
        if value != _SCHEMA_VERSION:
            raise ValueError
        return value

    @model_validator(mode="after")
    def _validate_tables(self) -> _WeightCatalogModel:
        if not self.tables:
            raise ValueError
        names = [table.name for table in self.tables]
        if len(set(names)) != len(names):
            raise ValueError
        domains = {table.name: table.domain for table in self.tables}
        for domain, name in self.default_tables.items():
            if domains.get(name.strip()) is not domain:
                raise ValueError
        return self


def _format_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ("<root>",)))
    message = str(first.get("msg", "invalid value"))
    return f"{location}: {message}"


def _to_domain_table(model: _WeightTableModel) -> WeightTable:
    # WeightTable re-checks the semantic rules (sum to 100, disclosures on weighted factors).
    return WeightTable(
        name=model.name,
        domain=model.domain,
        weights=model.weights,
        bonuses=tuple(
            BonusRule(name=bonus.name, cap=bonus.cap, reason=bonus.reason)
            for bonus in model.bonuses
        ),
        disclosures={
            factor: Disclosure(threshold=disclosure.threshold, reason=disclosure.reason)
            for factor, disclosure in model.disclosures.items()
        },
        tiers=TierThresholds(
            excellent=model.tiers.excellent,
            good=model.tiers.good,
            fair=model.tiers.fair,
        ),
    )


def load_weight_catalog(*, path: Path, fs: FileSystem) -> WeightCatalog:
    """Load and validate a weight table catalogue from JSON.

    Raises:
        WeightCatalogFileNotFoundError: The file does not exist.
        WeightCatalogValidationError: The payload does not match the schema.
        InvalidWeightTableError: A table is well-formed but inconsistent.
    """
    if not fs.exists(path):
        raise WeightCatalogFileNotFoundError(str(path))

    payload = fs.read_text(path)
    try:
        model = _WeightCatalogModel.model_validate_json(payload)
    except ValidationError as exc:
        raise WeightCatalogValidationError(str(path), _format_validation_error(exc)) from exc

    return WeightCatalog(
        schema_version=model.schema_version,
        default_tables=MappingProxyType(
            {domain: name.strip() for domain, name in model.default_tables.items()}
        ),
        tables=tuple(_to_domain_table(table) for table in model.tables),
    )


def resolve_weight_table(
    catalog: WeightCatalog | None,
    domain: MatchDomain,
    table_name: str | None = None,
) -> WeightTable:
    """Resolve a weight table for a domain.

    Without a catalogue, or when neither a name nor a catalogue default is
    given for the domain, the built-in table is used.
    """
    name = (table_name or "").strip()
    if catalog is None:
        if name:
            raise WeightProfileSelectionError(name, ())
        return default_weights(domain)

    target = name or catalog.default_tables.get(domain, "")
    if not target:
        return default_weights(domain)

    for table in catalog.tables:
        if table.name == target and table.domain is domain:
            return table

    raise WeightProfileSelectionError(target, catalog.names_for(domain))
