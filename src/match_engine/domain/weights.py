"""Weight tables and the policy constants that sit beside them.

A ``WeightTable`` assigns an integer weight to each scored factor (summing to
100), lists the bonus rules that add capped points outside the 0–100 scale,
and carries the disclosure thresholds that turn factor scores into
human-readable reasons. Disclosure thresholds and tier boundaries are policy:
they are tuned independently of the weights.

Usage example:
    from match_engine.domain.weights import DEFAULT_JOB_WEIGHTS

    assert sum(DEFAULT_JOB_WEIGHTS.weights.values()) == 100
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ..exceptions import InvalidWeightTableError
from .profiles import Factor, MatchDomain

WEIGHT_TOTAL = 100
RECOMMENDED_THRESHOLD = 60.0
TIER_NAMES: tuple[str, ...] = ("excellent", "good", "fair", "possible")

# Factors each domain has data for. Jobs carry no rating and mentors no listing date.
DOMAIN_FACTORS: MappingProxyType[MatchDomain, frozenset[Factor]] = MappingProxyType(
    {
        MatchDomain.JOB: frozenset(Factor) - {Factor.REPUTATION},
        MatchDomain.MENTORSHIP: frozenset(Factor) - {Factor.RECENCY},
    }
)


@dataclass(frozen=True)
class BonusRule:
    """An additive bonus worth up to ``cap`` points outside the 0–100 total."""

    name: str
    cap: float
    reason: str


@dataclass(frozen=True)
class Disclosure:
    """A reason shown when a factor score reaches ``threshold``."""

    threshold: float
    reason: str


@dataclass(frozen=True)
class TierThresholds:
    """Minimum totals for each compatibility tier; below ``fair`` is ``possible``."""

    excellent: float = 80.0
    good: float = 60.0
    fair: float = 45.0

    def tier_for(self, total: float) -> str:
        if total >= self.excellent:
            return "excellent"
        if total >= self.good:
            return "good"
        if total >= self.fair:
            return "fair"
        return "possible"


def _empty_disclosures() -> MappingProxyType[Factor, Disclosure]:
    return MappingProxyType({})


@dataclass(frozen=True)
class WeightTable:
    """Factor weights, bonus rules and disclosure policy for one domain."""

    name: str
    domain: MatchDomain
    weights: Mapping[Factor, int]
    bonuses: tuple[BonusRule, ...] = ()
    disclosures: Mapping[Factor, Disclosure] = field(default_factory=_empty_disclosures)
    tiers: TierThresholds = field(default_factory=TierThresholds)

    def __post_init__(self) -> None:
        object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))
        object.__setattr__(self, "disclosures", MappingProxyType(dict(self.disclosures)))
        self._validate()

    def _validate(self) -> None:
        if not self.weights:
            raise InvalidWeightTableError(self.name, "no factors are weighted")
        for factor, weight in self.weights.items():
            if not isinstance(factor, Factor):
                raise InvalidWeightTableError(self.name, f"unknown factor {factor!r}")
            if factor not in DOMAIN_FACTORS[self.domain]:
                raise InvalidWeightTableError(
                    self.name, f"factor {factor} does not apply to {self.domain} matching"
                )
            if isinstance(weight, bool) or not isinstance(weight, int):
                raise InvalidWeightTableError(self.name, f"weight for {factor} must be an integer")
            if weight < 0:
                raise InvalidWeightTableError(self.name, f"weight for {factor} is negative")
        total = sum(self.weights.values())
        if total != WEIGHT_TOTAL:
            raise InvalidWeightTableError(
                self.name, f"weights sum to {total}, expected {WEIGHT_TOTAL}"
            )

        names = [bonus.name for bonus in self.bonuses]
        if len(set(names)) != len(names):
            raise InvalidWeightTableError(self.name, "bonus names must be unique")
        for bonus in self.bonuses:
            if bonus.cap < 0:
                raise InvalidWeightTableError(self.name, f"bonus {bonus.name} has a negative cap")

        for factor, disclosure in self.disclosures.items():
            if factor not in self.weights:
                raise InvalidWeightTableError(
                    self.name, f"disclosure for unweighted factor {factor}"
                )
            if not 0.0 <= disclosure.threshold <= 1.0:
                raise InvalidWeightTableError(
                    self.name, f"disclosure threshold for {factor} is outside [0, 1]"
                )

        tiers = self.tiers
        if not WEIGHT_TOTAL >= tiers.excellent > tiers.good > tiers.fair >= 0:
            raise InvalidWeightTableError(self.name, "tier thresholds must strictly descend")

    @property
    def factors(self) -> tuple[Factor, ...]:
        return tuple(self.weights)

    def bonus(self, name: str) -> BonusRule | None:
        for rule in self.bonuses:
            if rule.name == name:
                return rule
        return None


INDIGENOUS_EMPLOYER_BONUS = "indigenous_employer"
ELDER_BONUS = "elder"

DEFAULT_JOB_WEIGHTS = WeightTable(
    name="job-default",
    domain=MatchDomain.JOB,
    weights={
        Factor.SKILLS: 35,
        Factor.EXPERIENCE: 20,
        Factor.LOCATION: 15,
        Factor.INDUSTRY: 10,
        Factor.CULTURAL: 10,
        Factor.RECENCY: 5,
        Factor.AVAILABILITY: 5,
    },
    bonuses=(
        BonusRule(
            name=INDIGENOUS_EMPLOYER_BONUS,
            cap=5.0,
            reason="Indigenous-owned or RAP-committed employer",
        ),
    ),
    disclosures={
        Factor.SKILLS: Disclosure(0.8, "Strong skills match"),
        Factor.EXPERIENCE: Disclosure(1.0, "Experience fits the role"),
        Factor.LOCATION: Disclosure(0.9, "Location and work mode suit you"),
        Factor.INDUSTRY: Disclosure(1.0, "In your preferred industry"),
        Factor.CULTURAL: Disclosure(0.8, "Strong cultural alignment"),
        Factor.RECENCY: Disclosure(1.0, "Recently posted"),
        Factor.AVAILABILITY: Disclosure(0.8, "Schedules overlap"),
    },
)

DEFAULT_MENTORSHIP_WEIGHTS = WeightTable(
    name="mentorship-default",
    domain=MatchDomain.MENTORSHIP,
    weights={
        Factor.CULTURAL: 30,
        Factor.INDUSTRY: 20,
        Factor.SKILLS: 15,
        Factor.EXPERIENCE: 10,
        Factor.AVAILABILITY: 10,
        Factor.REPUTATION: 10,
        Factor.LOCATION: 5,
    },
    bonuses=(BonusRule(name=ELDER_BONUS, cap=5.0, reason="Community Elder"),),
    disclosures={
        Factor.CULTURAL: Disclosure(0.8, "Shared cultural connection"),
        Factor.INDUSTRY: Disclosure(1.0, "Works in your industry"),
        Factor.SKILLS: Disclosure(0.8, "Expertise matches your interests"),
        Factor.EXPERIENCE: Disclosure(1.0, "Well-placed experience gap"),
        Factor.AVAILABILITY: Disclosure(0.8, "Available when you are"),
        Factor.REPUTATION: Disclosure(0.9, "Highly rated by mentees"),
    },
)


def default_weights(domain: MatchDomain) -> WeightTable:
    if domain is MatchDomain.MENTORSHIP:
        return DEFAULT_MENTORSHIP_WEIGHTS
    return DEFAULT_JOB_WEIGHTS


@dataclass(frozen=True)
class WeightCatalog:
    """Named weight tables loaded from one catalogue file."""

    schema_version: int
    default_tables: Mapping[MatchDomain, str]
    tables: tuple[WeightTable, ...]

    def names_for(self, domain: MatchDomain) -> tuple[str, ...]:
        return tuple(sorted(table.name for table in self.tables if table.domain is domain))
