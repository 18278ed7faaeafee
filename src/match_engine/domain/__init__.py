"""Domain modules for the matching engine."""

from .aggregation import MatchResult
from .profiles import Factor, MatchDomain, SubjectProfile, TargetProfile
from .scoring import score_pair
from .weights import WeightTable, default_weights

__all__ = [
    "Factor",
    "MatchDomain",
    "MatchResult",
    "SubjectProfile",
    "TargetProfile",
    "WeightTable",
    "default_weights",
    "score_pair",
]
