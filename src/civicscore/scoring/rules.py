"""Static scoring policy: severity table, keyword lists and threshold tables.

A :class:`ScoringRules` instance is immutable. Mappings are wrapped in
``MappingProxyType`` and sequences are tuples, so one instance can be shared
by any number of concurrent scoring calls.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from civicscore.models.priority import PriorityLevel

# (minimum, score) pairs, sorted by minimum descending
ThresholdTable = tuple[tuple[float, float], ...]


def _frozen_mapping(values: Mapping) -> MappingProxyType:
    return MappingProxyType({key: float(value) for key, value in values.items()})


def _threshold_table(pairs: Iterable[Iterable[float]]) -> ThresholdTable:
    table = tuple((float(minimum), float(score)) for minimum, score in pairs)
    minimums = [minimum for minimum, _ in table]
    if minimums != sorted(minimums, reverse=True):
        raise ValueError(f"Threshold table must be sorted descending: {table}")
    return table


def step_score(value: float, table: ThresholdTable, floor: float) -> float:
    """Score of the first threshold ``value`` reaches, else ``floor``."""
    for minimum, score in table:
        if value >= minimum:
            return score
    return floor


@dataclass(frozen=True)
class ScoringRules:
    """Immutable scoring policy consumed by the factor calculators."""

    severity_weights: Mapping[str, float] = field(
        default_factory=lambda: {
            "water": 20,
            "electricity": 18,
            "road": 16,
            "infrastructure": 15,
            "sanitation": 14,
            "transport": 12,
            "environment": 10,
            "others": 8,
        }
    )
    default_severity: float = 10

    location_keywords: tuple[str, ...] = (
        "school",
        "hospital",
        "clinic",
        "market",
        "junction",
        "highway",
        "main road",
        "bus stop",
        "station",
    )
    location_base: float = 10
    location_bonus: float = 10

    community_thresholds: ThresholdTable = ((50, 20), (30, 16), (15, 12), (5, 8))
    community_floor: float = 4

    age_thresholds: ThresholdTable = ((30, 20), (14, 15), (7, 10), (3, 6))
    age_floor: float = 3

    safety_keywords: tuple[str, ...] = (
        "danger",
        "unsafe",
        "hazard",
        "accident",
        "broken",
        "leak",
        "flooding",
        "fire",
        "emergency",
        "urgent",
        "critical",
        "exposed",
        "damaged",
        "collapse",
    )
    safety_thresholds: ThresholdTable = ((3, 20), (2, 15), (1, 10))
    safety_floor: float = 5

    max_score: float = 100
    level_thresholds: tuple[tuple[float, PriorityLevel], ...] = (
        (70, PriorityLevel.HIGH),
        (40, PriorityLevel.MEDIUM),
    )
    default_level: PriorityLevel = PriorityLevel.LOW

    def __post_init__(self) -> None:
        # Normalize caller-supplied collections into their frozen forms
        object.__setattr__(
            self, "severity_weights", _frozen_mapping(self.severity_weights)
        )
        object.__setattr__(
            self, "location_keywords", tuple(k.lower() for k in self.location_keywords)
        )
        object.__setattr__(
            self, "safety_keywords", tuple(k.lower() for k in self.safety_keywords)
        )
        for name in ("community_thresholds", "age_thresholds", "safety_thresholds"):
            object.__setattr__(self, name, _threshold_table(getattr(self, name)))

        levels = tuple(
            (float(minimum), PriorityLevel(level))
            for minimum, level in self.level_thresholds
        )
        minimums = [minimum for minimum, _ in levels]
        if minimums != sorted(minimums, reverse=True):
            raise ValueError(f"Level thresholds must be sorted descending: {levels}")
        object.__setattr__(self, "level_thresholds", levels)

        if self.max_score <= 0:
            raise ValueError("max_score must be positive")


DEFAULT_RULES = ScoringRules()
