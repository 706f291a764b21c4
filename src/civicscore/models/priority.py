"""Priority scoring models."""

from dataclasses import asdict, dataclass
from enum import Enum


class PriorityLevel(Enum):
    """Discrete priority bucket derived from the normalized score."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class FactorBreakdown:
    """Raw score of each factor, on that factor's own scale."""

    severity: float
    location: float
    community: float
    age: float
    safety: float

    @property
    def total(self) -> float:
        """Sum of the five factor scores."""
        return self.severity + self.location + self.community + self.age + self.safety

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass(frozen=True)
class PriorityResult:
    """Outcome of scoring one issue snapshot."""

    priority_level: PriorityLevel
    normalized_score: int
    factor_breakdown: FactorBreakdown

    def to_dict(self) -> dict:
        """Fields written back onto the stored issue."""
        return {
            "priority_level": self.priority_level.value,
            "priority_score": self.normalized_score,
            "priority_breakdown": self.factor_breakdown.to_dict(),
        }
