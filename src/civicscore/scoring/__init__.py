"""Priority scoring engine."""

from civicscore.scoring.engine import (
    PriorityEngine,
    compute_priority,
    priority_level_for,
)
from civicscore.scoring.rules import DEFAULT_RULES, ScoringRules

__all__ = [
    "DEFAULT_RULES",
    "PriorityEngine",
    "ScoringRules",
    "compute_priority",
    "priority_level_for",
]
