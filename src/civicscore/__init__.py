"""civicscore - priority scoring for citizen-reported civic issues."""

from civicscore.models.issue import IssueSnapshot
from civicscore.models.priority import FactorBreakdown, PriorityLevel, PriorityResult
from civicscore.scoring.engine import PriorityEngine, compute_priority
from civicscore.version import __version__

__all__ = [
    "FactorBreakdown",
    "IssueSnapshot",
    "PriorityEngine",
    "PriorityLevel",
    "PriorityResult",
    "__version__",
    "compute_priority",
]
