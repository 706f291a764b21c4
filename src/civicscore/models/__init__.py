"""Data models for issues and priority results."""

from civicscore.models.issue import IssueCategory, IssueSnapshot, IssueStatus, NewIssue
from civicscore.models.priority import FactorBreakdown, PriorityLevel, PriorityResult

__all__ = [
    "FactorBreakdown",
    "IssueCategory",
    "IssueSnapshot",
    "IssueStatus",
    "NewIssue",
    "PriorityLevel",
    "PriorityResult",
]
