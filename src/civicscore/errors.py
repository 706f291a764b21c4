"""Exceptions raised by the issue handlers, the store and the config layer.

Hierarchy:
    CivicScoreError
    ├── IssueNotFoundError: No stored issue with the given id
    ├── DuplicateUpvoteError: The user already upvoted the issue
    ├── IssueValidationError: New issue input failed validation
    ├── RecalculationError: Bulk recalculation stopped partway
    └── ConfigError: Configuration could not be turned into rules

The scoring engine itself raises none of these.
"""

from __future__ import annotations

from typing import Any


class CivicScoreError(Exception):
    """Base error carrying a message and structured context for logging."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context: dict[str, Any] = context
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured logs and API error bodies."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class IssueNotFoundError(CivicScoreError):
    """Raised when an issue id has no stored record."""

    def __init__(self, issue_id: int) -> None:
        self.issue_id = issue_id
        super().__init__(f"Issue not found: {issue_id}", issue_id=issue_id)


class DuplicateUpvoteError(CivicScoreError):
    """Raised when a user upvotes the same issue twice."""

    def __init__(self, issue_id: int, user_id: str) -> None:
        self.issue_id = issue_id
        self.user_id = user_id
        super().__init__(
            "You have already upvoted this issue",
            issue_id=issue_id,
            user_id=user_id,
        )


class IssueValidationError(CivicScoreError):
    """Raised when a new issue fails input validation."""

    def __init__(
        self, message: str, errors: list[dict[str, Any]] | None = None
    ) -> None:
        self.errors = errors or []
        super().__init__(message, errors=self.errors)


class RecalculationError(CivicScoreError):
    """Raised when bulk recalculation fails partway.

    ``updated`` holds how many issues were re-scored and committed before the
    failure. Re-running the recalculation is safe.
    """

    def __init__(self, updated: int, issue_id: int | None, cause: Exception) -> None:
        self.updated = updated
        self.issue_id = issue_id
        super().__init__(
            f"Recalculation stopped after {updated} issues: {cause}",
            updated=updated,
            issue_id=issue_id,
        )


class ConfigError(CivicScoreError):
    """Raised when scoring settings cannot be turned into rules."""
