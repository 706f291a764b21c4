"""Handlers that score issues at creation, upvote and bulk recalculation.

These are the only places a stored priority is written. Each builds a fresh
:class:`IssueSnapshot` from the issue's current state, runs the engine and
writes the full result (level, score, breakdown) back through the store.
"""

import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from civicscore.errors import (
    IssueNotFoundError,
    IssueValidationError,
    RecalculationError,
)
from civicscore.logging_config import get_logger
from civicscore.models.issue import IssueSnapshot, NewIssue
from civicscore.models.priority import PriorityResult
from civicscore.monitoring.metrics import MetricsCollector
from civicscore.scoring.engine import PriorityEngine, utc_now
from civicscore.storage.issue_store import IssueStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class UpvoteOutcome:
    """What the upvote handler reports back to its caller."""

    issue_id: int
    upvotes: int
    result: PriorityResult


class IssueHandlers:
    """Create, upvote and re-score issues against an issue store."""

    def __init__(
        self,
        store: IssueStore,
        engine: PriorityEngine | None = None,
        metrics: MetricsCollector | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize handlers.

        Args:
            store: Persistence for issues
            engine: Scoring engine (default: built-in rules)
            metrics: Metrics collector (default: process-wide registry)
            clock: Source of the evaluation instant
        """
        self.store = store
        self.engine = engine or PriorityEngine()
        self.metrics = metrics or MetricsCollector()
        self.clock = clock

    def _score(
        self, record: Mapping[str, Any], now: datetime
    ) -> tuple[PriorityResult, float]:
        start = time.perf_counter()
        result = self.engine.score(IssueSnapshot.from_record(record), now)
        return result, time.perf_counter() - start

    def _record_scored(self, result: PriorityResult, duration: float) -> None:
        """Count a priority that has been written to the store."""
        self.metrics.observe_scoring_duration(duration)
        self.metrics.increment_issues_scored(level=result.priority_level.value)

    def create_issue(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Validate, score and store a newly reported issue.

        Args:
            data: Raw input (title, description, category, latitude,
                longitude, address, reported_by)

        Returns:
            The stored issue including its priority fields.

        Raises:
            IssueValidationError: If the input fails validation.
        """
        try:
            issue = NewIssue(**data)
        except ValidationError as e:
            errors = e.errors(include_url=False, include_context=False)
            raise IssueValidationError("Invalid issue", errors=errors) from e

        now = self.clock()
        record = {
            "title": issue.title,
            "description": issue.description,
            "category": issue.category.value,
            "status": "pending",
            "address": issue.address,
            "latitude": issue.latitude,
            "longitude": issue.longitude,
            "reported_by": issue.reported_by,
            "upvotes": 0,
            "upvoted_by": [],
            "created_at": now,
        }
        # The row is inserted with its priority already set
        result, duration = self._score(record, now)
        row = self.store.insert_issue({**record, **result.to_dict()})
        self._record_scored(result, duration)
        self.metrics.increment_issues_reported(category=issue.category.value)

        logger.info(
            "issue_reported",
            issue_id=row["id"],
            category=issue.category.value,
            score=result.normalized_score,
            level=result.priority_level.value,
        )
        return row

    def upvote_issue(self, issue_id: int, user_id: str) -> UpvoteOutcome:
        """Record one user's upvote and re-score the issue.

        The new count and the new priority are written in the same
        transaction.

        Raises:
            IssueNotFoundError: If the issue does not exist.
            DuplicateUpvoteError: If the user already upvoted it.
        """
        now = self.clock()
        scored: list[tuple[PriorityResult, float]] = []

        def rescore(pending: Mapping[str, Any]) -> PriorityResult:
            scored.append(self._score(pending, now))
            return scored[-1][0]

        row = self.store.apply_upvote(issue_id, user_id, rescore)
        result, duration = scored[-1]
        self._record_scored(result, duration)
        self.metrics.increment_upvotes_recorded()

        logger.info(
            "upvote_recorded",
            issue_id=issue_id,
            upvotes=row["upvotes"],
            score=result.normalized_score,
            level=result.priority_level.value,
        )
        return UpvoteOutcome(issue_id=issue_id, upvotes=row["upvotes"], result=result)

    def recalculate_priorities(self) -> int:
        """Re-score every stored issue at one evaluation instant.

        Each issue is written independently, so a failure leaves earlier
        issues updated; running again is safe. Issues deleted while the run
        is in progress are skipped.

        Returns:
            Number of issues updated.

        Raises:
            RecalculationError: If loading or writing fails; carries the
                count updated before the failure.
        """
        now = self.clock()
        try:
            rows = self.store.list_issues()
        except Exception as e:
            raise RecalculationError(0, None, e) from e

        logger.info("recalculating_priorities", count=len(rows))

        updated = 0
        for row in rows:
            result, duration = self._score(row, now)
            try:
                self.store.update_priority(row["id"], result)
            except IssueNotFoundError:
                logger.warning("recalculate_issue_vanished", issue_id=row["id"])
                continue
            except Exception as e:
                logger.error(
                    "recalculation_failed",
                    issue_id=row["id"],
                    updated=updated,
                    error=str(e),
                )
                self.metrics.increment_issues_recalculated(updated)
                raise RecalculationError(updated, row["id"], e) from e
            self._record_scored(result, duration)
            updated += 1

        self.metrics.increment_issues_recalculated(updated)
        logger.info("priorities_recalculated", updated=updated)
        return updated

    def priority_stats(self) -> dict[str, int]:
        """Count stored issues per priority level."""
        counts = self.store.count_by_priority()
        self.metrics.set_issues_by_level(counts)
        return counts
