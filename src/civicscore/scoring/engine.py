"""Priority scoring engine.

Converts an :class:`IssueSnapshot` into a :class:`PriorityResult`: five
independent factor scores, their clamped sum as the normalized score, and the
priority level bucket for that score. Scoring is pure; the only input besides
the snapshot and the rules is the evaluation instant used by the age factor.
"""

import math
import time
from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from civicscore.logging_config import get_logger
from civicscore.models.issue import IssueSnapshot
from civicscore.models.priority import FactorBreakdown, PriorityLevel, PriorityResult
from civicscore.scoring import factors
from civicscore.scoring.rules import DEFAULT_RULES, ScoringRules

logger = get_logger(__name__)


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def priority_level_for(
    score: float, rules: ScoringRules = DEFAULT_RULES
) -> PriorityLevel:
    """Bucket a normalized score into a priority level.

    Thresholds are checked top-down and the first one reached wins.
    """
    for minimum, level in rules.level_thresholds:
        if score >= minimum:
            return level
    return rules.default_level


def compute_breakdown(
    snapshot: IssueSnapshot, now: datetime, rules: ScoringRules = DEFAULT_RULES
) -> FactorBreakdown:
    """Run the five factor calculators."""
    return FactorBreakdown(
        severity=float(factors.severity_score(snapshot, rules)),
        location=float(factors.location_score(snapshot, rules)),
        community=float(factors.community_score(snapshot, rules)),
        age=float(factors.age_score(snapshot, rules, now)),
        safety=float(factors.safety_score(snapshot, rules)),
    )


def compute_priority(
    snapshot: IssueSnapshot,
    now: datetime | None = None,
    rules: ScoringRules = DEFAULT_RULES,
) -> PriorityResult:
    """Score one issue snapshot.

    Args:
        snapshot: Current attributes of the issue
        now: Evaluation instant for the age factor (default: current UTC time)
        rules: Scoring policy (default: built-in rules)

    Returns:
        PriorityResult with rounded score, level and unrounded breakdown
    """
    if now is None:
        now = utc_now()

    breakdown = compute_breakdown(snapshot, now, rules)
    normalized = min(100, breakdown.total / rules.max_score * 100)

    return PriorityResult(
        priority_level=priority_level_for(normalized, rules),
        normalized_score=round_half_up(normalized),
        factor_breakdown=breakdown,
    )


class PriorityEngine:
    """Scores snapshots with a fixed rule set and clock.

    Holds no state that changes between calls, so one engine can be shared
    across threads.
    """

    def __init__(
        self,
        rules: ScoringRules = DEFAULT_RULES,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize engine.

        Args:
            rules: Scoring policy
            clock: Returns the evaluation instant for each call
        """
        self.rules = rules
        self.clock = clock

    def score(
        self, snapshot: IssueSnapshot, now: datetime | None = None
    ) -> PriorityResult:
        """Score one snapshot at ``now`` or at the clock's current instant."""
        start = time.perf_counter()
        result = compute_priority(snapshot, now or self.clock(), self.rules)

        logger.debug(
            "priority_computed",
            category=snapshot.category,
            upvotes=snapshot.upvote_count,
            score=result.normalized_score,
            level=result.priority_level.value,
            duration_ms=f"{(time.perf_counter() - start) * 1000:.3f}",
        )
        return result

    def rank(
        self, snapshots: Iterable[IssueSnapshot], now: datetime | None = None
    ) -> list[tuple[IssueSnapshot, PriorityResult]]:
        """Score snapshots and order them by score, highest first.

        All snapshots are evaluated at the same instant. Ties keep their input
        order.
        """
        now = now or self.clock()
        results = [(snapshot, self.score(snapshot, now)) for snapshot in snapshots]
        results.sort(key=lambda x: x[1].normalized_score, reverse=True)

        logger.info("issues_ranked", count=len(results))
        return results
