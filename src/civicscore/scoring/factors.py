"""The five factor calculators.

Each calculator reads an :class:`IssueSnapshot` and returns a score on its
own bounded scale. None of them raise for empty text.
"""

from datetime import datetime, timezone

from civicscore.models.issue import IssueSnapshot
from civicscore.scoring.rules import ScoringRules, step_score

SECONDS_PER_DAY = 86_400


def severity_score(snapshot: IssueSnapshot, rules: ScoringRules) -> float:
    """Fixed civic-impact weight of the issue's category."""
    return rules.severity_weights.get(snapshot.category, rules.default_severity)


def location_score(snapshot: IssueSnapshot, rules: ScoringRules) -> float:
    """Base score, plus a flat bonus near any critical location."""
    text = " ".join(
        (snapshot.description.lower(), snapshot.title.lower(), snapshot.address.lower())
    )
    if any(keyword in text for keyword in rules.location_keywords):
        return rules.location_base + rules.location_bonus
    return rules.location_base


def community_score(snapshot: IssueSnapshot, rules: ScoringRules) -> float:
    """Step function of the upvote count."""
    return step_score(
        snapshot.upvote_count, rules.community_thresholds, rules.community_floor
    )


def age_days(created_at: datetime, now: datetime) -> int:
    """Whole days elapsed between ``created_at`` and ``now``.

    Naive datetimes are taken as UTC. The result is negative when
    ``created_at`` lies in the future.
    """
    elapsed = _as_utc(now) - _as_utc(created_at)
    return int(elapsed.total_seconds() // SECONDS_PER_DAY)


def age_score(snapshot: IssueSnapshot, rules: ScoringRules, now: datetime) -> float:
    """Step function of the issue's age in whole days."""
    return step_score(
        age_days(snapshot.created_at, now), rules.age_thresholds, rules.age_floor
    )


def safety_hits(snapshot: IssueSnapshot, rules: ScoringRules) -> list[str]:
    """Distinct safety keywords present in the title or description."""
    text = f"{snapshot.description.lower()} {snapshot.title.lower()}"
    return [keyword for keyword in rules.safety_keywords if keyword in text]


def safety_score(snapshot: IssueSnapshot, rules: ScoringRules) -> float:
    """Step function of how many distinct safety keywords appear."""
    return step_score(
        len(safety_hits(snapshot, rules)), rules.safety_thresholds, rules.safety_floor
    )


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
