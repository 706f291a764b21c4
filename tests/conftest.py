"""Shared fixtures for the test suite."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from civicscore.errors import DuplicateUpvoteError, IssueNotFoundError
from civicscore.models.issue import IssueSnapshot
from civicscore.models.priority import PriorityLevel, PriorityResult

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
PRIORITY_FIELDS = {"priority_level", "priority_score", "priority_breakdown"}


class InMemoryIssueStore:
    """Dict-backed stand-in for IssueStore with the same method contract."""

    def __init__(self) -> None:
        self.rows: dict[int, dict[str, Any]] = {}
        self.next_id = 1
        self.fail_update_for: set[int] = set()
        self.update_calls: list[int] = []
        self.fail_upvote_write = False

    def insert_issue(self, issue: dict[str, Any]) -> dict[str, Any]:
        missing = PRIORITY_FIELDS - set(issue)
        if missing:
            raise KeyError(f"insert without priority fields: {sorted(missing)}")
        row = {
            "id": self.next_id,
            "status": "pending",
            "address": "",
            "upvotes": 0,
            "upvoted_by": [],
            **issue,
        }
        row["updated_at"] = row["created_at"]
        self.rows[self.next_id] = row
        self.next_id += 1
        return dict(row)

    def get_issue(self, issue_id: int) -> dict[str, Any] | None:
        row = self.rows.get(issue_id)
        return dict(row) if row else None

    def list_issues(self) -> list[dict[str, Any]]:
        return [dict(self.rows[i]) for i in sorted(self.rows)]

    def get_top_issues(
        self, limit: int = 20, status: str | None = None
    ) -> list[dict[str, Any]]:
        rows = [
            r for r in self.rows.values() if status is None or r["status"] == status
        ]
        rows.sort(key=lambda r: r["priority_score"], reverse=True)
        return [dict(r) for r in rows[:limit]]

    def update_priority(self, issue_id: int, result: PriorityResult) -> None:
        self.update_calls.append(issue_id)
        if issue_id in self.fail_update_for:
            raise ConnectionError("database unavailable")
        if issue_id not in self.rows:
            raise IssueNotFoundError(issue_id)
        self.rows[issue_id].update(result.to_dict())

    def apply_upvote(
        self,
        issue_id: int,
        user_id: str,
        rescore: Callable[[dict[str, Any]], PriorityResult],
    ) -> dict[str, Any]:
        row = self.rows.get(issue_id)
        if row is None:
            raise IssueNotFoundError(issue_id)
        if user_id in row["upvoted_by"]:
            raise DuplicateUpvoteError(issue_id, user_id)

        upvoted_by = [*row["upvoted_by"], user_id]
        pending = {**row, "upvoted_by": upvoted_by, "upvotes": len(upvoted_by)}
        result = rescore(pending)
        if self.fail_upvote_write:
            raise ConnectionError("database unavailable")
        row.update(pending)
        row.update(result.to_dict())
        return dict(row)

    def count_by_priority(self) -> dict[str, int]:
        counts = {level.value: 0 for level in PriorityLevel}
        for row in self.rows.values():
            counts[row["priority_level"]] += 1
        return counts


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation instant."""
    return NOW


@pytest.fixture
def make_snapshot() -> Callable[..., IssueSnapshot]:
    """Build snapshots with neutral defaults (no keywords, fresh, no votes)."""

    def _make(
        category: str = "others",
        title: str = "",
        description: str = "",
        address: str = "",
        upvote_count: int = 0,
        age_days: float = 0,
    ) -> IssueSnapshot:
        return IssueSnapshot(
            category=category,
            title=title,
            description=description,
            address=address,
            upvote_count=upvote_count,
            created_at=NOW - timedelta(days=age_days),
        )

    return _make


@pytest.fixture
def store() -> InMemoryIssueStore:
    """Empty in-memory issue store."""
    return InMemoryIssueStore()


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Point the CLI at a temporary config file and disable file logging."""
    config_path = tmp_path / "config.yaml"
    monkeypatch.setenv("CIVICSCORE_CONFIG", str(config_path))
    monkeypatch.setenv("CIVICSCORE_LOG_DIR", "")
    monkeypatch.chdir(tmp_path)
    return config_path
