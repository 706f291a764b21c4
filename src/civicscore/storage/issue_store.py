"""Persistent issue storage using PostgreSQL."""

from collections.abc import Callable
from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Json
from structlog import get_logger

from civicscore.errors import DuplicateUpvoteError, IssueNotFoundError
from civicscore.models.priority import PriorityLevel, PriorityResult
from civicscore.storage.db import get_connection

logger = get_logger(__name__)

ISSUE_COLUMNS = """
    id, title, description, category, status, address, latitude, longitude,
    reported_by, upvotes, upvoted_by, priority_level, priority_score,
    priority_breakdown, created_at, updated_at
"""


class IssueStore:
    """Persistent storage for reported issues and their stored priority."""

    def insert_issue(self, issue: dict[str, Any]) -> dict[str, Any]:
        """Insert a new issue together with its initial priority.

        Args:
            issue: Column values, including ``created_at`` and the
                ``priority_level``, ``priority_score`` and
                ``priority_breakdown`` computed for that instant.

        Returns:
            The stored row, including its generated ``id``.
        """
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"""
                        INSERT INTO issues (
                            title, description, category, status, address,
                            latitude, longitude, reported_by, upvotes, upvoted_by,
                            priority_level, priority_score, priority_breakdown,
                            created_at, updated_at
                        )
                        VALUES (
                            %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s,
                            %s, %s
                        )
                        RETURNING {ISSUE_COLUMNS}
                    """,
                        (
                            issue["title"],
                            issue["description"],
                            issue["category"],
                            issue.get("status", "pending"),
                            issue.get("address", ""),
                            issue["latitude"],
                            issue["longitude"],
                            issue["reported_by"],
                            issue.get("upvotes", 0),
                            list(issue.get("upvoted_by", [])),
                            issue["priority_level"],
                            issue["priority_score"],
                            Json(issue["priority_breakdown"]),
                            issue["created_at"],
                            issue["created_at"],
                        ),
                    )
                    row = cur.fetchone()
                conn.commit()
                logger.debug("inserted_issue", issue_id=row["id"])
                return row
        except Exception as e:
            logger.error("failed_to_insert_issue", error=str(e))
            raise

    def get_issue(self, issue_id: int) -> dict[str, Any] | None:
        """Get an issue by id.

        Returns:
            Issue row, or None if no issue has this id. Store failures are
            raised, not reported as a missing issue.
        """
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"SELECT {ISSUE_COLUMNS} FROM issues WHERE id = %s",
                        (issue_id,),
                    )
                    return cur.fetchone()
        except Exception as e:
            logger.error("failed_to_get_issue", issue_id=issue_id, error=str(e))
            raise

    def list_issues(self) -> list[dict[str, Any]]:
        """Load every stored issue, oldest id first.

        Raises on failure so bulk operations never mistake an outage for an
        empty table.
        """
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(f"SELECT {ISSUE_COLUMNS} FROM issues ORDER BY id")
                    return cur.fetchall()
        except Exception as e:
            logger.error("failed_to_list_issues", error=str(e))
            raise

    def get_top_issues(
        self, limit: int = 20, status: str | None = None
    ) -> list[dict[str, Any]]:
        """Get the highest-priority issues.

        Args:
            limit: Maximum number of issues to return.
            status: Only include issues with this status.

        Returns:
            Issue rows sorted by stored priority score (descending).
        """
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    if status:
                        cur.execute(
                            f"""
                            SELECT {ISSUE_COLUMNS} FROM issues
                            WHERE status = %s
                            ORDER BY priority_score DESC, created_at ASC
                            LIMIT %s
                        """,
                            (status, limit),
                        )
                    else:
                        cur.execute(
                            f"""
                            SELECT {ISSUE_COLUMNS} FROM issues
                            ORDER BY priority_score DESC, created_at ASC
                            LIMIT %s
                        """,
                            (limit,),
                        )
                    return cur.fetchall()
        except Exception as e:
            logger.error("failed_to_get_top_issues", error=str(e))
            return []

    def update_priority(self, issue_id: int, result: PriorityResult) -> None:
        """Overwrite an issue's stored priority with a fresh result.

        Raises:
            IssueNotFoundError: If no issue has this id.
        """
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        UPDATE issues
                        SET priority_level = %s,
                            priority_score = %s,
                            priority_breakdown = %s,
                            updated_at = NOW()
                        WHERE id = %s
                    """,
                        (
                            result.priority_level.value,
                            result.normalized_score,
                            Json(result.factor_breakdown.to_dict()),
                            issue_id,
                        ),
                    )
                    if cur.rowcount == 0:
                        raise IssueNotFoundError(issue_id)
                conn.commit()
        except IssueNotFoundError:
            raise
        except Exception as e:
            logger.error(
                "failed_to_update_priority", issue_id=issue_id, error=str(e)
            )
            raise

    def apply_upvote(
        self,
        issue_id: int,
        user_id: str,
        rescore: Callable[[dict[str, Any]], PriorityResult],
    ) -> dict[str, Any]:
        """Record an upvote and the re-scored priority in one transaction.

        The row is locked with SELECT FOR UPDATE so concurrent upvotes on the
        same issue serialize. Count and priority are written by one UPDATE,
        so no reader sees a new count with a stale priority.

        Args:
            issue_id: Issue to upvote
            user_id: Voter; each user may upvote an issue once
            rescore: Called with the row as it will be after the upvote

        Returns:
            The updated row.

        Raises:
            IssueNotFoundError: If no issue has this id.
            DuplicateUpvoteError: If the user already upvoted this issue.
        """
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"SELECT {ISSUE_COLUMNS} FROM issues WHERE id = %s FOR UPDATE",
                        (issue_id,),
                    )
                    row = cur.fetchone()
                    if row is None:
                        conn.rollback()
                        raise IssueNotFoundError(issue_id)

                    upvoted_by = list(row["upvoted_by"] or [])
                    if user_id in upvoted_by:
                        conn.rollback()
                        raise DuplicateUpvoteError(issue_id, user_id)

                    upvoted_by.append(user_id)
                    pending = {
                        **row,
                        "upvoted_by": upvoted_by,
                        "upvotes": len(upvoted_by),
                    }
                    result = rescore(pending)

                    cur.execute(
                        f"""
                        UPDATE issues
                        SET upvoted_by = %s,
                            upvotes = %s,
                            priority_level = %s,
                            priority_score = %s,
                            priority_breakdown = %s,
                            updated_at = NOW()
                        WHERE id = %s
                        RETURNING {ISSUE_COLUMNS}
                    """,
                        (
                            upvoted_by,
                            len(upvoted_by),
                            result.priority_level.value,
                            result.normalized_score,
                            Json(result.factor_breakdown.to_dict()),
                            issue_id,
                        ),
                    )
                    updated = cur.fetchone()
                conn.commit()
                logger.debug(
                    "upvote_applied",
                    issue_id=issue_id,
                    user_id=user_id,
                    upvotes=updated["upvotes"],
                )
                return updated
        except (IssueNotFoundError, DuplicateUpvoteError):
            raise
        except Exception as e:
            logger.error(
                "failed_to_apply_upvote",
                issue_id=issue_id,
                user_id=user_id,
                error=str(e),
            )
            raise

    def count_by_priority(self) -> dict[str, int]:
        """Count stored issues per priority level.

        Every level is present in the result, zero when no issue has it.
        Raises on failure so an outage is not reported as empty counts.
        """
        counts = {level.value: 0 for level in PriorityLevel}
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        SELECT priority_level, COUNT(*) FROM issues
                        GROUP BY priority_level
                    """
                    )
                    for level, count in cur.fetchall():
                        counts[level] = count
        except Exception as e:
            logger.error("failed_to_count_by_priority", error=str(e))
            raise
        return counts

