"""Schema creation and status for the issues database."""

from typing import Any

from psycopg.rows import dict_row
from structlog import get_logger

from civicscore.storage.db import Database, get_connection

logger = get_logger(__name__)

SCHEMA_VERSION = 1

# Priority columns have no defaults: an issue is always inserted with the
# priority computed for its creation instant.
SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS issues (
    id SERIAL PRIMARY KEY,
    title VARCHAR(200) NOT NULL,
    description VARCHAR(5000) NOT NULL,
    category VARCHAR(50) NOT NULL,
    status VARCHAR(20) NOT NULL DEFAULT 'pending'
        CHECK (status IN ('pending', 'in-progress', 'resolved', 'rejected')),
    address VARCHAR(500) NOT NULL DEFAULT '',
    latitude DOUBLE PRECISION NOT NULL CHECK (latitude BETWEEN -90 AND 90),
    longitude DOUBLE PRECISION NOT NULL CHECK (longitude BETWEEN -180 AND 180),
    reported_by VARCHAR(255) NOT NULL,
    upvoted_by TEXT[] NOT NULL DEFAULT '{}',
    upvotes INTEGER NOT NULL DEFAULT 0
        CHECK (upvotes = cardinality(upvoted_by)),
    priority_level VARCHAR(10) NOT NULL
        CHECK (priority_level IN ('low', 'medium', 'high')),
    priority_score INTEGER NOT NULL CHECK (priority_score BETWEEN 0 AND 100),
    priority_breakdown JSONB NOT NULL,
    created_at TIMESTAMP WITH TIME ZONE NOT NULL,
    updated_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_issues_priority_score
    ON issues(priority_score DESC, created_at ASC);
CREATE INDEX IF NOT EXISTS idx_issues_status ON issues(status);
CREATE INDEX IF NOT EXISTS idx_issues_category ON issues(category);
"""

DROP_SQL = """
DROP TABLE IF EXISTS issues CASCADE;
DROP TABLE IF EXISTS schema_version CASCADE;
"""


def init_database(drop_existing: bool = False) -> None:
    """Create the schema and record its version.

    Args:
        drop_existing: Drop the tables first. Deletes every stored issue.
    """
    try:
        with get_connection() as conn:
            with conn.cursor() as cur:
                if drop_existing:
                    cur.execute(DROP_SQL)
                    logger.warning("dropped_existing_tables")
                cur.execute(SCHEMA_SQL)
                cur.execute(
                    """
                    INSERT INTO schema_version (version) VALUES (%s)
                    ON CONFLICT (version) DO NOTHING
                """,
                    (SCHEMA_VERSION,),
                )
            conn.commit()
        logger.info("initialized_schema", version=SCHEMA_VERSION)
    except Exception as e:
        logger.error("failed_to_initialize_schema", error=str(e))
        raise


def get_schema_version() -> int | None:
    """Installed schema version, or None when the schema is missing."""
    try:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute("SELECT MAX(version) AS version FROM schema_version")
                row = cur.fetchone()
                return row["version"] if row else None
    except Exception as e:
        logger.debug("schema_version_unavailable", error=str(e))
        return None


def get_status() -> dict[str, Any]:
    """Schema version, pool state and stored issue count."""
    version = get_schema_version()
    status: dict[str, Any] = {
        "schema_version": version,
        "expected_version": SCHEMA_VERSION,
        "schema_current": version == SCHEMA_VERSION,
        "pool": Database.pool_info(),
    }

    if version is None:
        return status

    try:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT COUNT(*) FROM issues")
                status["issues_count"] = cur.fetchone()[0]
    except Exception as e:
        status["error"] = str(e)

    return status
