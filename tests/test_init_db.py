"""Tests for schema creation and database status."""

from unittest.mock import MagicMock, call

import pytest

from civicscore.storage import init_db
from civicscore.storage.db import Database, redact_dsn
from civicscore.storage.init_db import (
    DROP_SQL,
    SCHEMA_SQL,
    SCHEMA_VERSION,
    get_status,
    init_database,
)


@pytest.fixture
def conn(monkeypatch) -> MagicMock:
    """Mocked pooled connection with a single cursor."""
    conn = MagicMock()
    conn.__enter__.return_value = conn
    monkeypatch.setattr(init_db, "get_connection", lambda: conn)
    return conn


@pytest.fixture
def cursor(conn) -> MagicMock:
    return conn.cursor.return_value.__enter__.return_value


class TestSchema:
    """Test the schema definition."""

    def test_priority_columns_constrained(self) -> None:
        """Test stored priorities cannot leave their valid ranges."""
        assert "priority_level IN ('low', 'medium', 'high')" in SCHEMA_SQL
        assert "priority_score BETWEEN 0 AND 100" in SCHEMA_SQL
        assert "upvotes = cardinality(upvoted_by)" in SCHEMA_SQL

    def test_priority_columns_have_no_defaults(self) -> None:
        """Test an issue cannot be inserted without its priority."""
        for line in SCHEMA_SQL.splitlines():
            if line.strip().startswith("priority_"):
                assert "DEFAULT" not in line


class TestInitDatabase:
    """Test schema creation."""

    def test_creates_and_records_version(self, conn, cursor) -> None:
        """Test the schema is created and its version recorded."""
        init_database()

        statements = [c.args[0] for c in cursor.execute.call_args_list]
        assert statements[0] == SCHEMA_SQL
        assert "INSERT INTO schema_version" in statements[1]
        assert cursor.execute.call_args_list[1].args[1] == (SCHEMA_VERSION,)
        conn.commit.assert_called_once()

    def test_drop_existing(self, conn, cursor) -> None:
        """Test dropping runs before the schema is created."""
        init_database(drop_existing=True)

        assert cursor.execute.call_args_list[:2] == [call(DROP_SQL), call(SCHEMA_SQL)]

    def test_failure_raises(self, conn, cursor) -> None:
        """Test creation errors propagate without a commit."""
        cursor.execute.side_effect = ConnectionError("connection refused")
        with pytest.raises(ConnectionError):
            init_database()
        conn.commit.assert_not_called()


class TestGetStatus:
    """Test status reports."""

    def test_missing_schema(self, conn, cursor) -> None:
        """Test a missing schema skips the issue count."""
        cursor.execute.side_effect = Exception('relation "schema_version" missing')

        status = get_status()

        assert status["schema_version"] is None
        assert status["schema_current"] is False
        assert "issues_count" not in status
        assert status["pool"]["active"] is False

    def test_current_schema(self, conn, cursor) -> None:
        """Test a current schema reports the issue count."""
        cursor.fetchone.side_effect = [{"version": SCHEMA_VERSION}, (12,)]

        status = get_status()

        assert status["schema_current"] is True
        assert status["issues_count"] == 12
        assert "error" not in status

    def test_count_failure_reported(self, conn, cursor) -> None:
        """Test a failing count is reported as an error."""
        cursor.fetchone.side_effect = [{"version": SCHEMA_VERSION}]
        cursor.execute.side_effect = [None, ConnectionError("connection lost")]

        status = get_status()

        assert "issues_count" not in status
        assert status["error"] == "connection lost"


class TestDatabase:
    """Test pool configuration."""

    def test_configured_dsn(self, monkeypatch) -> None:
        """Test the environment wins over the configured DSN."""
        for attr, value in (("_dsn", None), ("_min_size", 1), ("_max_size", 5)):
            monkeypatch.setattr(Database, attr, value)
        monkeypatch.delenv("CIVICSCORE_DATABASE_URL", raising=False)
        Database.configure("postgresql://a:b@db/civic", 2, 4)
        assert Database.dsn() == "postgresql://a:b@db/civic"

        monkeypatch.setenv("CIVICSCORE_DATABASE_URL", "postgresql://env/civic")
        assert Database.dsn() == "postgresql://env/civic"

    def test_redact_dsn(self) -> None:
        """Test credentials are hidden in reported DSNs."""
        assert redact_dsn("postgresql://u:secret@db:5432/civic") == (
            "postgresql://***@db:5432/civic"
        )
        assert redact_dsn("postgresql://db/civic") == "postgresql://db/civic"
