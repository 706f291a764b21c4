"""Tests for issue and priority models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from civicscore.models.issue import IssueCategory, IssueSnapshot, NewIssue
from civicscore.models.priority import FactorBreakdown, PriorityLevel, PriorityResult

CREATED = datetime(2026, 2, 1, 9, 30, tzinfo=timezone.utc)


def valid_issue(**overrides) -> dict:
    data = {
        "title": "Broken streetlight",
        "description": "The streetlight outside number 12 has been off all week",
        "category": "electricity",
        "latitude": 12.97,
        "longitude": 77.59,
        "address": "12 Lake View Road",
        "reported_by": "user-1",
    }
    data.update(overrides)
    return data


class TestIssueCategory:
    """Test IssueCategory enum."""

    def test_values(self) -> None:
        """Test all eight categories are listed."""
        assert IssueCategory.values() == [
            "road",
            "electricity",
            "water",
            "sanitation",
            "transport",
            "infrastructure",
            "environment",
            "others",
        ]

    def test_from_string(self) -> None:
        """Test parsing is case and whitespace insensitive."""
        assert IssueCategory.from_string(" Water ") == IssueCategory.WATER

    def test_from_string_unknown(self) -> None:
        """Test unknown categories fall back to OTHERS."""
        assert IssueCategory.from_string("parks") == IssueCategory.OTHERS


class TestIssueSnapshot:
    """Test IssueSnapshot."""

    def test_none_text_becomes_empty(self) -> None:
        """Test missing text fields are treated as empty."""
        snapshot = IssueSnapshot(
            category="road", created_at=CREATED, title=None, address=None
        )
        assert snapshot.title == ""
        assert snapshot.address == ""

    def test_enum_category_stored_as_value(self) -> None:
        """Test an IssueCategory is stored as its string value."""
        snapshot = IssueSnapshot(category=IssueCategory.WATER, created_at=CREATED)
        assert snapshot.category == "water"

    def test_from_record(self) -> None:
        """Test building from a stored row."""
        record = {
            "id": 3,
            "category": "sanitation",
            "title": "Overflowing bin",
            "description": None,
            "address": "Ward 5",
            "upvotes": 17,
            "created_at": CREATED,
        }
        snapshot = IssueSnapshot.from_record(record)

        assert snapshot == IssueSnapshot(
            category="sanitation",
            title="Overflowing bin",
            description="",
            address="Ward 5",
            upvote_count=17,
            created_at=CREATED,
        )

    def test_from_record_iso_timestamp(self) -> None:
        """Test ISO strings are parsed into datetimes."""
        record = {"category": "road", "created_at": "2026-02-01T09:30:00+00:00"}
        snapshot = IssueSnapshot.from_record(record)
        assert snapshot.created_at == CREATED
        assert snapshot.upvote_count == 0


class TestNewIssue:
    """Test new issue validation."""

    def test_valid(self) -> None:
        """Test a complete report validates."""
        issue = NewIssue(**valid_issue(title="  Broken streetlight  "))
        assert issue.title == "Broken streetlight"
        assert issue.category == IssueCategory.ELECTRICITY

    @pytest.mark.parametrize(
        "overrides",
        [
            {"title": "Hole"},
            {"title": "x" * 201},
            {"description": "short"},
            {"category": "parks"},
            {"latitude": 91},
            {"longitude": -181},
            {"address": "a" * 501},
            {"reported_by": ""},
        ],
    )
    def test_invalid_fields(self, overrides) -> None:
        """Test each field constraint is enforced."""
        with pytest.raises(ValidationError):
            NewIssue(**valid_issue(**overrides))

    def test_whitespace_only_title(self) -> None:
        """Test padding does not count toward the minimum length."""
        with pytest.raises(ValidationError):
            NewIssue(**valid_issue(title="   ab   "))

    def test_null_island_rejected(self) -> None:
        """Test the 0,0 placeholder location is refused."""
        with pytest.raises(ValidationError, match="valid location"):
            NewIssue(**valid_issue(latitude=0, longitude=0))

    def test_address_optional(self) -> None:
        """Test address defaults to empty."""
        data = valid_issue()
        del data["address"]
        assert NewIssue(**data).address == ""


class TestPriorityResult:
    """Test priority result serialization."""

    def test_breakdown_total(self) -> None:
        """Test the factor total."""
        breakdown = FactorBreakdown(20, 10, 4, 3, 5)
        assert breakdown.total == 42

    def test_to_dict(self) -> None:
        """Test the fields written onto a stored issue."""
        result = PriorityResult(
            priority_level=PriorityLevel.MEDIUM,
            normalized_score=42,
            factor_breakdown=FactorBreakdown(20, 10, 4, 3, 5),
        )
        assert result.to_dict() == {
            "priority_level": "medium",
            "priority_score": 42,
            "priority_breakdown": {
                "severity": 20,
                "location": 10,
                "community": 4,
                "age": 3,
                "safety": 5,
            },
        }
