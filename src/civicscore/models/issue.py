"""Issue-related data models."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


class IssueCategory(Enum):
    """Categories a citizen can file an issue under."""

    ROAD = "road"
    ELECTRICITY = "electricity"
    WATER = "water"
    SANITATION = "sanitation"
    TRANSPORT = "transport"
    INFRASTRUCTURE = "infrastructure"
    ENVIRONMENT = "environment"
    OTHERS = "others"

    @classmethod
    def values(cls) -> list[str]:
        """All category values, in declaration order."""
        return [category.value for category in cls]

    @classmethod
    def from_string(cls, value: str) -> "IssueCategory":
        """Parse category from string, falling back to OTHERS."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.OTHERS


class IssueStatus(Enum):
    """Workflow status of a stored issue."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class IssueSnapshot:
    """Read-only view of the issue attributes the priority score depends on.

    ``category`` stays a plain string so categories outside
    :class:`IssueCategory` can still be scored (they get the default
    severity). Text fields given as ``None`` are stored as empty strings.
    """

    category: str
    created_at: datetime
    title: str = ""
    description: str = ""
    address: str = ""
    upvote_count: int = 0

    def __post_init__(self) -> None:
        for name in ("title", "description", "address"):
            if getattr(self, name) is None:
                object.__setattr__(self, name, "")
        if isinstance(self.category, IssueCategory):
            object.__setattr__(self, "category", self.category.value)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "IssueSnapshot":
        """Build a snapshot from a stored issue record.

        Args:
            record: Row from the issue store (or any mapping with the same keys)

        Returns:
            IssueSnapshot for the record's current state
        """
        created_at = record["created_at"]
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)

        return cls(
            category=record.get("category") or "",
            title=record.get("title") or "",
            description=record.get("description") or "",
            address=record.get("address") or "",
            upvote_count=int(record.get("upvotes") or 0),
            created_at=created_at,
        )


class NewIssue(BaseModel):
    """Validated input for reporting a new issue."""

    title: str = Field(min_length=5, max_length=200)
    description: str = Field(min_length=10, max_length=5000)
    category: IssueCategory
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    address: str = Field(default="", max_length=500)
    reported_by: str = Field(min_length=1)

    @field_validator("title", "description", "address", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        """Trim surrounding whitespace before length checks."""
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def check_coordinates(self) -> "NewIssue":
        """Reject the 0,0 placeholder location."""
        if self.latitude == 0 and self.longitude == 0:
            raise ValueError("Please provide valid location coordinates")
        return self
