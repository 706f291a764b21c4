"""Configuration settings using Pydantic."""

from pydantic import BaseModel, Field, field_validator, model_validator

from civicscore.errors import ConfigError
from civicscore.models.priority import PriorityLevel
from civicscore.scoring.rules import ScoringRules


def _check_descending(v: list[tuple[float, float]]) -> list[tuple[float, float]]:
    minimums = [minimum for minimum, _ in v]
    if minimums != sorted(minimums, reverse=True):
        raise ValueError("Thresholds must be sorted by minimum, highest first")
    return v


class ScoringSettings(BaseModel):
    """Scoring policy, as edited in the YAML config."""

    severity_weights: dict[str, float] = Field(
        default_factory=lambda: {
            "water": 20,
            "electricity": 18,
            "road": 16,
            "infrastructure": 15,
            "sanitation": 14,
            "transport": 12,
            "environment": 10,
            "others": 8,
        },
        description="Severity score per issue category",
    )
    default_severity: float = Field(
        default=10, ge=0, description="Severity for categories not in the table"
    )
    location_keywords: list[str] = Field(
        default_factory=lambda: [
            "school",
            "hospital",
            "clinic",
            "market",
            "junction",
            "highway",
            "main road",
            "bus stop",
            "station",
        ],
        description="Critical-location keywords",
    )
    location_base: float = Field(default=10, ge=0, description="Base location score")
    location_bonus: float = Field(
        default=10, ge=0, description="Bonus when a critical location is mentioned"
    )
    community_thresholds: list[tuple[float, float]] = Field(
        default_factory=lambda: [(50, 20), (30, 16), (15, 12), (5, 8)],
        description="(min upvotes, score) pairs, highest first",
    )
    community_floor: float = Field(default=4, ge=0)
    age_thresholds: list[tuple[float, float]] = Field(
        default_factory=lambda: [(30, 20), (14, 15), (7, 10), (3, 6)],
        description="(min age in days, score) pairs, highest first",
    )
    age_floor: float = Field(default=3, ge=0)
    safety_keywords: list[str] = Field(
        default_factory=lambda: [
            "danger",
            "unsafe",
            "hazard",
            "accident",
            "broken",
            "leak",
            "flooding",
            "fire",
            "emergency",
            "urgent",
            "critical",
            "exposed",
            "damaged",
            "collapse",
        ],
        description="Safety keywords",
    )
    safety_thresholds: list[tuple[float, float]] = Field(
        default_factory=lambda: [(3, 20), (2, 15), (1, 10)],
        description="(min distinct keywords, score) pairs, highest first",
    )
    safety_floor: float = Field(default=5, ge=0)
    max_score: float = Field(
        default=100, gt=0, description="Factor total mapped to a score of 100"
    )
    high_threshold: float = Field(default=70, ge=0, description="Minimum high score")
    medium_threshold: float = Field(
        default=40, ge=0, description="Minimum medium score"
    )

    @field_validator("severity_weights")
    @classmethod
    def validate_weights(cls, v: dict[str, float]) -> dict[str, float]:
        """Ensure weights are non-negative."""
        if any(weight < 0 for weight in v.values()):
            raise ValueError("Weights must be non-negative")
        return v

    @field_validator("community_thresholds", "age_thresholds", "safety_thresholds")
    @classmethod
    def validate_thresholds(
        cls, v: list[tuple[float, float]]
    ) -> list[tuple[float, float]]:
        """Ensure threshold tables are ordered highest first."""
        return _check_descending(v)

    def to_rules(self) -> ScoringRules:
        """Build the immutable rule set the engine consumes."""
        if self.medium_threshold > self.high_threshold:
            raise ConfigError(
                "medium_threshold must not exceed high_threshold",
                medium_threshold=self.medium_threshold,
                high_threshold=self.high_threshold,
            )
        try:
            return ScoringRules(
                severity_weights=self.severity_weights,
                default_severity=self.default_severity,
                location_keywords=tuple(self.location_keywords),
                location_base=self.location_base,
                location_bonus=self.location_bonus,
                community_thresholds=tuple(self.community_thresholds),
                community_floor=self.community_floor,
                age_thresholds=tuple(self.age_thresholds),
                age_floor=self.age_floor,
                safety_keywords=tuple(self.safety_keywords),
                safety_thresholds=tuple(self.safety_thresholds),
                safety_floor=self.safety_floor,
                max_score=self.max_score,
                level_thresholds=(
                    (self.high_threshold, PriorityLevel.HIGH),
                    (self.medium_threshold, PriorityLevel.MEDIUM),
                ),
            )
        except ValueError as e:
            raise ConfigError(f"Invalid scoring settings: {e}") from e


class Settings(BaseModel):
    """Global configuration settings."""

    scoring: ScoringSettings = Field(default_factory=ScoringSettings)

    # Database
    database_url: str | None = Field(
        default=None, description="PostgreSQL DSN (CIVICSCORE_DATABASE_URL wins)"
    )
    pool_min_size: int = Field(default=1, ge=0, description="Minimum connections")
    pool_max_size: int = Field(default=5, ge=1, description="Maximum connections")

    # Listing
    top_issues_limit: int = Field(
        default=20, ge=1, description="Default number of issues listed"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")

    model_config = {
        "extra": "ignore",  # Ignore extra fields from YAML
    }

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()

    @model_validator(mode="after")
    def validate_pool_bounds(self) -> "Settings":
        """Ensure the pool minimum does not exceed its maximum."""
        if self.pool_min_size > self.pool_max_size:
            raise ValueError("pool_min_size must not exceed pool_max_size")
        return self
