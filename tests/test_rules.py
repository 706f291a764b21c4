"""Tests for the scoring rule set."""

from dataclasses import FrozenInstanceError

import pytest

from civicscore.models.priority import PriorityLevel
from civicscore.scoring.rules import DEFAULT_RULES, ScoringRules, step_score


class TestStepScore:
    """Test threshold table lookup."""

    TABLE = ((50.0, 20.0), (30.0, 16.0), (15.0, 12.0), (5.0, 8.0))

    def test_first_reached_threshold_wins(self) -> None:
        """Test lookup returns the highest reached tier."""
        assert step_score(60, self.TABLE, 4) == 20
        assert step_score(30, self.TABLE, 4) == 16
        assert step_score(29.9, self.TABLE, 4) == 12

    def test_floor_below_all_thresholds(self) -> None:
        """Test values under every minimum get the floor."""
        assert step_score(4, self.TABLE, 4) == 4
        assert step_score(-1, self.TABLE, 4) == 4

    def test_empty_table(self) -> None:
        """Test an empty table always gives the floor."""
        assert step_score(100, (), 7) == 7


class TestScoringRules:
    """Test rule set construction and validation."""

    def test_factor_maxima_sum_to_max_score(self) -> None:
        """Test the five factor maxima add up to the cap."""
        rules = DEFAULT_RULES
        maxima = [
            max(rules.severity_weights.values()),
            rules.location_base + rules.location_bonus,
            rules.community_thresholds[0][1],
            rules.age_thresholds[0][1],
            rules.safety_thresholds[0][1],
        ]
        assert sum(maxima) == rules.max_score == 100

    def test_immutable(self) -> None:
        """Test rules cannot be changed after construction."""
        with pytest.raises(FrozenInstanceError):
            DEFAULT_RULES.max_score = 50
        with pytest.raises(TypeError):
            DEFAULT_RULES.severity_weights["water"] = 0

    def test_caller_mapping_is_copied(self) -> None:
        """Test mutating the input mapping does not leak into the rules."""
        weights = {"water": 20}
        rules = ScoringRules(severity_weights=weights)
        weights["water"] = 1
        assert rules.severity_weights["water"] == 20

    def test_keywords_lowercased(self) -> None:
        """Test keywords are normalized to lower case."""
        rules = ScoringRules(location_keywords=["Town Hall"], safety_keywords=["FIRE"])
        assert rules.location_keywords == ("town hall",)
        assert rules.safety_keywords == ("fire",)

    def test_unsorted_threshold_table_rejected(self) -> None:
        """Test ascending threshold tables are refused."""
        with pytest.raises(ValueError, match="sorted descending"):
            ScoringRules(community_thresholds=((5, 8), (50, 20)))

    def test_unsorted_level_thresholds_rejected(self) -> None:
        """Test level thresholds must be highest first."""
        with pytest.raises(ValueError, match="sorted descending"):
            ScoringRules(
                level_thresholds=((40, PriorityLevel.MEDIUM), (70, PriorityLevel.HIGH))
            )

    def test_level_strings_accepted(self) -> None:
        """Test level thresholds may name levels by value."""
        rules = ScoringRules(level_thresholds=((80, "high"), (50, "medium")))
        assert rules.level_thresholds == (
            (80.0, PriorityLevel.HIGH),
            (50.0, PriorityLevel.MEDIUM),
        )

    @pytest.mark.parametrize("max_score", [0, -10])
    def test_max_score_must_be_positive(self, max_score) -> None:
        """Test a non-positive cap is refused."""
        with pytest.raises(ValueError, match="max_score"):
            ScoringRules(max_score=max_score)
