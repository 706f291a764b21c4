"""Tests for display helpers."""

import pytest

from civicscore.models.priority import PriorityLevel
from civicscore.scoring.presentation import (
    FACTOR_DESCRIPTIONS,
    FALLBACK_COLOR,
    FALLBACK_EMOJI,
    LEVEL_RANGES,
    factor_tier,
    format_score,
    priority_color,
    priority_emoji,
    score_percentage,
)


class TestPriorityColor:
    """Test level colors."""

    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            (PriorityLevel.HIGH, "#e74c3c"),
            ("medium", "#f39c12"),
            (PriorityLevel.LOW, "#3498db"),
            ("critical", "#c0392b"),
        ],
    )
    def test_known_levels(self, level, expected) -> None:
        """Test each level has its color."""
        assert priority_color(level) == expected

    @pytest.mark.parametrize("level", [None, "", "urgent"])
    def test_fallback(self, level) -> None:
        """Test unknown levels get the neutral color."""
        assert priority_color(level) == FALLBACK_COLOR


class TestPriorityEmoji:
    """Test level emojis."""

    def test_known_levels(self) -> None:
        """Test each level has its glyph."""
        assert priority_emoji(PriorityLevel.HIGH) == "🔴"
        assert priority_emoji("medium") == "🟡"
        assert priority_emoji("low") == "🔵"
        assert priority_emoji("critical") == "⭕"

    def test_fallback(self) -> None:
        """Test unknown levels get the neutral glyph."""
        assert priority_emoji(None) == FALLBACK_EMOJI
        assert priority_emoji("unknown") == FALLBACK_EMOJI


class TestFactorFormatting:
    """Test per-factor formatting."""

    def test_format_score(self) -> None:
        """Test scores render out of twenty."""
        assert format_score(15) == "15/20"
        assert format_score(12.5) == "13/20"
        assert format_score(30, maximum=40) == "30/40"

    def test_score_percentage(self) -> None:
        """Test factor scores as percentages."""
        assert score_percentage(20) == 100
        assert score_percentage(3) == 15
        assert score_percentage(0) == 0

    @pytest.mark.parametrize(
        ("score", "expected"),
        [
            (20, PriorityLevel.HIGH),
            (16, PriorityLevel.HIGH),
            (15, PriorityLevel.MEDIUM),
            (10, PriorityLevel.MEDIUM),
            (8, PriorityLevel.LOW),
            (0, PriorityLevel.LOW),
        ],
    )
    def test_factor_tier(self, score, expected) -> None:
        """Test the bar color tier for one factor."""
        assert factor_tier(score) == expected

    def test_every_factor_described(self) -> None:
        """Test the five factors all have descriptions."""
        assert set(FACTOR_DESCRIPTIONS) == {
            "severity",
            "location",
            "community",
            "age",
            "safety",
        }

    def test_level_ranges_cover_scale(self) -> None:
        """Test level ranges tile 0 to 100 without gaps."""
        ranges = sorted(LEVEL_RANGES.values())
        assert ranges[0][0] == 0
        assert ranges[-1][1] == 100
        for (_, end), (start, _) in zip(ranges, ranges[1:]):
            assert start == end + 1
