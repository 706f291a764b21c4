"""Display helpers for priority results.

Pure lookups for the presentation layer. Nothing here feeds back into
scoring.
"""

from civicscore.models.priority import PriorityLevel
from civicscore.scoring.engine import round_half_up

DEFAULT_FACTOR_MAX = 20

PRIORITY_COLORS: dict[str, str] = {
    "high": "#e74c3c",
    "medium": "#f39c12",
    "low": "#3498db",
    "critical": "#c0392b",
}
FALLBACK_COLOR = "#95a5a6"

PRIORITY_EMOJIS: dict[str, str] = {
    "high": "🔴",
    "medium": "🟡",
    "low": "🔵",
    "critical": "⭕",
}
FALLBACK_EMOJI = "⚪"

FACTOR_DESCRIPTIONS: dict[str, str] = {
    "severity": "Based on issue category impact",
    "location": "Proximity to critical areas",
    "community": "Community support (upvotes)",
    "age": "Time since reported",
    "safety": "Safety concerns detected",
}

LEVEL_RANGES: dict[str, tuple[int, int]] = {
    "high": (70, 100),
    "medium": (40, 69),
    "low": (0, 39),
}


def _level_key(level: PriorityLevel | str | None) -> str | None:
    if isinstance(level, PriorityLevel):
        return level.value
    return level


def priority_color(level: PriorityLevel | str | None) -> str:
    """Hex color for a priority level."""
    return PRIORITY_COLORS.get(_level_key(level), FALLBACK_COLOR)


def priority_emoji(level: PriorityLevel | str | None) -> str:
    """Emoji glyph for a priority level."""
    return PRIORITY_EMOJIS.get(_level_key(level), FALLBACK_EMOJI)


def score_percentage(score: float, maximum: float = DEFAULT_FACTOR_MAX) -> int:
    """Factor score as a whole percentage of ``maximum``."""
    return round_half_up(score / maximum * 100)


def format_score(score: float, maximum: float = DEFAULT_FACTOR_MAX) -> str:
    """Factor score as ``"<score>/<maximum>"``."""
    return f"{round_half_up(score)}/{maximum:g}"


def factor_tier(score: float) -> PriorityLevel:
    """Level whose color is used for one factor's progress bar."""
    if score >= 16:
        return PriorityLevel.HIGH
    if score >= 10:
        return PriorityLevel.MEDIUM
    return PriorityLevel.LOW
