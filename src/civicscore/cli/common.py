"""Common utilities for CLI commands."""

from typing import Any

from rich import print as rprint
from rich.console import Console
from rich.table import Table

from civicscore.config.settings import Settings
from civicscore.models.priority import FactorBreakdown, PriorityLevel, PriorityResult
from civicscore.scoring.presentation import (
    FACTOR_DESCRIPTIONS,
    factor_tier,
    format_score,
    priority_color,
    priority_emoji,
    score_percentage,
)


def configure_database(config: Settings) -> None:
    """Point the connection pool at the configured database."""
    from civicscore.storage.db import Database  # noqa: PLC0415

    Database.configure(
        config.database_url, config.pool_min_size, config.pool_max_size
    )


def build_handlers(config: Settings):
    """Wire handlers to the PostgreSQL store with the configured rules."""
    from civicscore.issues.handlers import IssueHandlers  # noqa: PLC0415
    from civicscore.scoring.engine import PriorityEngine  # noqa: PLC0415
    from civicscore.storage.issue_store import IssueStore  # noqa: PLC0415

    rules = config.scoring.to_rules()
    configure_database(config)
    return IssueHandlers(IssueStore(), PriorityEngine(rules))


def _bar(score: float, width: int = 20) -> str:
    filled = round(score_percentage(score) / 100 * width)
    filled = max(0, min(width, filled))
    return "█" * filled + "░" * (width - filled)


def display_result(result: PriorityResult) -> None:
    """Show a priority result with its per-factor breakdown."""
    level = result.priority_level
    color = priority_color(level)
    rprint(
        f"\n{priority_emoji(level)} [bold {color}]Priority Score: "
        f"{result.normalized_score}/100 - {level.value.upper()}[/bold {color}]"
    )

    table = Table(title="Priority Factor Breakdown")
    table.add_column("Factor", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("", no_wrap=True)
    table.add_column("Description", style="dim")

    for factor, value in result.factor_breakdown.to_dict().items():
        bar_color = priority_color(factor_tier(value))
        table.add_row(
            factor.capitalize(),
            format_score(value),
            f"[{bar_color}]{_bar(value)}[/{bar_color}]",
            FACTOR_DESCRIPTIONS[factor],
        )

    Console().print(table)


def display_issues(issues: list[dict[str, Any]], title: str) -> None:
    """Display stored issues in a table."""
    if not issues:
        rprint("[yellow]No issues found[/yellow]")
        return

    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Title", style="white")
    table.add_column("Category", style="yellow")
    table.add_column("Status", style="dim")
    table.add_column("Upvotes", justify="right")
    table.add_column("Priority", justify="right")

    for issue in issues:
        level = issue.get("priority_level")
        color = priority_color(level)
        title_text = issue["title"]
        score = issue.get("priority_score", 0)
        table.add_row(
            str(issue["id"]),
            title_text[:40] + "..." if len(title_text) > 40 else title_text,
            issue["category"],
            issue.get("status", ""),
            str(issue.get("upvotes", 0)),
            f"[{color}]{priority_emoji(level)} {score}[/{color}]",
        )

    Console().print(table)


def result_from_issue(issue: dict[str, Any]) -> PriorityResult:
    """Rebuild the priority result stored on an issue row."""
    return PriorityResult(
        priority_level=PriorityLevel(issue["priority_level"]),
        normalized_score=issue["priority_score"],
        factor_breakdown=FactorBreakdown(**issue["priority_breakdown"]),
    )
