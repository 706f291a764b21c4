"""Issue commands: report, upvote, show, list and stats."""

import typer
from rich import print as rprint

from civicscore.config.loader import load_config
from civicscore.errors import CivicScoreError, IssueValidationError
from civicscore.models.issue import IssueCategory, IssueStatus
from civicscore.scoring.presentation import LEVEL_RANGES, priority_color, priority_emoji

app = typer.Typer()


@app.command()
def report(
    title: str = typer.Option(..., "--title", "-t", help="Issue title"),
    description: str = typer.Option(..., "--description", "-d", help="Description"),
    category: str = typer.Option(
        ..., "--category", "-k", help=f"One of: {', '.join(IssueCategory.values())}"
    ),
    latitude: float = typer.Option(..., "--lat", help="Latitude"),
    longitude: float = typer.Option(..., "--lon", help="Longitude"),
    address: str = typer.Option("", "--address", "-a", help="Street address"),
    reported_by: str = typer.Option(..., "--user", help="Reporting user id"),
) -> None:
    """Report a new issue and store its priority."""
    from civicscore.cli.common import (  # noqa: PLC0415
        build_handlers,
        display_result,
        result_from_issue,
    )

    try:
        issue = build_handlers(load_config()).create_issue(
            {
                "title": title,
                "description": description,
                "category": category,
                "latitude": latitude,
                "longitude": longitude,
                "address": address,
                "reported_by": reported_by,
            }
        )
    except IssueValidationError as e:
        rprint(f"[red]{e.message}[/red]")
        for error in e.errors:
            field = ".".join(str(part) for part in error.get("loc", ()))
            rprint(f"  [red]{field}: {error.get('msg')}[/red]")
        raise typer.Exit(1)
    except CivicScoreError as e:
        rprint(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    rprint(f"[green]Issue #{issue['id']} reported successfully[/green]")
    display_result(result_from_issue(issue))


@app.command()
def upvote(
    issue_id: int = typer.Argument(..., help="Issue id"),
    user_id: str = typer.Argument(..., help="Voting user id"),
) -> None:
    """Upvote an issue and re-score it."""
    from civicscore.cli.common import build_handlers  # noqa: PLC0415

    try:
        outcome = build_handlers(load_config()).upvote_issue(issue_id, user_id)
    except CivicScoreError as e:
        rprint(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    level = outcome.result.priority_level
    color = priority_color(level)
    rprint(f"[green]Issue #{issue_id} upvoted successfully[/green]")
    rprint(f"  Upvotes: {outcome.upvotes}")
    rprint(
        f"  Priority: [{color}]{priority_emoji(level)} "
        f"{outcome.result.normalized_score} ({level.value})[/{color}]"
    )


@app.command()
def show(issue_id: int = typer.Argument(..., help="Issue id")) -> None:
    """Show one stored issue with its priority breakdown."""
    from civicscore.cli.common import (  # noqa: PLC0415
        configure_database,
        display_result,
        result_from_issue,
    )
    from civicscore.storage.issue_store import IssueStore  # noqa: PLC0415

    configure_database(load_config())
    try:
        issue = IssueStore().get_issue(issue_id)
    except Exception as e:
        rprint(f"[red]Failed to load issue #{issue_id}: {e}[/red]")
        raise typer.Exit(1)

    if issue is None:
        rprint(f"[red]Issue not found: {issue_id}[/red]")
        raise typer.Exit(1)

    rprint(f"[bold]#{issue['id']} {issue['title']}[/bold]")
    rprint(f"  Category: {issue['category']}  Status: {issue['status']}")
    if issue.get("address"):
        rprint(f"  Address: {issue['address']}")
    rprint(f"  Upvotes: {issue['upvotes']}  Reported: {issue['created_at']:%Y-%m-%d}")
    display_result(result_from_issue(issue))


@app.command()
def issues(
    top: int = typer.Option(None, help="Number of top issues to show"),
    status: str = typer.Option(
        None, help=f"Filter by status ({', '.join(s.value for s in IssueStatus)})"
    ),
) -> None:
    """List stored issues by priority."""
    from civicscore.cli.common import (  # noqa: PLC0415
        configure_database,
        display_issues,
    )
    from civicscore.storage.issue_store import IssueStore  # noqa: PLC0415

    config = load_config()
    configure_database(config)
    limit = top or config.top_issues_limit

    rows = IssueStore().get_top_issues(limit=limit, status=status)
    display_issues(rows, title=f"Top {limit} issues by priority")


@app.command()
def stats() -> None:
    """Show how many stored issues fall in each priority level."""
    from civicscore.cli.common import build_handlers  # noqa: PLC0415

    try:
        counts = build_handlers(load_config()).priority_stats()
    except CivicScoreError as e:
        rprint(f"[red]{e.message}[/red]")
        raise typer.Exit(1)
    except Exception as e:
        rprint(f"[red]Failed to count issues: {e}[/red]")
        raise typer.Exit(1)

    rprint("\n[bold]Issues by priority[/bold]")
    for level in ("high", "medium", "low"):
        low, high = LEVEL_RANGES[level]
        color = priority_color(level)
        rprint(
            f"  {priority_emoji(level)} [{color}]{level.capitalize():<7}[/{color}]"
            f" ({low}-{high}): {counts.get(level, 0)}"
        )
