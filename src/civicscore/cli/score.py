"""Score command."""

import json
from datetime import timedelta

import typer
from rich import print as rprint

from civicscore.config.loader import load_config
from civicscore.errors import ConfigError
from civicscore.models.issue import IssueSnapshot
from civicscore.scoring.engine import PriorityEngine, utc_now

app = typer.Typer()


@app.command()
def score(
    category: str = typer.Option(..., "--category", "-k", help="Issue category"),
    title: str = typer.Option("", "--title", "-t", help="Issue title"),
    description: str = typer.Option("", "--description", "-d", help="Description"),
    address: str = typer.Option("", "--address", "-a", help="Street address"),
    upvotes: int = typer.Option(0, "--upvotes", "-u", min=0, help="Upvote count"),
    age_days: int = typer.Option(0, "--age-days", help="Days since reported"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Score an issue without storing it."""
    config = load_config()
    try:
        engine = PriorityEngine(config.scoring.to_rules())
    except ConfigError as e:
        rprint(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    now = utc_now()
    snapshot = IssueSnapshot(
        category=category.strip().lower(),
        title=title,
        description=description,
        address=address,
        upvote_count=upvotes,
        created_at=now - timedelta(days=age_days),
    )
    result = engine.score(snapshot, now)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    from civicscore.cli.common import display_result  # noqa: PLC0415

    display_result(result)
