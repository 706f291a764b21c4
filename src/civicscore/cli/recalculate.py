"""Recalculate command."""

import typer
from rich import print as rprint

from civicscore.config.loader import load_config
from civicscore.errors import CivicScoreError, RecalculationError

app = typer.Typer()


@app.command()
def recalculate() -> None:
    """Re-score every stored issue with the current rules.

    Safe to re-run: each issue's stored priority is simply overwritten.
    """
    from civicscore.cli.common import build_handlers  # noqa: PLC0415

    try:
        handlers = build_handlers(load_config())
        rprint("[bold cyan]Recalculating priorities...[/bold cyan]")
        updated = handlers.recalculate_priorities()
    except RecalculationError as e:
        rprint(f"[red]{e.message}[/red]")
        rprint("[dim]Updated issues keep their new priority. Re-run to finish.[/dim]")
        raise typer.Exit(1)
    except CivicScoreError as e:
        rprint(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    rprint(f"[green]Successfully recalculated priorities for {updated} issues[/green]")
