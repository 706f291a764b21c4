"""Database management commands."""

import typer
from rich import print as rprint

from civicscore.storage.db import Database
from civicscore.storage.init_db import SCHEMA_VERSION, get_status, init_database

app = typer.Typer(help="Database management commands")


@app.callback()
def _configure() -> None:
    from civicscore.cli.common import configure_database  # noqa: PLC0415
    from civicscore.config.loader import load_config  # noqa: PLC0415

    configure_database(load_config())


@app.command()
def init(
    drop_existing: bool = typer.Option(
        False, "--drop", help="Drop existing tables first"
    ),
) -> None:
    """Create the issues schema."""
    if drop_existing:
        rprint("[yellow]WARNING: every stored issue will be deleted![/yellow]")
        if not typer.confirm("Are you sure?"):
            rprint("[dim]Aborted.[/dim]")
            raise typer.Exit(0)

    try:
        init_database(drop_existing=drop_existing)
    except Exception as e:
        rprint(f"[red]Failed to initialize database: {e}[/red]")
        raise typer.Exit(1)
    rprint(f"[green]Schema version {SCHEMA_VERSION} ready.[/green]")


@app.command()
def status() -> None:
    """Show schema version, pool state and issue count."""
    info = get_status()
    version = info["schema_version"]

    rprint("\n[bold]Database Status[/bold]")
    if version is None:
        rprint("  Schema: [red]not initialized[/red] (run 'civicscore database init')")
    elif info["schema_current"]:
        rprint(f"  Schema version: [green]{version}[/green]")
    else:
        rprint(
            f"  Schema version: [yellow]{version}[/yellow] "
            f"(this release expects {info['expected_version']}; "
            "re-create with 'civicscore database init --drop')"
        )

    pool = info["pool"]
    rprint(f"  DSN: {pool['dsn']}")
    if pool["active"]:
        rprint(f"  Pool: [green]open[/green] ({pool['min_size']}-{pool['max_size']})")
    else:
        rprint("  Pool: [dim]not open[/dim]")

    if "issues_count" in info:
        rprint(f"  Issues: {info['issues_count']}")
    if "error" in info:
        rprint(f"\n[red]Error: {info['error']}[/red]")
        raise typer.Exit(1)


@app.command()
def close() -> None:
    """Close the database connection pool."""
    Database.close()
    rprint("[green]Connection pool closed.[/green]")
