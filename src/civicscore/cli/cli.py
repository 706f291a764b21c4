"""Root command of the civicscore CLI."""

import logging
import os

import typer
from dotenv import load_dotenv
from rich import print as rprint

from civicscore.version import __version__, get_git_commit

LOG_DIR_ENV_VAR = "CIVICSCORE_LOG_DIR"

app = typer.Typer(
    name="civicscore",
    help="Score, rank and re-score reported civic issues",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _setup_logging(log_level: str) -> str:
    """Configure logging; an empty CIVICSCORE_LOG_DIR disables the log file."""
    from civicscore.logging_config import configure_logging  # noqa: PLC0415

    logs_dir = os.getenv(LOG_DIR_ENV_VAR, "logs") or None
    configure_logging(getattr(logging, log_level.upper(), logging.INFO), logs_dir)
    return log_level


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"civicscore {__version__} ({get_git_commit() or 'unknown'})")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        is_eager=True,
        callback=_print_version,
    ),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        "-l",
        help="Console log level",
        callback=_setup_logging,
    ),
    config_file: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Config file (default: $CIVICSCORE_CONFIG or ~/.config/civicscore)",
    ),
) -> None:
    """civicscore - priority scoring for citizen-reported issues."""
    load_dotenv()

    if config_file:
        from civicscore.config.loader import (  # noqa: PLC0415
            CONFIG_ENV_VAR,
            load_config,
        )

        # Subcommands resolve the config path through the environment
        os.environ[CONFIG_ENV_VAR] = config_file
        try:
            load_config(config_file)
        except Exception as e:
            rprint(f"[red]Invalid config file {config_file}: {e}[/red]")
            raise typer.Exit(1)


# Import and register commands (must come after app is defined)
from civicscore.cli import (  # noqa: E402
    config,
    database,
    issues,
    recalculate,
    score,
)

app.add_typer(score.app)
app.add_typer(issues.app)
app.add_typer(recalculate.app)

app.add_typer(config.app, name="config", rich_help_panel="Command Groups")
app.add_typer(database.app, name="database", rich_help_panel="Command Groups")


if __name__ == "__main__":
    app()
