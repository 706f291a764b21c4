"""Config subcommands."""

import typer
from rich import print as rprint

app = typer.Typer(help="Configuration management")


def _parse_value(value: str):
    """Parse a CLI value as int, float, bool or string."""
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False
    return value


@app.command()
def show(
    key: str = typer.Option(None, help="Show specific config key"),
) -> None:
    """Show current configuration."""
    from civicscore.config.loader import get_config_path, load_config  # noqa: PLC0415

    config = load_config()

    if key:
        # Navigate nested keys with dot notation
        value = config
        for k in key.split("."):
            if hasattr(value, k):
                value = getattr(value, k)
            elif isinstance(value, dict) and k in value:
                value = value[k]
            else:
                rprint(f"[red]Key not found: {key}[/red]")
                raise typer.Exit(1)
        rprint(f"{key}: {value}")
        return

    rprint("[bold]Configuration file:[/bold]")
    rprint(f"  {get_config_path()}")

    scoring = config.scoring
    rprint("\n[bold]Current settings:[/bold]")
    rprint(f"  log_level = {config.log_level}")
    rprint(f"  top_issues_limit = {config.top_issues_limit}")
    rprint(f"  scoring.default_severity = {scoring.default_severity}")
    rprint(f"  scoring.high_threshold = {scoring.high_threshold}")
    rprint(f"  scoring.medium_threshold = {scoring.medium_threshold}")
    rprint("\n[bold]Severity weights:[/bold]")
    for category, weight in scoring.severity_weights.items():
        rprint(f"  {category:<15} {weight:g}")


@app.command()
def set(
    key: str = typer.Argument(..., help="Config key (e.g., scoring.high_threshold)"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Set a configuration value."""
    from pydantic import ValidationError  # noqa: PLC0415

    from civicscore.config.loader import load_config, save_config  # noqa: PLC0415
    from civicscore.config.settings import Settings  # noqa: PLC0415

    config = load_config()
    data = config.model_dump(mode="json")
    keys = key.split(".")
    parsed_value = _parse_value(value)

    obj = data
    for k in keys[:-1]:
        if not isinstance(obj.get(k), dict):
            rprint(f"[red]Key not found: {key}[/red]")
            raise typer.Exit(1)
        obj = obj[k]

    final_key = keys[-1]
    # Only severity weights accept new keys
    if final_key not in obj and keys[:-1] != ["scoring", "severity_weights"]:
        rprint(f"[red]Key not found: {key}[/red]")
        raise typer.Exit(1)
    obj[final_key] = parsed_value

    try:
        updated = Settings(**data)
    except ValidationError as e:
        rprint(f"[red]Invalid value for {key}: {e.errors()[0]['msg']}[/red]")
        raise typer.Exit(1)

    save_config(updated)
    rprint(f"[green]Set {key} = {parsed_value}[/green]")


@app.command()
def path() -> None:
    """Show the configuration file path."""
    from civicscore.config.loader import get_config_path  # noqa: PLC0415

    rprint(f"{get_config_path()}")
