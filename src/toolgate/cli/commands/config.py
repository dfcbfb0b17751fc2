"""
toolgate config - Configuration inspection.

Usage:
    toolgate config show
    toolgate config show tools --json
    toolgate config path
"""

from typing import Annotated

import typer
import yaml
from rich.panel import Panel
from rich.syntax import Syntax

from toolgate.cli.output import console, print_error, print_json
from toolgate.config import ConfigurationError, load_config
from toolgate.config.merger import get_nested_value
from toolgate.storage.paths import get_global_config_path

app = typer.Typer(
    name="config",
    help="Configuration inspection.",
)


@app.command()
def show(
    ctx: typer.Context,
    section: Annotated[
        str | None,
        typer.Argument(
            help="Config section or dotted key (e.g., 'tools', 'search.recency_days').",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show the effective (merged) configuration."""
    config_path = (ctx.obj or {}).get("config_path")
    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(1)

    config_dict = config.model_dump(mode="json")
    if section:
        value = get_nested_value(config_dict, section)
        if value is None:
            print_error(f"Section '{section}' not found in configuration.")
            raise typer.Exit(1)
        config_dict = value

    if json_output:
        print_json(config_dict)
        return

    output = yaml.dump(
        config_dict,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
    if section:
        console.print(Panel(Syntax(output, "yaml", theme="monokai"), title=f"[cyan]{section}[/cyan]"))
    else:
        console.print(Syntax(output, "yaml", theme="monokai"))


@app.command()
def path(ctx: typer.Context) -> None:
    """Print the config file that would be loaded."""
    config_path = (ctx.obj or {}).get("config_path") or get_global_config_path()
    status = "exists" if config_path.exists() else "not found"
    console.print(f"{config_path} [dim]({status})[/dim]")
