"""
Main Typer application for the toolgate CLI.

This module defines the root CLI application and registers all command groups.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer

from toolgate import __version__
from toolgate.cli.commands import config, tools
from toolgate.cli.output import print_info

app = typer.Typer(
    name="toolgate",
    help="Run the assistant's sandboxed tools from the command line.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        print_info(f"toolgate version [green]{__version__}[/green]")
        raise typer.Exit()


# noinspection PyUnusedLocal
@app.callback()
def main_callback(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Config file to use instead of ~/.toolgate/config.yaml.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log at DEBUG level.",
        ),
    ] = False,
) -> None:
    """
    [bold blue]toolgate[/bold blue] - sandboxed tools for a local assistant

    Files, notes, web search, URL fetch, shell and browser, each confined
    to the boundaries enabled in your configuration.
    """
    ctx.obj = {"config_path": config_path, "verbose": verbose}
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


# Register command groups
app.add_typer(tools.app, name="tools")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
