"""
toolgate tools - Inspect and run tools.

Usage:
    toolgate tools list [--enabled]
    toolgate tools info <tool-name>
    toolgate tools run <tool-name> --args '{"path": "notes.md"}'
"""

import json
import logging
from typing import Annotated, Any

import typer

from toolgate.cli.output import console, print_error, print_json, print_table, print_warning
from toolgate.config import Config, ConfigurationError, load_config
from toolgate.exceptions import UnknownToolError
from toolgate.tools.registry import build_default_registry

app = typer.Typer(
    name="tools",
    help="Inspect and run the assistant's tools.",
)


def _load(ctx: typer.Context) -> Config:
    obj = ctx.obj or {}
    try:
        config = load_config(obj.get("config_path"))
    except ConfigurationError as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(1)

    if not obj.get("verbose"):
        logging.basicConfig(level=config.logging.level)
    return config


@app.command("list")
def list_tools(
    ctx: typer.Context,
    enabled_only: Annotated[
        bool,
        typer.Option(
            "--enabled",
            "-e",
            help="Only show tools enabled by the current settings.",
        ),
    ] = False,
) -> None:
    """List the tool catalog."""
    registry = build_default_registry()

    if enabled_only:
        config = _load(ctx)
        definitions = registry.enabled_tool_definitions(config.tools)
    else:
        definitions = registry.all_tool_definitions()

    if not definitions:
        print_warning("No tools enabled.")
        return

    print_table(
        "Tools",
        ["Name", "Risk", "Scope"],
        [[d.name.value, d.risk.value, d.scope] for d in definitions],
    )
    console.print(f"\n[dim]Total: {len(definitions)} tool(s)[/dim]")


@app.command("info")
def tool_info(
    tool_name: Annotated[
        str,
        typer.Argument(help="Tool name to get info about"),
    ],
) -> None:
    """Show detailed information about a tool."""
    registry = build_default_registry()
    tool = registry.get(tool_name)

    if not tool:
        print_error(f"Tool not found: {tool_name}")
        available = ", ".join(t.name.value for t in registry.list_tools())
        console.print(f"\n[dim]Available tools: {available}[/dim]")
        raise typer.Exit(1)

    console.print(f"\n[bold cyan]{tool.name.value}[/bold cyan]")
    console.print(f"Risk: {tool.risk.value}")
    console.print(f"Scope: {tool.scope}")
    console.print(f"\n[bold]Description:[/bold]\n{tool.description}")

    if tool.parameters:
        console.print("\n[bold]Parameters:[/bold]")
        for param in tool.parameters:
            required = "[red]*[/red]" if param.required else ""
            default = f" (default: {param.default})" if param.default is not None else ""
            console.print(f"  • {param.name}{required}: {param.type}{default}")
            console.print(f"    {param.description}")

    console.print("\n[bold]Input Schema:[/bold]")
    print_json(tool.get_input_schema())


@app.command("run")
def run_tool(
    ctx: typer.Context,
    tool_name: Annotated[
        str,
        typer.Argument(help="Tool name to run"),
    ],
    args: Annotated[
        str | None,
        typer.Option(
            "--args",
            "-a",
            help="Tool arguments as a JSON object",
        ),
    ] = None,
    root: Annotated[
        str | None,
        typer.Option(
            "--root",
            help="Filesystem root (overrides settings).",
        ),
    ] = None,
    vault: Annotated[
        str | None,
        typer.Option(
            "--vault",
            help="Obsidian vault path (overrides settings).",
        ),
    ] = None,
) -> None:
    """Run a tool once and print its result envelope as JSON.

    Without --root or --vault the call goes through the enabled settings.
    """
    from toolgate.dispatcher import ToolDispatcher

    tool_args: dict[str, Any] = {}
    if args:
        try:
            tool_args = json.loads(args)
        except json.JSONDecodeError as e:
            print_error(f"Invalid JSON: {e}")
            raise typer.Exit(1)
        if not isinstance(tool_args, dict):
            print_error("--args must be a JSON object")
            raise typer.Exit(1)

    config = _load(ctx)
    dispatcher = ToolDispatcher.from_config(config)
    try:
        if root is not None or vault is not None:
            result = dispatcher.execute_tool(
                tool_name, tool_args, filesystem_root=root, obsidian_root=vault
            )
        else:
            result = dispatcher.execute_with_settings(tool_name, tool_args)
    except UnknownToolError as e:
        print_error(str(e))
        raise typer.Exit(1)
    finally:
        dispatcher.close()

    print_json(result.to_dict())
    if not result.ok:
        raise typer.Exit(1)
