"""CLI command modules."""

from toolgate.cli.commands import config, tools

__all__ = ["config", "tools"]
