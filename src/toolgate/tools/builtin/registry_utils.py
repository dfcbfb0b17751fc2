"""Utility functions for tool registry setup."""

import logging

from toolgate.tools.builtin.bash import OpenTerminalTool, RunCommandTool
from toolgate.tools.builtin.file import (
    ListDirTool,
    ObsidianListNotesTool,
    ObsidianReadNoteTool,
    ObsidianWriteNoteTool,
    ReadFileTool,
    WriteFileTool,
)
from toolgate.tools.builtin.http import FetchUrlTool, OpenBrowserSearchTool
from toolgate.tools.builtin.search import WebSearchTool
from toolgate.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


def register_builtin_tools(registry: ToolRegistry) -> None:
    """Register all built-in tools in catalog order.

    Args:
        registry: ToolRegistry to register tools in
    """
    # Filesystem
    registry.register(ReadFileTool())
    registry.register(WriteFileTool())
    registry.register(ListDirTool())

    # Vault
    registry.register(ObsidianReadNoteTool())
    registry.register(ObsidianWriteNoteTool())
    registry.register(ObsidianListNotesTool())

    # Web
    registry.register(WebSearchTool())
    registry.register(FetchUrlTool())

    # Terminal
    registry.register(RunCommandTool())
    registry.register(OpenTerminalTool())

    # Browser
    registry.register(OpenBrowserSearchTool())

    logger.debug(f"Registered {len(registry)} built-in tools")
