"""Built-in tools for toolgate.

- Read, write and list files under the filesystem root
- Read, write and list notes in the Obsidian vault
- Search the web and fetch pages
- Run shell commands, one-shot or in a visible terminal
- Open the browser at a URL or search page
"""

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
from toolgate.tools.builtin.registry_utils import register_builtin_tools
from toolgate.tools.builtin.search import WebSearchTool

__all__ = [
    "FetchUrlTool",
    "ListDirTool",
    "ObsidianListNotesTool",
    "ObsidianReadNoteTool",
    "ObsidianWriteNoteTool",
    "OpenBrowserSearchTool",
    "OpenTerminalTool",
    "ReadFileTool",
    "RunCommandTool",
    "WebSearchTool",
    "WriteFileTool",
    "register_builtin_tools",
]
