"""Tool registry: the static catalog of tools and its enabled view."""

import logging
from typing import TYPE_CHECKING, Optional

from toolgate.exceptions import UnknownToolError
from toolgate.tools.base import Tool
from toolgate.tools.models import Capability, ToolDefinition, ToolName

if TYPE_CHECKING:
    from toolgate.config.schema import ToolSettings

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Registry for managing available tools.

    Tools are kept in registration order, which is the order the agent sees
    them in its menu.
    """

    def __init__(self) -> None:
        """Initialize the tool registry."""
        self._tools: dict[ToolName, Tool] = {}

    def register(self, tool: Tool) -> None:
        """Register a tool.

        Args:
            tool: Tool instance to register

        Raises:
            ValueError: If tool name already registered
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name.value}' is already registered")

        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name.value}")

    def get(self, name: str | ToolName) -> Optional[Tool]:
        """Get a tool by name, or None if not registered."""
        try:
            key = ToolName(name)
        except ValueError:
            return None
        return self._tools.get(key)

    def require(self, name: str | ToolName) -> Tool:
        """Get a tool by name.

        Raises:
            UnknownToolError: If no tool has that name
        """
        tool = self.get(name)
        if tool is None:
            raise UnknownToolError(str(getattr(name, "value", name)))
        return tool

    def list_tools(self) -> list[Tool]:
        return list(self._tools.values())

    def all_tool_definitions(self) -> list[ToolDefinition]:
        """Every tool definition, regardless of settings."""
        return [tool.get_tool_definition() for tool in self._tools.values()]

    def enabled_tool_definitions(self, settings: "ToolSettings") -> list[ToolDefinition]:
        """
        Definitions whose capability group is enabled and, for root-bound
        groups, has a root or vault (a blank filesystem root means home).

        This is advisory for the agent's menu; the dispatcher enforces roots.
        """
        enabled: set[Capability] = set()
        if settings.effective_filesystem_root():
            enabled.add(Capability.FILESYSTEM)
        if settings.effective_obsidian_vault():
            enabled.add(Capability.OBSIDIAN)
        if settings.web_search_enabled:
            enabled.update({Capability.WEB_SEARCH, Capability.WEB, Capability.BROWSER})
        if settings.terminal_enabled:
            enabled.add(Capability.TERMINAL)

        return [
            tool.get_tool_definition()
            for tool in self._tools.values()
            if tool.capability in enabled
        ]

    def __len__(self) -> int:
        """Get number of registered tools."""
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        """Check if tool is registered."""
        if not isinstance(name, str):
            return False
        return self.get(name) is not None

    def __repr__(self) -> str:
        """Representation."""
        tools = ", ".join(name.value for name in self._tools)
        return f"<ToolRegistry tools=[{tools}]>"


def build_default_registry() -> ToolRegistry:
    """Registry holding the full built-in catalog."""
    from toolgate.tools.builtin import register_builtin_tools

    registry = ToolRegistry()
    register_builtin_tools(registry)

    missing = [name.value for name in ToolName if name not in registry]
    if missing:
        raise RuntimeError(f"No tool registered for: {', '.join(missing)}")
    return registry
