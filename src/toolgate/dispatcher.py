"""
Tool dispatcher: the single entry point for tool calls.

``execute_tool`` maps a tool name and a JSON argument bag to a handler and
always returns a ``ToolResult`` envelope. The only exception it lets through
is ``UnknownToolError`` for a name outside the catalog.
"""

import logging
import time
from dataclasses import replace
from pathlib import Path
from typing import Any

from toolgate.audit.logger import DiagnosticsLogger
from toolgate.config.schema import Config, ToolSettings
from toolgate.exceptions import (
    InvalidArgumentError,
    RootNotConfiguredError,
    ToolError,
    ToolIOError,
)
from toolgate.search.orchestrator import WebSearchOrchestrator
from toolgate.security.sandbox import SandboxExecutor
from toolgate.security.terminal import ConsoleHost, PersistentTerminal, detect_console_host
from toolgate.tools.base import Tool, ToolContext
from toolgate.tools.models import Capability, RootKind, ToolResult
from toolgate.tools.registry import ToolRegistry, build_default_registry

logger = logging.getLogger(__name__)


def _capability_enabled(settings: ToolSettings, capability: Capability) -> bool:
    if capability is Capability.FILESYSTEM:
        return settings.filesystem_enabled
    if capability is Capability.OBSIDIAN:
        return settings.obsidian_enabled
    if capability in (Capability.WEB_SEARCH, Capability.WEB, Capability.BROWSER):
        return settings.web_search_enabled
    return settings.terminal_enabled


class ToolDispatcher:
    """
    Owns the long-lived collaborators (persistent terminal, HTTP client) and
    routes each call to its tool.

    Safe to call from several threads; the only shared mutable state is the
    terminal session, which guards itself.
    """

    def __init__(
        self,
        context: ToolContext,
        registry: ToolRegistry | None = None,
        settings: ToolSettings | None = None,
        diagnostics: DiagnosticsLogger | None = None,
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            context: Collaborators shared by all calls
            registry: Tool catalog (default: all built-in tools)
            settings: Capability flags and roots for ``execute_with_settings``
            diagnostics: Sink for tool calls and diagnostic steps
        """
        self.context = context
        self.registry = registry or build_default_registry()
        self.settings = settings or ToolSettings()
        self.diagnostics = diagnostics

    @classmethod
    def from_config(
        cls,
        config: Config,
        diagnostics: DiagnosticsLogger | None = None,
        console_host: ConsoleHost | None = None,
    ) -> "ToolDispatcher":
        """
        Build a dispatcher and its collaborators from configuration.

        The console host is detected once here unless one is supplied.
        """
        if diagnostics is None and config.audit.enable:
            diagnostics = DiagnosticsLogger.from_config(config.audit)

        search = WebSearchOrchestrator.from_config(config.search)
        context = ToolContext(
            executor=SandboxExecutor.from_config(config.terminal, diagnostics),
            terminal=PersistentTerminal(console_host or detect_console_host()),
            search=search,
            http_client=search.client,
            search_config=config.search,
        )
        return cls(context, settings=config.tools, diagnostics=diagnostics)

    def execute_tool(
        self,
        name: str,
        args: dict[str, Any] | None,
        filesystem_root: str | None = None,
        obsidian_root: str | None = None,
    ) -> ToolResult:
        """
        Execute a tool call.

        Args:
            name: Tool name
            args: JSON argument bag
            filesystem_root: Root for filesystem tools
            obsidian_root: Vault path for note tools

        Returns:
            ToolResult envelope; ``ok`` is false on any tool failure

        Raises:
            UnknownToolError: If no tool has that name
        """
        tool = self.registry.require(name)
        start = time.perf_counter()

        try:
            parsed = tool.parse_args(args)
            root = self._resolve_root(tool, filesystem_root, obsidian_root)
            result = tool.execute(parsed, replace(self.context, root=root))
        except ToolError as e:
            logger.warning(f"Tool {tool.name.value} failed: {e}")
            result = ToolResult.failure(str(e), steps=e.steps)
        except Exception as e:
            logger.error(f"Unexpected error in tool {tool.name.value}: {e}", exc_info=True)
            result = ToolResult.failure(str(ToolIOError(str(e))))

        self._emit(tool, result, (time.perf_counter() - start) * 1000)
        return result

    def execute_with_settings(
        self,
        name: str,
        args: dict[str, Any] | None,
        settings: ToolSettings | None = None,
    ) -> ToolResult:
        """
        Execute a tool call with roots taken from settings.

        Calls to a tool whose capability group is disabled fail with an
        invalid-argument envelope.
        """
        settings = settings or self.settings
        tool = self.registry.require(name)
        if not _capability_enabled(settings, tool.capability):
            error = InvalidArgumentError(f"{tool.name.value} is disabled in settings")
            result = ToolResult.failure(str(error))
            self._emit(tool, result, 0.0)
            return result

        return self.execute_tool(
            name,
            args,
            filesystem_root=settings.effective_filesystem_root(),
            obsidian_root=settings.effective_obsidian_vault(),
        )

    @staticmethod
    def _resolve_root(
        tool: Tool, filesystem_root: str | None, obsidian_root: str | None
    ) -> Path | None:
        if tool.root_kind is None:
            return None
        raw = filesystem_root if tool.root_kind is RootKind.FILESYSTEM else obsidian_root
        if raw is None or not raw.strip():
            raise RootNotConfiguredError()
        return Path(raw.strip())

    def _emit(self, tool: Tool, result: ToolResult, duration_ms: float) -> None:
        """Hand the call outcome and its steps to the diagnostics sink."""
        if self.diagnostics is None:
            return
        try:
            self.diagnostics.log_tool_call(tool.name.value, result.ok, result.error, duration_ms)
            self.diagnostics.log_steps(tool.name.value, result.diagnostic_steps or [])
        except Exception as e:
            logger.warning(f"Diagnostics sink failed for {tool.name.value}: {e}")

    def close(self) -> None:
        """Flush diagnostics, end the terminal session and close the HTTP client."""
        if self.diagnostics is not None:
            self.diagnostics.close()
        self.context.terminal.close()
        self.context.http_client.close()
