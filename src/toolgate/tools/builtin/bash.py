"""Shell tools: one-shot command execution and the visible persistent terminal."""

import logging

from toolgate.tools.arguments import OpenTerminalArgs, RunCommandArgs
from toolgate.tools.base import Tool, ToolContext
from toolgate.tools.models import Capability, ToolName, ToolParameter, ToolResult, ToolRisk

logger = logging.getLogger(__name__)

TERMINAL_SCOPE = "Local system (opt-in)"


class RunCommandTool(Tool):
    """Execute one shell command and capture its output.

    Commands on the safety blocklist are refused before any process starts.
    A non-zero exit code is reported in the content, not as an error.
    """

    args_model = RunCommandArgs

    @property
    def name(self) -> ToolName:
        return ToolName.RUN_COMMAND

    @property
    def description(self) -> str:
        return (
            "Execute a shell command. Returns stdout and stderr. One command per call. "
            "Use with caution: commands run with your user permissions."
        )

    @property
    def capability(self) -> Capability:
        return Capability.TERMINAL

    @property
    def scope(self) -> str:
        return TERMINAL_SCOPE

    @property
    def risk(self) -> ToolRisk:
        return ToolRisk.HIGH

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="command",
                type="string",
                description="Command to execute (e.g. 'ls -la' or 'dir' on Windows)",
            ),
            ToolParameter(
                name="working_directory",
                type="string",
                description=(
                    "Optional: working directory (absolute path). "
                    "Defaults to user home, not the app folder."
                ),
                required=False,
            ),
        ]

    def execute(self, args: RunCommandArgs, context: ToolContext) -> ToolResult:
        result = context.executor.run(args.command, args.working_directory)
        return ToolResult.success(result.format())


class OpenTerminalTool(Tool):
    """Run a command in a visible terminal, reusing one shared tab by default."""

    args_model = OpenTerminalArgs

    @property
    def name(self) -> ToolName:
        return ToolName.OPEN_TERMINAL_AND_RUN

    @property
    def description(self) -> str:
        return (
            "Open a visible CLI and run a command. By default reuses the same terminal tab; "
            "set new_tab=true for a new tab. Default working directory is user home, "
            "not the app folder. Windows: PowerShell, cmd, or wt."
        )

    @property
    def capability(self) -> Capability:
        return Capability.TERMINAL

    @property
    def scope(self) -> str:
        return TERMINAL_SCOPE

    @property
    def risk(self) -> ToolRisk:
        return ToolRisk.HIGH

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="command", type="string", description="Command to run in the terminal"
            ),
            ToolParameter(
                name="shell",
                type="string",
                description="Shell for a new tab",
                required=False,
                default="powershell",
                enum=["powershell", "cmd", "wt"],
            ),
            ToolParameter(
                name="keep_open",
                type="boolean",
                description="Keep a new PowerShell tab open after the command",
                required=False,
                default=True,
            ),
            ToolParameter(
                name="working_directory",
                type="string",
                description="Optional: working directory. Defaults to user home, not the app folder.",
                required=False,
            ),
            ToolParameter(
                name="new_tab",
                type="boolean",
                description=(
                    "If true, open a new terminal tab/window. "
                    "If false (default), reuse the same terminal."
                ),
                required=False,
                default=False,
            ),
        ]

    def execute(self, args: OpenTerminalArgs, context: ToolContext) -> ToolResult:
        run = context.terminal.run(
            args.command,
            shell=args.shell,
            keep_open=args.keep_open,
            working_directory=args.working_directory,
            new_tab=args.new_tab,
        )
        logger.info(f"open_terminal_and_run via {run.shell_used}")
        return ToolResult.success(run.content, run.steps)
