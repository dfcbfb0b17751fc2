"""
Security layer for toolgate.

Path sandboxing, the command safety policy, one-shot execution and the
persistent terminal session.
"""

from toolgate.security.policy import BLOCKED_COMMAND_PATTERNS, CommandCheck, CommandPolicy
from toolgate.security.sandbox import (
    ExecutionResult,
    PathSandbox,
    SandboxExecutor,
    default_working_dir,
)
from toolgate.security.terminal import (
    ConsoleHost,
    PersistentTerminal,
    ShellKind,
    TerminalRun,
    WindowsConsoleHost,
    detect_console_host,
)

__all__ = [
    "BLOCKED_COMMAND_PATTERNS",
    "CommandCheck",
    "CommandPolicy",
    "ConsoleHost",
    "ExecutionResult",
    "PathSandbox",
    "PersistentTerminal",
    "SandboxExecutor",
    "ShellKind",
    "TerminalRun",
    "WindowsConsoleHost",
    "default_working_dir",
    "detect_console_host",
]
