"""
Tool exceptions for toolgate.

Every failure a tool handler can report is one of these. The dispatcher turns
them into result envelopes; only ``UnknownToolError`` escapes to the caller.
"""

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from toolgate.tools.models import DiagnosticStep


class ErrorKind(Enum):
    """Classification of tool failures."""

    PATH_NOT_ALLOWED = "path_not_allowed"
    ROOT_NOT_CONFIGURED = "root_not_configured"
    INVALID_ARG = "invalid_arg"
    UNKNOWN_TOOL = "unknown_tool"
    NETWORK = "network"
    COMMAND_FAILED = "command_failed"
    IO = "io"


class ToolError(Exception):
    """Base exception for tool errors."""

    kind: ErrorKind = ErrorKind.IO
    prefix: str = ""

    def __init__(self, detail: str = "", steps: "list[DiagnosticStep] | None" = None):
        self.detail = detail
        self.steps: list[DiagnosticStep] = list(steps or [])
        super().__init__(self._format())

    def _format(self) -> str:
        if not self.detail:
            return self.prefix
        return f"{self.prefix}: {self.detail}"


class PathNotAllowedError(ToolError):
    """Path escapes the configured root (traversal, absolute, or symlink)."""

    kind = ErrorKind.PATH_NOT_ALLOWED
    prefix = "Path not allowed"


class RootNotConfiguredError(ToolError):
    """Capability is enabled but no root or vault path is set."""

    kind = ErrorKind.ROOT_NOT_CONFIGURED
    prefix = "Root not configured"


class InvalidArgumentError(ToolError):
    """Missing or malformed argument, oversized file, empty command."""

    kind = ErrorKind.INVALID_ARG
    prefix = "Invalid argument"


class UnsupportedPlatformError(InvalidArgumentError):
    """Tool needs an OS facility this host does not have."""


class UnknownToolError(ToolError):
    """No tool is registered under the requested name."""

    kind = ErrorKind.UNKNOWN_TOOL
    prefix = "Tool not found"


class NetworkError(ToolError):
    """Transport failure unrelated to HTTP status."""

    kind = ErrorKind.NETWORK
    prefix = "Network"


class CommandFailedError(ToolError):
    """Process could not be launched, or the command is blocklisted."""

    kind = ErrorKind.COMMAND_FAILED
    prefix = "Command execution failed"


class ToolIOError(ToolError):
    """Local filesystem failure."""

    kind = ErrorKind.IO
    prefix = "IO"
