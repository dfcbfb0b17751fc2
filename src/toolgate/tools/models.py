"""Data models for the tool catalog and the result envelope."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Capability(str, Enum):
    """Capability group a tool belongs to (one enable flag per group)."""

    FILESYSTEM = "filesystem"
    OBSIDIAN = "obsidian"
    WEB_SEARCH = "web_search"
    WEB = "web"
    BROWSER = "browser"
    TERMINAL = "terminal"


class ToolRisk(str, Enum):
    """Risk label shown next to a tool in the agent's menu."""

    READ_ONLY = "read_only"
    WRITE = "write"
    NETWORK = "network"
    LOW = "low"
    HIGH = "high"


class ToolName(str, Enum):
    """Closed set of tools the dispatcher knows about."""

    READ_FILE = "read_file"
    WRITE_FILE = "write_file"
    LIST_DIR = "list_dir"
    OBSIDIAN_READ_NOTE = "obsidian_read_note"
    OBSIDIAN_WRITE_NOTE = "obsidian_write_note"
    OBSIDIAN_LIST_NOTES = "obsidian_list_notes"
    WEB_SEARCH = "web_search"
    FETCH_URL = "fetch_url"
    RUN_COMMAND = "run_command"
    OPEN_TERMINAL_AND_RUN = "open_terminal_and_run"
    OPEN_BROWSER_SEARCH = "open_browser_search"


class ShellKind(str, Enum):
    """Console-hosting shells selectable for open_terminal_and_run."""

    POWERSHELL = "powershell"
    CMD = "cmd"
    WT = "wt"


class SearchEngine(str, Enum):
    """Search providers for open_browser_search."""

    DUCKDUCKGO = "duckduckgo"
    BING = "bing"
    GOOGLE = "google"


class RootKind(str, Enum):
    """Which configured boundary a tool is confined to."""

    FILESYSTEM = "filesystem"
    OBSIDIAN = "obsidian"


class ToolParameter(BaseModel):
    """Defines a parameter for a tool."""

    name: str
    type: str  # "string", "integer", "boolean"
    description: str
    required: bool = True
    default: Optional[Any] = None
    enum: Optional[list[str]] = None
    minimum: Optional[int] = None
    maximum: Optional[int] = None


class ToolDefinition(BaseModel):
    """Immutable catalog entry handed to the agent's tool menu."""

    model_config = ConfigDict(frozen=True)

    id: Capability
    name: ToolName
    description: str
    scope: str
    risk: ToolRisk
    json_schema: Optional[dict[str, Any]] = None


class DiagnosticLevel(str, Enum):
    """Severity of a diagnostic step."""

    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class DiagnosticStep(BaseModel):
    """One operator-facing trace entry, independent of the tool's answer."""

    level: DiagnosticLevel
    message: str
    meta: Optional[dict[str, Any]] = None

    @classmethod
    def info(cls, message: str, meta: dict[str, Any] | None = None) -> "DiagnosticStep":
        return cls(level=DiagnosticLevel.INFO, message=message, meta=meta)

    @classmethod
    def warn(cls, message: str, meta: dict[str, Any] | None = None) -> "DiagnosticStep":
        return cls(level=DiagnosticLevel.WARN, message=message, meta=meta)

    @classmethod
    def error(cls, message: str, meta: dict[str, Any] | None = None) -> "DiagnosticStep":
        return cls(level=DiagnosticLevel.ERROR, message=message, meta=meta)


class ToolResult(BaseModel):
    """Uniform result envelope returned for every dispatched call.

    ``ok`` is false exactly when ``error`` is set. ``content`` is empty on
    failure except for web search, whose JSON body is itself the content.
    """

    ok: bool
    content: str = ""
    error: Optional[str] = None
    diagnostic_steps: Optional[list[DiagnosticStep]] = None

    @model_validator(mode="after")
    def _check_error_matches_ok(self) -> "ToolResult":
        if self.ok == (self.error is not None):
            raise ValueError("ok must be false exactly when error is set")
        return self

    @classmethod
    def success(
        cls, content: str, steps: list[DiagnosticStep] | None = None
    ) -> "ToolResult":
        return cls(ok=True, content=content, diagnostic_steps=steps)

    @classmethod
    def failure(
        cls,
        error: str,
        content: str = "",
        steps: list[DiagnosticStep] | None = None,
    ) -> "ToolResult":
        return cls(ok=False, content=content, error=error, diagnostic_steps=steps or None)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the host, omitting absent optional fields."""
        return self.model_dump(mode="json", exclude_none=True)

    def __str__(self) -> str:
        """String representation."""
        if not self.ok:
            return f"Error: {self.error}"
        return self.content[:200] + ("..." if len(self.content) > 200 else "")
