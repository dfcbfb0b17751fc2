"""
Typed argument models, one per tool.

Unknown fields are rejected. Numeric limits are clamped by the handlers rather
than rejected here, so the models only enforce type and sign.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, NonNegativeInt, field_validator

from toolgate.tools.models import SearchEngine, ShellKind


def _lowercase(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


class ToolArgs(BaseModel):
    """Base for tool arguments."""

    model_config = ConfigDict(extra="forbid")


class ReadFileArgs(ToolArgs):
    path: str
    head: Optional[NonNegativeInt] = None
    tail: Optional[NonNegativeInt] = None


class ReadNoteArgs(ToolArgs):
    path: str


class WriteFileArgs(ToolArgs):
    path: str
    content: str


class ListDirArgs(ToolArgs):
    path: str = "."
    depth: Optional[NonNegativeInt] = None


class WebSearchArgs(ToolArgs):
    query: str
    max_results: Optional[int] = None
    include_page_excerpts: bool = True


class FetchUrlArgs(ToolArgs):
    url: str
    max_chars: Optional[NonNegativeInt] = None


class RunCommandArgs(ToolArgs):
    command: str
    working_directory: Optional[str] = None


class OpenTerminalArgs(ToolArgs):
    command: str
    shell: ShellKind = ShellKind.POWERSHELL
    keep_open: bool = True
    working_directory: Optional[str] = None
    new_tab: bool = False

    @field_validator("shell", mode="before")
    @classmethod
    def _normalize_shell(cls, value: Any) -> Any:
        return _lowercase(value)


class OpenBrowserSearchArgs(ToolArgs):
    url: Optional[str] = None
    query: Optional[str] = None
    engine: SearchEngine = SearchEngine.DUCKDUCKGO

    @field_validator("engine", mode="before")
    @classmethod
    def _normalize_engine(cls, value: Any) -> Any:
        return _lowercase(value)
