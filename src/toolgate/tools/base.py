"""Base classes for tool implementation."""

import webbrowser
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from pydantic import ValidationError

from toolgate.exceptions import InvalidArgumentError, RootNotConfiguredError
from toolgate.tools.arguments import ToolArgs
from toolgate.tools.models import (
    Capability,
    RootKind,
    ToolDefinition,
    ToolName,
    ToolParameter,
    ToolResult,
    ToolRisk,
)

if TYPE_CHECKING:
    import httpx

    from toolgate.config.schema import SearchConfig
    from toolgate.search.orchestrator import WebSearchOrchestrator
    from toolgate.security.sandbox import SandboxExecutor
    from toolgate.security.terminal import PersistentTerminal


@dataclass
class ToolContext:
    """Collaborators a tool call may use.

    Built once by the dispatcher; ``root`` is filled in per call for tools that
    are confined to a filesystem root or vault.
    """

    executor: "SandboxExecutor"
    terminal: "PersistentTerminal"
    search: "WebSearchOrchestrator"
    http_client: "httpx.Client"
    search_config: "SearchConfig"
    browser_opener: Callable[[str], bool] = webbrowser.open
    root: Optional[Path] = None

    def require_root(self) -> Path:
        if self.root is None:
            raise RootNotConfiguredError()
        return self.root


class Tool(ABC):
    """Base class for all tools.

    Each tool defines:
    - Name and description (for the agent to understand when to use it)
    - Capability group, scope statement and risk label
    - Input parameters (JSON schema) and a typed argument model
    - Execution logic
    """

    args_model: type[ToolArgs] = ToolArgs

    def __init__(self) -> None:
        """Initialize the tool."""
        self._validate_definition()

    @property
    @abstractmethod
    def name(self) -> ToolName:
        """Tool name (must be unique)."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Description of what the tool does (for the agent)."""
        pass

    @property
    @abstractmethod
    def capability(self) -> Capability:
        """Capability group whose enable flag gates this tool."""
        pass

    @property
    @abstractmethod
    def scope(self) -> str:
        """Human-readable boundary statement."""
        pass

    @property
    @abstractmethod
    def risk(self) -> ToolRisk:
        pass

    @property
    @abstractmethod
    def parameters(self) -> list[ToolParameter]:
        """List of tool parameters."""
        pass

    @property
    def root_kind(self) -> RootKind | None:
        """Boundary the tool is confined to, if any."""
        return None

    @property
    def is_dangerous(self) -> bool:
        """Whether the tool modifies local state or runs commands."""
        return self.risk in (ToolRisk.WRITE, ToolRisk.HIGH)

    def get_input_schema(self) -> dict[str, Any]:
        """Get JSON schema for tool input.

        Returns:
            JSON schema describing tool parameters
        """
        properties = {}
        required = []

        for param in self.parameters:
            param_schema: dict[str, Any] = {"type": param.type}

            if param.description:
                param_schema["description"] = param.description

            if param.enum:
                param_schema["enum"] = param.enum

            if param.minimum is not None:
                param_schema["minimum"] = param.minimum

            if param.maximum is not None:
                param_schema["maximum"] = param.maximum

            if param.default is not None:
                param_schema["default"] = param.default

            properties[param.name] = param_schema

            if param.required:
                required.append(param.name)

        schema: dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            schema["required"] = required
        schema["additionalProperties"] = False
        return schema

    def get_tool_definition(self) -> ToolDefinition:
        """Catalog entry for the agent's tool menu."""
        return ToolDefinition(
            id=self.capability,
            name=self.name,
            description=self.description,
            scope=self.scope,
            risk=self.risk,
            json_schema=self.get_input_schema(),
        )

    def parse_args(self, raw: dict[str, Any] | None) -> ToolArgs:
        """Validate a raw argument bag into the tool's typed model.

        Raises:
            InvalidArgumentError: Unknown field, wrong type or missing required field
        """
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise InvalidArgumentError("expected a JSON object")
        try:
            return self.args_model.model_validate(raw)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'args'}: {err['msg']}"
                for err in e.errors()
            )
            raise InvalidArgumentError(problems) from e

    @abstractmethod
    def execute(self, args: Any, context: ToolContext) -> ToolResult:
        """Execute the tool with validated arguments.

        Args:
            args: Instance of ``args_model``
            context: Collaborators and the resolved root

        Returns:
            ToolResult with content (and diagnostic steps where the tool has them)

        Raises:
            ToolError: On any failure the dispatcher should turn into an envelope
        """
        pass

    def _validate_definition(self) -> None:
        """Validate tool definition is correct.

        Raises:
            ValueError: If tool definition is invalid
        """
        if not self.description:
            raise ValueError("Tool description cannot be empty")

        param_names = [p.name for p in self.parameters]
        if len(param_names) != len(set(param_names)):
            raise ValueError("Parameter names must be unique")

        if set(param_names) != set(self.args_model.model_fields):
            raise ValueError(f"Parameters of {self.name.value} do not match its argument model")

    def __str__(self) -> str:
        """String representation."""
        return f"Tool({self.name.value})"

    def __repr__(self) -> str:
        """Representation."""
        return f"<Tool name={self.name.value} risk={self.risk.value}>"
