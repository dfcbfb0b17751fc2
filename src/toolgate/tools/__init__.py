"""Tool catalog for toolgate.

Every capability the agent can invoke is a ``Tool`` with a typed argument
model, a risk label and a scope statement. Tools are gated by capability
flags and dispatched by name through ``toolgate.dispatcher``.
"""

from toolgate.tools.base import Tool, ToolContext
from toolgate.tools.models import (
    Capability,
    DiagnosticLevel,
    DiagnosticStep,
    RootKind,
    ToolDefinition,
    ToolName,
    ToolParameter,
    ToolResult,
    ToolRisk,
)
from toolgate.tools.registry import ToolRegistry, build_default_registry

__all__ = [
    "Capability",
    "DiagnosticLevel",
    "DiagnosticStep",
    "RootKind",
    "Tool",
    "ToolContext",
    "ToolDefinition",
    "ToolName",
    "ToolParameter",
    "ToolRegistry",
    "ToolResult",
    "ToolRisk",
    "build_default_registry",
]
