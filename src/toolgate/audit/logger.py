"""
Diagnostics logging for tool execution.

This module provides a JSON Lines sink for the operator-facing trail: every
dispatched tool call, every diagnostic step a handler emitted, and command
execution events. Writing is fire-and-forget; a failing sink is reported through
``logging`` and never reaches the tool result.
"""

import json
import logging
import threading
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from toolgate.storage.paths import expand_path, get_diagnostics_log_path

if TYPE_CHECKING:
    from toolgate.config.schema import AuditConfig
    from toolgate.tools.models import DiagnosticStep

logger = logging.getLogger(__name__)


class DiagnosticEventType(str, Enum):
    """Types of diagnostic events."""

    TOOL_CALL = "tool_call"
    DIAGNOSTIC_STEP = "diagnostic_step"

    COMMAND_COMPLETE = "command_complete"
    COMMAND_BLOCKED = "command_blocked"
    COMMAND_ERROR = "command_error"


class DiagnosticsLogger:
    """
    JSON Lines based diagnostics logger.

    Rotates by size: when the file reaches ``max_size_mb`` it is renamed to
    ``<name>.old`` (replacing any previous one) and a fresh file is started.
    """

    def __init__(
        self,
        log_path: str | Path,
        enable: bool = True,
        max_size_mb: int = 10,
        buffer_size: int = 1,
    ) -> None:
        """
        Initialize diagnostics logger.

        Args:
            log_path: Path to the JSON Lines file
            enable: Whether logging is enabled
            max_size_mb: Maximum file size in MB before rotation
            buffer_size: Number of events to buffer before flush
        """
        self.log_path = Path(log_path).expanduser()
        self.enable = enable
        self.max_size_mb = max_size_mb
        self.buffer_size = buffer_size

        self._buffer: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: "AuditConfig") -> "DiagnosticsLogger":
        """Create a diagnostics logger from the ``audit`` config section."""
        log_path = expand_path(config.path) if config.path.strip() else get_diagnostics_log_path()
        return cls(
            log_path=log_path,
            enable=config.enable,
            max_size_mb=config.max_size_mb,
            buffer_size=config.buffer_size,
        )

    @property
    def rotated_path(self) -> Path:
        return self.log_path.with_name(self.log_path.name + ".old")

    def _create_event(
        self, event_type: DiagnosticEventType, data: dict[str, Any]
    ) -> dict[str, Any]:
        return {
            "timestamp": datetime.now().isoformat(),
            "event_type": event_type.value,
            **data,
        }

    def _write_event(self, event: dict[str, Any]) -> None:
        if not self.enable:
            return

        with self._lock:
            self._buffer.append(event)
            if len(self._buffer) >= self.buffer_size:
                self._flush_locked()

    def flush(self) -> None:
        """Flush buffered events to disk."""
        with self._lock:
            self._flush_locked()

    def _flush_locked(self) -> None:
        if not self.enable or not self._buffer:
            return

        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            self._rotate_if_needed()
            with self.log_path.open("a", encoding="utf-8") as f:
                for event in self._buffer:
                    f.write(json.dumps(event, default=str) + "\n")
        except OSError as e:
            logger.warning(f"Failed to write diagnostics to {self.log_path}: {e}")
        finally:
            self._buffer.clear()

    def _rotate_if_needed(self) -> None:
        if not self.log_path.exists():
            return

        size_mb = self.log_path.stat().st_size / (1024 * 1024)
        if size_mb >= self.max_size_mb:
            self.log_path.replace(self.rotated_path)

    # Convenience methods for logging specific events

    def log_tool_call(
        self,
        tool: str,
        ok: bool,
        error: str | None = None,
        duration_ms: float | None = None,
    ) -> None:
        """Log the outcome of one dispatched tool call."""
        data: dict[str, Any] = {"tool": tool, "ok": ok}
        if error is not None:
            data["error"] = error
        if duration_ms is not None:
            data["duration_ms"] = round(duration_ms, 1)
        self._write_event(self._create_event(DiagnosticEventType.TOOL_CALL, data))

    def log_step(self, tool: str, step: "DiagnosticStep") -> None:
        """Log one diagnostic step emitted by a tool handler."""
        data: dict[str, Any] = {
            "tool": tool,
            "level": step.level.value,
            "message": step.message,
        }
        if step.meta is not None:
            data["meta"] = step.meta
        self._write_event(self._create_event(DiagnosticEventType.DIAGNOSTIC_STEP, data))

    def log_steps(self, tool: str, steps: "list[DiagnosticStep]") -> None:
        for step in steps:
            self.log_step(tool, step)

    def log_command_complete(self, command: str, exit_code: int) -> None:
        """Log a completed command execution."""
        event = self._create_event(
            DiagnosticEventType.COMMAND_COMPLETE,
            {"command": command, "exit_code": exit_code},
        )
        self._write_event(event)

    def log_command_blocked(self, command: str, reason: str) -> None:
        """Log a blocked command."""
        event = self._create_event(
            DiagnosticEventType.COMMAND_BLOCKED,
            {"command": command, "reason": reason},
        )
        self._write_event(event)

    def log_command_error(self, command: str, error: str) -> None:
        """Log a command execution error."""
        event = self._create_event(
            DiagnosticEventType.COMMAND_ERROR,
            {"command": command, "error": error},
        )
        self._write_event(event)

    def close(self) -> None:
        """Flush remaining events."""
        self.flush()
