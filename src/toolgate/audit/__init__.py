"""
Diagnostics logging for toolgate.

Persists tool calls, command events and diagnostic steps as JSON Lines.
"""

from toolgate.audit.logger import DiagnosticEventType, DiagnosticsLogger

__all__ = ["DiagnosticEventType", "DiagnosticsLogger"]
