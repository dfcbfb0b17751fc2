"""Tests for the diagnostics JSON Lines logger."""

import json

from toolgate.audit.logger import DiagnosticEventType, DiagnosticsLogger
from toolgate.config.schema import AuditConfig
from toolgate.tools.models import DiagnosticStep


def read_events(path) -> list[dict]:
    return [json.loads(line) for line in path.read_text().splitlines()]


class TestDiagnosticsLogger:
    """Tests for DiagnosticsLogger."""

    def test_tool_call(self, temp_dir):
        log_path = temp_dir / "logs" / "diag.jsonl"
        logger = DiagnosticsLogger(log_path)

        logger.log_tool_call("read_file", False, "Root not configured", 1.234)

        (event,) = read_events(log_path)
        assert event["event_type"] == DiagnosticEventType.TOOL_CALL.value
        assert event["tool"] == "read_file"
        assert event["ok"] is False
        assert event["error"] == "Root not configured"
        assert event["duration_ms"] == 1.2
        assert "timestamp" in event

    def test_steps(self, temp_dir):
        log_path = temp_dir / "diag.jsonl"
        logger = DiagnosticsLogger(log_path)

        logger.log_steps(
            "web_search",
            [DiagnosticStep.info("Step 1", {"provider": "duckduckgo"}), DiagnosticStep.warn("w")],
        )

        events = read_events(log_path)
        assert [e["level"] for e in events] == ["INFO", "WARN"]
        assert events[0]["meta"] == {"provider": "duckduckgo"}
        assert "meta" not in events[1]

    def test_command_events(self, temp_dir):
        log_path = temp_dir / "diag.jsonl"
        logger = DiagnosticsLogger(log_path)

        logger.log_command_blocked("shutdown", "shutdown")
        logger.log_command_complete("ls", 0)
        logger.log_command_error("sleep 9", "timed out")

        assert [e["event_type"] for e in read_events(log_path)] == [
            "command_blocked",
            "command_complete",
            "command_error",
        ]

    def test_buffering(self, temp_dir):
        log_path = temp_dir / "diag.jsonl"
        logger = DiagnosticsLogger(log_path, buffer_size=3)

        logger.log_command_complete("a", 0)
        logger.log_command_complete("b", 0)
        assert not log_path.exists()

        logger.close()
        assert len(read_events(log_path)) == 2

    def test_disabled(self, temp_dir):
        log_path = temp_dir / "diag.jsonl"
        DiagnosticsLogger(log_path, enable=False).log_command_complete("a", 0)
        assert not log_path.exists()

    def test_rotation(self, temp_dir):
        log_path = temp_dir / "diag.jsonl"
        log_path.write_text("x" * (1024 * 1024 + 10))
        logger = DiagnosticsLogger(log_path, max_size_mb=1)

        logger.log_command_complete("a", 0)

        assert logger.rotated_path.name == "diag.jsonl.old"
        assert logger.rotated_path.exists()
        assert len(read_events(log_path)) == 1

    def test_unwritable_path_does_not_raise(self, temp_dir):
        blocker = temp_dir / "file"
        blocker.write_text("not a dir")
        logger = DiagnosticsLogger(blocker / "diag.jsonl")

        logger.log_command_complete("a", 0)

        assert logger._buffer == []

    def test_from_config_default_path(self, mock_toolgate_home):
        logger = DiagnosticsLogger.from_config(AuditConfig())
        assert logger.log_path == mock_toolgate_home.resolve() / "logs" / "diagnostics.jsonl"

    def test_from_config_explicit_path(self, temp_dir):
        logger = DiagnosticsLogger.from_config(
            AuditConfig(path=str(temp_dir / "x.jsonl"), buffer_size=5)
        )
        assert logger.log_path == (temp_dir / "x.jsonl").resolve()
        assert logger.buffer_size == 5
