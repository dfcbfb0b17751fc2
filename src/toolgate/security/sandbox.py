"""
Path sandboxing and one-shot command execution.

Paths supplied by a caller are validated in two phases: a textual check that
rejects parent traversal and absolute paths before touching the filesystem,
then a canonical prefix check that catches symlink escapes. One-shot shell
commands go through the command policy before any process is spawned.
"""

import logging
import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path, PureWindowsPath
from typing import TYPE_CHECKING

from toolgate.exceptions import (
    CommandFailedError,
    InvalidArgumentError,
    PathNotAllowedError,
)
from toolgate.security.policy import CommandPolicy

if TYPE_CHECKING:
    from toolgate.audit.logger import DiagnosticsLogger
    from toolgate.config.schema import TerminalConfig

logger = logging.getLogger(__name__)


def default_working_dir() -> Path:
    """Working directory for shell tools: the user's home, never the app's data dir."""
    try:
        return Path.home()
    except RuntimeError:
        return Path(".")


class PathSandbox:
    """
    Confines caller-supplied relative paths to a root directory.

    The root is canonicalized on every call so that a root which is itself a
    symlink is compared in its resolved form.
    """

    def __init__(self, root: str | Path) -> None:
        """
        Initialize the sandbox.

        Args:
            root: Root directory (filesystem root or vault path)
        """
        self.root = Path(root)

    @staticmethod
    def check_relative_path(requested: str) -> str:
        """
        Normalize and textually validate a relative path.

        Runs on the raw string before any filesystem resolution.

        Args:
            requested: Caller-supplied path

        Returns:
            Path with backslashes normalized to forward slashes

        Raises:
            PathNotAllowedError: If the path contains '..' or is absolute
        """
        trimmed = requested.strip().replace("\\", "/")
        if ".." in trimmed or trimmed.startswith("/"):
            raise PathNotAllowedError("Path must be relative and cannot contain '..'")
        if os.path.isabs(trimmed) or PureWindowsPath(trimmed).drive:
            raise PathNotAllowedError("Path must be relative and cannot contain '..'")
        return trimmed

    def canonical_root(self) -> Path:
        """Resolve the root, which must exist."""
        try:
            return self.root.expanduser().resolve(strict=True)
        except OSError as e:
            raise PathNotAllowedError(f"root invalid: {e}") from e

    def resolve_for_read(self, requested: str) -> Path:
        """
        Resolve an existing path under the root.

        Args:
            requested: Caller-supplied relative path

        Returns:
            Canonical absolute path that is the root or one of its descendants

        Raises:
            PathNotAllowedError: If the path is missing or resolves outside the root
        """
        root = self.canonical_root()
        trimmed = self.check_relative_path(requested)
        try:
            canonical = (root / trimmed).resolve(strict=True)
        except OSError as e:
            raise PathNotAllowedError(f"path invalid or not found: {e}") from e

        if not canonical.is_relative_to(root):
            raise PathNotAllowedError("Resolved path is outside the allowed root")
        return canonical

    def resolve_for_write(self, requested: str) -> Path:
        """
        Resolve a path that may not exist yet.

        An existing leaf is validated like a read. For a new leaf, the nearest
        existing ancestor must resolve under the root; directories below it are
        created later under the joined path, which is already traversal-free.

        Args:
            requested: Caller-supplied relative path

        Returns:
            Absolute path under the canonical root

        Raises:
            PathNotAllowedError: If the path or its existing parent escapes the root
        """
        root = self.canonical_root()
        trimmed = self.check_relative_path(requested)
        full = root / trimmed

        if full.exists() or full.is_symlink():
            try:
                canonical = full.resolve(strict=True)
            except OSError as e:
                raise PathNotAllowedError(f"path invalid: {e}") from e
            if not canonical.is_relative_to(root):
                raise PathNotAllowedError("Resolved path is outside the allowed root")
            return canonical

        ancestor = full.parent
        while not (ancestor.exists() or ancestor.is_symlink()):
            if ancestor == root or ancestor.parent == ancestor:
                break
            ancestor = ancestor.parent

        if ancestor.exists() or ancestor.is_symlink():
            try:
                ancestor_canon = ancestor.resolve(strict=True)
            except OSError as e:
                raise PathNotAllowedError(f"parent path invalid: {e}") from e
            if not ancestor_canon.is_relative_to(root):
                raise PathNotAllowedError("Path is outside the allowed root")

        return full


@dataclass
class ExecutionResult:
    """Result of a one-shot command execution."""

    command: str
    working_directory: Path
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    def format(self) -> str:
        """Render command, directory, exit code and output as one text block."""
        parts = [
            f"Command: {self.command}",
            f"Working directory: {self.working_directory}",
            f"Exit code: {self.exit_code}",
        ]
        if self.stdout:
            parts.append(f"STDOUT:\n{self.stdout}")
        if self.stderr:
            parts.append(f"STDERR:\n{self.stderr}")
        if not self.stdout and not self.stderr:
            parts.append("(No output)")
        return "\n\n".join(parts)


class SandboxExecutor:
    """
    Runs a single shell invocation after the command policy allows it.

    A non-zero exit code is data, not an error; only a blocked command, a
    launch failure or a timeout raise.
    """

    def __init__(
        self,
        policy: CommandPolicy | None = None,
        timeout: float | None = 120,
        audit_logger: "DiagnosticsLogger | None" = None,
    ) -> None:
        """
        Initialize sandbox executor.

        Args:
            policy: Command safety policy
            timeout: Seconds before the process is killed (None waits forever)
            audit_logger: Diagnostics sink for command events
        """
        self.policy = policy or CommandPolicy()
        self.timeout = timeout
        self.audit_logger = audit_logger

    @classmethod
    def from_config(
        cls, config: "TerminalConfig", audit_logger: "DiagnosticsLogger | None" = None
    ) -> "SandboxExecutor":
        """
        Create sandbox executor from configuration.

        Args:
            config: Terminal configuration
            audit_logger: Optional diagnostics sink

        Returns:
            Configured SandboxExecutor instance
        """
        return cls(CommandPolicy(), config.command_timeout, audit_logger)

    @staticmethod
    def shell_argv(command: str) -> list[str]:
        """Platform command interpreter invocation for a command string."""
        if sys.platform == "win32":
            return ["cmd", "/C", command]
        return ["sh", "-c", command]

    @staticmethod
    def resolve_working_dir(working_directory: str | None) -> Path:
        """
        Resolve an explicit working directory or fall back to the home dir.

        Raises:
            InvalidArgumentError: If the explicit directory is missing or a file
        """
        if working_directory is None or not working_directory.strip():
            return default_working_dir()
        path = Path(working_directory.strip()).expanduser()
        if not path.exists():
            raise InvalidArgumentError(f"Working directory does not exist: {working_directory}")
        if not path.is_dir():
            raise InvalidArgumentError(
                f"Working directory is not a directory: {working_directory}"
            )
        return path

    def run(self, command: str, working_directory: str | None = None) -> ExecutionResult:
        """
        Execute a command through the platform shell.

        Args:
            command: Shell command to execute
            working_directory: Optional directory (default: user home)

        Returns:
            ExecutionResult with captured output and exit code

        Raises:
            InvalidArgumentError: Empty command or bad working directory
            CommandFailedError: Blocked command, launch failure or timeout
        """
        command = command.strip()
        if not command:
            raise InvalidArgumentError("command cannot be empty")

        check = self.policy.check_command(command)
        if not check.allowed:
            logger.warning(f"Blocked command (pattern {check.matched_rule!r}): {command[:100]}")
            if self.audit_logger:
                self.audit_logger.log_command_blocked(command, check.matched_rule or "")
            raise CommandFailedError(check.reason or "Command blocked")

        cwd = self.resolve_working_dir(working_directory)
        logger.info(f"Running command in {cwd}: {command[:100]}")

        try:
            proc = subprocess.run(
                self.shell_argv(command),
                cwd=cwd,
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            if self.audit_logger:
                self.audit_logger.log_command_error(command, f"timed out after {self.timeout}s")
            raise CommandFailedError(f"Command timed out after {self.timeout} seconds") from e
        except OSError as e:
            if self.audit_logger:
                self.audit_logger.log_command_error(command, str(e))
            raise CommandFailedError(f"Failed to execute command: {e}") from e

        result = ExecutionResult(
            command=command,
            working_directory=cwd,
            exit_code=proc.returncode,
            stdout=proc.stdout.decode("utf-8", errors="replace"),
            stderr=proc.stderr.decode("utf-8", errors="replace"),
        )
        if self.audit_logger:
            self.audit_logger.log_command_complete(command, result.exit_code)
        return result
