"""
Persistent terminal session for toolgate.

Holds at most one long-lived, visible shell whose input pipe receives the
commands of successive ``open_terminal_and_run`` calls, so that a ``cd`` in one
call still applies to the next. The session is owned by whoever builds the
dispatcher and injected into the terminal tool.

Two independent locks guard the state: one for the (process, pipe) pair and
one for the last working directory. Neither is held while a process is spawned.
"""

import logging
import subprocess
import sys
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO

from toolgate.exceptions import (
    CommandFailedError,
    InvalidArgumentError,
    UnsupportedPlatformError,
)
from toolgate.security.policy import CommandPolicy
from toolgate.security.sandbox import default_working_dir
from toolgate.tools.models import DiagnosticStep, ShellKind

logger = logging.getLogger(__name__)


class ConsoleHost(ABC):
    """Launches visible console windows on an OS that has them."""

    newline = "\r\n"

    @abstractmethod
    def spawn_persistent(self) -> subprocess.Popen:
        """Start the shared shell with a piped stdin."""

    @abstractmethod
    def spawn_window(self, argv: list[str], cwd: str | None = None) -> subprocess.Popen:
        """Start an independent visible window running ``argv``."""

    def translate(self, command: str) -> str:
        """Adapt a POSIX-style command chain to the persistent shell's syntax."""
        return command.replace(" && ", "; ")

    def change_directory(self, working_directory: str) -> str:
        """Shell line that moves the persistent shell into a directory."""
        escaped = working_directory.replace("'", "''")
        return f"Set-Location '{escaped}'"


class WindowsConsoleHost(ConsoleHost):
    """PowerShell / cmd / Windows Terminal in a new console window."""

    CREATE_NEW_CONSOLE = getattr(subprocess, "CREATE_NEW_CONSOLE", 0x10)

    def spawn_persistent(self) -> subprocess.Popen:
        return subprocess.Popen(
            ["powershell", "-NoExit"],
            stdin=subprocess.PIPE,
            creationflags=self.CREATE_NEW_CONSOLE,
        )

    def spawn_window(self, argv: list[str], cwd: str | None = None) -> subprocess.Popen:
        return subprocess.Popen(argv, cwd=cwd, creationflags=self.CREATE_NEW_CONSOLE)


def detect_console_host() -> ConsoleHost | None:
    """Resolve the visible console host once at startup; None where there is none."""
    if sys.platform == "win32":
        return WindowsConsoleHost()
    return None


@dataclass
class TerminalSession:
    """The shared shell process and the write end of its input pipe."""

    process: subprocess.Popen
    stdin: IO[bytes]

    def is_alive(self) -> bool:
        """Non-blocking liveness check."""
        return self.process.poll() is None

    def send(self, text: str) -> None:
        self.stdin.write(text.encode("utf-8"))
        self.stdin.flush()


@dataclass
class TerminalRun:
    """Outcome of one ``open_terminal_and_run`` call."""

    content: str
    shell_used: str
    steps: list[DiagnosticStep] = field(default_factory=list)


class PersistentTerminal:
    """
    Single shared visible terminal, created lazily and recreated when it dies.

    State machine: no session -> first call (new_tab=False) creates one; later
    calls reuse it while its process is alive, writing only the command so the
    shell's own current directory persists. new_tab=True always opens a
    detached window that is never stored.
    """

    def __init__(
        self,
        host: ConsoleHost | None,
        policy: CommandPolicy | None = None,
    ) -> None:
        """
        Initialize the terminal manager.

        Args:
            host: Console host, or None when the platform has no visible console
            policy: Command safety policy
        """
        self.host = host
        self.policy = policy or CommandPolicy()
        self._session: TerminalSession | None = None
        self._session_lock = threading.Lock()
        self._last_working_dir = ""
        self._wd_lock = threading.Lock()

    @property
    def supported(self) -> bool:
        return self.host is not None

    @property
    def has_session(self) -> bool:
        with self._session_lock:
            return self._session is not None

    @property
    def last_working_dir(self) -> str:
        with self._wd_lock:
            return self._last_working_dir

    def run(
        self,
        command: str,
        shell: ShellKind = ShellKind.POWERSHELL,
        keep_open: bool = True,
        working_directory: str | None = None,
        new_tab: bool = False,
    ) -> TerminalRun:
        """
        Run a command in a visible terminal.

        Args:
            command: Command to run
            shell: Shell for a new tab (the shared session is always PowerShell)
            keep_open: Keep a new PowerShell tab open after the command
            working_directory: Directory for a new session or tab
            new_tab: Open an independent window instead of the shared one

        Returns:
            TerminalRun with a confirmation message and the diagnostic trail

        Raises:
            CommandFailedError: Blocked command or spawn/write failure
            InvalidArgumentError: Empty command
            UnsupportedPlatformError: No visible console on this OS
        """
        steps: list[DiagnosticStep] = []

        check = self.policy.check_command(command)
        if not check.allowed:
            steps.append(
                DiagnosticStep.error(
                    "open_terminal_and_run: command blocked by safety policy",
                    {"pattern": check.matched_rule},
                )
            )
            raise CommandFailedError(check.reason or "Command blocked", steps=steps)

        steps.append(
            DiagnosticStep.info(
                "open_terminal_and_run: validating arguments",
                {
                    "shell": shell.value,
                    "keep_open": keep_open,
                    "new_tab": new_tab,
                    "working_directory": working_directory,
                },
            )
        )

        command = command.strip()
        if not command:
            steps.append(DiagnosticStep.error("open_terminal_and_run: command cannot be empty"))
            raise InvalidArgumentError("command cannot be empty", steps=steps)

        host = self.host
        if host is None:
            steps.append(
                DiagnosticStep.warn("open_terminal_and_run: Windows-only; use run_command on this OS")
            )
            raise UnsupportedPlatformError(
                "open_terminal_and_run is only supported on Windows. "
                f"Use run_command for: {command}",
                steps=steps,
            )

        explicit_wd = working_directory.strip() if working_directory else ""
        wd = explicit_wd or self.last_working_dir or str(default_working_dir())

        if new_tab:
            return self._open_new_tab(host, shell, command, keep_open, wd, steps)

        reused = self._send_to_existing(host, command, explicit_wd, steps)
        if reused is not None:
            return reused

        return self._start_session(host, command, wd, steps)

    def _send_to_existing(
        self, host: ConsoleHost, command: str, explicit_wd: str, steps: list[DiagnosticStep]
    ) -> TerminalRun | None:
        translated = host.translate(command)

        with self._session_lock:
            session = self._session
            if session is None:
                return None
            if not session.is_alive():
                self._session = None
                steps.append(DiagnosticStep.info("Previous terminal has exited; starting a new one."))
                return None
            try:
                session.send(translated + host.newline)
            except OSError as e:
                self._session = None
                steps.append(
                    DiagnosticStep.warn(f"Write to existing terminal failed ({e}); starting a new one.")
                )
                return None

        if explicit_wd:
            steps.append(
                DiagnosticStep.warn(
                    "working_directory ignored: the shared terminal keeps its own current directory.",
                    {"working_directory": explicit_wd},
                )
            )
        steps.append(
            DiagnosticStep.info(
                "Reused existing terminal; command sent (no Set-Location).",
                {"command": translated},
            )
        )
        return TerminalRun(
            content=f"Ran in existing terminal (PowerShell).\nCommand: {translated}",
            shell_used=ShellKind.POWERSHELL.value,
            steps=steps,
        )

    def _start_session(
        self, host: ConsoleHost, command: str, wd: str, steps: list[DiagnosticStep]
    ) -> TerminalRun:
        steps.append(DiagnosticStep.info("Step: starting persistent PowerShell (reuse same tab)"))
        try:
            process = host.spawn_persistent()
        except OSError as e:
            steps.append(DiagnosticStep.error(f"powershell spawn failed: {e}"))
            raise CommandFailedError(f"powershell spawn failed: {e}", steps=steps) from e

        if process.stdin is None:
            process.terminate()
            steps.append(DiagnosticStep.error("could not take stdin of the new terminal"))
            raise CommandFailedError("could not take stdin", steps=steps)

        session = TerminalSession(process=process, stdin=process.stdin)
        translated = host.translate(command)
        setup = host.change_directory(wd) + host.newline + translated + host.newline
        try:
            joined = self._claim_session(session, setup, translated + host.newline)
        except OSError as e:
            process.terminate()
            steps.append(DiagnosticStep.error(f"write to terminal failed: {e}"))
            raise CommandFailedError(f"write to terminal failed: {e}", steps=steps) from e

        if joined:
            process.terminate()
            steps.append(
                DiagnosticStep.info(
                    "A concurrent call started the terminal first; command sent there.",
                    {"command": translated},
                )
            )
            return TerminalRun(
                content=f"Ran in existing terminal (PowerShell).\nCommand: {translated}",
                shell_used=ShellKind.POWERSHELL.value,
                steps=steps,
            )

        with self._wd_lock:
            self._last_working_dir = wd

        steps.append(
            DiagnosticStep.info(
                "Persistent terminal started; future commands will reuse this tab.",
                {"working_directory": wd},
            )
        )
        return TerminalRun(
            content=(
                "Opened terminal (reuse same tab for next commands).\n"
                f"Working directory: {wd}\nCommand: {command}"
            ),
            shell_used=ShellKind.POWERSHELL.value,
            steps=steps,
        )

    def _claim_session(self, session: TerminalSession, setup: str, command_line: str) -> bool:
        """
        Store ``session`` as the shared one, unless a concurrent call already
        stored a live session; then ``command_line`` goes to that one instead.

        Returns:
            True if the command was sent to the already stored session

        Raises:
            OSError: Writing ``setup`` to the new session failed
        """
        with self._session_lock:
            current = self._session
            if current is not None and current.is_alive():
                try:
                    current.send(command_line)
                    return True
                except OSError as e:
                    logger.warning(f"Write to concurrent terminal failed ({e}); replacing it")
                    current.process.terminate()
                    self._session = None
            session.send(setup)
            self._session = session
            return False

    def _open_new_tab(
        self,
        host: ConsoleHost,
        shell: ShellKind,
        command: str,
        keep_open: bool,
        wd: str,
        steps: list[DiagnosticStep],
    ) -> TerminalRun:
        cwd = wd if Path(wd).is_dir() else None

        if shell is ShellKind.WT:
            steps.append(DiagnosticStep.info("Step: Windows Terminal (wt)"))
            try:
                host.spawn_window(["wt", "powershell", "-NoExit", "-Command", command], cwd)
                shell_used = ShellKind.WT.value
            except OSError as e:
                steps.append(DiagnosticStep.warn(f"wt failed ({e}), falling back to powershell"))
                try:
                    host.spawn_window(["powershell", "-NoExit", "-Command", command], cwd)
                except OSError as e2:
                    raise CommandFailedError(f"wt and powershell failed: {e2}", steps=steps) from e2
                shell_used = ShellKind.POWERSHELL.value
        elif shell is ShellKind.CMD:
            steps.append(DiagnosticStep.info("Step: cmd /k"))
            try:
                host.spawn_window(["cmd", "/k", command], cwd)
            except OSError as e:
                raise CommandFailedError(f"cmd spawn failed: {e}", steps=steps) from e
            shell_used = ShellKind.CMD.value
        else:
            steps.append(DiagnosticStep.info("Step: PowerShell -NoExit -Command"))
            argv = ["powershell", "-NoExit", "-Command", command]
            if not keep_open:
                argv.remove("-NoExit")
            try:
                host.spawn_window(argv, cwd)
            except OSError as e:
                raise CommandFailedError(f"powershell spawn failed: {e}", steps=steps) from e
            shell_used = ShellKind.POWERSHELL.value

        steps.append(
            DiagnosticStep.info(
                f"Opened new terminal tab. Shell: {shell_used}", {"shell_used": shell_used}
            )
        )
        return TerminalRun(
            content=(
                f"Opened new terminal window.\nShell: {shell_used}\n"
                f"Command: {command}\nWorking directory: {wd}"
            ),
            shell_used=shell_used,
            steps=steps,
        )

    def close(self) -> None:
        """Terminate the shared session, if any."""
        with self._session_lock:
            session, self._session = self._session, None
        if session is not None and session.is_alive():
            logger.info("Closing persistent terminal session")
            session.process.terminate()
