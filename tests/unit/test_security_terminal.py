"""Tests for the persistent visible terminal."""

import threading

import pytest

from toolgate.exceptions import (
    CommandFailedError,
    InvalidArgumentError,
    UnsupportedPlatformError,
)
from toolgate.security.terminal import PersistentTerminal, WindowsConsoleHost, detect_console_host
from toolgate.tools.models import DiagnosticLevel, ShellKind


class TestConsoleHost:
    def test_translate_chains(self):
        host = WindowsConsoleHost()
        assert host.translate("cd src && npm test") == "cd src; npm test"
        assert host.translate("a&&b") == "a&&b"

    def test_change_directory_escapes_quotes(self):
        host = WindowsConsoleHost()
        assert host.change_directory("C:\\Users\\o'neil") == "Set-Location 'C:\\Users\\o''neil'"

    def test_detect_matches_platform(self, monkeypatch):
        monkeypatch.setattr("toolgate.security.terminal.sys.platform", "linux")
        assert detect_console_host() is None
        monkeypatch.setattr("toolgate.security.terminal.sys.platform", "win32")
        assert isinstance(detect_console_host(), WindowsConsoleHost)


class TestUnsupportedAndRejected:
    def test_no_host(self):
        terminal = PersistentTerminal(None)

        with pytest.raises(UnsupportedPlatformError) as exc_info:
            terminal.run("dir")

        error = exc_info.value
        assert isinstance(error, InvalidArgumentError)
        assert str(error) == (
            "Invalid argument: open_terminal_and_run is only supported on Windows. "
            "Use run_command for: dir"
        )
        assert error.steps[-1].level == DiagnosticLevel.WARN
        assert terminal.supported is False

    def test_blocked_before_spawn(self, console_host):
        terminal = PersistentTerminal(console_host)

        with pytest.raises(CommandFailedError) as exc_info:
            terminal.run("shutdown /s")

        assert exc_info.value.steps[0].level == DiagnosticLevel.ERROR
        assert console_host.persistent == []
        assert console_host.windows == []

    def test_blocked_even_without_host(self):
        with pytest.raises(CommandFailedError):
            PersistentTerminal(None).run("format c:")

    def test_empty_command(self, console_host):
        with pytest.raises(InvalidArgumentError, match="command cannot be empty"):
            PersistentTerminal(console_host).run("   ")


class TestSharedSession:
    """Lazy creation, reuse and recreation of the shared tab."""

    def test_first_call_starts_session(self, console_host, temp_dir):
        terminal = PersistentTerminal(console_host)

        run = terminal.run("cd src && ls", working_directory=str(temp_dir))

        assert len(console_host.persistent) == 1
        written = console_host.persistent[0].written()
        assert written == f"Set-Location '{temp_dir}'\r\ncd src; ls\r\n"
        assert run.content == (
            "Opened terminal (reuse same tab for next commands).\n"
            f"Working directory: {temp_dir}\nCommand: cd src && ls"
        )
        assert run.shell_used == "powershell"
        assert terminal.has_session
        assert terminal.last_working_dir == str(temp_dir)

    def test_second_call_reuses_without_set_location(self, console_host, temp_dir):
        terminal = PersistentTerminal(console_host)
        terminal.run("cd src", working_directory=str(temp_dir))

        run = terminal.run("git status && git log")

        assert len(console_host.persistent) == 1
        assert console_host.persistent[0].written().endswith("cd src\r\ngit status; git log\r\n")
        assert console_host.persistent[0].written().count("Set-Location") == 1
        assert run.content == "Ran in existing terminal (PowerShell).\nCommand: git status; git log"

    def test_reuse_ignores_working_directory_with_warning(self, console_host, temp_dir):
        terminal = PersistentTerminal(console_host)
        terminal.run("echo one", working_directory=str(temp_dir))

        run = terminal.run("echo two", working_directory="D:\\elsewhere")

        assert "elsewhere" not in console_host.persistent[0].written()
        warnings = [s for s in run.steps if s.level == DiagnosticLevel.WARN]
        assert len(warnings) == 1
        assert "working_directory ignored" in warnings[0].message

    def test_dead_session_is_recreated(self, console_host, temp_dir):
        terminal = PersistentTerminal(console_host)
        terminal.run("echo one", working_directory=str(temp_dir))
        console_host.persistent[0].returncode = 0

        run = terminal.run("echo two")

        assert len(console_host.persistent) == 2
        assert run.content.startswith("Opened terminal")
        # Falls back to the last working directory
        assert console_host.persistent[1].written().startswith(f"Set-Location '{temp_dir}'")
        assert any("has exited" in s.message for s in run.steps)

    def test_default_working_directory_is_home(self, console_host, temp_dir, monkeypatch):
        monkeypatch.setenv("HOME", str(temp_dir))
        monkeypatch.setenv("USERPROFILE", str(temp_dir))
        run = PersistentTerminal(console_host).run("echo hi")
        assert f"Working directory: {temp_dir}" in run.content

    def test_spawn_failure(self, make_console_host):
        host = make_console_host(failing=("persistent",))
        terminal = PersistentTerminal(host)

        with pytest.raises(CommandFailedError, match="powershell spawn failed"):
            terminal.run("echo hi")
        assert not terminal.has_session

    def test_close_terminates(self, console_host):
        terminal = PersistentTerminal(console_host)
        terminal.run("echo hi")

        terminal.close()

        assert console_host.persistent[0].terminated
        assert not terminal.has_session


class TestNewTab:
    """Detached windows never replace the shared session."""

    def test_powershell_keep_open(self, console_host, temp_dir):
        terminal = PersistentTerminal(console_host)

        run = terminal.run("npm start", working_directory=str(temp_dir), new_tab=True)

        argv, cwd = console_host.windows[0]
        assert argv == ["powershell", "-NoExit", "-Command", "npm start"]
        assert cwd == str(temp_dir)
        assert run.content == (
            "Opened new terminal window.\nShell: powershell\n"
            f"Command: npm start\nWorking directory: {temp_dir}"
        )
        assert not terminal.has_session

    def test_powershell_without_keep_open(self, console_host):
        PersistentTerminal(console_host).run("echo hi", new_tab=True, keep_open=False)
        assert console_host.windows[0][0] == ["powershell", "-Command", "echo hi"]

    def test_cmd(self, console_host):
        run = PersistentTerminal(console_host).run("dir", shell=ShellKind.CMD, new_tab=True)
        assert console_host.windows[0][0] == ["cmd", "/k", "dir"]
        assert run.shell_used == "cmd"

    def test_wt(self, console_host):
        run = PersistentTerminal(console_host).run("dir", shell=ShellKind.WT, new_tab=True)
        assert console_host.windows[0][0] == ["wt", "powershell", "-NoExit", "-Command", "dir"]
        assert run.shell_used == "wt"

    def test_wt_falls_back_to_powershell(self, make_console_host):
        host = make_console_host(failing=("wt",))

        run = PersistentTerminal(host).run("dir", shell=ShellKind.WT, new_tab=True)

        assert host.windows[0][0] == ["powershell", "-NoExit", "-Command", "dir"]
        assert run.shell_used == "powershell"
        assert any(s.level == DiagnosticLevel.WARN for s in run.steps)

    def test_missing_directory_gets_no_cwd(self, console_host, temp_dir):
        PersistentTerminal(console_host).run(
            "dir", working_directory=str(temp_dir / "missing"), new_tab=True
        )
        assert console_host.windows[0][1] is None

    def test_new_tab_uses_last_working_directory(self, console_host, temp_dir):
        terminal = PersistentTerminal(console_host)
        terminal.run("echo one", working_directory=str(temp_dir))

        terminal.run("echo two", new_tab=True)

        assert console_host.windows[0][1] == str(temp_dir)
        assert len(console_host.persistent) == 1


class BrokenStdin:
    def write(self, data: bytes) -> int:
        raise BrokenPipeError("pipe closed")

    def flush(self) -> None:
        pass


class TestSessionSetupFailure:
    """A shell that cannot be set up is terminated, not left running."""

    def test_write_failure_terminates_new_shell(self, make_console_host):
        class BrokenPipeHost(make_console_host):
            def spawn_persistent(self):
                process = super().spawn_persistent()
                process.stdin = BrokenStdin()
                return process

        host = BrokenPipeHost()
        terminal = PersistentTerminal(host)

        with pytest.raises(CommandFailedError, match="pipe closed") as exc_info:
            terminal.run("echo hi")

        assert host.persistent[0].terminated
        assert not terminal.has_session
        assert exc_info.value.steps[-1].level == DiagnosticLevel.ERROR

    def test_missing_stdin_terminates_new_shell(self, make_console_host):
        class NoPipeHost(make_console_host):
            def spawn_persistent(self):
                process = super().spawn_persistent()
                process.stdin = None
                return process

        host = NoPipeHost()
        terminal = PersistentTerminal(host)

        with pytest.raises(CommandFailedError, match="could not take stdin"):
            terminal.run("echo hi")

        assert host.persistent[0].terminated
        assert not terminal.has_session


class TestConcurrency:
    """Concurrent callers share one session and locks are not held across spawn."""

    def test_concurrent_first_calls_leave_one_live_shell(self, make_console_host, temp_dir):
        barrier = threading.Barrier(2, timeout=5)

        class RacingHost(make_console_host):
            def spawn_persistent(self):
                process = super().spawn_persistent()
                barrier.wait()
                return process

        host = RacingHost()
        terminal = PersistentTerminal(host)
        runs = []
        errors = []

        def call(i: int) -> None:
            try:
                runs.append(terminal.run(f"echo {i}", working_directory=str(temp_dir)))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=call, args=(i,)) for i in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        assert errors == []
        assert len(host.persistent) == 2
        alive = [p for p in host.persistent if p.poll() is None]
        assert len(alive) == 1
        written = alive[0].written()
        assert written.count("Set-Location") == 1
        assert "echo 0\r\n" in written
        assert "echo 1\r\n" in written
        contents = sorted(run.content.split("\n")[0] for run in runs)
        assert contents == [
            "Opened terminal (reuse same tab for next commands).",
            "Ran in existing terminal (PowerShell).",
        ]
        assert terminal.has_session

    def test_concurrent_reuse_writes_whole_lines(self, console_host, temp_dir):
        terminal = PersistentTerminal(console_host)
        terminal.run("echo start", working_directory=str(temp_dir))

        threads = [
            threading.Thread(target=terminal.run, args=(f"echo {i}",)) for i in range(8)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        assert len(console_host.persistent) == 1
        lines = console_host.persistent[0].written().split("\r\n")
        assert lines[:2] == [f"Set-Location '{temp_dir}'", "echo start"]
        assert sorted(lines[2:-1]) == sorted(f"echo {i}" for i in range(8))
        assert lines[-1] == ""

    def test_locks_are_free_while_spawning(self, make_console_host):
        spawning = threading.Event()
        release = threading.Event()

        class SlowHost(make_console_host):
            def spawn_persistent(self):
                spawning.set()
                release.wait(timeout=5)
                return super().spawn_persistent()

        terminal = PersistentTerminal(SlowHost())
        worker = threading.Thread(target=terminal.run, args=("echo hi",))
        worker.start()
        try:
            assert spawning.wait(timeout=5)
            for lock in (terminal._session_lock, terminal._wd_lock):
                assert lock.acquire(timeout=1)
                lock.release()
        finally:
            release.set()
            worker.join(timeout=10)

        assert terminal.has_session
