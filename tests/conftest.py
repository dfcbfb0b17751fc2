"""
Pytest configuration and fixtures for toolgate tests.
"""

import io
import os
import tempfile
from collections.abc import Callable, Generator
from datetime import date
from pathlib import Path
from typing import Any

import httpx
import pytest
from typer.testing import CliRunner

from toolgate.config.schema import SearchConfig
from toolgate.search.orchestrator import WebSearchOrchestrator
from toolgate.security.sandbox import SandboxExecutor
from toolgate.security.terminal import ConsoleHost, PersistentTerminal
from toolgate.tools.base import ToolContext


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_toolgate_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point TOOLGATE_HOME at an empty directory and clear TOOLGATE_* overrides."""
    home = temp_dir / ".toolgate"
    home.mkdir()
    for key in list(os.environ):
        if key.startswith("TOOLGATE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("TOOLGATE_HOME", str(home))
    return home


@pytest.fixture
def sandbox_root(temp_dir: Path) -> Path:
    """A filesystem root with a few files and a nested directory."""
    root = temp_dir / "root"
    root.mkdir()
    (root / "hello.txt").write_text("Hello, World!\n", encoding="utf-8")
    (root / "docs").mkdir()
    (root / "docs" / "guide.md").write_text("# Guide\n", encoding="utf-8")
    (root / "docs" / "deep").mkdir()
    (root / "docs" / "deep" / "note.txt").write_text("deep\n", encoding="utf-8")
    return root


# =============================================================================
# HTTP
# =============================================================================


class HttpRouter:
    """MockTransport handler that routes by host and path prefix."""

    def __init__(self) -> None:
        self.routes: list[tuple[str, str, Callable[[httpx.Request], httpx.Response]]] = []
        self.requests: list[httpx.Request] = []

    def add(
        self,
        host: str,
        path: str = "/",
        *,
        json: Any = None,
        text: str | None = None,
        html: str | None = None,
        status: int = 200,
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
    ) -> "HttpRouter":
        if handler is None:

            def handler(request: httpx.Request) -> httpx.Response:
                if html is not None:
                    return httpx.Response(status, html=html)
                if text is not None:
                    return httpx.Response(status, text=text)
                return httpx.Response(status, json=json if json is not None else {})

        self.routes.append((host, path, handler))
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for host, path, handler in self.routes:
            if request.url.host == host and request.url.path.startswith(path):
                return handler(request)
        return httpx.Response(404, text="not found")

    def hosts(self) -> list[str]:
        return [r.url.host for r in self.requests]

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))


@pytest.fixture
def http_router() -> HttpRouter:
    """Provide an empty HTTP router; unknown routes answer 404."""
    return HttpRouter()


@pytest.fixture
def fixed_today() -> Callable[[], date]:
    return lambda: date(2026, 2, 10)


# =============================================================================
# Terminal
# =============================================================================


class FakeProcess:
    """Stands in for a spawned console process."""

    def __init__(self) -> None:
        self.stdin = io.BytesIO()
        self.returncode: int | None = None
        self.terminated = False

    def poll(self) -> int | None:
        return self.returncode

    def terminate(self) -> None:
        self.terminated = True
        self.returncode = 1

    def written(self) -> str:
        return self.stdin.getvalue().decode("utf-8")


class FakeConsoleHost(ConsoleHost):
    """Records spawns instead of opening windows."""

    def __init__(self, failing: tuple[str, ...] = ()) -> None:
        self.failing = failing
        self.persistent: list[FakeProcess] = []
        self.windows: list[tuple[list[str], str | None]] = []

    def spawn_persistent(self) -> FakeProcess:  # type: ignore[override]
        if "persistent" in self.failing:
            raise FileNotFoundError("powershell not found")
        process = FakeProcess()
        self.persistent.append(process)
        return process

    def spawn_window(self, argv: list[str], cwd: str | None = None) -> FakeProcess:  # type: ignore[override]
        if argv[0] in self.failing:
            raise FileNotFoundError(f"{argv[0]} not found")
        self.windows.append((argv, cwd))
        return FakeProcess()


@pytest.fixture
def console_host() -> FakeConsoleHost:
    return FakeConsoleHost()


@pytest.fixture
def make_console_host() -> type[FakeConsoleHost]:
    """Host factory, for hosts whose spawns fail."""
    return FakeConsoleHost


# =============================================================================
# Tool context
# =============================================================================


class RecordingOpener:
    """Browser opener that records URLs and reports success."""

    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.urls: list[str] = []

    def __call__(self, url: str) -> bool:
        self.urls.append(url)
        return self.result


@pytest.fixture
def browser_opener() -> RecordingOpener:
    return RecordingOpener()


@pytest.fixture
def make_context(
    http_router: HttpRouter,
    browser_opener: RecordingOpener,
    fixed_today: Callable[[], date],
) -> Callable[..., ToolContext]:
    """Build a ToolContext wired to the router, a fake opener and an optional host."""

    def _make(
        root: Path | None = None,
        host: ConsoleHost | None = None,
        config: SearchConfig | None = None,
    ) -> ToolContext:
        config = config or SearchConfig()
        client = http_router.client()
        return ToolContext(
            executor=SandboxExecutor(timeout=10),
            terminal=PersistentTerminal(host),
            search=WebSearchOrchestrator(client, config, today=fixed_today),
            http_client=client,
            search_config=config,
            browser_opener=browser_opener,
            root=root,
        )

    return _make
