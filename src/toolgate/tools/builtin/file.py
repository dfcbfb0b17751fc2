"""File and vault tools: read, write and list within a sandboxed root."""

import logging
from pathlib import Path

from toolgate.exceptions import InvalidArgumentError, ToolIOError
from toolgate.security.sandbox import PathSandbox
from toolgate.tools.arguments import ListDirArgs, ReadFileArgs, ReadNoteArgs, WriteFileArgs
from toolgate.tools.base import Tool, ToolContext
from toolgate.tools.models import (
    Capability,
    RootKind,
    ToolName,
    ToolParameter,
    ToolResult,
    ToolRisk,
)

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_BYTES = 512 * 1024
MAX_READ_LINES = 2000
TRUNCATION_MARKER = f"\n... (truncated, max {MAX_READ_LINES} lines)"
MAX_LIST_DEPTH = 3


def _split_lines(content: str) -> list[str]:
    """Split on newlines, dropping a trailing empty line and CRs before LF."""
    lines = content.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def read_file(
    root: str | Path,
    path: str,
    head: int | None = None,
    tail: int | None = None,
) -> str:
    """
    Read a UTF-8 text file under ``root``.

    Files over 2000 lines come back truncated with a marker unless ``head`` or
    ``tail`` selects a slice; both are clamped to 2000 lines.

    Raises:
        PathNotAllowedError: Path escapes the root or does not exist
        InvalidArgumentError: Not a regular file, or over 512 KiB
        ToolIOError: Read or decode failure
    """
    full = PathSandbox(root).resolve_for_read(path)
    if not full.is_file():
        raise InvalidArgumentError("Path is not a file")

    try:
        size = full.stat().st_size
        if size > MAX_FILE_SIZE_BYTES:
            raise InvalidArgumentError(f"File too large (max {MAX_FILE_SIZE_BYTES} bytes)")
        content = full.read_bytes().decode("utf-8")
    except UnicodeDecodeError as e:
        raise ToolIOError(f"file is not valid UTF-8: {e}") from e
    except OSError as e:
        raise ToolIOError(str(e)) from e

    lines = _split_lines(content)
    total = len(lines)

    if head is None and tail is None:
        if total > MAX_READ_LINES:
            return "\n".join(lines[:MAX_READ_LINES]) + TRUNCATION_MARKER
        return content

    if head is not None:
        return "\n".join(lines[: min(head, MAX_READ_LINES)])

    n = min(tail or 0, MAX_READ_LINES)
    start = max(total - n, 0)
    return "\n".join(lines[start:])


def write_file(root: str | Path, path: str, content: str) -> str:
    """
    Write (overwrite) a UTF-8 text file under ``root``, creating parents.

    Returns:
        "Wrote <n> bytes to <path>" where n is the encoded length

    Raises:
        PathNotAllowedError: Path escapes the root
        InvalidArgumentError: Target is an existing directory
        ToolIOError: Write failure
    """
    full = PathSandbox(root).resolve_for_write(path)
    if full.is_dir():
        raise InvalidArgumentError("Path is a directory")

    data = content.encode("utf-8")
    try:
        full.parent.mkdir(parents=True, exist_ok=True)
        full.write_bytes(data)
    except OSError as e:
        raise ToolIOError(str(e)) from e

    logger.info(f"Wrote {len(data)} bytes to {full}")
    return f"Wrote {len(data)} bytes to {full}"


def list_dir(root: str | Path, path: str = ".", depth: int | None = None) -> str:
    """
    List a directory under ``root`` as an indented tree.

    Entries are sorted by name, indented two spaces per level, directories
    suffixed with "/". ``depth`` defaults to 1 and is clamped to 1..3.
    Symlinked directories are listed but not descended into.

    Raises:
        PathNotAllowedError: Path escapes the root or does not exist
        InvalidArgumentError: Not a directory
        ToolIOError: Directory read failure
    """
    full = PathSandbox(root).resolve_for_read(path)
    if not full.is_dir():
        raise InvalidArgumentError("Path is not a directory")

    max_depth = max(1, min(depth if depth is not None else 1, MAX_LIST_DEPTH))
    lines: list[str] = []
    try:
        _list_dir_inner(full, 0, max_depth, lines)
    except OSError as e:
        raise ToolIOError(str(e)) from e
    return "\n".join(lines)


def _list_dir_inner(directory: Path, level: int, max_depth: int, out: list[str]) -> None:
    prefix = "  " * level
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        is_dir = entry.is_dir()
        out.append(f"{prefix}{entry.name}{'/' if is_dir else ''}")
        if is_dir and not entry.is_symlink() and level + 1 < max_depth:
            _list_dir_inner(entry, level + 1, max_depth, out)


# =============================================================================
# Filesystem tools
# =============================================================================

FILESYSTEM_SCOPE = "Sandboxed to user-selected root"
VAULT_SCOPE = "Obsidian vault path"

_DEPTH_PARAMETER = ToolParameter(
    name="depth",
    type="integer",
    description="How many levels to list (1 = direct children only)",
    required=False,
    default=1,
    minimum=1,
    maximum=MAX_LIST_DEPTH,
)


class _FilesystemTool(Tool):
    @property
    def capability(self) -> Capability:
        return Capability.FILESYSTEM

    @property
    def scope(self) -> str:
        return FILESYSTEM_SCOPE

    @property
    def root_kind(self) -> RootKind:
        return RootKind.FILESYSTEM


class _VaultTool(Tool):
    @property
    def capability(self) -> Capability:
        return Capability.OBSIDIAN

    @property
    def scope(self) -> str:
        return VAULT_SCOPE

    @property
    def root_kind(self) -> RootKind:
        return RootKind.OBSIDIAN


class ReadFileTool(_FilesystemTool):
    """Read a text file under the filesystem root."""

    args_model = ReadFileArgs

    @property
    def name(self) -> ToolName:
        return ToolName.READ_FILE

    @property
    def description(self) -> str:
        return (
            "Read a UTF-8 text file. Only within the selected root directory. "
            "Use relative path from root."
        )

    @property
    def risk(self) -> ToolRisk:
        return ToolRisk.READ_ONLY

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="path", type="string", description="Relative path to file from root"
            ),
            ToolParameter(
                name="head",
                type="integer",
                description="Return only first N lines",
                required=False,
                minimum=1,
            ),
            ToolParameter(
                name="tail",
                type="integer",
                description="Return only last N lines",
                required=False,
                minimum=1,
            ),
        ]

    def execute(self, args: ReadFileArgs, context: ToolContext) -> ToolResult:
        return ToolResult.success(read_file(context.require_root(), args.path, args.head, args.tail))


class WriteFileTool(_FilesystemTool):
    """Write a text file under the filesystem root."""

    args_model = WriteFileArgs

    @property
    def name(self) -> ToolName:
        return ToolName.WRITE_FILE

    @property
    def description(self) -> str:
        return (
            "Write a UTF-8 text file. Only within the selected root. "
            "Creates parent directories if needed."
        )

    @property
    def risk(self) -> ToolRisk:
        return ToolRisk.WRITE

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(name="path", type="string", description="Relative path from root"),
            ToolParameter(name="content", type="string", description="File content"),
        ]

    def execute(self, args: WriteFileArgs, context: ToolContext) -> ToolResult:
        return ToolResult.success(write_file(context.require_root(), args.path, args.content))


class ListDirTool(_FilesystemTool):
    """List a directory under the filesystem root."""

    args_model = ListDirArgs

    @property
    def name(self) -> ToolName:
        return ToolName.LIST_DIR

    @property
    def description(self) -> str:
        return (
            "List directory contents (names, with / for dirs). "
            "Only within the selected root."
        )

    @property
    def risk(self) -> ToolRisk:
        return ToolRisk.READ_ONLY

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="path",
                type="string",
                description="Relative path to directory from root",
                required=False,
                default=".",
            ),
            _DEPTH_PARAMETER,
        ]

    def execute(self, args: ListDirArgs, context: ToolContext) -> ToolResult:
        return ToolResult.success(list_dir(context.require_root(), args.path, args.depth))


# =============================================================================
# Vault tools
# =============================================================================


class ObsidianReadNoteTool(_VaultTool):
    """Read a Markdown note from the vault, frontmatter included."""

    args_model = ReadNoteArgs

    @property
    def name(self) -> ToolName:
        return ToolName.OBSIDIAN_READ_NOTE

    @property
    def description(self) -> str:
        return (
            "Read an Obsidian note (Markdown) from the vault. Path is vault-relative "
            "(e.g. 'Daily/2026-02-10.md'). Preserves frontmatter."
        )

    @property
    def risk(self) -> ToolRisk:
        return ToolRisk.READ_ONLY

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="path",
                type="string",
                description="Vault-relative path, e.g. 'Daily/2026-02-10.md'",
            )
        ]

    def execute(self, args: ReadNoteArgs, context: ToolContext) -> ToolResult:
        return ToolResult.success(read_file(context.require_root(), args.path))


class ObsidianWriteNoteTool(_VaultTool):
    """Write a Markdown note into the vault."""

    args_model = WriteFileArgs

    @property
    def name(self) -> ToolName:
        return ToolName.OBSIDIAN_WRITE_NOTE

    @property
    def description(self) -> str:
        return (
            "Write an Obsidian note (Markdown) to the vault. "
            "Preserve frontmatter if present in content."
        )

    @property
    def risk(self) -> ToolRisk:
        return ToolRisk.WRITE

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(name="path", type="string", description="Vault-relative path"),
            ToolParameter(
                name="content",
                type="string",
                description="Markdown content (include frontmatter if desired)",
            ),
        ]

    def execute(self, args: WriteFileArgs, context: ToolContext) -> ToolResult:
        return ToolResult.success(write_file(context.require_root(), args.path, args.content))


class ObsidianListNotesTool(_VaultTool):
    """List notes in a vault folder."""

    args_model = ListDirArgs

    @property
    def name(self) -> ToolName:
        return ToolName.OBSIDIAN_LIST_NOTES

    @property
    def description(self) -> str:
        return "List note files in a vault folder. Path is vault-relative."

    @property
    def risk(self) -> ToolRisk:
        return ToolRisk.READ_ONLY

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="path",
                type="string",
                description="Vault-relative path to directory",
                required=False,
                default=".",
            ),
            _DEPTH_PARAMETER,
        ]

    def execute(self, args: ListDirArgs, context: ToolContext) -> ToolResult:
        return ToolResult.success(list_dir(context.require_root(), args.path, args.depth))
