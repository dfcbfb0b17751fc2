"""
Command safety policy for toolgate.

A deny-list of destructive command fragments checked before any process is
spawned, for both one-shot and persistent-terminal execution. Matching is a
case-insensitive substring test: it can over-match (a blocked phrase inside a
quoted string) and under-match (dangerous commands not on the list).
"""

from collections.abc import Iterable
from dataclasses import dataclass

BLOCKED_COMMAND_PATTERNS: tuple[str, ...] = (
    "rm -rf /",
    "rm -rf /*",
    "del /s /q c:\\",
    "format c:",
    "format d:",
    "mkfs",
    ":(){:|:&};:",  # fork bomb
    "shutdown",
    "reboot",
    "halt",
    "poweroff",
    "init 0",
    "init 6",
    "dd if=",  # raw disk write
    "diskpart",
    "bcdedit",
    "reg delete",
    "net user",  # account manipulation
    "net localgroup",
    "schtasks /delete",
    "wmic os delete",
    "cipher /w:",  # secure wipe
)

BLOCKED_MESSAGE = (
    "Command blocked: this command is on the safety blocklist. "
    "Dangerous system commands are not allowed."
)


@dataclass
class CommandCheck:
    """Result of a command policy check."""

    allowed: bool
    reason: str | None = None
    matched_rule: str | None = None


class CommandPolicy:
    """Rejects commands containing any blocked pattern."""

    def __init__(self, blocked_patterns: Iterable[str] = BLOCKED_COMMAND_PATTERNS) -> None:
        self.blocked_patterns = [p.lower() for p in blocked_patterns]

    def check_command(self, command: str) -> CommandCheck:
        """
        Check a command against the blocklist.

        Args:
            command: Shell command as the caller supplied it

        Returns:
            CommandCheck with the first matching pattern, if any
        """
        lowered = command.lower().strip()
        for pattern in self.blocked_patterns:
            if pattern in lowered:
                return CommandCheck(
                    allowed=False, reason=BLOCKED_MESSAGE, matched_rule=pattern
                )
        return CommandCheck(allowed=True)
