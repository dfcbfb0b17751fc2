"""
Pydantic configuration schema for toolgate.

This module defines all configuration models with validation.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Tool Capability Settings
# =============================================================================


class ToolSettings(BaseModel):
    """Enable flags and boundaries for each capability group.

    ``web_search_enabled`` gates web_search, fetch_url and open_browser_search;
    ``terminal_enabled`` gates run_command and open_terminal_and_run.
    """

    filesystem_enabled: bool = False
    filesystem_root: str = ""
    obsidian_enabled: bool = False
    obsidian_vault_path: str = ""
    web_search_enabled: bool = False
    terminal_enabled: bool = False

    def effective_filesystem_root(self) -> str | None:
        """Configured filesystem root; the user's home when enabled but blank."""
        if not self.filesystem_enabled:
            return None
        root = self.filesystem_root.strip()
        return root or str(Path.home())

    def effective_obsidian_vault(self) -> str | None:
        """Configured vault path, or None when disabled or unset."""
        if not self.obsidian_enabled:
            return None
        return self.obsidian_vault_path.strip() or None


# =============================================================================
# Web Search Configuration
# =============================================================================


class SearchConfig(BaseModel):
    """Providers, timeouts and excerpt limits for web search and fetch."""

    duckduckgo_url: str = "https://api.duckduckgo.com/"
    wikidata_api_url: str = "https://www.wikidata.org/w/api.php"
    wikipedia_search_url: str = "https://en.wikipedia.org/w/rest.php/v1/search/page"
    wikipedia_summary_url: str = "https://en.wikipedia.org/api/rest_v1/page/summary/"

    user_agent: str = "Mozilla/5.0 (Windows NT 10.0; rv:91.0) Gecko/20100101 Firefox/91.0"
    accept_language: str = "en-US,en;q=0.9"
    wikimedia_user_agent: str = "toolgate/0.4 (officeholder lookup)"

    request_timeout: float = Field(default=10.0, gt=0)
    wikidata_timeout: float = Field(default=10.0, gt=0)
    wikipedia_timeout: float = Field(default=8.0, gt=0)

    excerpt_timeout: float = Field(default=8.0, gt=0)
    excerpt_max_chars: int = Field(default=2200, ge=1)
    excerpt_max_results: int = Field(default=4, ge=0)
    max_body_bytes: int = Field(default=512 * 1024, ge=1)
    recency_days: int = Field(default=30, ge=1)

    browser_timeout: float = Field(default=12.0, gt=0)
    browser_max_chars: int = Field(default=12000, ge=1)


# =============================================================================
# Terminal Configuration
# =============================================================================


class TerminalConfig(BaseModel):
    """One-shot command execution settings."""

    command_timeout: int = Field(default=120, ge=1, le=3600)


# =============================================================================
# Audit / Diagnostics Configuration
# =============================================================================


class AuditConfig(BaseModel):
    """Diagnostics JSON Lines sink."""

    enable: bool = True
    path: str = ""  # blank: <toolgate home>/logs/diagnostics.jsonl
    max_size_mb: int = Field(default=10, ge=1)
    buffer_size: int = Field(default=1, ge=1)


class LoggingConfig(BaseModel):
    """Python logging settings applied by the CLI."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"


# =============================================================================
# Root Configuration Model
# =============================================================================


class Config(BaseModel):
    """
    Root configuration model for toolgate.

    Loaded from YAML and environment variables, merged in order of priority.
    The core only reads it; nothing in the tool layer writes settings back.
    """

    model_config = ConfigDict(extra="allow")

    tools: ToolSettings = Field(default_factory=ToolSettings)
    search: SearchConfig = Field(default_factory=SearchConfig)
    terminal: TerminalConfig = Field(default_factory=TerminalConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
