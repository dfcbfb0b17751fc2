"""Configuration loading and schema for toolgate."""

from toolgate.config.loader import (
    ConfigurationError,
    load_config,
)
from toolgate.config.schema import (
    AuditConfig,
    Config,
    LoggingConfig,
    SearchConfig,
    TerminalConfig,
    ToolSettings,
)

__all__ = [
    "AuditConfig",
    "Config",
    "ConfigurationError",
    "LoggingConfig",
    "SearchConfig",
    "TerminalConfig",
    "ToolSettings",
    "load_config",
]
