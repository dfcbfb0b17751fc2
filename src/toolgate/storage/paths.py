"""
Path utilities for toolgate.

Provides consistent path resolution for configuration and log files.
"""

import os
from pathlib import Path


def get_toolgate_home() -> Path:
    """
    Get the toolgate home directory.

    Resolution order:
    1. TOOLGATE_HOME environment variable
    2. Default: ~/.toolgate

    Returns:
        Path to the toolgate home directory.
    """
    env_home = os.environ.get("TOOLGATE_HOME")
    if env_home:
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".toolgate"


def get_global_config_path() -> Path:
    """
    Get the path to the global configuration file.

    Returns:
        Path to ~/.toolgate/config.yaml
    """
    return get_toolgate_home() / "config.yaml"


def get_logs_dir() -> Path:
    """Path to ~/.toolgate/logs/"""
    return get_toolgate_home() / "logs"


def get_diagnostics_log_path() -> Path:
    """Path to ~/.toolgate/logs/diagnostics.jsonl"""
    return get_logs_dir() / "diagnostics.jsonl"


def expand_path(path: str | Path) -> Path:
    """
    Expand user home and environment variables in a path.

    Args:
        path: Path string or Path object.

    Returns:
        Expanded and resolved Path.
    """
    if isinstance(path, str):
        path = os.path.expandvars(path)
    return Path(path).expanduser().resolve()

