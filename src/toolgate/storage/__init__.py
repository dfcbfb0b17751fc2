"""Storage paths for toolgate."""

from toolgate.storage.paths import (
    get_diagnostics_log_path,
    get_global_config_path,
    get_logs_dir,
    get_toolgate_home,
)

__all__ = [
    "get_diagnostics_log_path",
    "get_global_config_path",
    "get_logs_dir",
    "get_toolgate_home",
]
