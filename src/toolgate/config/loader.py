"""
Configuration loader for toolgate.

Loads and merges configuration from multiple sources:
1. Default values
2. Global config (~/.toolgate/config.yaml)
3. Environment variables (TOOLGATE_<SECTION>__<KEY>)
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from toolgate.config.merger import deep_merge, set_nested_value
from toolgate.config.schema import Config
from toolgate.storage.paths import get_global_config_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "TOOLGATE_"
ENV_SEPARATOR = "__"


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed configuration dictionary.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError(f"Invalid YAML in {path}: top level must be a mapping")
    return content


def apply_env_overrides(
    config: dict[str, Any], environ: dict[str, str] | None = None
) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Environment variables follow the pattern ``TOOLGATE_<SECTION>__<KEY>``,
    e.g. ``TOOLGATE_TOOLS__FILESYSTEM_ROOT=/srv/data``. The double underscore
    separates levels because keys themselves contain underscores.

    Args:
        config: Configuration dictionary to modify.
        environ: Environment mapping (defaults to ``os.environ``).

    Returns:
        Configuration with environment overrides applied.
    """
    env = os.environ if environ is None else environ

    for key, value in env.items():
        if not key.startswith(ENV_PREFIX) or ENV_SEPARATOR not in key:
            continue

        config_key = key[len(ENV_PREFIX) :].lower().replace(ENV_SEPARATOR, ".")
        logger.debug(f"Config override from environment: {config_key}")
        config = set_nested_value(config, config_key, _parse_env_value(value))

    return config


def _parse_env_value(value: str) -> Any:
    """
    Parse an environment variable value to the appropriate type.

    Args:
        value: String value from environment.

    Returns:
        Parsed value (bool, int, float, or string).
    """
    if value.lower() in ("true", "yes", "on"):
        return True
    if value.lower() in ("false", "no", "off"):
        return False

    if re.match(r"^-?\d+$", value):
        return int(value)

    if re.match(r"^-?\d+\.\d+$", value):
        return float(value)

    return value


def load_config(
    config_path: Path | None = None,
    skip_env: bool = False,
) -> Config:
    """
    Load and merge configuration from all sources.

    Loading order (later overrides earlier):
    1. Default values from Config model
    2. Global config (~/.toolgate/config.yaml, or the given path)
    3. Environment variables (TOOLGATE_*)

    Args:
        config_path: Explicit YAML file to load instead of the global one.
        skip_env: Skip environment variable overrides.

    Returns:
        Merged and validated Config object.

    Raises:
        ConfigurationError: If configuration is invalid.
    """
    config_dict = Config().model_dump()

    path = config_path or get_global_config_path()
    if path.exists():
        config_dict = deep_merge(config_dict, load_yaml_file(path))

    if not skip_env:
        config_dict = apply_env_overrides(config_dict)

    try:
        return Config.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed: {e}") from e
