"""
Unit tests for configuration loading.
"""

from pathlib import Path

import pytest
import yaml

from toolgate.config import (
    Config,
    ConfigurationError,
    ToolSettings,
    load_config,
)
from toolgate.config.loader import _parse_env_value, apply_env_overrides, load_yaml_file
from toolgate.config.merger import deep_merge, get_nested_value, set_nested_value


class TestDefaults:
    def test_default_config(self):
        config = Config()
        assert config.tools.filesystem_enabled is False
        assert config.search.duckduckgo_url == "https://api.duckduckgo.com/"
        assert config.search.excerpt_max_chars == 2200
        assert config.terminal.command_timeout == 120
        assert config.logging.level == "WARNING"

    def test_effective_roots(self):
        assert ToolSettings().effective_filesystem_root() is None
        assert ToolSettings(filesystem_enabled=True).effective_filesystem_root() == str(Path.home())
        assert (
            ToolSettings(filesystem_enabled=True, filesystem_root=" /data ").effective_filesystem_root()
            == "/data"
        )
        assert ToolSettings(obsidian_enabled=True).effective_obsidian_vault() is None
        assert ToolSettings(obsidian_vault_path="/v").effective_obsidian_vault() is None


class TestMerger:
    def test_deep_merge(self):
        base = {"tools": {"filesystem_enabled": False, "filesystem_root": ""}, "x": 1}
        override = {"tools": {"filesystem_enabled": True}}

        merged = deep_merge(base, override)

        assert merged == {"tools": {"filesystem_enabled": True, "filesystem_root": ""}, "x": 1}
        assert base["tools"]["filesystem_enabled"] is False

    def test_nested_values(self):
        config = {"search": {"recency_days": 30}}
        assert get_nested_value(config, "search.recency_days") == 30
        assert get_nested_value(config, "search.missing") is None

        set_nested_value(config, "terminal.command_timeout", 5)
        assert config["terminal"]["command_timeout"] == 5


class TestEnvOverrides:
    def test_apply(self):
        config = Config().model_dump()
        env = {
            "TOOLGATE_TOOLS__TERMINAL_ENABLED": "true",
            "TOOLGATE_TERMINAL__COMMAND_TIMEOUT": "30",
            "TOOLGATE_HOME": "/ignored",
            "OTHER__THING": "x",
        }

        result = apply_env_overrides(config, env)

        assert result["tools"]["terminal_enabled"] is True
        assert result["terminal"]["command_timeout"] == 30
        assert "home" not in result

    @pytest.mark.parametrize(
        "raw, parsed",
        [("yes", True), ("off", False), ("42", 42), ("-1.5", -1.5), ("/srv/data", "/srv/data")],
    )
    def test_parse_value(self, raw, parsed):
        assert _parse_env_value(raw) == parsed


class TestLoadConfig:
    def test_missing_file_uses_defaults(self, mock_toolgate_home):
        config = load_config()
        assert config == Config()

    def test_global_file(self, mock_toolgate_home):
        (mock_toolgate_home / "config.yaml").write_text(
            yaml.dump({"tools": {"web_search_enabled": True}, "search": {"recency_days": 7}})
        )

        config = load_config()

        assert config.tools.web_search_enabled is True
        assert config.search.recency_days == 7

    def test_explicit_path_and_env(self, mock_toolgate_home, temp_dir, monkeypatch):
        path = temp_dir / "custom.yaml"
        path.write_text("tools:\n  filesystem_root: /from/file\n")
        monkeypatch.setenv("TOOLGATE_TOOLS__FILESYSTEM_ROOT", "/from/env")

        assert load_config(path).tools.filesystem_root == "/from/env"
        assert load_config(path, skip_env=True).tools.filesystem_root == "/from/file"

    def test_invalid_yaml(self, temp_dir):
        path = temp_dir / "bad.yaml"
        path.write_text("tools: [unclosed")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_yaml_file(path)

    def test_top_level_must_be_mapping(self, temp_dir):
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_yaml_file(path)

    def test_validation_error(self, mock_toolgate_home):
        (mock_toolgate_home / "config.yaml").write_text("terminal:\n  command_timeout: 0\n")
        with pytest.raises(ConfigurationError, match="validation failed"):
            load_config()
