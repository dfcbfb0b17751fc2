"""Tests for the tool registry and its enabled view."""

import pytest

from toolgate.config.schema import ToolSettings
from toolgate.exceptions import UnknownToolError
from toolgate.tools.builtin import ReadFileTool
from toolgate.tools.models import ToolName
from toolgate.tools.registry import ToolRegistry, build_default_registry

CATALOG_ORDER = [
    "read_file",
    "write_file",
    "list_dir",
    "obsidian_read_note",
    "obsidian_write_note",
    "obsidian_list_notes",
    "web_search",
    "fetch_url",
    "run_command",
    "open_terminal_and_run",
    "open_browser_search",
]


def names(definitions) -> list[str]:
    return [d.name.value for d in definitions]


class TestToolRegistry:
    """Tests for ToolRegistry."""

    def test_register_and_get(self):
        registry = ToolRegistry()
        registry.register(ReadFileTool())

        assert len(registry) == 1
        assert "read_file" in registry
        assert registry.get("read_file").name is ToolName.READ_FILE
        assert registry.get(ToolName.READ_FILE) is registry.get("read_file")

    def test_register_duplicate(self):
        registry = ToolRegistry()
        registry.register(ReadFileTool())
        with pytest.raises(ValueError, match="already registered"):
            registry.register(ReadFileTool())

    def test_get_unknown(self):
        registry = build_default_registry()
        assert registry.get("delete_everything") is None
        assert "delete_everything" not in registry
        assert 42 not in registry

    def test_require_unknown(self):
        with pytest.raises(UnknownToolError) as exc_info:
            build_default_registry().require("delete_everything")
        assert str(exc_info.value) == "Tool not found: delete_everything"

    def test_default_catalog(self):
        registry = build_default_registry()
        assert names(registry.all_tool_definitions()) == CATALOG_ORDER
        assert len(registry) == len(ToolName)

    def test_definitions_are_complete(self):
        for definition in build_default_registry().all_tool_definitions():
            assert definition.description
            assert definition.scope
            assert definition.json_schema["type"] == "object"
            assert definition.json_schema["additionalProperties"] is False


class TestEnabledDefinitions:
    """Capability flags and roots decide the agent's menu."""

    @pytest.fixture
    def registry(self) -> ToolRegistry:
        return build_default_registry()

    def test_nothing_enabled(self, registry):
        assert registry.enabled_tool_definitions(ToolSettings()) == []

    def test_filesystem_blank_root_means_home(self, registry):
        settings = ToolSettings(filesystem_enabled=True)
        assert names(registry.enabled_tool_definitions(settings)) == [
            "read_file",
            "write_file",
            "list_dir",
        ]

    def test_obsidian_requires_vault(self, registry):
        assert registry.enabled_tool_definitions(ToolSettings(obsidian_enabled=True)) == []

        settings = ToolSettings(obsidian_enabled=True, obsidian_vault_path="/vault")
        assert names(registry.enabled_tool_definitions(settings)) == [
            "obsidian_read_note",
            "obsidian_write_note",
            "obsidian_list_notes",
        ]

    def test_vault_path_without_flag(self, registry):
        settings = ToolSettings(obsidian_vault_path="/vault")
        assert registry.enabled_tool_definitions(settings) == []

    def test_web_search_gates_web_and_browser(self, registry):
        settings = ToolSettings(web_search_enabled=True)
        assert names(registry.enabled_tool_definitions(settings)) == [
            "web_search",
            "fetch_url",
            "open_browser_search",
        ]

    def test_terminal(self, registry):
        settings = ToolSettings(terminal_enabled=True)
        assert names(registry.enabled_tool_definitions(settings)) == [
            "run_command",
            "open_terminal_and_run",
        ]

    def test_everything_enabled(self, registry):
        settings = ToolSettings(
            filesystem_enabled=True,
            filesystem_root="/data",
            obsidian_enabled=True,
            obsidian_vault_path="/vault",
            web_search_enabled=True,
            terminal_enabled=True,
        )
        assert names(registry.enabled_tool_definitions(settings)) == CATALOG_ORDER
