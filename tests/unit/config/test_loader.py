"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from ccscan.config.loader import (
    dict_to_config,
    expand_env_vars,
    find_project_config,
    load_config,
    load_yaml_file,
    merge_configs,
)
from ccscan.core.errors import ConfigError

GLOBAL_YAML = """\
cli_location: /opt/topaz/TopazCLI
host_connections:
  - id: cw01
    description: Development LPAR
    host: cw01.example.com
    port: 16196
credentials:
  - id: dev-user
    username: XDEVREG
    password: ${CCSCAN_TEST_PASSWORD:-fallback}
"""


@pytest.fixture
def ccscan_home(tmp_path: Path, monkeypatch) -> Path:
    home = tmp_path / "home"
    monkeypatch.setenv("CCSCAN_HOME", str(home))
    return home


def _write_global(home: Path, text: str) -> Path:
    config_dir = home / "config"
    config_dir.mkdir(parents=True, exist_ok=True)
    path = config_dir / "config.yml"
    path.write_text(text, encoding="utf-8")
    return path


class TestExpandEnvVars:
    """Tests for environment variable expansion."""

    def test_expands_set_variable(self, monkeypatch) -> None:
        monkeypatch.setenv("CCSCAN_TEST_VAR", "value")

        assert expand_env_vars("x-${CCSCAN_TEST_VAR}-y") == "x-value-y"

    def test_default_used_when_unset(self, monkeypatch) -> None:
        monkeypatch.delenv("CCSCAN_TEST_VAR", raising=False)

        assert expand_env_vars("${CCSCAN_TEST_VAR:-dflt}") == "dflt"

    def test_unset_without_default_is_empty(self, monkeypatch) -> None:
        monkeypatch.delenv("CCSCAN_TEST_VAR", raising=False)

        assert expand_env_vars("${CCSCAN_TEST_VAR}") == ""

    def test_nested_structures(self, monkeypatch) -> None:
        monkeypatch.setenv("CCSCAN_TEST_VAR", "v")

        data = {"a": ["${CCSCAN_TEST_VAR}", 1], "b": {"c": "${CCSCAN_TEST_VAR}"}}

        assert expand_env_vars(data) == {"a": ["v", 1], "b": {"c": "v"}}


class TestMergeConfigs:
    """Tests for merge_configs."""

    def test_scalar_overridden(self) -> None:
        assert merge_configs({"cli_location": "a"}, {"cli_location": "b"}) == {"cli_location": "b"}

    def test_entries_merged_by_id(self) -> None:
        base = {"host_connections": [{"id": "a", "host": "h1"}, {"id": "b", "host": "h2"}]}
        overlay = {"host_connections": [{"id": "b", "host": "h3"}, {"id": "c", "host": "h4"}]}

        merged = merge_configs(base, overlay)

        assert merged["host_connections"] == [
            {"id": "a", "host": "h1"},
            {"id": "b", "host": "h3"},
            {"id": "c", "host": "h4"},
        ]

    def test_base_not_mutated(self) -> None:
        base = {"cli_location": "a"}

        merge_configs(base, {"cli_location": "b"})

        assert base == {"cli_location": "a"}


class TestDictToConfig:
    """Tests for dict_to_config."""

    def test_builds_typed_config(self) -> None:
        config = dict_to_config(
            {
                "cli_location": "/cli",
                "host_connections": [
                    {"id": "cw01", "host": "h", "port": 16196, "code_page": 1140, "timeout": 30}
                ],
                "credentials": [
                    {"id": "u", "username": "user", "password": "pw", "scopes": ["job"]}
                ],
            }
        )

        connection = config.resolve_connection("cw01")
        assert connection.port == "16196"
        assert connection.code_page == "1140"
        assert connection.timeout == "30"
        assert config.resolve_credentials("u", "job").scopes == ("job",)
        assert config.cli_location == "/cli"

    def test_defaults(self) -> None:
        config = dict_to_config({"host_connections": [{"id": "c", "host": "h", "port": "1"}]})

        connection = config.resolve_connection("c")
        assert connection.code_page == "1047"
        assert connection.timeout == "0"
        assert connection.description == ""

    def test_incomplete_entries_skipped(self) -> None:
        config = dict_to_config(
            {
                "host_connections": [{"id": "c", "host": "h"}],
                "credentials": [{"id": "u", "username": "user"}],
            }
        )

        assert config.list_connections() == []
        assert config.list_credentials() == []

    def test_empty(self) -> None:
        config = dict_to_config({})

        assert config.cli_location == ""
        assert config.host_connections == {}


class TestLoadYamlFile:
    """Tests for load_yaml_file."""

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yml"
        path.write_text("", encoding="utf-8")

        assert load_yaml_file(path) == {}

    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_yaml_file(path)


class TestFindProjectConfig:
    def test_finds_first_name(self, tmp_path: Path) -> None:
        (tmp_path / "ccscan.yml").write_text("", encoding="utf-8")
        (tmp_path / ".ccscan.yml").write_text("", encoding="utf-8")

        assert find_project_config(tmp_path) == tmp_path / ".ccscan.yml"

    def test_none(self, tmp_path: Path) -> None:
        assert find_project_config(tmp_path) is None


class TestLoadConfig:
    """Tests for load_config."""

    def test_no_files(self, ccscan_home: Path, tmp_path: Path) -> None:
        config = load_config(project_root=tmp_path)

        assert config.host_connections == {}
        assert config.config_sources == []

    def test_global_config(self, ccscan_home: Path, monkeypatch) -> None:
        monkeypatch.setenv("CCSCAN_TEST_PASSWORD", "from-env")
        path = _write_global(ccscan_home, GLOBAL_YAML)

        config = load_config()

        assert config.cli_location == "/opt/topaz/TopazCLI"
        assert config.resolve_connection("cw01").host == "cw01.example.com"
        assert config.resolve_credentials("dev-user").password == "from-env"
        assert config.config_sources == [f"global:{path}"]

    def test_project_overrides_global(
        self, ccscan_home: Path, tmp_path: Path, monkeypatch
    ) -> None:
        monkeypatch.delenv("CCSCAN_TEST_PASSWORD", raising=False)
        _write_global(ccscan_home, GLOBAL_YAML)
        workspace = tmp_path / "ws"
        workspace.mkdir()
        (workspace / ".ccscan.yml").write_text(
            "host_connections:\n  - id: cw01\n    host: other\n    port: 1\n",
            encoding="utf-8",
        )

        config = load_config(project_root=workspace)

        assert config.resolve_connection("cw01").host == "other"
        assert config.resolve_credentials("dev-user").password == "fallback"
        assert len(config.config_sources) == 2

    def test_custom_config_replaces_project(self, ccscan_home: Path, tmp_path: Path) -> None:
        workspace = tmp_path / "ws"
        workspace.mkdir()
        (workspace / ".ccscan.yml").write_text("cli_location: project\n", encoding="utf-8")
        custom = tmp_path / "custom.yml"
        custom.write_text("cli_location: custom\n", encoding="utf-8")

        config = load_config(project_root=workspace, cli_config_path=custom)

        assert config.cli_location == "custom"

    def test_missing_custom_config(self, ccscan_home: Path, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Config file not found"):
            load_config(cli_config_path=tmp_path / "missing.yml")

    def test_invalid_project_yaml(self, ccscan_home: Path, tmp_path: Path) -> None:
        (tmp_path / ".ccscan.yml").write_text("key: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(project_root=tmp_path)

    def test_broken_global_config_is_skipped(self, ccscan_home: Path) -> None:
        _write_global(ccscan_home, "key: [unclosed\n")

        with patch("ccscan.config.loader.LOGGER") as logger:
            config = load_config()

        assert config.host_connections == {}
        logger.warning.assert_called_once()
