"""Tests for configuration validation."""

from __future__ import annotations

from ccscan.config.validation import validate_config


def _messages(data) -> list:
    return [w.message for w in validate_config(data, source="test.yml")]


class TestValidateConfig:
    """Tests for validate_config."""

    def test_valid_config(self) -> None:
        data = {
            "cli_location": "/cli",
            "host_connections": [{"id": "c", "host": "h", "port": 1, "timeout": 0}],
            "credentials": [
                {"id": "u", "username": "user", "password": "pw", "scopes": ["job"]}
            ],
        }

        assert validate_config(data, source="test.yml") == []

    def test_empty_config(self) -> None:
        assert validate_config({}, source="test.yml") == []

    def test_not_a_mapping(self) -> None:
        assert _messages(["a"]) == ["Config must be a mapping, got list"]

    def test_unknown_top_level_key_with_suggestion(self) -> None:
        warnings = validate_config({"cli_locaton": "/cli"}, source="test.yml")

        assert len(warnings) == 1
        assert warnings[0].key == "cli_locaton"
        assert warnings[0].suggestion == "cli_location"
        assert warnings[0].source == "test.yml"

    def test_unknown_entry_key(self) -> None:
        warnings = validate_config(
            {"host_connections": [{"id": "c", "host": "h", "port": 1, "codepage": 1047}]},
            source="test.yml",
        )

        assert [w.key for w in warnings] == ["host_connections[0].codepage"]
        assert warnings[0].suggestion == "code_page"

    def test_missing_required_keys(self) -> None:
        messages = _messages({"credentials": [{"id": "u"}]})

        assert messages == [
            "Missing required key 'credentials[0].password'",
            "Missing required key 'credentials[0].username'",
        ]

    def test_section_must_be_list(self) -> None:
        assert _messages({"host_connections": {"id": "c"}}) == [
            "'host_connections' must be a list, got dict"
        ]

    def test_entry_must_be_mapping(self) -> None:
        assert _messages({"credentials": ["u"]}) == ["'credentials[0]' must be a mapping, got str"]

    def test_duplicate_ids(self) -> None:
        entry = {"id": "c", "host": "h", "port": 1}

        assert _messages({"host_connections": [entry, dict(entry)]}) == [
            "Duplicate id 'c' in 'host_connections'"
        ]

    def test_scopes_must_be_list(self) -> None:
        messages = _messages(
            {"credentials": [{"id": "u", "username": "a", "password": "b", "scopes": "job"}]}
        )

        assert messages == ["'credentials[0].scopes' must be a list"]

    def test_cli_location_must_be_string(self) -> None:
        assert _messages({"cli_location": 5}) == ["'cli_location' must be a string, got int"]
