"""Tests for the build step and its form helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from ccscan.core.errors import StepAbortedError
from ccscan.core.properties import parse_properties
from ccscan.step import (
    CHECK_HOST_CONNECTION_ERROR,
    CHECK_LOGIN_CREDENTIALS_ERROR,
    DEFAULT_ANALYSIS_PROPERTIES,
    CodeCoverageStep,
    FormValidation,
    check_connection_id,
    check_credentials_id,
    connection_choices,
    credentials_choices,
)

from tests.conftest import FakeLauncher


class TestFormChecks:
    """Tests for the field checks."""

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_connection_required(self, value) -> None:
        result = check_connection_id(value)

        assert result == FormValidation.error(CHECK_HOST_CONNECTION_ERROR)
        assert not result.is_ok

    def test_connection_ok(self) -> None:
        assert check_connection_id("cw01").is_ok

    @pytest.mark.parametrize("value", ["", "\t", None])
    def test_credentials_required(self, value) -> None:
        assert check_credentials_id(value).message == CHECK_LOGIN_CREDENTIALS_ERROR

    def test_credentials_ok(self) -> None:
        assert check_credentials_id("dev-user") == FormValidation.ok()


class TestChoices:
    """Tests for the selection lists."""

    def test_connection_choices(self, global_config) -> None:
        options = connection_choices(global_config, "cw01")

        assert options[0].name == ""
        assert options[0].value == ""
        assert options[1].name == "Development LPAR [cw01.example.com:16196]"
        assert options[1].value == "cw01"
        assert options[1].selected

    def test_connection_choices_nothing_selected(self, global_config) -> None:
        options = connection_choices(global_config)

        assert not any(option.selected for option in options)

    def test_credentials_choices_respect_scope(self, global_config) -> None:
        unscoped = credentials_choices(global_config, "dev-user")
        scoped = credentials_choices(global_config, scope="release-job")

        assert [o.value for o in unscoped] == ["", "dev-user"]
        assert unscoped[1].name == "XDEVREG (development user)"
        assert unscoped[1].selected
        assert [o.value for o in scoped] == ["", "dev-user", "release-user"]
        assert scoped[2].name == "XRELEASE"


class TestCodeCoverageStep:
    """Tests for CodeCoverageStep."""

    def test_config_is_trimmed(self) -> None:
        step = CodeCoverageStep(" cw01 ", None, " p ", None)

        assert step.config.connection_id == "cw01"
        assert step.config.credentials_id == ""
        assert step.config.analysis_properties_path == "p"

    def test_from_form(self) -> None:
        step = CodeCoverageStep.from_form({"connectionId": "cw01", "credentialsId": "dev-user"})

        assert step.config.connection_id == "cw01"
        assert step.validate() == []

    def test_validate_reports_missing_fields(self) -> None:
        messages = [error.message for error in CodeCoverageStep().validate()]

        assert messages == [CHECK_HOST_CONNECTION_ERROR, CHECK_LOGIN_CREDENTIALS_ERROR]

    def test_perform(self, tmp_path: Path, global_config) -> None:
        step = CodeCoverageStep("cw01", "dev-user", "", "cc.test=T")
        launcher = FakeLauncher()

        result = step.perform(
            tmp_path, launcher, global_config, global_config, global_config.cli_location
        )

        assert result == 0
        assert launcher.calls[0]["cmd"][-2:] == ["-cc.test", '"T"']

    def test_perform_scopes_credentials_by_job(self, tmp_path: Path, global_config) -> None:
        step = CodeCoverageStep("cw01", "release-user")

        result = step.perform(
            tmp_path,
            FakeLauncher(),
            global_config,
            global_config,
            global_config.cli_location,
            job_name="release-job",
        )

        assert result == 0

    def test_perform_failure(self, tmp_path: Path, global_config) -> None:
        step = CodeCoverageStep("cw01", "dev-user")

        with pytest.raises(StepAbortedError):
            step.perform(
                tmp_path,
                FakeLauncher(exit_code=2),
                global_config,
                global_config,
                global_config.cli_location,
            )


class TestDefaults:
    def test_default_properties_parse(self) -> None:
        defaults = parse_properties(DEFAULT_ANALYSIS_PROPERTIES)

        assert list(defaults) == [
            "cc.sources",
            "cc.repos",
            "cc.system",
            "cc.test",
            "cc.ddio.overrides",
        ]
        assert all(value == "" for value in defaults.values())
