"""Build step definition and its form helpers.

The form helpers back the step's configuration page: field checks, the
selectable host connections and credentials, and the default analysis
properties offered to new steps.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

from ccscan.core.collaborators import ConnectionRegistry, CredentialStore
from ccscan.core.launcher import Launcher
from ccscan.core.logging import get_logger
from ccscan.core.models import StepConfig
from ccscan.core.streaming import StreamHandler
from ccscan.scanner import CodeCoverageScanner

LOGGER = get_logger(__name__)

DISPLAY_NAME = "Code Coverage"

DEFAULT_ANALYSIS_PROPERTIES = """\
# The following properties are required
cc.sources=
cc.repos=
cc.system=
cc.test=
# The following properties are optional
cc.ddio.overrides=
"""

CHECK_HOST_CONNECTION_ERROR = "Host connection is required"
CHECK_LOGIN_CREDENTIALS_ERROR = "Login credentials are required"


@dataclass(frozen=True)
class FormValidation:
    """Result of checking a single form field."""

    kind: str
    message: str = ""

    OK = "ok"
    ERROR = "error"

    @property
    def is_ok(self) -> bool:
        return self.kind == self.OK

    @classmethod
    def ok(cls) -> "FormValidation":
        return cls(cls.OK)

    @classmethod
    def error(cls, message: str) -> "FormValidation":
        return cls(cls.ERROR, message)


@dataclass(frozen=True)
class Option:
    """One entry of a selection list."""

    name: str
    value: str
    selected: bool = False


def check_connection_id(connection_id: Optional[str]) -> FormValidation:
    """A host connection must be selected."""
    if not (connection_id or "").strip():
        return FormValidation.error(CHECK_HOST_CONNECTION_ERROR)
    return FormValidation.ok()


def check_credentials_id(credentials_id: Optional[str]) -> FormValidation:
    """Login credentials must be selected."""
    if not (credentials_id or "").strip():
        return FormValidation.error(CHECK_LOGIN_CREDENTIALS_ERROR)
    return FormValidation.ok()


def connection_choices(
    registry: ConnectionRegistry, connection_id: Optional[str] = None
) -> List[Option]:
    """List host connections for selection.

    The list starts with an empty entry; each connection is shown as
    ``description [host:port]``.

    Args:
        registry: Source of host connections.
        connection_id: Currently selected connection, if any.

    Returns:
        Selection entries.
    """
    options = [Option("", "")]
    for connection in registry.list_connections():
        options.append(
            Option(
                name=f"{connection.description} [{connection.host_port}]",
                value=connection.connection_id,
                selected=connection_id == connection.connection_id,
            )
        )
    return options


def credentials_choices(
    store: CredentialStore,
    credentials_id: Optional[str] = None,
    scope: Optional[str] = None,
) -> List[Option]:
    """List credentials visible to a job for selection.

    Each entry is shown as ``username (description)``, or just the
    username when there is no description.

    Args:
        store: Source of credentials.
        credentials_id: Currently selected credentials, if any.
        scope: Job the step belongs to.

    Returns:
        Selection entries.
    """
    options = [Option("", "")]
    for credentials in store.list_credentials(scope):
        description = credentials.description.strip()
        name = credentials.username
        if description:
            name += f" ({description})"
        options.append(
            Option(
                name=name,
                value=credentials.credentials_id,
                selected=credentials_id == credentials.credentials_id,
            )
        )
    return options


class CodeCoverageStep:
    """A configured Code Coverage build step."""

    display_name = DISPLAY_NAME

    def __init__(
        self,
        connection_id: Optional[str] = None,
        credentials_id: Optional[str] = None,
        analysis_properties_path: Optional[str] = None,
        analysis_properties: Optional[str] = None,
    ) -> None:
        self.config = StepConfig(
            connection_id=connection_id,  # type: ignore[arg-type]
            credentials_id=credentials_id,  # type: ignore[arg-type]
            analysis_properties_path=analysis_properties_path,  # type: ignore[arg-type]
            analysis_properties=analysis_properties,  # type: ignore[arg-type]
        )

    @classmethod
    def from_form(cls, data: Mapping[str, str]) -> "CodeCoverageStep":
        """Create a step from submitted form data."""
        config = StepConfig.from_form(data)
        return cls(
            config.connection_id,
            config.credentials_id,
            config.analysis_properties_path,
            config.analysis_properties,
        )

    def validate(self) -> List[FormValidation]:
        """Return the errors found in the step configuration."""
        checks = [
            check_connection_id(self.config.connection_id),
            check_credentials_id(self.config.credentials_id),
        ]
        return [check for check in checks if not check.is_ok]

    def perform(
        self,
        workspace: Path,
        launcher: Launcher,
        connection_registry: ConnectionRegistry,
        credential_store: CredentialStore,
        cli_location: str,
        stream_handler: Optional[StreamHandler] = None,
        env: Optional[Mapping[str, str]] = None,
        job_name: Optional[str] = None,
    ) -> int:
        """Run the step.

        Raises:
            ResolutionError: If the connection or credentials cannot be resolved.
            StepAbortedError: If the CLI exits with a non-zero value.
        """
        scanner = CodeCoverageScanner(
            self.config, connection_registry, credential_store, cli_location
        )
        return scanner.perform(
            workspace,
            launcher,
            stream_handler=stream_handler,
            env=env,
            scope=job_name,
        )
