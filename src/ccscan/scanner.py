"""Code Coverage scanner.

Runs a Code Coverage scan through the Topaz command line interface:
resolve the host connection and credentials, merge analysis properties,
build the command line, launch it in the job workspace and map the exit
code to the build step result.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from ccscan.core.arguments import build_arguments, cli_script_name
from ccscan.core.collaborators import ConnectionRegistry, CredentialStore
from ccscan.core.errors import StepAbortedError
from ccscan.core.launcher import Launcher
from ccscan.core.logging import get_logger
from ccscan.core.models import ArgumentList, PropertyMap, StepConfig
from ccscan.core.properties import build_analysis_properties
from ccscan.core.streaming import NullStreamHandler, StreamHandler

LOGGER = get_logger(__name__)

TOOL_NAME = "CodeCoverageCLI"


class CodeCoverageScanner:
    """Performs a Code Coverage scan for one build step invocation."""

    def __init__(
        self,
        config: StepConfig,
        connection_registry: ConnectionRegistry,
        credential_store: CredentialStore,
        cli_location: str,
    ) -> None:
        """Initialize CodeCoverageScanner.

        Args:
            config: Step configuration.
            connection_registry: Source of host connections.
            credential_store: Source of login credentials.
            cli_location: Directory holding the Topaz CLI installation.
        """
        self._config = config
        self._connections = connection_registry
        self._credentials = credential_store
        self._cli_location = cli_location

    @property
    def config(self) -> StepConfig:
        return self._config

    def build_command(
        self,
        workspace: Path,
        launcher: Launcher,
        stream_handler: Optional[StreamHandler] = None,
        scope: Optional[str] = None,
    ) -> ArgumentList:
        """Resolve configuration and build the CLI command line.

        Args:
            workspace: Job workspace directory.
            launcher: Launcher for the build agent.
            stream_handler: Build log.
            scope: Name of the running job, used to scope credentials.

        Returns:
            The argument list.

        Raises:
            ConnectionNotFoundError: If the connection id is unknown.
            CredentialsNotFoundError: If the credentials are unknown or not
                visible to the job.
        """
        log = stream_handler or NullStreamHandler()

        connection = self._connections.resolve_connection(self._config.connection_id)
        credentials = self._credentials.resolve_credentials(self._config.credentials_id, scope)

        properties: PropertyMap = build_analysis_properties(
            self._config.analysis_properties_path,
            self._config.analysis_properties,
            workspace,
            stream_handler=log,
        )

        return build_arguments(
            self._config,
            connection,
            credentials,
            str(workspace),
            properties,
            is_unix_shell=launcher.is_unix,
            cli_location=self._cli_location,
            file_separator=launcher.file_separator,
            stream_handler=log,
        )

    def perform(
        self,
        workspace: Path,
        launcher: Launcher,
        stream_handler: Optional[StreamHandler] = None,
        env: Optional[Mapping[str, str]] = None,
        scope: Optional[str] = None,
    ) -> int:
        """Run the scan.

        Args:
            workspace: Job workspace directory; created if missing.
            launcher: Launcher for the build agent.
            stream_handler: Build log.
            env: Job environment variables (default: current environment).
            scope: Name of the running job, used to scope credentials.

        Returns:
            The CLI exit code (always 0).

        Raises:
            ResolutionError: If the connection or credentials cannot be resolved.
            StepAbortedError: If the CLI exits with a non-zero value.
        """
        log = stream_handler or NullStreamHandler()
        workspace = Path(workspace)
        script_name = cli_script_name(launcher.is_unix)

        args = self.build_command(workspace, launcher, stream_handler=log, scope=scope)

        workspace.mkdir(parents=True, exist_ok=True)
        environment = dict(os.environ if env is None else env)

        LOGGER.info(f"Running {script_name} in {workspace}")
        log.status(TOOL_NAME, f"$ {args.to_masked_string()}")

        exit_code = launcher.launch(
            args.to_list(),
            cwd=workspace,
            env=environment,
            stream_handler=log,
            tool_name=TOOL_NAME,
        )

        if exit_code != 0:
            error = StepAbortedError(script_name, exit_code)
            LOGGER.error(str(error))
            log.status(TOOL_NAME, str(error))
            raise error

        log.status(TOOL_NAME, f"Call {script_name} exited with value = {exit_code}")
        return exit_code
