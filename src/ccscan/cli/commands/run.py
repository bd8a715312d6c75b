"""Run command implementation."""

from __future__ import annotations

import sys
from argparse import Namespace
from typing import TYPE_CHECKING

from ccscan.cli.commands import Command
from ccscan.cli.exit_codes import (
    EXIT_INVALID_USAGE,
    EXIT_RESOLUTION_FAILURE,
    EXIT_STEP_ABORTED,
    EXIT_SUCCESS,
)
from ccscan.core.errors import ResolutionError, StepAbortedError
from ccscan.core.launcher import LocalLauncher
from ccscan.core.logging import get_logger
from ccscan.core.streaming import CLIStreamHandler
from ccscan.step import CodeCoverageStep

if TYPE_CHECKING:
    from ccscan.config.models import GlobalConfiguration

LOGGER = get_logger(__name__)


class RunCommand(Command):
    """Runs the Code Coverage build step."""

    needs_config = True

    @property
    def name(self) -> str:
        return "run"

    def execute(self, args: Namespace, config: "GlobalConfiguration | None" = None) -> int:
        """Execute the run command.

        Args:
            args: Parsed command-line arguments.
            config: Global configuration.

        Returns:
            Exit code based on the step result.
        """
        if config is None:
            LOGGER.error("Configuration is required for the run command")
            return EXIT_INVALID_USAGE

        step = CodeCoverageStep(
            connection_id=args.connection_id,
            credentials_id=args.credentials_id,
            analysis_properties_path=args.analysis_properties_path,
            analysis_properties=args.analysis_properties,
        )

        errors = step.validate()
        if errors:
            for error in errors:
                LOGGER.error(error.message)
            return EXIT_INVALID_USAGE

        cli_location = args.cli_location or config.cli_location
        if not cli_location:
            LOGGER.error("Topaz CLI location is not configured (set cli_location or --cli-location)")
            return EXIT_INVALID_USAGE

        build_log = CLIStreamHandler(output=sys.stdout, use_rich=args.rich)

        try:
            step.perform(
                workspace=args.workspace.resolve(),
                launcher=LocalLauncher(),
                connection_registry=config,
                credential_store=config,
                cli_location=cli_location,
                stream_handler=build_log,
                job_name=args.job_name,
            )
        except ResolutionError as e:
            LOGGER.error(str(e))
            return EXIT_RESOLUTION_FAILURE
        except StepAbortedError as e:
            LOGGER.error(str(e))
            return EXIT_STEP_ABORTED
        except OSError as e:
            # Missing or non-executable CLI script
            LOGGER.error(f"Unable to launch the Code Coverage CLI: {e}")
            return EXIT_STEP_ABORTED

        return EXIT_SUCCESS
