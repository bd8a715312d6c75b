"""Commands listing host connections and credentials."""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING

from ccscan.cli.commands import Command
from ccscan.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS
from ccscan.core.logging import get_logger
from ccscan.step import connection_choices, credentials_choices

if TYPE_CHECKING:
    from ccscan.config.models import GlobalConfiguration

LOGGER = get_logger(__name__)


class ConnectionsCommand(Command):
    """Lists configured host connections."""

    needs_config = True

    @property
    def name(self) -> str:
        return "connections"

    def execute(self, args: Namespace, config: "GlobalConfiguration | None" = None) -> int:
        if config is None:
            LOGGER.error("Configuration is required for the connections command")
            return EXIT_INVALID_USAGE

        options = [o for o in connection_choices(config) if o.value]
        if not options:
            print("No host connections configured.")
            return EXIT_SUCCESS

        print("Host connections:")
        for option in options:
            print(f"  {option.value}: {option.name}")
        return EXIT_SUCCESS


class CredentialsCommand(Command):
    """Lists credentials available to a job."""

    needs_config = True

    @property
    def name(self) -> str:
        return "credentials"

    def execute(self, args: Namespace, config: "GlobalConfiguration | None" = None) -> int:
        if config is None:
            LOGGER.error("Configuration is required for the credentials command")
            return EXIT_INVALID_USAGE

        options = [o for o in credentials_choices(config, scope=args.job_name) if o.value]
        if not options:
            print("No credentials available.")
            return EXIT_SUCCESS

        print("Credentials:")
        for option in options:
            print(f"  {option.value}: {option.name}")
        return EXIT_SUCCESS
