"""CLI runner: parses arguments and dispatches to commands."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from typing import Dict, Iterable, Optional

from ccscan.cli.arguments import build_parser
from ccscan.cli.commands import (
    Command,
    ConnectionsCommand,
    CredentialsCommand,
    DefaultsCommand,
    PropertiesCommand,
    RunCommand,
)
from ccscan.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS
from ccscan.config import load_config
from ccscan.core.errors import ConfigError
from ccscan.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


def get_version() -> str:
    try:
        return version("ccscan")
    except PackageNotFoundError:
        # Fallback for editable installs that have not yet built metadata.
        from ccscan import __version__

        return __version__


class CLIRunner:
    """Entry point object behind ``ccscan``."""

    def __init__(self) -> None:
        self._parser = build_parser()
        self._commands: Dict[str, Command] = {
            command.name: command
            for command in (
                RunCommand(),
                PropertiesCommand(),
                ConnectionsCommand(),
                CredentialsCommand(),
                DefaultsCommand(),
            )
        }

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Parse arguments and run the selected command.

        Args:
            argv: Command-line arguments (defaults to sys.argv).

        Returns:
            Exit code.
        """
        argv_list = list(argv) if argv is not None else None

        try:
            args = self._parser.parse_args(argv_list)
        except SystemExit as e:
            # argparse exits on --help (0) and on usage errors (2)
            return EXIT_SUCCESS if e.code in (0, None) else EXIT_INVALID_USAGE

        configure_logging(debug=args.debug, verbose=args.verbose, quiet=args.quiet)

        if args.version:
            print(get_version())
            return EXIT_SUCCESS

        command = self._commands.get(args.command or "")
        if command is None:
            self._parser.print_help()
            return EXIT_SUCCESS

        config = None
        if command.needs_config:
            try:
                config = load_config(
                    project_root=getattr(args, "workspace", None),
                    cli_config_path=args.config,
                )
            except ConfigError as e:
                LOGGER.error(str(e))
                return EXIT_INVALID_USAGE

        return command.execute(args, config)
