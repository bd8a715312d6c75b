"""Properties command implementation."""

from __future__ import annotations

import sys
from argparse import Namespace
from typing import TYPE_CHECKING

from ccscan.cli.commands import Command
from ccscan.cli.exit_codes import EXIT_SUCCESS
from ccscan.core.properties import build_analysis_properties, format_properties
from ccscan.core.streaming import CLIStreamHandler

if TYPE_CHECKING:
    from ccscan.config.models import GlobalConfiguration


class PropertiesCommand(Command):
    """Prints the analysis properties a run would use."""

    @property
    def name(self) -> str:
        return "properties"

    def execute(self, args: Namespace, config: "GlobalConfiguration | None" = None) -> int:
        # Diagnostics go to stderr so stdout stays a valid properties file
        build_log = CLIStreamHandler(output=sys.stderr)
        merged = build_analysis_properties(
            args.analysis_properties_path,
            args.analysis_properties,
            args.workspace.resolve(),
            stream_handler=build_log,
        )
        sys.stdout.write(format_properties(merged))
        return EXIT_SUCCESS
