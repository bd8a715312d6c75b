"""Defaults command implementation."""

from __future__ import annotations

import sys
from argparse import Namespace
from typing import TYPE_CHECKING

from ccscan.cli.commands import Command
from ccscan.cli.exit_codes import EXIT_SUCCESS
from ccscan.step import DEFAULT_ANALYSIS_PROPERTIES

if TYPE_CHECKING:
    from ccscan.config.models import GlobalConfiguration


class DefaultsCommand(Command):
    """Prints the default analysis properties for a new step."""

    @property
    def name(self) -> str:
        return "defaults"

    def execute(self, args: Namespace, config: "GlobalConfiguration | None" = None) -> int:
        sys.stdout.write(DEFAULT_ANALYSIS_PROPERTIES)
        return EXIT_SUCCESS
