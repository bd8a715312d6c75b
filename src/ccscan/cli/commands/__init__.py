"""CLI commands package.

This module provides the base Command class and exports all command implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ccscan.config.models import GlobalConfiguration


class Command(ABC):
    """Base class for CLI commands.

    All CLI commands should inherit from this class and implement
    the execute method.
    """

    # Whether the runner must load the global configuration first
    needs_config: bool = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Command identifier, as typed on the command line."""

    @abstractmethod
    def execute(self, args: Namespace, config: "GlobalConfiguration | None" = None) -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments.
            config: Global configuration, when ``needs_config`` is set.

        Returns:
            Exit code (0 for success, non-zero for error).
        """


# Import command implementations for convenience
# ruff: noqa: E402
from ccscan.cli.commands.run import RunCommand
from ccscan.cli.commands.properties import PropertiesCommand
from ccscan.cli.commands.connections import ConnectionsCommand, CredentialsCommand
from ccscan.cli.commands.defaults import DefaultsCommand

__all__ = [
    "Command",
    "RunCommand",
    "PropertiesCommand",
    "ConnectionsCommand",
    "CredentialsCommand",
    "DefaultsCommand",
]
