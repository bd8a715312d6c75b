"""Interfaces to the global configuration consumed by the build step.

The build step never looks up connections or credentials on its own;
callers hand it objects implementing these interfaces.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from ccscan.core.models import Credentials, HostConnection


class ConnectionRegistry(ABC):
    """Read-only registry of mainframe host connections."""

    @abstractmethod
    def resolve_connection(self, connection_id: str) -> HostConnection:
        """Look up a host connection.

        Args:
            connection_id: Unique host connection identifier.

        Returns:
            The host connection.

        Raises:
            ConnectionNotFoundError: If no connection has this id.
        """

    @abstractmethod
    def list_connections(self) -> List[HostConnection]:
        """Return all configured host connections."""


class CredentialStore(ABC):
    """Read-only store of login credentials."""

    @abstractmethod
    def resolve_credentials(self, credentials_id: str, scope: Optional[str] = None) -> Credentials:
        """Look up credentials visible to a job.

        Args:
            credentials_id: Unique credentials identifier.
            scope: Name of the job requesting the credentials.

        Returns:
            The credentials.

        Raises:
            CredentialsNotFoundError: If the id is unknown or not visible to the job.
        """

    @abstractmethod
    def list_credentials(self, scope: Optional[str] = None) -> List[Credentials]:
        """Return all credentials visible to a job."""
