"""Configuration data models for ccscan.

Example config.yml:
    cli_location: /opt/topaz/TopazCLI
    host_connections:
      - id: cw01
        description: Development LPAR
        host: cw01.example.com
        port: 16196
        code_page: 1047
        timeout: 0
    credentials:
      - id: dev-user
        username: XDEVREG
        password: ${TOPAZ_PASSWORD}
        description: development user
        scopes: []   # job names allowed to use it; empty = all jobs
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ccscan.core.collaborators import ConnectionRegistry, CredentialStore
from ccscan.core.errors import ConnectionNotFoundError, CredentialsNotFoundError
from ccscan.core.models import Credentials, HostConnection


@dataclass
class GlobalConfiguration(ConnectionRegistry, CredentialStore):
    """Host connections, credentials and the Topaz CLI location."""

    cli_location: str = ""
    host_connections: Dict[str, HostConnection] = field(default_factory=dict)
    credentials: Dict[str, Credentials] = field(default_factory=dict)

    # Metadata (not from YAML, set by loader)
    _config_sources: List[str] = field(default_factory=list, repr=False)

    @property
    def config_sources(self) -> List[str]:
        return list(self._config_sources)

    def resolve_connection(self, connection_id: str) -> HostConnection:
        connection = self.host_connections.get(connection_id)
        if connection is None:
            raise ConnectionNotFoundError(connection_id)
        return connection

    def list_connections(self) -> List[HostConnection]:
        return list(self.host_connections.values())

    def resolve_credentials(self, credentials_id: str, scope: Optional[str] = None) -> Credentials:
        credentials = self.credentials.get(credentials_id)
        if credentials is None or not credentials.is_visible_to(scope):
            raise CredentialsNotFoundError(credentials_id, scope)
        return credentials

    def list_credentials(self, scope: Optional[str] = None) -> List[Credentials]:
        return [c for c in self.credentials.values() if c.is_visible_to(scope)]
