"""Exception hierarchy for ccscan."""

from __future__ import annotations

from typing import Dict, Optional


class CCScanError(Exception):
    """Base class for all ccscan errors."""


class ConfigError(CCScanError):
    """Configuration loading or parsing error."""


class PropertiesParseError(CCScanError):
    """Analysis properties text contains a malformed line.

    ``partial`` holds every property parsed before the offending line so
    callers can continue on a best-effort basis.
    """

    def __init__(
        self,
        message: str,
        line_number: int,
        line: str,
        partial: Optional[Dict[str, str]] = None,
    ) -> None:
        super().__init__(f"{message} (line {line_number}: {line!r})")
        self.line_number = line_number
        self.line = line
        self.partial: Dict[str, str] = dict(partial or {})


class ResolutionError(CCScanError):
    """A configured identifier could not be resolved from global configuration."""


class ConnectionNotFoundError(ResolutionError):
    """No host connection exists for the requested connection id."""

    def __init__(self, connection_id: str) -> None:
        super().__init__(f"Host connection not found: '{connection_id}'")
        self.connection_id = connection_id


class CredentialsNotFoundError(ResolutionError):
    """No credentials exist (or are visible to the job) for the requested id."""

    def __init__(self, credentials_id: str, scope: Optional[str] = None) -> None:
        message = f"Login credentials not found: '{credentials_id}'"
        if scope:
            message += f" (job: {scope})"
        super().__init__(message)
        self.credentials_id = credentials_id
        self.scope = scope


class StepAbortedError(CCScanError):
    """The Code Coverage CLI exited with a non-zero value."""

    def __init__(self, script_name: str, exit_code: int) -> None:
        super().__init__(f"Call {script_name} exited with value = {exit_code}")
        self.script_name = script_name
        self.exit_code = exit_code
