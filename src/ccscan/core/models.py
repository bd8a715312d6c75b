"""Data models shared across ccscan.

StepConfig is the immutable step configuration; HostConnection and
Credentials are resolved from global configuration at run time;
ArgumentList carries the command line handed to the launcher.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set, Tuple

# Ordered key -> value mapping of analysis properties.
PropertyMap = Dict[str, str]

MASK = "******"


def _trim_to_empty(value: Optional[str]) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class StepConfig:
    """Configuration of a single Code Coverage build step.

    All fields are strings; ``None`` becomes ``""`` and surrounding
    whitespace is removed when the object is created.
    """

    connection_id: str = ""
    credentials_id: str = ""
    analysis_properties_path: str = ""
    analysis_properties: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "connection_id", _trim_to_empty(self.connection_id))
        object.__setattr__(self, "credentials_id", _trim_to_empty(self.credentials_id))
        object.__setattr__(
            self, "analysis_properties_path", _trim_to_empty(self.analysis_properties_path)
        )
        object.__setattr__(
            self, "analysis_properties", _trim_to_empty(self.analysis_properties)
        )

    @classmethod
    def from_form(cls, data: Mapping[str, Any]) -> "StepConfig":
        """Build a StepConfig from submitted form or job-definition data.

        Accepts the form field names (``connectionId``, ...) as well as the
        snake_case attribute names. Unknown keys are ignored.

        Args:
            data: Mapping of field name to value.

        Returns:
            New StepConfig instance.
        """

        def pick(camel: str, snake: str) -> Optional[str]:
            if camel in data:
                return data[camel]
            return data.get(snake)

        return cls(
            connection_id=pick("connectionId", "connection_id"),  # type: ignore[arg-type]
            credentials_id=pick("credentialsId", "credentials_id"),  # type: ignore[arg-type]
            analysis_properties_path=pick(  # type: ignore[arg-type]
                "analysisPropertiesPath", "analysis_properties_path"
            ),
            analysis_properties=pick(  # type: ignore[arg-type]
                "analysisProperties", "analysis_properties"
            ),
        )

    def to_form(self) -> Dict[str, str]:
        """Return the configuration keyed by form field name."""
        return {
            "connectionId": self.connection_id,
            "credentialsId": self.credentials_id,
            "analysisPropertiesPath": self.analysis_properties_path,
            "analysisProperties": self.analysis_properties,
        }


@dataclass(frozen=True)
class HostConnection:
    """A mainframe host connection from global configuration."""

    connection_id: str
    host: str
    port: str
    description: str = ""
    code_page: str = "1047"
    timeout: str = "0"

    @property
    def host_port(self) -> str:
        """Host and port in ``host:port`` form."""
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class Credentials:
    """Username/password credentials from global configuration."""

    credentials_id: str
    username: str
    password: str = field(repr=False)
    description: str = ""
    # Job names allowed to use these credentials; empty means every job
    scopes: Tuple[str, ...] = ()

    def is_visible_to(self, scope: Optional[str]) -> bool:
        """Check whether a job may use these credentials.

        Args:
            scope: Job name requesting the credentials, or None.

        Returns:
            True if unrestricted or the job is listed in ``scopes``.
        """
        if not self.scopes:
            return True
        return scope is not None and scope in self.scopes


class LoadStatus(str, Enum):
    """Outcome of reading an analysis properties file."""

    LOADED = "loaded"
    ABSENT = "absent"
    UNREADABLE = "unreadable"
    MALFORMED = "malformed"


@dataclass
class PropertiesLoadResult:
    """Result of loading a properties file.

    ``properties`` is empty for ABSENT and UNREADABLE, and holds whatever
    was parsed before the bad line for MALFORMED.
    """

    path: Path
    status: LoadStatus
    properties: PropertyMap = field(default_factory=dict)
    text: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status == LoadStatus.LOADED


class ArgumentList:
    """Ordered command-line tokens with support for masked values.

    Masked tokens are passed to the process unchanged but are replaced by
    ``******`` whenever the command line is rendered for a log.
    """

    def __init__(self, *tokens: str) -> None:
        self._tokens: List[str] = []
        self._masked: Set[int] = set()
        for token in tokens:
            self.add(token)

    def add(self, flag: str, value: Optional[str] = None) -> "ArgumentList":
        """Append a flag and, if given, its value.

        Args:
            flag: Flag or lone token (e.g. the script path).
            value: Optional value following the flag.

        Returns:
            self, for chaining.
        """
        self._tokens.append(flag)
        if value is not None:
            self._tokens.append(value)
        return self

    def add_masked(self, value: str) -> "ArgumentList":
        """Append a sensitive token that must never be echoed."""
        self._masked.add(len(self._tokens))
        self._tokens.append(value)
        return self

    def is_masked(self, index: int) -> bool:
        return index in self._masked

    @property
    def masked_values(self) -> List[str]:
        """The sensitive tokens, in order."""
        return [self._tokens[i] for i in sorted(self._masked)]

    def to_list(self) -> List[str]:
        """Tokens with real values, for process launch."""
        return list(self._tokens)

    def to_masked_list(self) -> List[str]:
        """Tokens with sensitive values replaced by the mask."""
        return [
            MASK if i in self._masked else token for i, token in enumerate(self._tokens)
        ]

    def to_masked_string(self) -> str:
        """Single-line rendering safe for logs."""
        return " ".join(self.to_masked_list())

    def __iter__(self) -> Iterator[str]:
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __repr__(self) -> str:
        return f"ArgumentList({self.to_masked_string()!r})"

    def __str__(self) -> str:
        return self.to_masked_string()
