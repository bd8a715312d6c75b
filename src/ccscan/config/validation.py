"""Configuration validation for ccscan.

Warns on unknown keys and wrong types. Never raises: problems are
returned (and logged) as warnings so a typo does not break a build.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, Dict, List, Optional, Set

from ccscan.core.logging import get_logger

LOGGER = get_logger(__name__)

# Valid top-level keys
VALID_TOP_LEVEL_KEYS: Set[str] = {
    "cli_location",
    "host_connections",
    "credentials",
}

# Valid keys of a host_connections entry
VALID_CONNECTION_KEYS: Set[str] = {
    "id",
    "description",
    "host",
    "port",
    "code_page",
    "timeout",
}

REQUIRED_CONNECTION_KEYS: Set[str] = {"id", "host", "port"}

# Valid keys of a credentials entry
VALID_CREDENTIALS_KEYS: Set[str] = {
    "id",
    "username",
    "password",
    "description",
    "scopes",
}

REQUIRED_CREDENTIALS_KEYS: Set[str] = {"id", "username", "password"}


@dataclass
class ConfigValidationWarning:
    """A validation warning for configuration."""

    message: str
    source: str
    key: Optional[str] = None
    suggestion: Optional[str] = None


def validate_config(
    data: Dict[str, Any],
    source: str,
) -> List[ConfigValidationWarning]:
    """Validate a configuration dictionary.

    Args:
        data: Config dictionary to validate.
        source: Source file path for warning messages.

    Returns:
        List of validation warnings.
    """
    warnings: List[ConfigValidationWarning] = []

    if not isinstance(data, dict):
        warnings.append(ConfigValidationWarning(
            message=f"Config must be a mapping, got {type(data).__name__}",
            source=source,
        ))
        return warnings

    for key in data.keys():
        if key not in VALID_TOP_LEVEL_KEYS:
            _add(warnings, ConfigValidationWarning(
                message=f"Unknown top-level key '{key}'",
                source=source,
                key=key,
                suggestion=_suggest_key(key, VALID_TOP_LEVEL_KEYS),
            ))

    cli_location = data.get("cli_location")
    if cli_location is not None and not isinstance(cli_location, str):
        _add(warnings, ConfigValidationWarning(
            message=f"'cli_location' must be a string, got {type(cli_location).__name__}",
            source=source,
            key="cli_location",
        ))

    _validate_entries(
        data.get("host_connections"),
        "host_connections",
        VALID_CONNECTION_KEYS,
        REQUIRED_CONNECTION_KEYS,
        source,
        warnings,
    )
    _validate_entries(
        data.get("credentials"),
        "credentials",
        VALID_CREDENTIALS_KEYS,
        REQUIRED_CREDENTIALS_KEYS,
        source,
        warnings,
    )

    credentials = data.get("credentials")
    if isinstance(credentials, list):
        for index, entry in enumerate(credentials):
            if isinstance(entry, dict) and "scopes" in entry:
                if not isinstance(entry["scopes"], list):
                    _add(warnings, ConfigValidationWarning(
                        message=f"'credentials[{index}].scopes' must be a list",
                        source=source,
                        key=f"credentials[{index}].scopes",
                    ))

    return warnings


def _validate_entries(
    entries: Any,
    section: str,
    valid_keys: Set[str],
    required_keys: Set[str],
    source: str,
    warnings: List[ConfigValidationWarning],
) -> None:
    if entries is None:
        return

    if not isinstance(entries, list):
        _add(warnings, ConfigValidationWarning(
            message=f"'{section}' must be a list, got {type(entries).__name__}",
            source=source,
            key=section,
        ))
        return

    seen: Set[str] = set()
    for index, entry in enumerate(entries):
        prefix = f"{section}[{index}]"
        if not isinstance(entry, dict):
            _add(warnings, ConfigValidationWarning(
                message=f"'{prefix}' must be a mapping, got {type(entry).__name__}",
                source=source,
                key=prefix,
            ))
            continue

        for key in entry.keys():
            if key not in valid_keys:
                _add(warnings, ConfigValidationWarning(
                    message=f"Unknown key '{prefix}.{key}'",
                    source=source,
                    key=f"{prefix}.{key}",
                    suggestion=_suggest_key(key, valid_keys),
                ))

        for key in sorted(required_keys - set(entry.keys())):
            _add(warnings, ConfigValidationWarning(
                message=f"Missing required key '{prefix}.{key}'",
                source=source,
                key=f"{prefix}.{key}",
            ))

        entry_id = entry.get("id")
        if entry_id is not None:
            if str(entry_id) in seen:
                _add(warnings, ConfigValidationWarning(
                    message=f"Duplicate id '{entry_id}' in '{section}'",
                    source=source,
                    key=f"{prefix}.id",
                ))
            seen.add(str(entry_id))


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a potential typo.

    Args:
        invalid_key: The invalid key entered.
        valid_keys: Set of valid keys.

    Returns:
        Closest matching valid key, or None if no good match.
    """
    matches = get_close_matches(str(invalid_key), list(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _add(warnings: List[ConfigValidationWarning], warning: ConfigValidationWarning) -> None:
    warnings.append(warning)
    _log_warning(warning)


def _log_warning(warning: ConfigValidationWarning) -> None:
    """Log a validation warning."""
    msg = f"{warning.message} in {warning.source}"
    if warning.suggestion:
        msg += f" (did you mean '{warning.suggestion}'?)"
    LOGGER.warning(msg)
