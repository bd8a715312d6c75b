"""Escaping helpers for Code Coverage CLI arguments.

Values are quoted the same way for shell and batch scripts: embedded
double quotes are doubled and the whole value is wrapped in double quotes.
"""

from __future__ import annotations

from typing import Optional

DASH = "-"
COMMA = ","
DOUBLE_QUOTE = '"'
DOUBLE_QUOTE_ESCAPED = '""'


def escape_for_script(value: Optional[str]) -> Optional[str]:
    """Escape a value for a batch or shell script.

    Args:
        value: Value to escape, or None.

    Returns:
        The quoted value, or None when ``value`` is None.
    """
    if value is None:
        return None

    escaped = value.replace(DOUBLE_QUOTE, DOUBLE_QUOTE_ESCAPED)
    return wrap_in_quotes(escaped)


def escape_comma_delimited_paths_for_script(value: Optional[str]) -> Optional[str]:
    """Escape each path of a comma-delimited list individually.

    ``/a,/b c`` becomes ``"/a","/b c"``.

    Args:
        value: Comma-delimited paths, or None.

    Returns:
        The escaped list, or None when ``value`` is None.
    """
    if value is None:
        return None

    return COMMA.join(escape_for_script(path) or "" for path in value.split(COMMA))


def wrap_in_quotes(value: Optional[str]) -> Optional[str]:
    """Wrap a value in double quotes without escaping it."""
    if value is None:
        return None
    return f"{DOUBLE_QUOTE}{value}{DOUBLE_QUOTE}"


def prefix_with_dash(key: str) -> str:
    """Prefix a property key with a dash unless it already has one.

    Args:
        key: Property key, e.g. ``cc.sources`` or ``-cc.sources``.

    Returns:
        The dashed key.
    """
    if key.startswith(DASH):
        return key
    return DASH + key
