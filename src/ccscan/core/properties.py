"""Analysis properties parsing and merging.

Analysis properties come from two places:
- a properties file (explicit path, or ``ccanalysis.properties`` in the workspace)
- inline text entered on the build step

Both use the ``key=value`` properties text format. Inline values win over
file values key by key.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ccscan.core.errors import PropertiesParseError
from ccscan.core.logging import get_logger
from ccscan.core.models import LoadStatus, PropertiesLoadResult, PropertyMap
from ccscan.core.streaming import NullStreamHandler, StreamHandler

LOGGER = get_logger(__name__)

DEFAULT_ANALYSIS_PROPERTIES_FILE_NAME = "ccanalysis.properties"

# Name used to tag build log lines written while merging
LOG_SOURCE = "analysis-properties"

_LINE_SPLIT = re.compile(r"\r\n|\r|\n")

# Only these count as whitespace around keys and values
_WHITESPACE = " \t\f"

_UNICODE_ESCAPE = re.compile(r"[0-9a-fA-F]{4}")

_ESCAPES: Dict[str, str] = {
    "t": "\t",
    "n": "\n",
    "r": "\r",
    "f": "\f",
}


def _split_logical_lines(text: str) -> List[Tuple[int, str]]:
    """Join continuation lines.

    Returns:
        (first physical line number, logical line) pairs.
    """
    logical: List[Tuple[int, str]] = []
    pending: Optional[str] = None
    start = 0

    for number, raw in enumerate(_LINE_SPLIT.split(text), start=1):
        if pending is None:
            line = raw.lstrip(_WHITESPACE)
            start = number
            # Comments never continue
            if not line or line[0] in "#!":
                continue
        else:
            line = pending + raw.lstrip(_WHITESPACE)

        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending = line[:-1]
            continue

        pending = None
        logical.append((start, line))

    if pending is not None:
        logical.append((start, pending))

    return logical


def _unescape(text: str) -> str:
    """Decode escape sequences.

    Raises:
        ValueError: If a \\u escape is not followed by four hex digits.
    """
    result: List[str] = []
    i = 0
    while i < len(text):
        char = text[i]
        if char != "\\" or i + 1 >= len(text):
            result.append(char)
            i += 1
            continue

        nxt = text[i + 1]
        if nxt == "u":
            if not _UNICODE_ESCAPE.fullmatch(text[i + 2:i + 6]):
                raise ValueError("Malformed \\uxxxx escape")
            result.append(chr(int(text[i + 2:i + 6], 16)))
            i += 6
            continue

        result.append(_ESCAPES.get(nxt, nxt))
        i += 2

    return "".join(result)


def _rstrip_unescaped(text: str) -> str:
    """Strip trailing whitespace that is not escaped with a backslash."""
    end = len(text)
    while end > 0 and text[end - 1] in _WHITESPACE:
        backslashes = 0
        j = end - 2
        while j >= 0 and text[j] == "\\":
            backslashes += 1
            j -= 1
        if backslashes % 2 == 1:
            break
        end -= 1
    return text[:end]


def _find_separator(line: str) -> int:
    """Index of the first unescaped ``=``, or -1."""
    i = 0
    while i < len(line):
        if line[i] == "\\":
            i += 2
            continue
        if line[i] == "=":
            return i
        i += 1
    return -1


def parse_properties(text: str) -> PropertyMap:
    """Parse properties text into an ordered mapping.

    Keys are kept exactly as written (a leading dash is preserved), and a
    key appearing twice keeps its first position with the last value.

    Args:
        text: Properties text, lines separated by ``\\n``, ``\\r`` or ``\\r\\n``.

    Returns:
        Parsed properties.

    Raises:
        PropertiesParseError: If a non-comment line has no ``=`` or holds
            a malformed ``\\uxxxx`` escape. The error's ``partial``
            attribute holds the properties parsed before that line.
    """
    properties: PropertyMap = {}

    for line_number, line in _split_logical_lines(text):
        separator = _find_separator(line)
        if separator < 0:
            raise PropertiesParseError(
                "Malformed analysis property, expected key=value",
                line_number=line_number,
                line=line,
                partial=properties,
            )

        try:
            key = _unescape(_rstrip_unescaped(line[:separator]))
            value = _unescape(line[separator + 1:].lstrip(_WHITESPACE))
        except ValueError as e:
            raise PropertiesParseError(
                str(e), line_number=line_number, line=line, partial=properties
            ) from e
        properties[key] = value

    return properties


def _escape(text: str, is_key: bool) -> str:
    out: List[str] = []
    for index, char in enumerate(text):
        if char == "\\":
            out.append("\\\\")
        elif char == "\t":
            out.append("\\t")
        elif char == "\n":
            out.append("\\n")
        elif char == "\r":
            out.append("\\r")
        elif char == "\f":
            out.append("\\f")
        elif char == "=" and is_key:
            out.append("\\=")
        elif char in "#!" and is_key and index == 0:
            out.append("\\" + char)
        elif char == " " and (is_key or index == 0):
            out.append("\\ ")
        else:
            out.append(char)
    return "".join(out)


def format_properties(properties: PropertyMap) -> str:
    """Serialize properties as ``key=value`` lines.

    The output parses back to the same mapping with :func:`parse_properties`.

    Args:
        properties: Properties to serialize.

    Returns:
        Properties text, one entry per line.
    """
    return "".join(
        f"{_escape(key, is_key=True)}={_escape(value, is_key=False)}\n"
        for key, value in properties.items()
    )


def resolve_properties_path(file_path: str, working_dir: Path) -> Tuple[Path, bool]:
    """Determine which properties file to read.

    Args:
        file_path: User-supplied path; may be blank.
        working_dir: Job workspace.

    Returns:
        (path, explicitly specified) tuple.
    """
    if file_path and file_path.strip():
        path = Path(file_path.strip())
        if not path.is_absolute():
            path = Path(working_dir) / path
        return path, True

    return Path(working_dir) / DEFAULT_ANALYSIS_PROPERTIES_FILE_NAME, False


def load_properties_file(path: Path) -> PropertiesLoadResult:
    """Read and parse a properties file without raising.

    Args:
        path: File to read as UTF-8.

    Returns:
        PropertiesLoadResult describing what happened.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as e:
        return PropertiesLoadResult(path=path, status=LoadStatus.ABSENT, error=e)
    except (OSError, UnicodeDecodeError) as e:
        return PropertiesLoadResult(path=path, status=LoadStatus.UNREADABLE, error=e)

    try:
        properties = parse_properties(text)
    except PropertiesParseError as e:
        return PropertiesLoadResult(
            path=path,
            status=LoadStatus.MALFORMED,
            properties=e.partial,
            text=text,
            error=e,
        )

    return PropertiesLoadResult(
        path=path, status=LoadStatus.LOADED, properties=properties, text=text
    )


def _parse_best_effort(text: str, source: str, log: StreamHandler) -> PropertyMap:
    try:
        return parse_properties(text)
    except PropertiesParseError as e:
        LOGGER.error(f"Failed to parse analysis properties from {source}: {e}")
        log.warning(LOG_SOURCE, f"An error occurred while parsing analysis properties from {source}: {e}")
        return e.partial


def build_analysis_properties(
    file_path: str,
    inline_text: str,
    working_dir: Path,
    stream_handler: Optional[StreamHandler] = None,
) -> PropertyMap:
    """Merge analysis properties from a file and inline text.

    Properties from ``inline_text`` take precedence over properties from
    the file. Keys overridden by inline text keep their file position;
    inline-only keys are appended. Blank values are kept.

    A missing or unreadable file is not fatal: it is reported as a warning
    when ``file_path`` was given, and ignored silently when the default
    file name was used. Malformed text is reported and whatever parsed
    before the bad line is used.

    Args:
        file_path: Path of the properties file, absolute or relative to
            ``working_dir``; blank to use ``ccanalysis.properties``.
        inline_text: Inline properties text; may be blank.
        working_dir: Job workspace.
        stream_handler: Build log.

    Returns:
        Merged properties.
    """
    log = stream_handler or NullStreamHandler()
    merged: PropertyMap = {}

    path, specified = resolve_properties_path(file_path, working_dir)
    log.status(LOG_SOURCE, f"Analysis properties file path: {path.absolute()}")

    result = load_properties_file(path)
    if result.status in (LoadStatus.ABSENT, LoadStatus.UNREADABLE):
        message = f"Unable to read analysis properties file {path}: {result.error}"
        if specified:
            LOGGER.warning(message)
            log.warning(LOG_SOURCE, message)
        else:
            LOGGER.debug(message)
    else:
        log.status(LOG_SOURCE, f"Analysis properties string from file: {result.text}")
        if result.status == LoadStatus.MALFORMED:
            LOGGER.error(f"Failed to parse analysis properties from {path}: {result.error}")
            log.warning(
                LOG_SOURCE,
                f"An error occurred while parsing analysis properties from the file: {result.error}",
            )
        merged.update(result.properties)

    if inline_text and inline_text.strip():
        log.status(LOG_SOURCE, f"Analysis properties string from UI: {inline_text}")
        merged.update(_parse_best_effort(inline_text, "the UI", log))

    return merged
