"""Subprocess execution with live output streaming.

Runs a command, forwarding each line of its combined stdout/stderr to a
StreamHandler as soon as it is produced, and returns the completed process.
"""

from __future__ import annotations

import subprocess
import threading
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from ccscan.core.logging import get_logger
from ccscan.core.streaming import NullStreamHandler, StreamEvent, StreamHandler, StreamType

LOGGER = get_logger(__name__)


def run_with_streaming(
    cmd: Sequence[str],
    cwd: Path,
    tool_name: str,
    stream_handler: Optional[StreamHandler] = None,
    env: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = None,
) -> subprocess.CompletedProcess:
    """Run a command and stream its output line by line.

    stderr is merged into stdout so lines keep the order the tool wrote them.

    Args:
        cmd: Command and arguments.
        cwd: Working directory.
        tool_name: Name used to tag stream events.
        stream_handler: Destination for output lines (default: discard).
        env: Full environment for the child, or None to inherit.
        timeout: Seconds before the child is killed, or None to wait forever.

    Returns:
        CompletedProcess with ``stdout`` holding the combined output.

    Raises:
        FileNotFoundError: If the executable does not exist.
        subprocess.TimeoutExpired: If the timeout elapsed.
    """
    handler = stream_handler or NullStreamHandler()
    lines: List[str] = []

    process = subprocess.Popen(
        list(cmd),
        cwd=str(cwd),
        env=dict(env) if env is not None else None,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        stdin=subprocess.DEVNULL,
        text=True,
        encoding="utf-8",
        errors="replace",
        bufsize=1,
    )

    timed_out = threading.Event()
    timer: Optional[threading.Timer] = None
    if timeout is not None:

        def _kill() -> None:
            timed_out.set()
            process.kill()

        timer = threading.Timer(timeout, _kill)
        timer.daemon = True
        timer.start()

    handler.start_tool(tool_name)
    try:
        assert process.stdout is not None
        for line_number, line in enumerate(process.stdout, start=1):
            content = line.rstrip("\r\n")
            lines.append(content)
            handler.emit(
                StreamEvent(
                    tool_name=tool_name,
                    stream_type=StreamType.STDOUT,
                    content=content,
                    line_number=line_number,
                )
            )
        returncode = process.wait()
    except KeyboardInterrupt:
        LOGGER.warning(f"Interrupted, terminating {tool_name}")
        process.kill()
        process.wait()
        handler.end_tool(tool_name, False)
        raise
    finally:
        if timer is not None:
            timer.cancel()
        if process.stdout is not None:
            process.stdout.close()

    if timed_out.is_set():
        handler.end_tool(tool_name, False)
        raise subprocess.TimeoutExpired(list(cmd), timeout or 0, output="\n".join(lines))

    handler.end_tool(tool_name, returncode == 0)
    return subprocess.CompletedProcess(
        args=list(cmd),
        returncode=returncode,
        stdout="\n".join(lines),
        stderr="",
    )
