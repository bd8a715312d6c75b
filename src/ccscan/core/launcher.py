"""Process launchers.

A launcher knows the platform of the machine running the build step and
starts processes there.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Mapping, Optional, Sequence

from ccscan.core.logging import get_logger
from ccscan.core.streaming import StreamHandler
from ccscan.core.subprocess_runner import run_with_streaming

LOGGER = get_logger(__name__)


class Launcher(ABC):
    """Starts processes on a build agent."""

    @property
    @abstractmethod
    def is_unix(self) -> bool:
        """True when the agent runs a Unix-style shell."""

    @property
    def file_separator(self) -> str:
        """Path separator of the agent's platform."""
        return "/" if self.is_unix else "\\"

    @abstractmethod
    def launch(
        self,
        cmd: Sequence[str],
        cwd: Path,
        env: Optional[Mapping[str, str]],
        stream_handler: StreamHandler,
        tool_name: str,
    ) -> int:
        """Run a command to completion.

        Args:
            cmd: Command and arguments.
            cwd: Working directory.
            env: Environment for the child process.
            stream_handler: Build log receiving the output.
            tool_name: Name used to tag output lines.

        Returns:
            The process exit code.
        """


class LocalLauncher(Launcher):
    """Runs processes on the current machine."""

    def __init__(self, timeout: Optional[float] = None) -> None:
        """Initialize LocalLauncher.

        Args:
            timeout: Seconds before a process is killed; None waits forever.
        """
        self._timeout = timeout

    @property
    def is_unix(self) -> bool:
        return os.name != "nt"

    @property
    def file_separator(self) -> str:
        return os.sep

    def launch(
        self,
        cmd: Sequence[str],
        cwd: Path,
        env: Optional[Mapping[str, str]],
        stream_handler: StreamHandler,
        tool_name: str,
    ) -> int:
        result = run_with_streaming(
            cmd=cmd,
            cwd=cwd,
            tool_name=tool_name,
            stream_handler=stream_handler,
            env=env,
            timeout=self._timeout,
        )
        return result.returncode
