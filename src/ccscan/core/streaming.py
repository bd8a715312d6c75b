"""Build log stream handlers.

The build log receives two kinds of events:
- tool output: lines printed by the Code Coverage CLI while it runs
- status: diagnostic lines written by the build step itself

Handlers:
- CLI: Print to a console stream with optional Rich formatting
- Callback: Forward events to another system (or collect them in tests)
- Null: Discard everything
"""

from __future__ import annotations

import sys
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, TextIO

from rich.console import Console
from rich.markup import escape


class StreamType(str, Enum):
    """Type of stream output."""

    STDOUT = "stdout"
    STDERR = "stderr"
    STATUS = "status"
    WARNING = "warning"


@dataclass
class StreamEvent:
    """A single line written to the build log."""

    tool_name: str
    stream_type: StreamType
    content: str
    line_number: Optional[int] = None


class StreamHandler(ABC):
    """Abstract base class for stream handlers.

    Implementations must be thread-safe: status lines and tool output
    may be emitted from different threads.
    """

    @abstractmethod
    def emit(self, event: StreamEvent) -> None:
        """Emit a stream event.

        Args:
            event: The stream event to emit.
        """

    @abstractmethod
    def start_tool(self, tool_name: str) -> None:
        """Signal that a tool has started execution.

        Args:
            tool_name: Name of the tool that started.
        """

    @abstractmethod
    def end_tool(self, tool_name: str, success: bool) -> None:
        """Signal that a tool has finished execution.

        Args:
            tool_name: Name of the tool that finished.
            success: Whether the tool completed successfully.
        """

    def status(self, tool_name: str, message: str) -> None:
        """Write a diagnostic line to the build log."""
        self.emit(StreamEvent(tool_name=tool_name, stream_type=StreamType.STATUS, content=message))

    def warning(self, tool_name: str, message: str) -> None:
        """Write a warning line to the build log."""
        self.emit(StreamEvent(tool_name=tool_name, stream_type=StreamType.WARNING, content=message))


class NullStreamHandler(StreamHandler):
    """No-op handler, used when no build log is attached."""

    def emit(self, event: StreamEvent) -> None:
        pass

    def start_tool(self, tool_name: str) -> None:
        pass

    def end_tool(self, tool_name: str, success: bool) -> None:
        pass


class CLIStreamHandler(StreamHandler):
    """Thread-safe console build log.

    Tool output is printed verbatim (optionally prefixed with the tool
    name); status and warning lines are printed as they are emitted.
    """

    def __init__(
        self,
        output: TextIO = sys.stdout,
        show_output: bool = True,
        use_rich: bool = False,
        prefix_output: bool = False,
    ):
        """Initialize CLIStreamHandler.

        Args:
            output: Output stream to write to (default: stdout).
            show_output: Whether to show raw tool output lines.
            use_rich: Whether to use Rich for formatted output.
            prefix_output: Whether to prefix tool output with the tool name.
        """
        self._output = output
        self._show_output = show_output
        self._prefix_output = prefix_output
        self._lock = threading.Lock()
        self._console: Optional[Console] = None

        if use_rich:
            self._console = Console(file=output, force_terminal=True, highlight=False)

    def emit(self, event: StreamEvent) -> None:
        """Emit a stream event to the console.

        Args:
            event: The stream event to emit.
        """
        with self._lock:
            if event.stream_type == StreamType.STATUS:
                self._print_status(event.content)
            elif event.stream_type == StreamType.WARNING:
                self._print_warning(event.content)
            elif self._show_output:
                prefix = f"  {event.tool_name}: " if self._prefix_output else ""
                self._print_line(prefix, event.content)

    def start_tool(self, tool_name: str) -> None:
        with self._lock:
            self._print_status(f"[{tool_name}] Starting...")

    def end_tool(self, tool_name: str, success: bool) -> None:
        with self._lock:
            if success:
                self._print_status(f"[{tool_name}] Done")
            else:
                self._print_status(f"[{tool_name}] Failed")

    def _print_status(self, message: str) -> None:
        if self._console:
            self._console.print(f"[bold cyan]{escape(message)}[/bold cyan]")
        else:
            print(message, file=self._output, flush=True)

    def _print_warning(self, message: str) -> None:
        if self._console:
            self._console.print(f"[bold yellow]WARNING: {escape(message)}[/bold yellow]")
        else:
            print(f"WARNING: {message}", file=self._output, flush=True)

    def _print_line(self, prefix: str, content: str) -> None:
        if self._console:
            self._console.print(f"[dim]{escape(prefix)}[/dim]{escape(content)}")
        else:
            print(f"{prefix}{content}", file=self._output, flush=True)


class CallbackStreamHandler(StreamHandler):
    """Handler that invokes callbacks for stream events.

    Useful when the build log lives in another system, and for
    collecting events in tests.
    """

    def __init__(
        self,
        on_event: Optional[Callable[[StreamEvent], None]] = None,
        on_start: Optional[Callable[[str], None]] = None,
        on_end: Optional[Callable[[str, bool], None]] = None,
    ):
        """Initialize CallbackStreamHandler.

        Args:
            on_event: Callback for stream events.
            on_start: Callback when a tool starts.
            on_end: Callback when a tool ends.
        """
        self._on_event = on_event
        self._on_start = on_start
        self._on_end = on_end
        self._lock = threading.Lock()

    def emit(self, event: StreamEvent) -> None:
        if self._on_event:
            with self._lock:
                self._on_event(event)

    def start_tool(self, tool_name: str) -> None:
        if self._on_start:
            with self._lock:
                self._on_start(tool_name)

    def end_tool(self, tool_name: str, success: bool) -> None:
        if self._on_end:
            with self._lock:
                self._on_end(tool_name, success)
