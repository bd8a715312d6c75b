"""Shared fixtures for ccscan tests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

import pytest

from ccscan.config.models import GlobalConfiguration
from ccscan.core.launcher import Launcher
from ccscan.core.logging import ROOT_LOGGER_NAME
from ccscan.core.models import Credentials, HostConnection
from ccscan.core.streaming import (
    CallbackStreamHandler,
    StreamEvent,
    StreamHandler,
    StreamType,
)


class BuildLogRecorder:
    """Collects build log events for assertions."""

    def __init__(self) -> None:
        self.events: List[StreamEvent] = []
        self.handler = CallbackStreamHandler(on_event=self.events.append)

    @property
    def lines(self) -> List[str]:
        return [event.content for event in self.events]

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def of_type(self, stream_type: StreamType) -> List[str]:
        return [e.content for e in self.events if e.stream_type == stream_type]


class FakeLauncher(Launcher):
    """Launcher that records the command instead of running it."""

    def __init__(self, exit_code: int = 0, unix: bool = True, output: Sequence[str] = ()) -> None:
        self.exit_code = exit_code
        self.unix = unix
        self.output = list(output)
        self.calls: List[dict] = []

    @property
    def is_unix(self) -> bool:
        return self.unix

    def launch(
        self,
        cmd: Sequence[str],
        cwd: Path,
        env: Optional[Mapping[str, str]],
        stream_handler: StreamHandler,
        tool_name: str,
    ) -> int:
        self.calls.append({"cmd": list(cmd), "cwd": cwd, "env": env, "tool_name": tool_name})
        for line in self.output:
            stream_handler.emit(
                StreamEvent(tool_name=tool_name, stream_type=StreamType.STDOUT, content=line)
            )
        return self.exit_code


@pytest.fixture
def build_log() -> BuildLogRecorder:
    return BuildLogRecorder()


@pytest.fixture
def connection() -> HostConnection:
    return HostConnection(
        connection_id="cw01",
        host="cw01.example.com",
        port="16196",
        description="Development LPAR",
        code_page="1047",
        timeout="30",
    )


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        credentials_id="dev-user",
        username="XDEVREG",
        password="s3cr3t-pw",
        description="development user",
    )


@pytest.fixture
def global_config(connection: HostConnection, credentials: Credentials) -> GlobalConfiguration:
    restricted = Credentials(
        credentials_id="release-user",
        username="XRELEASE",
        password="release-pw",
        scopes=("release-job",),
    )
    return GlobalConfiguration(
        cli_location="/opt/topaz/TopazCLI",
        host_connections={connection.connection_id: connection},
        credentials={
            credentials.credentials_id: credentials,
            restricted.credentials_id: restricted,
        },
    )


@pytest.fixture
def fake_launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture(autouse=True)
def _restore_ccscan_logger():
    """Undo configure_logging() calls made by CLI tests."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    level, propagate, handlers = logger.level, logger.propagate, list(logger.handlers)
    yield
    logger.setLevel(level)
    logger.propagate = propagate
    logger.handlers[:] = handlers
