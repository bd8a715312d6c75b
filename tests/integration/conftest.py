"""Fixtures for integration tests that launch real processes."""

from __future__ import annotations

import os
import shutil
import stat
from pathlib import Path

import pytest

sh_available = pytest.mark.skipif(
    os.name == "nt" or shutil.which("sh") is None,
    reason="requires a Unix shell",
)

FAKE_CLI_SCRIPT = """\
#!/bin/sh
for arg in "$@"; do
  printf '%s\\n' "$arg" >> "$CCSCAN_ARGS_FILE"
done
echo "Code Coverage CLI running in $(pwd)"
echo "diagnostic on stderr" >&2
exit "${CCSCAN_FAKE_EXIT:-0}"
"""


@pytest.fixture
def fake_cli(tmp_path: Path) -> Path:
    """A directory holding a CodeCoverageCLI.sh that records its arguments."""
    cli_dir = tmp_path / "TopazCLI"
    cli_dir.mkdir()
    script = cli_dir / "CodeCoverageCLI.sh"
    script.write_text(FAKE_CLI_SCRIPT, encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return cli_dir
