"""Command line construction for the Code Coverage CLI."""

from __future__ import annotations

from typing import Optional

from ccscan.core.escaping import (
    escape_comma_delimited_paths_for_script,
    escape_for_script,
    prefix_with_dash,
)
from ccscan.core.logging import get_logger
from ccscan.core.models import (
    ArgumentList,
    Credentials,
    HostConnection,
    PropertyMap,
    StepConfig,
)
from ccscan.core.streaming import NullStreamHandler, StreamHandler

LOGGER = get_logger(__name__)

CODE_COVERAGE_CLI_BAT = "CodeCoverageCLI.bat"
CODE_COVERAGE_CLI_SH = "CodeCoverageCLI.sh"
TOPAZ_CLI_WORKSPACE = "TopazCliWkspc"

HOST_PARM = "-host"
PORT_PARM = "-port"
USERID_PARM = "-id"
PASSWORD_PARM = "-pass"
CODE_PAGE_PARM = "-code"
TIMEOUT_PARM = "-timeout"
TARGET_FOLDER_PARM = "-targetFolder"
DATA_PARM = "-data"

# Properties whose value is a comma-delimited list of paths
PATHS_PARMS = frozenset({"-cc.sources"})

# Name used to tag build log lines written while building arguments
LOG_SOURCE = "arguments"


def cli_script_name(is_unix_shell: bool) -> str:
    """File name of the CLI script for the agent's platform."""
    return CODE_COVERAGE_CLI_SH if is_unix_shell else CODE_COVERAGE_CLI_BAT


def cli_script_path(cli_location: str, file_separator: str, is_unix_shell: bool) -> str:
    """Full path of the CLI script on the agent.

    Args:
        cli_location: Directory holding the Topaz CLI installation.
        file_separator: Path separator of the agent's platform.
        is_unix_shell: True for a Unix shell, False for Windows batch.

    Returns:
        Script path.
    """
    return cli_location.rstrip("/\\") + file_separator + cli_script_name(is_unix_shell)


def topaz_cli_workspace(workspace_path: str, file_separator: str) -> str:
    """Scratch directory used by the CLI inside the job workspace."""
    return workspace_path + file_separator + TOPAZ_CLI_WORKSPACE


def build_arguments(
    config: StepConfig,
    connection: HostConnection,
    credentials: Credentials,
    workspace_path: str,
    merged_properties: PropertyMap,
    is_unix_shell: bool,
    cli_location: str = "",
    file_separator: str = "/",
    stream_handler: Optional[StreamHandler] = None,
) -> ArgumentList:
    """Build the Code Coverage CLI command line.

    Connection parameters come first, followed by one ``-key "value"`` pair
    per merged property in mapping order. Properties with a blank value are
    left out. The password is added as a masked token and never written to
    the build log.

    Args:
        config: Step configuration.
        connection: Resolved host connection.
        credentials: Resolved login credentials.
        workspace_path: Job workspace on the agent.
        merged_properties: Output of ``build_analysis_properties``.
        is_unix_shell: True for a Unix shell, False for Windows batch.
        cli_location: Directory holding the Topaz CLI installation.
        file_separator: Path separator of the agent's platform.
        stream_handler: Build log.

    Returns:
        The argument list.
    """
    log = stream_handler or NullStreamHandler()

    script = cli_script_path(cli_location, file_separator, is_unix_shell)
    log.status(LOG_SOURCE, f"cliScriptFile: {script}")

    host = escape_for_script(connection.host)
    port = escape_for_script(str(connection.port))
    user_id = escape_for_script(credentials.username)
    password = escape_for_script(credentials.password)
    code_page = str(connection.code_page)
    timeout = str(connection.timeout)
    target_folder = escape_for_script(workspace_path)
    cli_workspace = escape_for_script(topaz_cli_workspace(workspace_path, file_separator))

    log.status(LOG_SOURCE, f"connectionId: {config.connection_id}")
    log.status(LOG_SOURCE, f"host: {host}")
    log.status(LOG_SOURCE, f"port: {port}")
    log.status(LOG_SOURCE, f"userId: {user_id}")
    log.status(LOG_SOURCE, f"codePage: {code_page}")
    log.status(LOG_SOURCE, f"timeout: {timeout}")
    log.status(LOG_SOURCE, f"targetFolder: {target_folder}")
    log.status(LOG_SOURCE, f"topazCliWorkspace: {cli_workspace}")

    args = ArgumentList(script)
    args.add(HOST_PARM, host)
    args.add(PORT_PARM, port)
    args.add(USERID_PARM, user_id)
    args.add(PASSWORD_PARM)
    args.add_masked(password or "")
    args.add(CODE_PAGE_PARM, code_page)
    args.add(TIMEOUT_PARM, timeout)
    args.add(TARGET_FOLDER_PARM, target_folder)
    args.add(DATA_PARM, cli_workspace)

    echoed = []
    for key, value in merged_properties.items():
        if value is None or not value.strip():
            LOGGER.debug(f"Skipping analysis property with blank value: {key}")
            continue

        flag = prefix_with_dash(key)
        if flag in PATHS_PARMS:
            escaped = escape_comma_delimited_paths_for_script(value)
        else:
            escaped = escape_for_script(value)

        echoed.append(f"{flag}={escaped}")
        args.add(flag, escaped)

    log.status(
        LOG_SOURCE,
        "Analysis properties after parsing/merging: " + " ".join(echoed),
    )
    LOGGER.debug(f"Command line: {args.to_masked_string()}")

    return args
