"""Argument parser for the ccscan CLI."""

from __future__ import annotations

import argparse
import os
from pathlib import Path


def _add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to config file (default: .ccscan.yml in the workspace, "
        "then $CCSCAN_HOME/config/config.yml).",
    )


def _add_workspace_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--workspace",
        metavar="DIR",
        type=Path,
        default=Path(os.environ.get("WORKSPACE", ".")),
        help="Job workspace (default: $WORKSPACE or the current directory).",
    )


def _add_properties_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--analysis-properties-path",
        metavar="PATH",
        default="",
        help="Analysis properties file, absolute or relative to the workspace "
        "(default: ccanalysis.properties in the workspace).",
    )
    parser.add_argument(
        "--analysis-properties",
        metavar="TEXT",
        default="",
        help="Inline analysis properties (key=value lines); these override the file.",
    )


def _add_job_name_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--job-name",
        default=os.environ.get("JOB_NAME"),
        help="Name of the running job, used to scope credentials (default: $JOB_NAME).",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the ccscan argument parser."""
    parser = argparse.ArgumentParser(
        prog="ccscan",
        description="ccscan - Code Coverage build step for CI jobs.",
    )

    # Global options
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show ccscan version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce logging output to errors only.",
    )

    subparsers = parser.add_subparsers(dest="command")

    run = subparsers.add_parser(
        "run",
        help="Run a Code Coverage scan.",
        description="Run the Code Coverage CLI against a mainframe host.",
    )
    run.add_argument(
        "--connection-id",
        default="",
        help="Host connection id from the global configuration.",
    )
    run.add_argument(
        "--credentials-id",
        default="",
        help="Login credentials id from the global configuration.",
    )
    _add_properties_arguments(run)
    _add_workspace_argument(run)
    _add_job_name_argument(run)
    _add_config_argument(run)
    run.add_argument(
        "--cli-location",
        default=None,
        help="Topaz CLI installation directory (overrides cli_location in config).",
    )
    run.add_argument(
        "--rich",
        action="store_true",
        help="Colorize the build log.",
    )

    properties = subparsers.add_parser(
        "properties",
        help="Print the merged analysis properties.",
    )
    _add_properties_arguments(properties)
    _add_workspace_argument(properties)

    connections = subparsers.add_parser(
        "connections",
        help="List configured host connections.",
    )
    _add_config_argument(connections)

    credentials = subparsers.add_parser(
        "credentials",
        help="List credentials available to a job.",
    )
    _add_job_name_argument(credentials)
    _add_config_argument(credentials)

    subparsers.add_parser(
        "defaults",
        help="Print the default analysis properties.",
    )

    return parser
