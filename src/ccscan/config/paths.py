"""Location of the ccscan home directory.

    ~/.ccscan/
        config/config.yml   - global configuration
"""

from __future__ import annotations

import os
from pathlib import Path

# Default directory name under user home
DEFAULT_HOME_DIR_NAME = ".ccscan"

# Environment variable to override home directory
CCSCAN_HOME_ENV = "CCSCAN_HOME"

CONFIG_DIR_NAME = "config"


def get_ccscan_home() -> Path:
    """Get the ccscan home directory path.

    Resolution order:
    1. CCSCAN_HOME environment variable (if set)
    2. ~/.ccscan (default)

    Returns:
        Path to the ccscan home directory.
    """
    env_home = os.environ.get(CCSCAN_HOME_ENV)
    if env_home:
        return Path(env_home)
    return Path.home() / DEFAULT_HOME_DIR_NAME


def get_config_dir() -> Path:
    """Directory holding the global configuration file."""
    return get_ccscan_home() / CONFIG_DIR_NAME
