"""Global configuration for ccscan.

Provides configuration file loading, parsing, and validation with support for:
- Project-level config (.ccscan.yml in the workspace)
- Global config ($CCSCAN_HOME/config/config.yml)
- Environment variable expansion, e.g. for passwords
"""

from ccscan.config.models import GlobalConfiguration
from ccscan.config.loader import load_config, find_project_config, find_global_config
from ccscan.config.validation import validate_config, ConfigValidationWarning

__all__ = [
    "GlobalConfiguration",
    "load_config",
    "find_project_config",
    "find_global_config",
    "validate_config",
    "ConfigValidationWarning",
]
