"""Configuration file loading and merging.

Handles loading configuration from YAML files with:
- Project-level config (.ccscan.yml in the workspace)
- Global config ($CCSCAN_HOME/config/config.yml)
- Environment variable expansion (${VAR})
- Config merging with proper precedence
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ccscan.config.models import GlobalConfiguration
from ccscan.config.paths import get_config_dir
from ccscan.config.validation import validate_config
from ccscan.core.errors import ConfigError
from ccscan.core.logging import get_logger
from ccscan.core.models import Credentials, HostConnection

LOGGER = get_logger(__name__)

# Config file names
PROJECT_CONFIG_NAMES = [".ccscan.yml", ".ccscan.yaml", "ccscan.yml", "ccscan.yaml"]
GLOBAL_CONFIG_NAME = "config.yml"

# Sections holding lists of entries identified by "id"
ID_LIST_SECTIONS = ("host_connections", "credentials")

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def load_config(
    project_root: Optional[Path] = None,
    cli_config_path: Optional[Path] = None,
) -> GlobalConfiguration:
    """Load configuration with proper precedence.

    Precedence (highest to lowest):
    1. Custom config file (cli_config_path) OR project config (.ccscan.yml)
    2. Global config ($CCSCAN_HOME/config/config.yml)

    Args:
        project_root: Directory searched for a project config file.
        cli_config_path: Optional path to custom config file (--config flag).

    Returns:
        Merged GlobalConfiguration instance.

    Raises:
        ConfigError: If the custom config file doesn't exist, or a config
            file has parse errors.
    """
    sources: List[str] = []
    merged: Dict[str, Any] = {}

    # Layer 1: Global config
    global_path = find_global_config()
    if global_path and global_path.exists():
        try:
            global_dict = load_yaml_file(global_path)
            validate_config(global_dict, source=str(global_path))
            merged = merge_configs(merged, global_dict)
            sources.append(f"global:{global_path}")
            LOGGER.debug(f"Loaded global config from {global_path}")
        except (yaml.YAMLError, ConfigError, OSError) as e:
            LOGGER.warning(f"Failed to load global config: {e}")

    # Layer 2: Project or custom config
    if cli_config_path:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        merged = _load_layer(merged, cli_config_path, "custom", sources)
    elif project_root is not None:
        project_path = find_project_config(project_root)
        if project_path and project_path.exists():
            merged = _load_layer(merged, project_path, "project", sources)

    config = dict_to_config(merged)
    config._config_sources = sources

    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def _load_layer(
    merged: Dict[str, Any], path: Path, kind: str, sources: List[str]
) -> Dict[str, Any]:
    try:
        layer = load_yaml_file(path)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    validate_config(layer, source=str(path))
    sources.append(f"{kind}:{path}")
    LOGGER.debug(f"Loaded {kind} config from {path}")
    return merge_configs(merged, layer)


def find_project_config(project_root: Path) -> Optional[Path]:
    """Find config file in project root.

    Args:
        project_root: Directory to search in.

    Returns:
        Path to config file if found, None otherwise.
    """
    for name in PROJECT_CONFIG_NAMES:
        config_path = project_root / name
        if config_path.exists():
            return config_path
    return None


def find_global_config() -> Optional[Path]:
    """Find global config at $CCSCAN_HOME/config/config.yml.

    Returns:
        Path to global config if it exists, None otherwise.
    """
    config_path = get_config_dir() / GLOBAL_CONFIG_NAME
    if config_path.exists():
        return config_path
    return None


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML config file.

    Performs environment variable expansion on string values.

    Args:
        path: Path to YAML file.

    Returns:
        Parsed dictionary.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
        FileNotFoundError: If file doesn't exist.
    """
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    data = yaml.safe_load(content)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in config values.

    Supports ${VAR} and ${VAR:-default} syntax.

    Args:
        data: Config data (dict, list, or scalar).

    Returns:
        Data with environment variables expanded.
    """
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    else:
        return data


def _env_var_replacer(match: re.Match[str]) -> str:
    """Replace environment variable reference with its value."""
    var_name = match.group(1)
    default_value = match.group(2)

    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two config dicts, with overlay taking precedence.

    Rules:
    - host_connections / credentials: entries merged by ``id``, overlay
      entries replace base entries with the same id
    - Scalar values and other lists: overlay replaces base
    - Dicts: recursive merge

    Args:
        base: Base configuration dictionary.
        overlay: Overlay configuration to merge on top.

    Returns:
        Merged configuration dictionary.
    """
    result = base.copy()

    for key, overlay_value in overlay.items():
        base_value = result.get(key)
        if key in ID_LIST_SECTIONS and isinstance(base_value, list) and isinstance(overlay_value, list):
            result[key] = _merge_by_id(base_value, overlay_value)
        elif isinstance(base_value, dict) and isinstance(overlay_value, dict):
            result[key] = merge_configs(base_value, overlay_value)
        else:
            result[key] = overlay_value

    return result


def _merge_by_id(base: List[Any], overlay: List[Any]) -> List[Any]:
    merged: Dict[Any, Any] = {}
    anonymous: List[Any] = []
    for entry in list(base) + list(overlay):
        if isinstance(entry, dict) and "id" in entry:
            merged[str(entry["id"])] = entry
        else:
            anonymous.append(entry)
    return list(merged.values()) + anonymous


def dict_to_config(data: Dict[str, Any]) -> GlobalConfiguration:
    """Convert a validated dict to a typed GlobalConfiguration.

    Entries missing a required key are skipped (validation has already
    warned about them).

    Args:
        data: Configuration dictionary.

    Returns:
        Typed GlobalConfiguration instance.
    """
    connections: Dict[str, HostConnection] = {}
    for entry in data.get("host_connections") or []:
        if not isinstance(entry, dict) or not all(k in entry for k in ("id", "host", "port")):
            continue
        connection = HostConnection(
            connection_id=str(entry["id"]),
            host=str(entry["host"]),
            port=str(entry["port"]),
            description=str(entry.get("description") or ""),
            code_page=str(entry.get("code_page", "1047")),
            timeout=str(entry.get("timeout", "0")),
        )
        connections[connection.connection_id] = connection

    credentials: Dict[str, Credentials] = {}
    for entry in data.get("credentials") or []:
        if not isinstance(entry, dict) or not all(
            k in entry for k in ("id", "username", "password")
        ):
            continue
        scopes = entry.get("scopes") or []
        creds = Credentials(
            credentials_id=str(entry["id"]),
            username=str(entry["username"]),
            password=str(entry["password"]),
            description=str(entry.get("description") or ""),
            scopes=tuple(str(s) for s in scopes) if isinstance(scopes, list) else (),
        )
        credentials[creds.credentials_id] = creds

    return GlobalConfiguration(
        cli_location=str(data.get("cli_location") or ""),
        host_connections=connections,
        credentials=credentials,
    )


def get_default_config() -> GlobalConfiguration:
    """Get an empty configuration."""
    return GlobalConfiguration()
