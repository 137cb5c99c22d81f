"""Settings file loading and merging.

Handles loading runtime settings from YAML files with:
- Global settings (~/.kiroboot/config/config.yml)
- Custom settings file (KIROBOOT_CONFIG)
- Environment variable expansion (${VAR})
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from kiroboot.bootstrap.paths import KirobootPaths
from kiroboot.config.models import BootstrapConfig, FileMetadataBackend, RuntimeSettings
from kiroboot.config.validation import ValidationSeverity, validate_settings
from kiroboot.core.errors import ConfigError
from kiroboot.core.logging import get_logger

LOGGER = get_logger(__name__)

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def load_config(
    cli_config_path: Optional[Path] = None,
    paths: Optional[KirobootPaths] = None,
) -> BootstrapConfig:
    """Build the process configuration.

    Precedence (highest to lowest):
    1. Custom settings file (cli_config_path)
    2. Global settings file (~/.kiroboot/config/config.yml)
    3. Built-in defaults

    Trust constants always come from the compiled-in defaults.

    Args:
        cli_config_path: Optional path to a settings file (KIROBOOT_CONFIG).
        paths: Home directory layout (defaults to KirobootPaths.default()).

    Returns:
        Immutable BootstrapConfig.

    Raises:
        ConfigError: If a settings file is missing, unparsable or invalid.
    """
    paths = paths or KirobootPaths.default()
    merged: Dict[str, Any] = {}
    sources: List[str] = []

    global_path = paths.settings_file
    if global_path.exists():
        merged.update(load_settings_file(global_path))
        sources.append(f"global:{global_path}")
        LOGGER.debug(f"Loaded global settings from {global_path}")

    if cli_config_path is not None:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}", check="config")
        merged.update(load_settings_file(cli_config_path))
        sources.append(f"custom:{cli_config_path}")
        LOGGER.debug(f"Loaded custom settings from {cli_config_path}")

    LOGGER.debug(f"Settings loaded from sources: {sources or ['defaults']}")
    return BootstrapConfig(settings=dict_to_settings(merged))


def load_settings_file(path: Path) -> Dict[str, Any]:
    """Load, expand and validate a YAML settings file.

    Args:
        path: Path to YAML file.

    Returns:
        Validated settings dictionary.

    Raises:
        ConfigError: On YAML syntax errors or validation errors.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}", check="config") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}", check="config") from e

    if data is None:
        return {}

    data = expand_env_vars(data)
    errors = [
        issue for issue in validate_settings(data, source=str(path))
        if issue.severity == ValidationSeverity.ERROR
    ]
    if errors:
        details = "; ".join(issue.message for issue in errors)
        raise ConfigError(f"Invalid settings in {path}: {details}", check="config")

    return data


def expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in settings values.

    Supports ${VAR} and ${VAR:-default} syntax.
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
    var_name = match.group(1)
    default_value = match.group(2)

    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def dict_to_settings(data: Dict[str, Any]) -> RuntimeSettings:
    """Convert a validated settings dict to RuntimeSettings.

    Unknown keys have already been reported and are ignored here.
    """
    defaults = RuntimeSettings()
    return RuntimeSettings(
        fetch_timeout=data.get("fetch_timeout", defaults.fetch_timeout),
        installer_timeout=data.get("installer_timeout", defaults.installer_timeout),
        shred_passes=data.get("shred_passes", defaults.shred_passes),
        file_metadata=FileMetadataBackend(data.get("file_metadata", defaults.file_metadata.value)),
        interpreter=data.get("interpreter", defaults.interpreter),
        git=data.get("git", defaults.git),
    )
