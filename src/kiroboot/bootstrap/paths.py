"""Path management for the kiroboot home directory.

The home directory only holds the optional global settings file; nothing
fetched from the network is ever stored there.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

# Default directory name under user home
DEFAULT_HOME_DIR_NAME = ".kiroboot"

# Environment variable to override home directory
KIROBOOT_HOME_ENV = "KIROBOOT_HOME"


def get_kiroboot_home() -> Path:
    """Get the kiroboot home directory path.

    Resolution order:
    1. KIROBOOT_HOME environment variable (if set)
    2. ~/.kiroboot (default)

    Returns:
        Path to the kiroboot home directory.
    """
    env_home = os.environ.get(KIROBOOT_HOME_ENV)
    if env_home:
        return Path(env_home)
    return Path.home() / DEFAULT_HOME_DIR_NAME


@dataclass
class KirobootPaths:
    """Paths within the kiroboot home directory.

    Directory structure:
        ~/.kiroboot/
            config/
                config.yml    - Global settings file
    """

    home: Path

    _CONFIG_DIR: ClassVar[str] = "config"
    _SETTINGS_FILE: ClassVar[str] = "config.yml"

    @classmethod
    def default(cls) -> "KirobootPaths":
        """Create paths from the default kiroboot home."""
        return cls(get_kiroboot_home())

    @property
    def config_dir(self) -> Path:
        """Directory for configuration files."""
        return self.home / self._CONFIG_DIR

    @property
    def settings_file(self) -> Path:
        """Global settings file."""
        return self.config_dir / self._SETTINGS_FILE
