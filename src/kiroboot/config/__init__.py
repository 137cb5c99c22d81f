"""Configuration for kiroboot.

Trust constants (source locator, installer filename, reference digest) are
compiled in. Only operational settings can come from a YAML file.
"""

from kiroboot.config.loader import load_config
from kiroboot.config.models import BootstrapConfig, RuntimeSettings

__all__ = ["load_config", "BootstrapConfig", "RuntimeSettings"]
