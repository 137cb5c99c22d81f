"""Bootstrap module for the kiroboot pipeline.

This module handles:
- Platform detection (macOS / Linux)
- The kiroboot home directory (~/.kiroboot/)
- The environment guard, secure workspace and signal handling used before
  and around every fetch
"""

from kiroboot.bootstrap.platform import get_platform_info, PlatformInfo
from kiroboot.bootstrap.paths import get_kiroboot_home, KirobootPaths

__all__ = [
    "get_platform_info",
    "PlatformInfo",
    "get_kiroboot_home",
    "KirobootPaths",
]
