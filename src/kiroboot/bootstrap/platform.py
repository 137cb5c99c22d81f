"""Platform detection.

The installer pipeline only runs on macOS and Linux; the detected platform
also selects the probes used by the system information report.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass
from typing import Optional

# Supported operating systems (lowercase platform.system())
SUPPORTED_OS = frozenset({"darwin", "linux"})

_OS_DISPLAY_NAMES = {
    "darwin": "macOS",
    "linux": "Linux",
}

# Architecture normalization map
_ARCH_MAP = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "arm64": "arm64",
    "aarch64": "arm64",
}


def normalize_arch(machine: str) -> Optional[str]:
    """Normalize architecture string to standard form.

    Args:
        machine: Raw architecture string from platform.machine()

    Returns:
        Normalized architecture string or None if unknown.
    """
    return _ARCH_MAP.get(machine.lower())


def detect_os() -> str:
    """Detect the current operating system.

    Returns:
        Lowercase OS name (darwin or linux).

    Raises:
        ValueError: If the OS is not supported.
    """
    system = platform.system().lower()
    if system not in SUPPORTED_OS:
        raise ValueError(
            f"Unsupported operating system: {platform.system()}. "
            f"Supported: {', '.join(sorted(SUPPORTED_OS))}"
        )
    return system


@dataclass(frozen=True)
class PlatformInfo:
    """Information about the current platform.

    Attributes:
        os: Operating system (darwin, linux).
        arch: Normalized CPU architecture, or the raw machine string when
            it is not one we recognise.
        release: Kernel release string.
    """

    os: str
    arch: str
    release: str = ""

    @property
    def is_macos(self) -> bool:
        return self.os == "darwin"

    @property
    def is_linux(self) -> bool:
        return self.os == "linux"

    @property
    def display_name(self) -> str:
        """Human-facing OS name ("macOS", "Linux")."""
        return _OS_DISPLAY_NAMES.get(self.os, "Unknown")


def get_platform_info() -> PlatformInfo:
    """Detect and return current platform information.

    Raises:
        ValueError: If the operating system is not supported.
    """
    machine = platform.machine()
    return PlatformInfo(
        os=detect_os(),
        arch=normalize_arch(machine) or machine,
        release=platform.release(),
    )
