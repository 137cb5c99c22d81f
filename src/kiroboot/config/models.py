from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from kiroboot.core.errors import ConfigError

# Repository the installer is fetched from
SOURCE_LOCATOR = "https://github.com/kactlabs/kiro-ide-linux-installation"

# File inside the repository that is verified and executed
INSTALLER_FILENAME = "install-kiro.sh"

# SHA-256 of the reviewed installer. Regenerate with `sha256sum install-kiro.sh`
# after auditing a new upstream revision; "" disables the digest check.
EXPECTED_INSTALLER_DIGEST = "e0ece1c0223a2969ff279907507f8e23bf12a2194cda9b8c9f43a9f1d924f747"

DIGEST_PATTERN = re.compile(r"^[a-f0-9]{64}$")


class FileMetadataBackend(str, Enum):
    """How file size and permission bits are queried."""

    NATIVE = "native"
    STAT_COMMAND = "stat-command"


@dataclass(frozen=True)
class RuntimeSettings:
    """Operational settings that may be tuned from a settings file.

    None of these take part in a trust decision.

    Attributes:
        fetch_timeout: Seconds before the clone is abandoned (None blocks).
        installer_timeout: Seconds before the installer is killed (None blocks).
        shred_passes: Overwrite passes used when shredding the workspace.
        file_metadata: Backend used for size/permission queries.
        interpreter: Program the installer is run with.
        git: Git executable name.
    """

    fetch_timeout: Optional[float] = None
    installer_timeout: Optional[float] = None
    shred_passes: int = 3
    file_metadata: FileMetadataBackend = FileMetadataBackend.NATIVE
    interpreter: str = "bash"
    git: str = "git"


@dataclass(frozen=True)
class BootstrapConfig:
    """Immutable configuration built once at process start.

    Every pipeline component receives this explicitly instead of reading
    module globals.
    """

    source_locator: str = SOURCE_LOCATOR
    installer_filename: str = INSTALLER_FILENAME
    expected_digest: str = EXPECTED_INSTALLER_DIGEST
    settings: RuntimeSettings = field(default_factory=RuntimeSettings)

    def __post_init__(self) -> None:
        if self.expected_digest and not DIGEST_PATTERN.fullmatch(self.expected_digest):
            raise ConfigError(
                f"Invalid reference digest (expected 64 lowercase hex characters): "
                f"{self.expected_digest}",
                check="config",
            )

    @property
    def digest_pinned(self) -> bool:
        """Whether the digest-match step runs."""
        return bool(self.expected_digest)
