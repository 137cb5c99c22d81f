"""File metadata queries used by the verifier.

Both backends return the raw textual result (size in bytes, permission bits
in octal) so the verifier validates the format before trusting the value.
"""

from __future__ import annotations

import os
import shutil
import stat
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from kiroboot.config.models import FileMetadataBackend
from kiroboot.core.logging import get_logger
from kiroboot.core.subprocess_runner import run_command

LOGGER = get_logger(__name__)


class FileMetadata(ABC):
    """Size and permission queries for a single path."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend identifier."""

    @abstractmethod
    def size(self, path: Path) -> str:
        """Return the size of path in bytes, as text.

        Raises:
            OSError: If the size cannot be determined.
        """

    @abstractmethod
    def permissions(self, path: Path) -> str:
        """Return the permission bits of path in octal (e.g. "644").

        Special bits (setuid, setgid, sticky) show up as a fourth digit.

        Raises:
            OSError: If the permissions cannot be determined.
        """


class NativeFileMetadata(FileMetadata):
    """Queries through os.lstat; never follows a symlink."""

    @property
    def name(self) -> str:
        return FileMetadataBackend.NATIVE.value

    def size(self, path: Path) -> str:
        return str(os.lstat(path).st_size)

    def permissions(self, path: Path) -> str:
        return format(stat.S_IMODE(os.lstat(path).st_mode), "o")


class StatCommandFileMetadata(FileMetadata):
    """Queries through the stat(1) command.

    The BSD/macOS form is tried first and the GNU/Linux form second; the
    first one that exits 0 wins.
    """

    SIZE_FORMS = (["-f%z"], ["-c%s"])
    PERMISSION_FORMS = (["-f%OLp"], ["-c%a"])

    def __init__(self, stat_path: Optional[str] = None, timeout: float = 30) -> None:
        self._stat = stat_path or shutil.which("stat")
        self._timeout = timeout

    @property
    def name(self) -> str:
        return FileMetadataBackend.STAT_COMMAND.value

    def size(self, path: Path) -> str:
        return self._query(self.SIZE_FORMS, path)

    def permissions(self, path: Path) -> str:
        return self._query(self.PERMISSION_FORMS, path)

    def _query(self, forms: tuple, path: Path) -> str:
        if self._stat is None:
            raise OSError("stat command not available")

        for form in forms:
            cmd: List[str] = [self._stat, *form, str(path)]
            try:
                result = run_command(cmd, tool_name="stat", timeout=self._timeout)
            except subprocess.SubprocessError as e:
                LOGGER.debug(f"stat {form[0]} failed: {e}")
                continue
            if result.returncode == 0:
                return result.stdout.strip()

        raise OSError(f"stat could not query {path}")


def select_file_metadata(backend: FileMetadataBackend) -> FileMetadata:
    """Return the metadata implementation for the configured backend."""
    if backend == FileMetadataBackend.STAT_COMMAND:
        return StatCommandFileMetadata()
    return NativeFileMetadata()
