"""Secure workspace management.

The workspace is a freshly allocated, owner-only temporary directory that
holds the fetched repository. It is destroyed on every exit path: immediate
regular files are shredded when `shred` is available, then the tree is
removed.
"""

from __future__ import annotations

import os
import shutil
import stat
import subprocess
import tempfile
from pathlib import Path
from types import TracebackType
from typing import Optional, Type

from kiroboot.bootstrap.signals import signals_ignored
from kiroboot.core.errors import EnvironmentCheckError
from kiroboot.core.logging import get_logger
from kiroboot.core.subprocess_runner import run_command

LOGGER = get_logger(__name__)

WORKSPACE_PREFIX = "kiroboot-"
WORKSPACE_MODE = 0o700
SHRED_TOOL = "shred"


class SecureWorkspace:
    """An exclusively owned temporary directory.

    Use as a context manager so destruction runs on every return path:

        with SecureWorkspace.allocate(scratch_dir) as workspace:
            ...
    """

    def __init__(self, path: Path, shred_passes: int = 3) -> None:
        self._path = path
        self._shred_passes = shred_passes
        self._destroyed = False

    @classmethod
    def allocate(cls, scratch_dir: Path, shred_passes: int = 3) -> "SecureWorkspace":
        """Create a new randomly named workspace under scratch_dir.

        Raises:
            EnvironmentCheckError: If the directory cannot be created or restricted.
        """
        try:
            raw = tempfile.mkdtemp(prefix=WORKSPACE_PREFIX, dir=str(scratch_dir))
        except OSError as e:
            raise EnvironmentCheckError(
                f"Failed to create temporary directory: {e}", check="workspace"
            ) from e

        if not raw or not os.path.isdir(raw):
            raise EnvironmentCheckError(
                "Temporary directory creation failed or is invalid", check="workspace"
            )

        workspace = cls(Path(raw), shred_passes=shred_passes)
        try:
            os.chmod(raw, WORKSPACE_MODE)
        except OSError as e:
            workspace.destroy()
            raise EnvironmentCheckError(
                f"Failed to set temp directory permissions: {e}", check="workspace"
            ) from e

        LOGGER.debug(f"Allocated workspace {raw}")
        return workspace

    @property
    def path(self) -> Path:
        return self._path

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def destroy(self, exit_code: int = 0) -> int:
        """Shred and remove the workspace.

        Safe to call more than once, and never raises.

        Args:
            exit_code: Exit code of whatever triggered the cleanup.

        Returns:
            The exit_code passed in, unchanged.
        """
        if self._destroyed:
            return exit_code
        self._destroyed = True

        with signals_ignored():
            if self._is_real_directory():
                LOGGER.info("Cleaning up temporary files...")
                self._shred_files()
                try:
                    shutil.rmtree(self._path)
                except OSError as e:
                    LOGGER.warning(f"Failed to remove temporary directory {self._path}: {e}")

        return exit_code

    def _is_real_directory(self) -> bool:
        try:
            return stat.S_ISDIR(os.lstat(self._path).st_mode)
        except OSError:
            return False

    def _shred_files(self) -> None:
        shred = shutil.which(SHRED_TOOL)
        if shred is None:
            LOGGER.debug("shred not available, removing without overwrite")
            return

        try:
            entries = list(os.scandir(self._path))
        except OSError as e:
            LOGGER.debug(f"Cannot list workspace for shredding: {e}")
            return

        for entry in entries:
            # Never follow symlinks out of the workspace
            if entry.is_symlink() or not entry.is_file(follow_symlinks=False):
                continue
            try:
                run_command(
                    [shred, "-f", "-z", "-n", str(self._shred_passes), entry.path],
                    tool_name=SHRED_TOOL,
                    timeout=120,
                )
            except (OSError, subprocess.SubprocessError) as e:
                LOGGER.debug(f"Failed to shred {entry.path}: {e}")

    def __enter__(self) -> "SecureWorkspace":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.destroy()
