"""Environment guard.

Runs before any network access or filesystem side effect and fails fast if
the host cannot run the pipeline safely. Nothing here is retried; every
failure is a misconfiguration the operator has to fix.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Tuple

from kiroboot.bootstrap.platform import PlatformInfo, get_platform_info
from kiroboot.config.models import BootstrapConfig
from kiroboot.core.errors import EnvironmentCheckError
from kiroboot.core.logging import get_logger
from kiroboot.core.subprocess_runner import run_command

LOGGER = get_logger(__name__)

MIN_PYTHON: Tuple[int, int] = (3, 9)

# Scratch directory override, and the system-wide location that must exist regardless
SCRATCH_ENV = "TMPDIR"
FALLBACK_SCRATCH = Path("/tmp")

# Owner-only file creation mask
SECURE_UMASK = 0o077


@dataclass(frozen=True)
class EnvironmentReport:
    """What the guard established about the host.

    Attributes:
        platform: Detected platform.
        scratch_dir: Validated directory the workspace is allocated under.
        git_path: Absolute path of the git executable.
        git_version: Version reported by `git --version`.
        interpreter_path: Absolute path of the installer interpreter.
        previous_umask: Mask in effect before the guard tightened it.
    """

    platform: PlatformInfo
    scratch_dir: Path
    git_path: str
    git_version: str
    interpreter_path: str
    previous_umask: int


def apply_secure_umask() -> int:
    """Set the owner-only umask and return the previous one."""
    return os.umask(SECURE_UMASK)


def check_python_version(version_info: Tuple[int, ...]) -> None:
    if tuple(version_info[:2]) < MIN_PYTHON:
        required = ".".join(str(p) for p in MIN_PYTHON)
        raise EnvironmentCheckError(
            f"Python {required} or higher is required", check="interpreter"
        )


def check_scratch_dir(
    env: Mapping[str, str],
    fallback: Path = FALLBACK_SCRATCH,
) -> Path:
    """Validate the scratch location and return the directory to use.

    The override from TMPDIR (when set) must be an existing writable
    directory, and the system fallback must be available in every case.
    """
    override = env.get(SCRATCH_ENV)
    scratch = Path(override) if override else fallback

    if not scratch.is_dir() or not os.access(scratch, os.W_OK):
        raise EnvironmentCheckError(
            f"{SCRATCH_ENV} is not writable or does not exist: {scratch}",
            check="scratch-dir",
        )
    if not fallback.is_dir() or not os.access(fallback, os.W_OK):
        raise EnvironmentCheckError(
            f"{fallback} is not available or writable", check="scratch-dir"
        )
    return scratch


def resolve_tools(names: List[str], path: Optional[str] = None) -> List[str]:
    """Resolve every tool to an absolute path.

    Raises:
        EnvironmentCheckError: Listing every missing tool at once.
    """
    resolved: List[str] = []
    missing: List[str] = []
    for name in names:
        found = shutil.which(name, path=path)
        if found is None:
            missing.append(name)
        else:
            resolved.append(os.path.abspath(found))
    if missing:
        raise EnvironmentCheckError(
            f"Missing required dependencies: {' '.join(missing)}. "
            "Please install the missing dependencies and try again.",
            check="dependencies",
        )
    return resolved


def detect_git_version(git_path: str) -> str:
    """Return the version token of `git --version` (e.g. "2.43.0")."""
    try:
        result = run_command([git_path, "--version"], tool_name="git", timeout=30)
    except (OSError, subprocess.SubprocessError) as e:
        raise EnvironmentCheckError(
            f"Could not determine git version: {e}", check="dependencies"
        ) from e

    parts = result.stdout.split()
    if result.returncode != 0 or len(parts) < 3:
        raise EnvironmentCheckError("Could not determine git version", check="dependencies")
    return parts[2]


def warn_if_untrusted_launch_location(launch_dir: Path) -> bool:
    """Warn when running from a directory writable by us but owned by someone else.

    Returns:
        True if the warning was emitted.
    """
    try:
        if not os.access(launch_dir, os.W_OK):
            return False
        owner = launch_dir.stat().st_uid
    except OSError:
        return False

    if owner != os.getuid():
        LOGGER.warning(
            f"kiroboot is running from {launch_dir}, a directory owned by another "
            "user that you can write to. Consider moving it to a secure location."
        )
        return True
    return False


class EnvironmentGuard:
    """Validates the host before the pipeline touches the network.

    Side effect: tightens the process umask to owner-only once the
    interpreter check has passed.
    """

    def __init__(
        self,
        config: BootstrapConfig,
        env: Optional[Mapping[str, str]] = None,
        fallback_scratch: Path = FALLBACK_SCRATCH,
        launch_dir: Optional[Path] = None,
    ) -> None:
        self._config = config
        self._env = os.environ if env is None else env
        self._fallback_scratch = fallback_scratch
        self._launch_dir = launch_dir

    def check(self) -> EnvironmentReport:
        """Run every environment check in order.

        Returns:
            EnvironmentReport describing the validated host.

        Raises:
            EnvironmentCheckError: On the first failed check.
        """
        check_python_version(sys.version_info)
        previous_umask = apply_secure_umask()

        try:
            platform_info = get_platform_info()
        except ValueError as e:
            raise EnvironmentCheckError(str(e), check="platform") from e

        scratch_dir = check_scratch_dir(self._env, self._fallback_scratch)

        LOGGER.info("Checking dependencies...")
        settings = self._config.settings
        git_path, interpreter_path = resolve_tools(
            [settings.git, settings.interpreter], path=self._env.get("PATH")
        )
        git_version = detect_git_version(git_path)
        LOGGER.info("All dependencies satisfied.")

        if self._launch_dir is not None:
            warn_if_untrusted_launch_location(self._launch_dir)

        return EnvironmentReport(
            platform=platform_info,
            scratch_dir=scratch_dir,
            git_path=git_path,
            git_version=git_version,
            interpreter_path=interpreter_path,
            previous_umask=previous_umask,
        )
