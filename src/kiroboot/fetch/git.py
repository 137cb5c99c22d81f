"""Shallow git retrieval of the installer repository."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Dict, List, Optional

from kiroboot.core.errors import ConfigError, FetchError
from kiroboot.fetch.base import SourceFetcher
from kiroboot.core.logging import get_logger
from kiroboot.core.subprocess_runner import run_command, sanitized_env
from kiroboot.fetch.locator import contains_metacharacters, validate_locator

LOGGER = get_logger(__name__)

# Identity overrides that would let the clone act as a different author/committer
IDENTITY_OVERRIDE_VARS = (
    "GIT_AUTHOR_NAME",
    "GIT_AUTHOR_EMAIL",
    "GIT_COMMITTER_NAME",
    "GIT_COMMITTER_EMAIL",
)

# Variables that would point git at a different repository than the workspace
REPOSITORY_OVERRIDE_VARS = (
    "GIT_DIR",
    "GIT_WORK_TREE",
)


class GitFetcher(SourceFetcher):
    """Fetches the installer repository with git.

    Handles:
    - `git clone --depth=1` into the workspace
    - Reading back remote.origin.url and comparing it to the locator
    - Confirming the workspace itself is the top level of the clone
    """

    def __init__(self, git_path: str = "git", timeout: Optional[float] = None) -> None:
        self._git = git_path
        self._timeout = timeout

    def git_env(self, ceiling: Optional[Path] = None) -> Dict[str, str]:
        """Environment for git: no identity overrides, no interactive prompts.

        With a ceiling, repository discovery never climbs into that directory.
        """
        extra = {"GIT_TERMINAL_PROMPT": "0"}
        if ceiling is not None:
            extra["GIT_CEILING_DIRECTORIES"] = str(ceiling)
        return sanitized_env(
            remove=IDENTITY_OVERRIDE_VARS + REPOSITORY_OVERRIDE_VARS,
            extra=extra,
        )

    def fetch(self, locator: str, workspace: Path) -> None:
        """Clone the locator into the workspace with minimal history.

        Raises:
            ConfigError: If the locator fails validation (nothing is spawned).
            FetchError: If the clone fails for any reason.
        """
        validate_locator(locator).raise_for_failure(ConfigError)

        LOGGER.info("Cloning repository to temporary directory...")
        LOGGER.info(f"Repository: {locator}")
        LOGGER.info(f"Temporary directory: {workspace}")

        result = self._git_run(
            ["clone", "--depth=1", "--", locator, str(workspace)],
            check="clone",
        )
        if result.returncode != 0:
            raise FetchError(
                f"Failed to clone repository: {_last_line(result.stderr)}", check="clone"
            )

    def verify_origin(self, workspace: Path, locator: str) -> None:
        """Confirm the clone declares the expected origin and is a git repository.

        Raises:
            FetchError: If the origin is unreadable, suspicious or different.
        """
        workspace = workspace.resolve()
        ceiling = workspace.parent

        result = self._git_run(
            ["config", "--get", "remote.origin.url"], check="origin", cwd=workspace, ceiling=ceiling
        )
        if result.returncode != 0:
            raise FetchError("Failed to verify cloned repository remote", check="origin")

        origin = result.stdout.strip()
        if contains_metacharacters(origin):
            raise FetchError(
                "Cloned repository remote contains suspicious characters", check="origin"
            )
        if origin != locator:
            raise FetchError(
                f"Cloned repository remote URL mismatch! Expected: {locator} Got: {origin}",
                check="origin",
            )

        result = self._git_run(
            ["rev-parse", "--show-toplevel"], check="repository", cwd=workspace, ceiling=ceiling
        )
        if result.returncode != 0:
            raise FetchError("Cloned directory is not a valid git repository", check="repository")
        toplevel = Path(result.stdout.strip()).resolve()
        if toplevel != workspace:
            raise FetchError(
                f"Cloned directory is not the repository root: {toplevel}", check="repository"
            )

        LOGGER.info("Repository cloned successfully.")

    def _git_run(
        self,
        args: List[str],
        check: str,
        cwd: Optional[Path] = None,
        ceiling: Optional[Path] = None,
    ) -> subprocess.CompletedProcess:
        try:
            return run_command(
                [self._git, *args],
                tool_name="git",
                cwd=cwd,
                env=self.git_env(ceiling),
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise FetchError(f"git {args[0]} timed out after {e.timeout}s", check=check) from e
        except OSError as e:
            raise FetchError(f"Failed to run git {args[0]}: {e}", check=check) from e


def _last_line(text: str) -> str:
    lines = [line for line in text.strip().splitlines() if line.strip()]
    return lines[-1] if lines else "unknown error"
