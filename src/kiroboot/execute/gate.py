"""Execution gate.

Re-validates the trusted installer immediately before running it, because
time has passed since verification, then runs it with an explicit
interpreter and forwards the caller's arguments untouched.
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from kiroboot.core.errors import ExecutionError
from kiroboot.core.logging import get_logger
from kiroboot.core.models import ExecutionResult
from kiroboot.core.subprocess_runner import run_command

LOGGER = get_logger(__name__)

USER_SCOPE_FLAG = "--user"


def stdin_is_interactive() -> bool:
    stream = sys.stdin
    try:
        return stream is not None and stream.isatty()
    except ValueError:
        # closed stream
        return False


def normalize_exit_code(returncode: int) -> int:
    """Map a child killed by signal N (returncode -N) to the shell's 128 + N."""
    if returncode < 0:
        return 128 - returncode
    return returncode


class ExecutionGate:
    """Runs the verified installer, or refuses to."""

    def __init__(
        self,
        interpreter_path: str,
        timeout: Optional[float] = None,
        interactive: Optional[bool] = None,
    ) -> None:
        self._interpreter = interpreter_path
        self._timeout = timeout
        self._interactive = interactive

    def recheck(self, script_path: Path, workspace: Path) -> Path:
        """Re-validate the installer and return its canonical path.

        Raises:
            ExecutionError: If the file changed identity, or escapes the workspace.
        """
        if not script_path.is_file() or script_path.is_symlink():
            raise ExecutionError("Script file was modified or removed", check="toctou")

        if any(ch.isspace() for ch in str(script_path)):
            raise ExecutionError("Script path contains whitespace", check="containment")

        try:
            resolved_path = script_path.parent.resolve(strict=True) / script_path.name
        except OSError as e:
            raise ExecutionError(f"Failed to resolve script path: {e}", check="containment") from e
        try:
            resolved_workspace = workspace.resolve(strict=True)
        except OSError as e:
            raise ExecutionError(
                f"Failed to resolve temp directory path: {e}", check="containment"
            ) from e

        if resolved_path == resolved_workspace or not resolved_path.is_relative_to(resolved_workspace):
            raise ExecutionError(
                "Script path validation failed (security check)", check="containment"
            )
        return resolved_path

    def advise(self, args: Sequence[str]) -> bool:
        """Emit the privilege notice for piped runs without --user.

        Returns:
            True if the notice was emitted.
        """
        interactive = stdin_is_interactive() if self._interactive is None else self._interactive
        if interactive or USER_SCOPE_FLAG in args:
            return False
        LOGGER.warning(
            "Running via pipe (curl). System-wide installation will proceed with sudo. "
            "Use --user if you prefer user-only installation (no sudo required)."
        )
        return True

    def run(self, script_path: Path, workspace: Path, args: Sequence[str]) -> ExecutionResult:
        """Re-check, then run the installer and return its exit status.

        Raises:
            ExecutionError: If a re-check fails, the interpreter cannot start,
                or the installer times out.
        """
        canonical = self.recheck(script_path, workspace)
        self.advise(args)

        forwarded: List[str] = list(args)
        LOGGER.info("Running Kiro installation script...")
        LOGGER.info(f"Script location: {canonical}")
        if forwarded:
            LOGGER.info(f"Arguments passed to installer: {' '.join(forwarded)}")

        try:
            result = run_command(
                [self._interpreter, str(canonical), *forwarded],
                tool_name="installer",
                timeout=self._timeout,
                capture_output=False,
            )
        except subprocess.TimeoutExpired as e:
            raise ExecutionError(
                f"Installation script timed out after {e.timeout}s", check="execute"
            ) from e
        except OSError as e:
            raise ExecutionError(f"Failed to start installer: {e}", check="execute") from e

        exit_code = normalize_exit_code(result.returncode)
        if exit_code != 0:
            LOGGER.error(f"Installation script exited with code: {exit_code}")
        return ExecutionResult(exit_code=exit_code, args=forwarded)
