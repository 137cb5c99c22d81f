"""Blocking subprocess helpers.

All external tools (git, stat, shred) run through here so the environment
handed to them is explicit and timeouts are applied uniformly.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Union

from kiroboot.core.logging import get_logger

LOGGER = get_logger(__name__)


def sanitized_env(
    remove: Iterable[str] = (),
    extra: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """Return a copy of the environment with some variables removed.

    Args:
        remove: Variable names to drop.
        extra: Variables to set on top of the copy.
        base: Environment to copy (defaults to os.environ).

    Returns:
        A new environment mapping; the process environment is not modified.
    """
    env = dict(os.environ if base is None else base)
    for name in remove:
        env.pop(name, None)
    if extra:
        env.update(extra)
    return env


def run_command(
    cmd: List[str],
    tool_name: str,
    cwd: Optional[Union[str, Path]] = None,
    env: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = None,
    capture_output: bool = True,
) -> subprocess.CompletedProcess:
    """Run a command to completion.

    Args:
        cmd: Command and arguments. Never passed through a shell.
        tool_name: Name of the tool, used in log messages.
        cwd: Working directory for the command.
        env: Environment for the child (defaults to the inherited one).
        timeout: Timeout in seconds, or None to block until exit.
        capture_output: Capture stdout/stderr as text instead of inheriting them.

    Returns:
        CompletedProcess; a non-zero return code is not an exception here.

    Raises:
        subprocess.TimeoutExpired: If the command times out (the child is killed).
        OSError: If the command cannot be started.
    """
    LOGGER.debug(f"Running {tool_name}: {cmd}")
    result = subprocess.run(
        cmd,
        capture_output=capture_output,
        text=True,
        encoding="utf-8",
        errors="replace",
        cwd=str(cwd) if cwd is not None else None,
        env=dict(env) if env is not None else None,
        timeout=timeout,
        check=False,
    )
    LOGGER.debug(f"{tool_name} exited with code {result.returncode}")
    return result
