"""CLI commands package.

This module provides the base Command class and exports all command implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import Namespace
from typing import Sequence


class Command(ABC):
    """Base class for CLI commands."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Command identifier."""

    @abstractmethod
    def execute(self, args: Namespace, forwarded: Sequence[str] = ()) -> int:
        """Execute the command.

        Args:
            args: Parsed launcher options.
            forwarded: Arguments destined for the installer.

        Returns:
            Exit code (0 for success, non-zero for error).
        """


# ruff: noqa: E402
from kiroboot.cli.commands.help import HelpCommand
from kiroboot.cli.commands.install import InstallCommand

__all__ = [
    "Command",
    "HelpCommand",
    "InstallCommand",
]
