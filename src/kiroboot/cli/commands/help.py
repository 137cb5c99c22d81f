"""Help command implementation."""

from __future__ import annotations

import argparse
from argparse import Namespace
from typing import Sequence

from kiroboot.cli.commands import Command
from kiroboot.cli.exit_codes import EXIT_SUCCESS


class HelpCommand(Command):
    """Prints usage, including the installer's own options."""

    def __init__(self, parser: argparse.ArgumentParser) -> None:
        self._parser = parser

    @property
    def name(self) -> str:
        return "help"

    def execute(self, args: Namespace, forwarded: Sequence[str] = ()) -> int:
        self._parser.print_help()
        return EXIT_SUCCESS
