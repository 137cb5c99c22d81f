"""CLI runner orchestration.

This module handles help interception and dispatch for the kiroboot CLI.
"""

from __future__ import annotations

import sys
from typing import Iterable, Mapping, Optional

from importlib.metadata import version, PackageNotFoundError

from kiroboot.cli.arguments import build_parser, parse_arguments, wants_help
from kiroboot.cli.commands.help import HelpCommand
from kiroboot.cli.commands.install import InstallCommand
from kiroboot.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


def get_version() -> str:
    """Get kiroboot version.

    Returns:
        Version string from package metadata or fallback.
    """
    try:
        return version("kiroboot")
    except PackageNotFoundError:
        # Fallback for editable installs that have not yet built metadata.
        from kiroboot import __version__
        return __version__


class CLIRunner:
    """Intercepts help and hands everything else to the install command."""

    def __init__(
        self,
        install_cmd: Optional[InstallCommand] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._version = get_version()
        self.parser = build_parser(self._version)
        self.help_cmd = HelpCommand(self.parser)
        self.install_cmd = install_cmd or InstallCommand()
        self._env = env

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv[1:]).

        Returns:
            Exit code.
        """
        argv_list = list(sys.argv[1:] if argv is None else argv)

        # Help is intercepted before anything else runs
        if wants_help(argv_list):
            return self.help_cmd.execute(self.parser.parse_known_args([])[0])

        args, forwarded = parse_arguments(argv_list, self._env)

        configure_logging(debug=args.debug, quiet=args.quiet)

        return self.install_cmd.execute(args, forwarded)
