"""Argument handling for the kiroboot CLI.

Only `--help`/`-h` is handled by kiroboot itself. Every other argument is
forwarded, verbatim and in its original order, to the installer. Launcher
controls (debug logging, quiet output, settings file) are read from
KIROBOOT_* environment variables so they can never shadow an installer flag.
"""

from __future__ import annotations

import argparse
import os
from typing import List, Mapping, Optional, Sequence, Tuple

HELP_FLAGS = frozenset({"--help", "-h"})

DEBUG_ENV = "KIROBOOT_DEBUG"
QUIET_ENV = "KIROBOOT_QUIET"
CONFIG_ENV = "KIROBOOT_CONFIG"

_TRUTHY = frozenset({"1", "true", "yes", "on"})

# Flags understood by the installer itself; listed for the usage text only
INSTALLER_OPTIONS: List[Tuple[str, str]] = [
    ("--install", "Install or update Kiro (default)"),
    ("--update", "Same as --install"),
    ("--uninstall", "Uninstall Kiro"),
    ("--user", "Perform operation for current user only (recommended for curl)"),
    ("--force", "Force reinstall even if same version exists"),
    ("--clean", "Remove user data during uninstall"),
]

_EPILOG_TEMPLATE = """\
installer options (forwarded, interpreted by the installer):
{options}

environment:
  {debug}=1      Enable debug logging
  {quiet}=1      Reduce logging output to errors only
  {config}=PATH  Settings file (timeouts, shred passes, tool names)

security notes:
  - The installer is verified (location, type, size, shebang, permissions
    and SHA-256) before it is executed
  - Temporary files are shredded and removed after installation
  - When piping into a shell, use --user to avoid sudo

examples:
  kiroboot                     Clone repo and install Kiro
  kiroboot --user              Install for the current user (no sudo)
  kiroboot --force             Force reinstall
  kiroboot --uninstall --user  Uninstall the user installation
"""


def _format_epilog() -> str:
    options = "\n".join(f"  {flag:<13} {text}" for flag, text in INSTALLER_OPTIONS)
    return _EPILOG_TEMPLATE.format(
        options=options, debug=DEBUG_ENV, quiet=QUIET_ENV, config=CONFIG_ENV
    )


def build_parser(version: Optional[str] = None) -> argparse.ArgumentParser:
    """Build the parser used to render the usage text."""
    description = (
        "Clone the Kiro installation repository, verify the installer "
        "and run it. All arguments except --help are passed directly to "
        "the installer."
    )
    if version:
        description = f"kiroboot {version}\n\n{description}"
    parser = argparse.ArgumentParser(
        prog="kiroboot",
        usage="%(prog)s [INSTALLER_OPTIONS...]",
        description=description,
        epilog=_format_epilog(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument(
        "-h", "--help",
        action="store_true",
        help="Show this help message and exit.",
    )
    return parser


def wants_help(argv: Sequence[str]) -> bool:
    """True if --help or -h is among the given arguments."""
    return any(arg in HELP_FLAGS for arg in argv)


def _flag(env: Mapping[str, str], name: str) -> bool:
    return env.get(name, "").strip().lower() in _TRUTHY


def launcher_options(env: Optional[Mapping[str, str]] = None) -> argparse.Namespace:
    """Read launcher controls from the environment."""
    env = os.environ if env is None else env
    config = env.get(CONFIG_ENV, "").strip() or None
    return argparse.Namespace(
        debug=_flag(env, DEBUG_ENV),
        quiet=_flag(env, QUIET_ENV),
        config=config,
    )


def parse_arguments(
    argv: Sequence[str],
    env: Optional[Mapping[str, str]] = None,
) -> Tuple[argparse.Namespace, List[str]]:
    """Collect launcher controls and the installer arguments.

    Returns:
        (launcher options, arguments to forward to the installer).
    """
    return launcher_options(env), list(argv)
