"""System information report (the kiroboot-sysinfo entry point).

Independent of the installer pipeline; it shares only platform detection
and logging.
"""

from __future__ import annotations

import argparse
import sys
from typing import Iterable, Optional

from kiroboot.bootstrap.platform import PlatformInfo, get_platform_info
from kiroboot.core.logging import configure_logging, get_logger
from kiroboot.sysinfo.probes import select_probe
from kiroboot.sysinfo.report import SysinfoTableReport

LOGGER = get_logger(__name__)


def _detect_platform() -> Optional[PlatformInfo]:
    try:
        return get_platform_info()
    except ValueError as e:
        LOGGER.warning(str(e))
        return None


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Print OS, CPU, memory, GPU, disk and swap tables to stdout."""
    parser = argparse.ArgumentParser(
        prog="kiroboot-sysinfo",
        description="Display operating system, CPU, memory, GPU, disk and swap information.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(list(sys.argv[1:] if argv is None else argv))

    configure_logging(debug=args.debug)

    probe = select_probe(_detect_platform())
    SysinfoTableReport().report(probe.sections(), sys.stdout)
    return 0


__all__ = ["main"]
