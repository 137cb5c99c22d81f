from __future__ import annotations

import logging
from typing import Optional

DEBUG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DEFAULT_FORMAT = "%(levelname)s: %(message)s"


def configure_logging(*, debug: bool = False, quiet: bool = False) -> None:
    """Configure root logging level based on CLI flags.

    Precedence:
    - quiet → ERROR
    - debug → DEBUG
    - default → INFO (progress messages are part of the installer UX)

    Records go to stderr so piped invocations keep stdout clean.
    """

    if quiet:
        level = logging.ERROR
    elif debug:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format=DEBUG_FORMAT if debug else DEFAULT_FORMAT,
        force=True,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-level logger."""

    return logging.getLogger(name if name is not None else __name__)
