"""Signal handling for the pipeline.

SIGINT and SIGTERM both become PipelineInterrupted so they unwind through
the same cleanup path as any other failure.
"""

from __future__ import annotations

import signal
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from kiroboot.core.errors import PipelineInterrupted

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def _raise_interrupted(signum: int, frame: Any) -> None:
    raise PipelineInterrupted(signum)


@contextmanager
def _handlers(handler: Any) -> Iterator[None]:
    # signal.signal only works from the main thread
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    previous: Dict[int, Any] = {}
    for signum in HANDLED_SIGNALS:
        previous[signum] = signal.signal(signum, handler)
    try:
        yield
    finally:
        for signum, old in previous.items():
            signal.signal(signum, old)


def interruptible() -> Any:
    """Context manager raising PipelineInterrupted on SIGINT/SIGTERM."""
    return _handlers(_raise_interrupted)


def signals_ignored() -> Any:
    """Context manager ignoring SIGINT/SIGTERM, used while cleaning up."""
    return _handlers(signal.SIG_IGN)
