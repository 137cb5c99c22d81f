"""kiroboot command-line interface."""

from __future__ import annotations

from typing import Iterable, Optional

from kiroboot.cli.runner import CLIRunner


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the kiroboot console script."""
    return CLIRunner().run(argv)


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    raise SystemExit(main())
