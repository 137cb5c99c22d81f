"""Error taxonomy for the fetch-verify-execute pipeline.

Every stage raises a subclass of BootstrapError. The CLI runner is the only
place that turns these into exit codes.
"""

from __future__ import annotations

from typing import Optional


class BootstrapError(Exception):
    """Base error for all pipeline failures.

    Attributes:
        check: Name of the check or step that failed.
    """

    def __init__(self, message: str, check: Optional[str] = None) -> None:
        self.check = check
        super().__init__(message)


class EnvironmentCheckError(BootstrapError):
    """The execution environment is unusable (interpreter, scratch space, tools)."""


class ConfigError(BootstrapError):
    """Invalid compiled-in constants or settings file."""


class FetchError(BootstrapError):
    """Remote retrieval failed or the fetched origin does not match."""


class IntegrityError(BootstrapError):
    """The installer candidate violated one of the trust-chain invariants."""


class TamperDetectedError(IntegrityError):
    """The installer digest does not match the pinned reference digest."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Installer hash mismatch! Expected: {expected} Actual: {actual}. "
            "This may indicate the script has been tampered with.",
            check="digest-match",
        )


class ExecutionError(BootstrapError):
    """The execution gate refused to run the installer, or running it failed."""


class PipelineInterrupted(BootstrapError):
    """A termination signal arrived while the pipeline was running."""

    def __init__(self, signum: int) -> None:
        self.signum = signum
        super().__init__(f"Installation interrupted by signal {signum}", check="signal")
