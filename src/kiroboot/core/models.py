from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Type

from kiroboot.core.errors import BootstrapError


class CheckStatus(str, Enum):
    """Outcome tag of a single trust-chain check."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class CheckOutcome:
    """Tagged result of one validation step.

    Attributes:
        check: Name of the check (e.g. "size-in-range").
        status: Whether the check passed, failed or was skipped.
        message: Human-readable explanation, used verbatim in error output.
    """

    check: str
    status: CheckStatus
    message: str = ""

    @classmethod
    def passed(cls, check: str, message: str = "") -> "CheckOutcome":
        return cls(check=check, status=CheckStatus.PASSED, message=message)

    @classmethod
    def failed(cls, check: str, message: str) -> "CheckOutcome":
        return cls(check=check, status=CheckStatus.FAILED, message=message)

    @classmethod
    def skipped(cls, check: str, message: str = "") -> "CheckOutcome":
        return cls(check=check, status=CheckStatus.SKIPPED, message=message)

    @property
    def ok(self) -> bool:
        return self.status != CheckStatus.FAILED

    def raise_for_failure(self, error_cls: Type[BootstrapError]) -> "CheckOutcome":
        """Raise error_cls carrying this outcome's message if the check failed."""
        if not self.ok:
            raise error_cls(self.message, check=self.check)
        return self


@dataclass
class InstallerCandidate:
    """The installer file as observed while walking the trust chain.

    Fields are filled in as the corresponding check runs; a candidate is only
    trusted once every check has passed.
    """

    filename: str
    path: Path
    size: Optional[int] = None
    permissions: Optional[str] = None
    is_symlink: Optional[bool] = None
    digest: Optional[str] = None
    first_line: Optional[str] = None


@dataclass
class VerificationReport:
    """Everything the verifier established about a trusted installer."""

    candidate: InstallerCandidate
    outcomes: List[CheckOutcome] = field(default_factory=list)
    made_executable: bool = False

    @property
    def digest_checked(self) -> bool:
        return any(
            o.check == "digest-match" and o.status == CheckStatus.PASSED
            for o in self.outcomes
        )


@dataclass(frozen=True)
class ExecutionResult:
    """Exit status of the forwarded installer process."""

    exit_code: int
    args: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.exit_code == 0
