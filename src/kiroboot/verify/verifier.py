"""Installer verifier.

Walks a single candidate file through the trust chain:

    located -> readable -> not-symlink -> size-in-range -> has-shebang
            -> permissions-safe -> [digest-match] -> trusted

The first failing step aborts with IntegrityError (TamperDetectedError for a
digest mismatch). Nothing is retried.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, List, Optional

from kiroboot.config.models import DIGEST_PATTERN, BootstrapConfig
from kiroboot.core.errors import ConfigError, IntegrityError, TamperDetectedError
from kiroboot.core.logging import get_logger
from kiroboot.core.models import CheckOutcome, InstallerCandidate, VerificationReport
from kiroboot.verify.checks import (
    check_digest,
    check_filename,
    check_located,
    check_not_symlink,
    check_permissions,
    check_readable,
    check_shebang,
    check_size,
    read_first_line,
    sha256_file,
)
from kiroboot.verify.metadata import FileMetadata, select_file_metadata

LOGGER = get_logger(__name__)

# Mode granted to a fully verified installer that is not yet executable
EXECUTABLE_MODE = 0o755


def list_regular_files(directory: Path) -> List[str]:
    """Sorted names of the immediate regular files in directory (no symlinks)."""
    try:
        return sorted(
            entry.name
            for entry in os.scandir(directory)
            if entry.is_file(follow_symlinks=False)
        )
    except OSError:
        return []


class InstallerVerifier:
    """Decides whether the fetched installer may be executed."""

    def __init__(
        self,
        config: BootstrapConfig,
        metadata: Optional[FileMetadata] = None,
    ) -> None:
        self._config = config
        self._metadata = metadata or select_file_metadata(config.settings.file_metadata)

    def candidate_path(self, workspace: Path) -> Path:
        """Path of the installer inside the workspace.

        Raises:
            ConfigError: If the configured filename could escape the workspace.
        """
        check_filename(self._config.installer_filename).raise_for_failure(ConfigError)
        return workspace / self._config.installer_filename

    def verify(self, workspace: Path) -> VerificationReport:
        """Run the full trust chain against the installer in workspace.

        Returns:
            VerificationReport for the now-trusted installer.

        Raises:
            ConfigError: If the installer filename is invalid.
            IntegrityError: On the first failed check.
        """
        LOGGER.info("Verifying installation script...")
        path = self.candidate_path(workspace)
        candidate = InstallerCandidate(filename=self._config.installer_filename, path=path)
        report = VerificationReport(candidate=candidate)

        located = check_located(path)
        if not located.ok:
            available = ", ".join(list_regular_files(workspace)) or "none"
            located = CheckOutcome.failed(
                located.check, f"{located.message}. Available files in repository: {available}"
            )
        self._record(report, located)
        self._record(report, check_readable(path))

        candidate.is_symlink = path.is_symlink()
        self._record(report, check_not_symlink(path))

        raw_size = self._query(self._metadata.size, path, "size-in-range", "size")
        self._record(report, check_size(raw_size))
        candidate.size = int(raw_size)

        try:
            candidate.first_line = read_first_line(path)
        except OSError as e:
            raise IntegrityError(f"Failed to read installation script: {e}", check="has-shebang") from e
        self._record(report, check_shebang(candidate.first_line))

        candidate.permissions = self._query(
            self._metadata.permissions, path, "permissions-safe", "permissions"
        )
        self._record(report, check_permissions(candidate.permissions))

        self._verify_digest(report)
        self._make_executable(report)

        LOGGER.info("Installation script verified.")
        return report

    def _verify_digest(self, report: VerificationReport) -> None:
        candidate = report.candidate
        try:
            candidate.digest = sha256_file(candidate.path)
        except OSError as e:
            raise IntegrityError(f"Failed to compute script hash: {e}", check="digest-match") from e

        expected = self._config.expected_digest
        outcome = check_digest(candidate.digest, expected)
        if not outcome.ok and DIGEST_PATTERN.fullmatch(candidate.digest):
            raise TamperDetectedError(expected=expected, actual=candidate.digest)
        self._record(report, outcome)

        if outcome.ok and expected:
            LOGGER.info("Script hash verified.")
        else:
            LOGGER.info(f"No reference digest pinned; installer SHA-256 is {candidate.digest}")

    def _make_executable(self, report: VerificationReport) -> None:
        path = report.candidate.path
        if os.access(path, os.X_OK):
            return
        LOGGER.info("Making installation script executable...")
        try:
            os.chmod(path, EXECUTABLE_MODE)
        except OSError as e:
            raise IntegrityError(f"Failed to make installation script executable: {e}", check="trusted") from e
        report.made_executable = True

    def _query(self, query: Callable[[Path], str], path: Path, check: str, what: str) -> str:
        try:
            return query(path)
        except OSError as e:
            raise IntegrityError(f"Failed to determine script {what}: {e}", check=check) from e

    @staticmethod
    def _record(report: VerificationReport, outcome: CheckOutcome) -> None:
        outcome.raise_for_failure(IntegrityError)
        LOGGER.debug(f"{outcome.check}: {outcome.status.value} {outcome.message}".rstrip())
        report.outcomes.append(outcome)
