"""Install pipeline executor.

Runs the stages strictly in order, each of which may abort the run:

1. Environment guard
2. Secure workspace allocation
3. Source fetch and origin verification
4. Installer verification
5. Execution gate

The workspace is destroyed on every exit path, including SIGINT/SIGTERM.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from kiroboot.bootstrap.environment import EnvironmentGuard, EnvironmentReport
from kiroboot.bootstrap.signals import interruptible
from kiroboot.bootstrap.workspace import SecureWorkspace
from kiroboot.config.models import BootstrapConfig
from kiroboot.core.errors import ConfigError
from kiroboot.core.logging import get_logger
from kiroboot.core.models import ExecutionResult
from kiroboot.execute.gate import ExecutionGate
from kiroboot.fetch.base import SourceFetcher
from kiroboot.fetch.git import GitFetcher
from kiroboot.fetch.locator import validate_locator
from kiroboot.verify.checks import check_filename
from kiroboot.verify.verifier import InstallerVerifier

LOGGER = get_logger(__name__)


class InstallPipeline:
    """Fetch-verify-execute pipeline for the installer.

    Collaborators can be injected for testing; by default they are built
    from the configuration and the environment report.
    """

    def __init__(
        self,
        config: BootstrapConfig,
        guard: Optional[EnvironmentGuard] = None,
        fetcher: Optional[SourceFetcher] = None,
        verifier: Optional[InstallerVerifier] = None,
        gate: Optional[ExecutionGate] = None,
        launch_dir: Optional[Path] = None,
    ) -> None:
        self._config = config
        self._guard = guard or EnvironmentGuard(config, launch_dir=launch_dir)
        self._fetcher = fetcher
        self._verifier = verifier or InstallerVerifier(config)
        self._gate = gate

    def validate_config(self) -> None:
        """Validate the compiled-in locator and filename.

        Runs before anything is spawned so a bad locator never reaches a
        command line.

        Raises:
            ConfigError: If either constant is invalid.
        """
        validate_locator(self._config.source_locator).raise_for_failure(ConfigError)
        check_filename(self._config.installer_filename).raise_for_failure(ConfigError)

    def run(self, args: Sequence[str]) -> ExecutionResult:
        """Run every stage and return the installer's exit status.

        Args:
            args: Arguments forwarded verbatim to the installer.

        Raises:
            BootstrapError: From whichever stage failed first.
        """
        self.validate_config()
        report = self._guard.check()

        fetcher = self._fetcher or self._default_fetcher(report)
        gate = self._gate or self._default_gate(report)
        locator = self._config.source_locator

        with interruptible():
            with SecureWorkspace.allocate(
                report.scratch_dir, shred_passes=self._config.settings.shred_passes
            ) as workspace:
                fetcher.fetch(locator, workspace.path)
                fetcher.verify_origin(workspace.path, locator)
                verification = self._verifier.verify(workspace.path)
                return gate.run(verification.candidate.path, workspace.path, args)

    def _default_fetcher(self, report: EnvironmentReport) -> SourceFetcher:
        return GitFetcher(report.git_path, timeout=self._config.settings.fetch_timeout)

    def _default_gate(self, report: EnvironmentReport) -> ExecutionGate:
        return ExecutionGate(
            report.interpreter_path, timeout=self._config.settings.installer_timeout
        )
