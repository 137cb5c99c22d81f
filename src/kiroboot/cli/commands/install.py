"""Install command implementation.

Runs the fetch-verify-execute pipeline and maps its outcome to an exit code.
"""

from __future__ import annotations

import sys
import traceback
from argparse import Namespace
from pathlib import Path
from typing import Callable, Optional, Sequence

from kiroboot.cli.commands import Command
from kiroboot.cli.exit_codes import EXIT_FAILURE, EXIT_INTERRUPTED, EXIT_SUCCESS
from kiroboot.config import BootstrapConfig, load_config
from kiroboot.core.errors import BootstrapError, PipelineInterrupted
from kiroboot.core.logging import get_logger
from kiroboot.pipeline.executor import InstallPipeline

LOGGER = get_logger(__name__)

BANNER = (
    "======================================\n"
    "    Kiro Clone & Install Script\n"
    "======================================\n"
)

PipelineFactory = Callable[[BootstrapConfig], InstallPipeline]


def default_pipeline(config: BootstrapConfig) -> InstallPipeline:
    launch_dir = Path(sys.argv[0]).resolve().parent if sys.argv and sys.argv[0] else None
    return InstallPipeline(config, launch_dir=launch_dir)


class InstallCommand(Command):
    """Clones, verifies and runs the Kiro installer."""

    def __init__(self, pipeline_factory: Optional[PipelineFactory] = None) -> None:
        self._pipeline_factory = pipeline_factory or default_pipeline

    @property
    def name(self) -> str:
        return "install"

    def execute(self, args: Namespace, forwarded: Sequence[str] = ()) -> int:
        """Run the pipeline.

        Returns:
            0 on success, 1 on any pipeline failure, 130 when interrupted,
            otherwise the installer's own exit code.
        """
        if not getattr(args, "quiet", False):
            sys.stderr.write(BANNER + "\n")

        config_path = Path(args.config) if getattr(args, "config", None) else None
        try:
            config = load_config(cli_config_path=config_path)
            result = self._pipeline_factory(config).run(list(forwarded))
        except (PipelineInterrupted, KeyboardInterrupt):
            LOGGER.error("Installation interrupted. Temporary files were cleaned up.")
            return EXIT_INTERRUPTED
        except BootstrapError as e:
            if getattr(args, "debug", False):
                traceback.print_exc()
            LOGGER.error(f"Error: {e}")
            return EXIT_FAILURE

        if result.success:
            LOGGER.info("Script execution completed!")
            return EXIT_SUCCESS
        return result.exit_code
