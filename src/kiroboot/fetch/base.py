"""Base class for source fetchers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class SourceFetcher(ABC):
    """Retrieves the installer repository into a workspace.

    Implementations must validate the locator before spawning anything and
    must never fall back to partial content.
    """

    @abstractmethod
    def fetch(self, locator: str, workspace: Path) -> None:
        """Retrieve locator into workspace.

        Raises:
            ConfigError: If the locator is invalid.
            FetchError: If retrieval fails.
        """

    @abstractmethod
    def verify_origin(self, workspace: Path, locator: str) -> None:
        """Confirm the retrieved content declares locator as its origin.

        Raises:
            FetchError: If the origin is missing, suspicious or different.
        """
