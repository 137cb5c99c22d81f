"""Installer verification: the trust chain a fetched file must pass before it runs."""

from kiroboot.verify.metadata import FileMetadata, select_file_metadata
from kiroboot.verify.verifier import InstallerVerifier

__all__ = ["FileMetadata", "select_file_metadata", "InstallerVerifier"]
