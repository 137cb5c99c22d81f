"""Individual trust-chain checks.

Every function here returns a CheckOutcome and never raises for a failed
check; the verifier decides what a failure means.
"""

from __future__ import annotations

import hashlib
import os
import re
from pathlib import Path
from typing import Optional

from kiroboot.config.models import DIGEST_PATTERN
from kiroboot.core.models import CheckOutcome

# Accepted installer size, in bytes (inclusive)
MIN_INSTALLER_SIZE = 1024
MAX_INSTALLER_SIZE = 1_048_576

SHEBANG = "#!"

SIZE_PATTERN = re.compile(r"[0-9]+")
PERMISSION_PATTERN = re.compile(r"[0-7]{3}")

GROUP_OR_WORLD_WRITE = 0o022

_HASH_CHUNK = 65536


def check_filename(filename: str) -> CheckOutcome:
    """Reject names that could escape the workspace."""
    if not filename or "/" in filename or ".." in filename or "\0" in filename:
        return CheckOutcome.failed(
            "filename", f"Invalid install script filename: {filename!r}"
        )
    return CheckOutcome.passed("filename")


def check_located(path: Path) -> CheckOutcome:
    if not path.is_file():
        return CheckOutcome.failed(
            "located", f"Installation script not found at {path}"
        )
    return CheckOutcome.passed("located")


def check_readable(path: Path) -> CheckOutcome:
    if not path.exists() or not os.access(path, os.R_OK):
        return CheckOutcome.failed("readable", "Installation script is not readable")
    return CheckOutcome.passed("readable")


def check_not_symlink(path: Path) -> CheckOutcome:
    # A readable file can still be a link to something sensitive
    if path.is_symlink():
        return CheckOutcome.failed(
            "not-symlink", "Installation script is a symlink (security risk)"
        )
    return CheckOutcome.passed("not-symlink")


def check_size(raw_size: str) -> CheckOutcome:
    """Validate a raw size query result and its bounds."""
    if not SIZE_PATTERN.fullmatch(raw_size):
        return CheckOutcome.failed("size-in-range", f"Invalid script size value: {raw_size!r}")

    size = int(raw_size)
    if size < MIN_INSTALLER_SIZE or size > MAX_INSTALLER_SIZE:
        return CheckOutcome.failed(
            "size-in-range", f"Installation script size is suspicious ({size} bytes)"
        )
    return CheckOutcome.passed("size-in-range", f"{size} bytes")


def check_shebang(first_line: Optional[str]) -> CheckOutcome:
    if not first_line or not first_line.startswith(SHEBANG):
        return CheckOutcome.failed("has-shebang", "Installation script missing shebang")
    return CheckOutcome.passed("has-shebang")


def check_permissions(raw_permissions: str) -> CheckOutcome:
    """Validate a raw octal permission string and reject group/world write."""
    if not PERMISSION_PATTERN.fullmatch(raw_permissions):
        return CheckOutcome.failed(
            "permissions-safe", f"Invalid permission format: {raw_permissions!r}"
        )
    if int(raw_permissions, 8) & GROUP_OR_WORLD_WRITE:
        return CheckOutcome.failed(
            "permissions-safe",
            f"Installation script has unsafe permissions: {raw_permissions}",
        )
    return CheckOutcome.passed("permissions-safe", raw_permissions)


def check_digest(actual: str, expected: str) -> CheckOutcome:
    """Compare a computed SHA-256 digest to the pinned one.

    An empty expected digest means no digest is pinned and the step is skipped.
    """
    if not expected:
        return CheckOutcome.skipped("digest-match", "No reference digest configured")
    if not DIGEST_PATTERN.fullmatch(actual):
        return CheckOutcome.failed("digest-match", f"Invalid hash format: {actual!r}")
    if actual != expected:
        return CheckOutcome.failed(
            "digest-match", f"Script hash mismatch! Expected: {expected} Actual: {actual}"
        )
    return CheckOutcome.passed("digest-match", actual)


def read_first_line(path: Path) -> str:
    """Return the first line of path without its line terminator."""
    with open(path, "rb") as f:
        line = f.readline(4096)
    return line.decode("utf-8", errors="replace").rstrip("\r\n")


def sha256_file(path: Path) -> str:
    """Return the lowercase hex SHA-256 digest of path."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_HASH_CHUNK), b""):
            digest.update(chunk)
    return digest.hexdigest()
