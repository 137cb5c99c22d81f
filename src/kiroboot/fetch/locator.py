"""Source locator validation.

The locator is validated before it is ever placed on a command line: it
must match a strict GitHub https pattern and contain no shell metacharacters.
"""

from __future__ import annotations

import re

from kiroboot.core.models import CheckOutcome

# https://github.com/<org>/<repo>[/]; org is 1-39 alphanumerics or hyphens,
# not starting or ending with a hyphen
LOCATOR_PATTERN = re.compile(
    r"https://github\.com/[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,37}[a-zA-Z0-9])?/[a-zA-Z0-9._-]+/?"
)

SHELL_METACHARACTERS = frozenset(";$`|&<>(){}[]")


def contains_metacharacters(value: str) -> bool:
    return any(ch in SHELL_METACHARACTERS for ch in value)


def validate_locator(locator: str) -> CheckOutcome:
    """Check a source locator against the allowlist and the blacklist.

    Args:
        locator: Repository URL to validate.

    Returns:
        Passed outcome, or a failed one naming the violated rule.
    """
    if not LOCATOR_PATTERN.fullmatch(locator):
        return CheckOutcome.failed(
            "locator-format", f"Invalid repository URL format: {locator!r}"
        )
    if contains_metacharacters(locator):
        return CheckOutcome.failed(
            "locator-characters", "Repository URL contains suspicious characters"
        )
    return CheckOutcome.passed("locator-format")
