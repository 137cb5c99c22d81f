"""Settings file validation for kiroboot.

Validates the keys and value types of a settings mapping. Unknown keys are
warnings; wrong types and attempts to override trust constants are errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple

from kiroboot.config.models import FileMetadataBackend
from kiroboot.core.logging import get_logger

LOGGER = get_logger(__name__)


class ValidationSeverity(Enum):
    """Severity level for validation issues."""

    ERROR = "error"  # Settings cannot be used
    WARNING = "warning"  # Likely mistake but settings usable


@dataclass
class ConfigValidationIssue:
    """A validation issue for a settings file."""

    message: str
    source: str
    severity: ValidationSeverity
    key: Optional[str] = None
    suggestion: Optional[str] = None


# Keys that are compiled in and can never come from a file
TRUST_KEYS: Set[str] = {
    "source_locator",
    "installer_filename",
    "expected_digest",
}

# Keys accepted in a settings file, with the types they accept
VALID_SETTINGS_KEYS: Dict[str, Tuple[type, ...]] = {
    "fetch_timeout": (int, float, type(None)),
    "installer_timeout": (int, float, type(None)),
    "shred_passes": (int,),
    "file_metadata": (str,),
    "interpreter": (str,),
    "git": (str,),
}

VALID_FILE_METADATA: Set[str] = {backend.value for backend in FileMetadataBackend}


def validate_settings(data: Any, source: str) -> List[ConfigValidationIssue]:
    """Validate a settings mapping.

    Args:
        data: Parsed settings (normally a dict from YAML).
        source: Source file path for messages.

    Returns:
        List of issues; the caller decides whether errors are fatal.
    """
    issues: List[ConfigValidationIssue] = []

    if not isinstance(data, dict):
        issues.append(ConfigValidationIssue(
            message=f"Settings must be a mapping, got {type(data).__name__}",
            source=source,
            severity=ValidationSeverity.ERROR,
        ))
        return issues

    for key, value in data.items():
        if key in TRUST_KEYS:
            issues.append(ConfigValidationIssue(
                message=f"'{key}' is compiled in and cannot be overridden",
                source=source,
                severity=ValidationSeverity.ERROR,
                key=key,
            ))
            continue

        expected = VALID_SETTINGS_KEYS.get(key)
        if expected is None:
            issue = ConfigValidationIssue(
                message=f"Unknown settings key '{key}'",
                source=source,
                severity=ValidationSeverity.WARNING,
                key=key,
                suggestion=_suggest_key(str(key), set(VALID_SETTINGS_KEYS)),
            )
            issues.append(issue)
            _log_warning(issue)
            continue

        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool) or not isinstance(value, expected):
            issues.append(ConfigValidationIssue(
                message=f"'{key}' must be a {_type_names(expected)}, got {type(value).__name__}",
                source=source,
                severity=ValidationSeverity.ERROR,
                key=key,
            ))
            continue

        issues.extend(_validate_value(key, value, source))

    return issues


def _validate_value(key: str, value: Any, source: str) -> List[ConfigValidationIssue]:
    issues: List[ConfigValidationIssue] = []
    if key in ("fetch_timeout", "installer_timeout") and value is not None and value <= 0:
        issues.append(ConfigValidationIssue(
            message=f"'{key}' must be positive, got {value}",
            source=source,
            severity=ValidationSeverity.ERROR,
            key=key,
        ))
    elif key == "shred_passes" and value < 1:
        issues.append(ConfigValidationIssue(
            message=f"'shred_passes' must be at least 1, got {value}",
            source=source,
            severity=ValidationSeverity.ERROR,
            key=key,
        ))
    elif key == "file_metadata" and value not in VALID_FILE_METADATA:
        issues.append(ConfigValidationIssue(
            message=f"Invalid value '{value}' for 'file_metadata'. "
                    f"Valid values: {', '.join(sorted(VALID_FILE_METADATA))}",
            source=source,
            severity=ValidationSeverity.ERROR,
            key=key,
            suggestion=_suggest_key(value, VALID_FILE_METADATA),
        ))
    elif key in ("interpreter", "git") and not value.strip():
        issues.append(ConfigValidationIssue(
            message=f"'{key}' must not be empty",
            source=source,
            severity=ValidationSeverity.ERROR,
            key=key,
        ))
    return issues


def _type_names(types: Tuple[type, ...]) -> str:
    names = ["number" if t in (int, float) else "null" if t is type(None) else t.__name__
             for t in types]
    return " or ".join(dict.fromkeys(names))


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a potential typo.

    Args:
        invalid_key: The invalid key entered.
        valid_keys: Set of valid keys.

    Returns:
        Closest matching valid key, or None if no good match.
    """
    matches = get_close_matches(invalid_key, list(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_warning(issue: ConfigValidationIssue) -> None:
    msg = f"{issue.message} in {issue.source}"
    if issue.suggestion:
        msg += f" (did you mean '{issue.suggestion}'?)"
    LOGGER.warning(msg)
