"""Tests for kiroboot.config.validation."""

from __future__ import annotations

from kiroboot.config.validation import (
    ValidationSeverity,
    _suggest_key,
    validate_settings,
)


def _errors(issues):
    return [i for i in issues if i.severity == ValidationSeverity.ERROR]


def _warnings(issues):
    return [i for i in issues if i.severity == ValidationSeverity.WARNING]


class TestSuggestKey:
    """Tests for _suggest_key function."""

    def test_suggests_typo_fix(self) -> None:
        assert _suggest_key("shred_pases", {"shred_passes", "git"}) == "shred_passes"

    def test_returns_none_for_no_match(self) -> None:
        assert _suggest_key("xyz", {"shred_passes", "interpreter"}) is None

    def test_handles_empty_valid_keys(self) -> None:
        assert _suggest_key("test", set()) is None


class TestValidateSettings:
    """Tests for validate_settings function."""

    def test_valid_settings_have_no_issues(self) -> None:
        data = {
            "fetch_timeout": 60,
            "installer_timeout": 1800.5,
            "shred_passes": 1,
            "file_metadata": "stat-command",
            "interpreter": "bash",
            "git": "/usr/bin/git",
        }
        assert validate_settings(data, source="config.yml") == []

    def test_non_mapping_is_error(self) -> None:
        issues = validate_settings(["a"], source="config.yml")
        assert len(_errors(issues)) == 1
        assert "mapping" in issues[0].message

    def test_trust_keys_are_errors(self) -> None:
        for key in ("source_locator", "installer_filename", "expected_digest"):
            issues = validate_settings({key: "x"}, source="config.yml")
            errors = _errors(issues)
            assert len(errors) == 1
            assert errors[0].key == key
            assert "cannot be overridden" in errors[0].message

    def test_unknown_key_is_warning_with_suggestion(self) -> None:
        issues = validate_settings({"fetch_timout": 10}, source="config.yml")
        assert _errors(issues) == []
        warnings = _warnings(issues)
        assert len(warnings) == 1
        assert warnings[0].suggestion == "fetch_timeout"

    def test_wrong_type_is_error(self) -> None:
        issues = validate_settings({"shred_passes": "three"}, source="config.yml")
        assert len(_errors(issues)) == 1

    def test_bool_is_not_a_number(self) -> None:
        issues = validate_settings({"shred_passes": True}, source="config.yml")
        assert len(_errors(issues)) == 1

    def test_null_timeout_is_allowed(self) -> None:
        assert validate_settings({"fetch_timeout": None}, source="config.yml") == []

    def test_non_positive_timeout_is_error(self) -> None:
        issues = validate_settings({"installer_timeout": 0}, source="config.yml")
        assert "must be positive" in _errors(issues)[0].message

    def test_zero_shred_passes_is_error(self) -> None:
        issues = validate_settings({"shred_passes": 0}, source="config.yml")
        assert len(_errors(issues)) == 1

    def test_invalid_file_metadata_value(self) -> None:
        issues = validate_settings({"file_metadata": "stat-comand"}, source="config.yml")
        errors = _errors(issues)
        assert len(errors) == 1
        assert errors[0].suggestion == "stat-command"

    def test_empty_interpreter_is_error(self) -> None:
        issues = validate_settings({"interpreter": "  "}, source="config.yml")
        assert len(_errors(issues)) == 1
