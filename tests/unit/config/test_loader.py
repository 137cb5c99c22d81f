"""Tests for kiroboot.config.loader."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from kiroboot.bootstrap.paths import KirobootPaths
from kiroboot.config.loader import (
    dict_to_settings,
    expand_env_vars,
    load_config,
    load_settings_file,
)
from kiroboot.config.models import SOURCE_LOCATOR, FileMetadataBackend
from kiroboot.core.errors import ConfigError


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


class TestExpandEnvVars:
    """Tests for environment variable expansion."""

    def test_expands_set_variable(self) -> None:
        with patch.dict(os.environ, {"KIRO_GIT": "/opt/git"}):
            assert expand_env_vars({"git": "${KIRO_GIT}"}) == {"git": "/opt/git"}

    def test_uses_default(self) -> None:
        os.environ.pop("KIRO_UNSET_VAR", None)
        assert expand_env_vars("${KIRO_UNSET_VAR:-bash}") == "bash"

    def test_missing_without_default_is_empty(self) -> None:
        os.environ.pop("KIRO_UNSET_VAR", None)
        assert expand_env_vars("${KIRO_UNSET_VAR}") == ""

    def test_leaves_non_strings(self) -> None:
        assert expand_env_vars({"shred_passes": 3, "list": [1, "a"]}) == {
            "shred_passes": 3,
            "list": [1, "a"],
        }


class TestLoadSettingsFile:
    """Tests for load_settings_file."""

    def test_loads_valid_file(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "config.yml", "shred_passes: 5\nfetch_timeout: 30\n")
        assert load_settings_file(path) == {"shred_passes": 5, "fetch_timeout": 30}

    def test_empty_file_is_empty_mapping(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "config.yml", "")
        assert load_settings_file(path) == {}

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "config.yml", "shred_passes: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings_file(path)

    def test_trust_key_raises(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "config.yml", "source_locator: https://github.com/evil/repo\n")
        with pytest.raises(ConfigError, match="cannot be overridden"):
            load_settings_file(path)

    def test_unknown_key_is_not_fatal(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "config.yml", "colour: blue\n")
        assert load_settings_file(path) == {"colour": "blue"}


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_files(self, tmp_path: Path) -> None:
        config = load_config(paths=KirobootPaths(tmp_path / "home"))
        assert config.source_locator == SOURCE_LOCATOR
        assert config.settings.shred_passes == 3

    def test_global_file_applies(self, tmp_path: Path) -> None:
        paths = KirobootPaths(tmp_path / "home")
        _write(paths.settings_file, "shred_passes: 7\n")
        config = load_config(paths=paths)
        assert config.settings.shred_passes == 7

    def test_cli_file_overrides_global(self, tmp_path: Path) -> None:
        paths = KirobootPaths(tmp_path / "home")
        _write(paths.settings_file, "shred_passes: 7\ninterpreter: zsh\n")
        custom = _write(tmp_path / "custom.yml", "shred_passes: 2\n")
        config = load_config(cli_config_path=custom, paths=paths)
        assert config.settings.shred_passes == 2
        assert config.settings.interpreter == "zsh"

    def test_missing_cli_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(
                cli_config_path=tmp_path / "missing.yml",
                paths=KirobootPaths(tmp_path / "home"),
            )


class TestDictToSettings:
    """Tests for dict_to_settings."""

    def test_converts_backend(self) -> None:
        settings = dict_to_settings({"file_metadata": "stat-command"})
        assert settings.file_metadata is FileMetadataBackend.STAT_COMMAND

    def test_ignores_unknown_keys(self) -> None:
        settings = dict_to_settings({"colour": "blue"})
        assert settings.git == "git"
