"""Tests for path management functionality."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

from kiroboot.bootstrap.paths import (
    DEFAULT_HOME_DIR_NAME,
    KIROBOOT_HOME_ENV,
    KirobootPaths,
    get_kiroboot_home,
)


class TestGetKirobootHome:
    """Tests for get_kiroboot_home function."""

    def test_returns_default_in_user_home(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"HOME": str(tmp_path)}, clear=False):
            os.environ.pop(KIROBOOT_HOME_ENV, None)
            home = get_kiroboot_home()
            assert home == tmp_path / DEFAULT_HOME_DIR_NAME

    def test_respects_kiroboot_home_env_var(self, tmp_path: Path) -> None:
        custom_home = tmp_path / "custom-kiroboot"
        with patch.dict(os.environ, {KIROBOOT_HOME_ENV: str(custom_home)}):
            assert get_kiroboot_home() == custom_home

    def test_empty_env_var_uses_default(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {KIROBOOT_HOME_ENV: "", "HOME": str(tmp_path)}):
            assert get_kiroboot_home() == tmp_path / DEFAULT_HOME_DIR_NAME


class TestKirobootPaths:
    """Tests for KirobootPaths class."""

    def test_paths_from_home(self, tmp_path: Path) -> None:
        home = tmp_path / ".kiroboot"
        paths = KirobootPaths(home)

        assert paths.home == home
        assert paths.config_dir == home / "config"
        assert paths.settings_file == home / "config" / "config.yml"

    def test_default_uses_env(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {KIROBOOT_HOME_ENV: str(tmp_path)}):
            assert KirobootPaths.default().home == tmp_path
