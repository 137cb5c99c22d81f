"""Tests for subprocess helpers."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

from kiroboot.core.subprocess_runner import run_command, sanitized_env


class TestSanitizedEnv:
    """Tests for sanitized_env."""

    def test_removes_variables(self) -> None:
        env = sanitized_env(remove=["SECRET"], base={"SECRET": "x", "PATH": "/bin"})
        assert env == {"PATH": "/bin"}

    def test_adds_extra(self) -> None:
        env = sanitized_env(extra={"GIT_TERMINAL_PROMPT": "0"}, base={})
        assert env == {"GIT_TERMINAL_PROMPT": "0"}

    def test_does_not_modify_base(self) -> None:
        base = {"A": "1"}
        sanitized_env(remove=["A"], base=base)
        assert base == {"A": "1"}

    def test_missing_names_are_ignored(self) -> None:
        assert sanitized_env(remove=["NOPE"], base={"A": "1"}) == {"A": "1"}


class TestRunCommand:
    """Tests for run_command."""

    def test_passes_options_to_subprocess(self) -> None:
        completed = subprocess.CompletedProcess(["git"], 0, "out", "")
        with patch("kiroboot.core.subprocess_runner.subprocess.run", return_value=completed) as run:
            result = run_command(["git", "--version"], tool_name="git", cwd="/tmp", timeout=5)

        assert result is completed
        kwargs = run.call_args.kwargs
        assert run.call_args.args[0] == ["git", "--version"]
        assert kwargs["cwd"] == "/tmp"
        assert kwargs["timeout"] == 5
        assert kwargs["check"] is False
        assert kwargs["capture_output"] is True
        assert "shell" not in kwargs

    def test_env_is_copied(self) -> None:
        run = MagicMock(return_value=subprocess.CompletedProcess(["x"], 0, "", ""))
        with patch("kiroboot.core.subprocess_runner.subprocess.run", run):
            run_command(["x"], tool_name="x", env={"A": "1"})
        assert run.call_args.kwargs["env"] == {"A": "1"}
