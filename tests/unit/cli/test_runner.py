"""Tests for CLI runner."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from kiroboot.cli import main
from kiroboot.cli.exit_codes import EXIT_SUCCESS
from kiroboot.cli.runner import CLIRunner, get_version


class TestGetVersion:
    """Tests for get_version function."""

    def test_get_version_from_metadata(self) -> None:
        with patch("kiroboot.cli.runner.version", return_value="1.2.3"):
            assert get_version() == "1.2.3"

    def test_get_version_fallback(self) -> None:
        from importlib.metadata import PackageNotFoundError

        from kiroboot import __version__

        with patch(
            "kiroboot.cli.runner.version",
            side_effect=PackageNotFoundError("not found"),
        ):
            assert get_version() == __version__


class TestCLIRunner:
    """Tests for CLIRunner class."""

    def _runner(self, exit_code: int = 0, env=None) -> CLIRunner:
        install_cmd = MagicMock()
        install_cmd.execute.return_value = exit_code
        return CLIRunner(install_cmd=install_cmd, env={} if env is None else env)

    def test_help_exits_zero_without_running(self, capsys) -> None:
        runner = self._runner()
        assert runner.run(["--user", "--help"]) == EXIT_SUCCESS
        assert "usage:" in capsys.readouterr().out.lower()
        runner.install_cmd.execute.assert_not_called()

    def test_short_help(self, capsys) -> None:
        runner = self._runner()
        assert runner.run(["-h"]) == EXIT_SUCCESS
        runner.install_cmd.execute.assert_not_called()

    def test_help_after_separator_is_intercepted(self) -> None:
        runner = self._runner()
        assert runner.run(["--", "--help"]) == EXIT_SUCCESS
        runner.install_cmd.execute.assert_not_called()

    def test_help_shows_version(self, capsys) -> None:
        with patch("kiroboot.cli.runner.version", return_value="9.9.9"):
            runner = self._runner()
        runner.run(["--help"])
        assert "kiroboot 9.9.9" in capsys.readouterr().out

    def test_version_and_debug_reach_installer(self, capsys) -> None:
        runner = self._runner()
        runner.run(["--version", "--debug"])
        args, forwarded = runner.install_cmd.execute.call_args.args
        assert forwarded == ["--version", "--debug"]
        assert not args.debug
        assert capsys.readouterr().out == ""

    def test_config_and_quiet_flags_reach_installer(self) -> None:
        runner = self._runner()
        runner.run(["--user", "--debug", "--quiet", "--config", "x.yml", "--force"])
        _, forwarded = runner.install_cmd.execute.call_args.args
        assert forwarded == ["--user", "--debug", "--quiet", "--config", "x.yml", "--force"]

    def test_forwards_to_install_command(self) -> None:
        runner = self._runner(exit_code=7, env={"KIROBOOT_DEBUG": "1"})
        with patch("kiroboot.cli.runner.configure_logging") as configure:
            assert runner.run(["--user"]) == 7
        configure.assert_called_once_with(debug=True, quiet=False)
        args, forwarded = runner.install_cmd.execute.call_args.args
        assert args.debug
        assert forwarded == ["--user"]


class TestMain:
    """Tests for the console entry point."""

    def test_main_help(self, capsys) -> None:
        assert main(["--help"]) == EXIT_SUCCESS
