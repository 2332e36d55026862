"""Tests for the eventkit CLI."""
from __future__ import annotations

import pytest
from click.testing import CliRunner

from eventkit import __version__
from eventkit import selfcheck
from eventkit.cli.main import cli
from eventkit.errors import SelfCheckError


class TestCLIGroup:
    def test_help_lists_check_command(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "check" in result.output

    def test_version(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestCheckCommand:
    def test_check_passes(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["check"])
        assert result.exit_code == 0
        assert "PASS basic_operations" in result.output
        assert "PASS arguments" in result.output
        assert "Summary: 2 passed, 0 failed" in result.output

    def test_check_help_shows_options(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["check", "--help"])
        assert result.exit_code == 0
        assert "--log-level" in result.output
        assert "--fail-fast" in result.output

    def test_check_failure_exits_nonzero(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken() -> None:
            raise SelfCheckError("callback ran twice")

        monkeypatch.setattr(selfcheck, "CHECKS", {"broken": broken})

        runner = CliRunner()
        result = runner.invoke(cli, ["check", "--log-level", "error"])
        assert result.exit_code == 1
        assert "FAIL broken: callback ran twice" in result.output
        assert "Summary: 0 passed, 1 failed" in result.output
