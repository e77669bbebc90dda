"""Tests for the top-level kwt group: options, error handling and help."""

from pathlib import Path

from click.testing import CliRunner

from kwt import __version__
from kwt.cli.cli import cli
from tests.fakes.runner import fail
from tests.test_utils.kwt_env import LIST_WORKTREES, build_repo_env


def test_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_short_help_flag_lists_commands() -> None:
    result = CliRunner().invoke(cli, ["-h"])

    assert result.exit_code == 0
    for command in ["new", "mr", "pr", "rm", "config", "list"]:
        assert command in result.output


def test_kwt_error_becomes_exit_code_one(tmp_path: Path) -> None:
    env = build_repo_env(tmp_path, responses={LIST_WORKTREES: fail("fatal: broken", 128)})

    result = CliRunner().invoke(cli, ["list"], obj=env.ctx)

    assert result.exit_code == 1
    assert result.output.startswith("Error: Failed to list worktrees")
    assert "stderr: fatal: broken" in result.output


def test_usage_errors_are_left_to_click(tmp_path: Path) -> None:
    env = build_repo_env(tmp_path)

    result = CliRunner().invoke(cli, ["new"], obj=env.ctx)

    assert result.exit_code == 2
    assert "Missing argument 'NAME'" in result.output
