"""Tests for the list command."""

from pathlib import Path

from click.testing import CliRunner

from kwt.cli.cli import cli
from kwt.cli.commands.list import format_worktree_row
from kwt.core.worktrees import WorktreeRecord
from tests.fakes.runner import ok
from tests.test_utils.kwt_env import LIST_WORKTREES, build_repo_env


def test_format_worktree_row() -> None:
    assert format_worktree_row(WorktreeRecord(path=Path("/w/a"), branch="a")) == "a -> a"
    assert (
        format_worktree_row(WorktreeRecord(path=Path("/w/b"), commit="abc", detached=True))
        == "b -> abc (detached)"
    )
    assert format_worktree_row(WorktreeRecord(path=Path("/r.git"), bare=True)) == "r.git ->  (bare)"


def test_list_prints_every_worktree(tmp_path: Path) -> None:
    env = build_repo_env(tmp_path, worktrees=[("feat", "feat"), ("spike", None)])

    result = CliRunner().invoke(cli, ["list"], obj=env.ctx)

    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert lines[0] == "  repo -> main"
    assert lines[1] == "  feat -> feat"
    assert lines[2] == f"  spike -> {'1' * 40} (detached)"


def test_ls_alias(tmp_path: Path) -> None:
    env = build_repo_env(tmp_path)

    result = CliRunner().invoke(cli, ["ls"], obj=env.ctx)

    assert result.exit_code == 0, result.output
    assert "repo -> main" in result.stdout


def test_list_without_worktrees(tmp_path: Path) -> None:
    env = build_repo_env(tmp_path, responses={LIST_WORKTREES: ok("")})

    result = CliRunner().invoke(cli, ["list"], obj=env.ctx)

    assert result.exit_code == 0, result.output
    assert "No worktrees found" in result.output
