"""Test environment helpers for running kwt commands against a fake repository.

The fake repository lives at `<tmp_path>/repo` and its worktrees under
`<tmp_path>/worktrees`, matching the default `worktree_dir` of
`../worktrees`. Config files stay inside `tmp_path`.

Usage Pattern:
    ```python
    def test_something(tmp_path: Path) -> None:
        env = build_repo_env(
            tmp_path,
            worktrees=[("feat", "feat")],
            responses={branch_ref("feat"): fail()},
        )
        result = CliRunner().invoke(cli, ["rm", "feat", "-f"], obj=env.ctx)
    ```
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from kwt.core.context import KwtContext
from kwt.core.runner import CommandResult
from tests.fakes.runner import FakeCommandRunner, ok, porcelain

DEFAULT_ORIGIN = "git@gitlab.com:acme/widgets.git"

LIST_WORKTREES = ("git", "worktree", "list", "--porcelain")


def branch_ref(branch: str) -> tuple[str, ...]:
    """Key of the `git show-ref` call that checks whether `branch` exists locally."""
    return ("git", "show-ref", "--verify", "--quiet", f"refs/heads/{branch}")


@dataclass(frozen=True)
class RepoEnv:
    """A fake repository plus the context wired to it."""

    root: Path
    worktrees_root: Path
    runner: FakeCommandRunner
    ctx: KwtContext

    def worktree_path(self, name: str) -> Path:
        return self.worktrees_root / name

    def write_local_config(self, content: str) -> None:
        self.ctx.config_store.local_path.write_text(content, encoding="utf-8")


def build_repo_env(
    tmp_path: Path,
    *,
    worktrees: Iterable[tuple[str, str | None]] = (),
    responses: Mapping[tuple[str, ...], CommandResult] | None = None,
    available_programs: set[str] | None = None,
    origin_url: str = DEFAULT_ORIGIN,
    dry_run: bool = False,
) -> RepoEnv:
    """Build a RepoEnv.

    Args:
        tmp_path: pytest tmp_path
        worktrees: (directory name, branch) pairs listed as linked worktrees
            next to the main checkout on `main`. A None branch is detached.
        responses: Extra scripted results; these win over the defaults
        available_programs: Programs `which` should find (e.g. {"glab"})
        origin_url: Fetch URL of the origin remote
        dry_run: Context-level dry-run flag
    """
    root = tmp_path / "repo"
    root.mkdir(parents=True, exist_ok=True)
    worktrees_root = tmp_path / "worktrees"

    entries: list[dict[str, str | bool]] = [{"path": str(root), "head": "0" * 40, "branch": "main"}]
    for name, branch in worktrees:
        entry: dict[str, str | bool] = {"path": str(worktrees_root / name), "head": "1" * 40}
        if branch is None:
            entry["detached"] = True
        else:
            entry["branch"] = branch
        entries.append(entry)

    scripted: dict[tuple[str, ...], CommandResult] = {
        ("git", "rev-parse", "--git-dir"): ok(".git\n"),
        ("git", "remote", "-v"): ok(f"origin\t{origin_url} (fetch)\norigin\t{origin_url} (push)\n"),
        LIST_WORKTREES: ok(porcelain(*entries)),
    }
    scripted.update(responses or {})

    runner = FakeCommandRunner(responses=scripted, available_programs=available_programs)
    ctx = KwtContext.for_test(runner, root, dry_run=dry_run)
    return RepoEnv(root=root, worktrees_root=worktrees_root, runner=runner, ctx=ctx)
