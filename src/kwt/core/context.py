"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from kwt.core.branches import BranchOps
from kwt.core.config import ConfigStore, global_config_path, local_config_path
from kwt.core.hosting import GitHubResolver, GitLabResolver
from kwt.core.remotes import RemoteInspector
from kwt.core.runner import CommandRunner, RealCommandRunner
from kwt.core.worktrees import WorktreeDirectory


@dataclass(frozen=True)
class KwtContext:
    """Immutable context holding all dependencies for kwt operations.

    Created at the CLI entry point and passed to every command.
    """

    runner: CommandRunner
    config_store: ConfigStore
    remotes: RemoteInspector
    worktrees: WorktreeDirectory
    branches: BranchOps
    gitlab: GitLabResolver
    github: GitHubResolver
    cwd: Path  # Current working directory at CLI invocation
    dry_run: bool

    @staticmethod
    def for_test(
        runner: CommandRunner,
        cwd: Path,
        *,
        config_store: ConfigStore | None = None,
        dry_run: bool = False,
    ) -> "KwtContext":
        """Create a context around a fake runner.

        Args:
            runner: Usually a FakeCommandRunner with scripted responses
            cwd: Working directory the collaborators operate in
            config_store: Optional ConfigStore. If None, one is created over
                `cwd/.kwt-home/config.toml` and `cwd/.kwt.toml`, so nothing
                outside `cwd` is read.
            dry_run: Whether to enable dry-run mode

        Example:
            >>> runner = FakeCommandRunner(responses={...})
            >>> ctx = KwtContext.for_test(runner, tmp_path)
        """
        if config_store is None:
            config_store = ConfigStore(
                global_path=cwd / ".kwt-home" / "config.toml",
                local_path=local_config_path(cwd),
            )
        return _build(runner, config_store, cwd, dry_run)


def create_context(*, dry_run: bool, config_path: Path | None = None) -> KwtContext:
    """Create production context with real implementations.

    The local config file lives at the repository root when `cwd` is inside a
    repository, otherwise in `cwd`. `config_path` replaces it entirely.
    """
    runner = RealCommandRunner()
    cwd = Path.cwd()

    if config_path is None:
        repo_root = RemoteInspector(runner, cwd).get_repo_root()
        local_path = local_config_path(repo_root if repo_root is not None else cwd)
    else:
        local_path = config_path

    config_store = ConfigStore(global_path=global_config_path(), local_path=local_path)
    return _build(runner, config_store, cwd, dry_run)


def _build(
    runner: CommandRunner, config_store: ConfigStore, cwd: Path, dry_run: bool
) -> KwtContext:
    return KwtContext(
        runner=runner,
        config_store=config_store,
        remotes=RemoteInspector(runner, cwd),
        worktrees=WorktreeDirectory(runner, cwd),
        branches=BranchOps(runner, cwd),
        gitlab=GitLabResolver(runner, cwd),
        github=GitHubResolver(runner, cwd),
        cwd=cwd,
        dry_run=dry_run,
    )
