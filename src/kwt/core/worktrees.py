"""Git worktree listing, creation, removal and path resolution."""

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from kwt.core.runner import CommandRunner
from kwt.errors import CommandError, GitError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorktreeRecord:
    """Information about a single git worktree."""

    path: Path
    branch: str | None = None
    commit: str | None = None
    bare: bool = False
    detached: bool = False

    @property
    def name(self) -> str:
        return worktree_name(str(self.path))


def worktree_name(path: str) -> str:
    """Final path segment, splitting on either `/` or `\\`."""
    return path.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]


def parse_worktree_porcelain(output: str) -> list[WorktreeRecord]:
    """Parse `git worktree list --porcelain` output.

    A `worktree <path>` line starts a record. Later `HEAD`, `branch`, `bare`
    and `detached` lines apply to that record until the next `worktree` line.
    A record is emitted when the next `worktree` line or the end of input is
    reached.

    Examples:
        >>> parse_worktree_porcelain("worktree /repo\\nHEAD abc\\nbranch refs/heads/main\\n")
        [WorktreeRecord(path=Path('/repo'), branch='main', commit='abc', ...)]
    """
    worktrees: list[WorktreeRecord] = []
    current: dict[str, object] | None = None

    for raw_line in output.splitlines():
        line = raw_line.strip()
        if line.startswith("worktree "):
            if current is not None:
                worktrees.append(WorktreeRecord(**current))  # type: ignore[arg-type]
            current = {"path": Path(line.removeprefix("worktree "))}
            continue

        if current is None:
            continue

        if line.startswith("HEAD "):
            current["commit"] = line.removeprefix("HEAD ")
        elif line.startswith("branch "):
            current["branch"] = line.removeprefix("branch ").removeprefix("refs/heads/")
        elif line == "bare":
            current["bare"] = True
        elif line == "detached":
            current["detached"] = True

    if current is not None:
        worktrees.append(WorktreeRecord(**current))  # type: ignore[arg-type]

    return worktrees


def resolve_worktree_path(cwd: Path, worktree_dir: str, name: str) -> Path:
    """Resolve where a worktree named `name` lives.

    A relative `worktree_dir` is taken relative to `cwd`. The result is
    normalized lexically; the filesystem is not consulted.

    Examples:
        >>> resolve_worktree_path(Path("/repo"), "../worktrees/", "feature-x")
        Path('/worktrees/feature-x')
    """
    return Path(os.path.normpath(os.path.join(cwd, worktree_dir, name)))


class WorktreeDirectory:
    """Worktree operations for the repository containing `cwd`."""

    def __init__(self, runner: CommandRunner, cwd: Path) -> None:
        self._runner = runner
        self._cwd = cwd

    def list_worktrees(self) -> list[WorktreeRecord]:
        """List all worktrees in the repository.

        Raises:
            GitError: If `git worktree list` fails
        """
        output = self._git(["worktree", "list", "--porcelain"], "list worktrees")
        return parse_worktree_porcelain(output)

    def resolve_path(self, worktree_dir: str, name: str) -> Path:
        return resolve_worktree_path(self._cwd, worktree_dir, name)

    def exists(self, path: Path) -> bool:
        """Check whether a registered worktree lives at `path`."""
        target = _canonical(self._cwd, path)
        return any(_canonical(self._cwd, wt.path) == target for wt in self.list_worktrees())

    def find_by_name(self, name: str) -> WorktreeRecord | None:
        """Find a worktree whose directory name equals `name`."""
        for wt in self.list_worktrees():
            if wt.name == name:
                return wt
        return None

    def create(
        self,
        path: Path,
        branch_name: str,
        *,
        create_branch: bool = True,
        force: bool = False,
        checkout: bool = True,
    ) -> None:
        """Add a new git worktree.

        Args:
            path: Where the worktree should be created
            branch_name: Branch to create or check out
            create_branch: Create `branch_name` at the new worktree
            force: Pass --force to bypass git's safety checks
            checkout: When not creating a branch, check out `branch_name`;
                otherwise the worktree is created detached

        Raises:
            GitError: If `git worktree add` fails
        """
        args = ["worktree", "add"]
        if force:
            args.append("--force")

        if create_branch:
            args.extend(["-b", branch_name])
        elif not checkout:
            args.append("--detach")

        args.append(str(path))

        if not create_branch and checkout:
            args.append(branch_name)

        self._git(args, "create worktree")
        logger.debug("Worktree created at: %s", path)

    def remove(self, path: Path, *, force: bool = False) -> None:
        """Remove a worktree.

        When git refuses and `force` was requested, the directory is deleted
        by hand and the worktree metadata pruned. The git error is
        raised either way.

        Raises:
            GitError: If `git worktree remove` fails
        """
        args = ["worktree", "remove"]
        if force:
            args.append("--force")
        args.append(str(path))

        try:
            self._git(args, "remove worktree")
        except GitError:
            if force and path.exists():
                logger.debug("git worktree remove failed, attempting manual cleanup: %s", path)
                self._remove_manually(path)
            raise

        logger.debug("Worktree removed: %s", path)

    def prune(self) -> None:
        """Prune stale worktree metadata.

        Raises:
            GitError: If `git worktree prune` fails
        """
        self._git(["worktree", "prune"], "prune worktrees")

    def _remove_manually(self, path: Path) -> None:
        try:
            shutil.rmtree(path)
        except OSError as e:
            logger.warning("Manual cleanup also failed: %s", e)
            return

        result = self._runner.run("git", ["worktree", "prune"], self._cwd)
        if not result.success:
            logger.warning("Manual cleanup also failed: %s", result.stderr.strip())

    def _git(self, args: list[str], operation_context: str) -> str:
        try:
            return self._runner.run_checked(
                "git", args, self._cwd, operation_context=operation_context
            )
        except CommandError as e:
            raise GitError(str(e)) from e


def _canonical(cwd: Path, path: Path) -> Path:
    return (cwd / path).resolve()
