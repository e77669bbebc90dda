"""Branch mutations used after creating or removing a worktree."""

import logging
from pathlib import Path

from kwt.core.runner import CommandRunner
from kwt.errors import CommandError, GitError

logger = logging.getLogger(__name__)


class BranchOps:
    """Push and delete branches."""

    def __init__(self, runner: CommandRunner, cwd: Path) -> None:
        self._runner = runner
        self._cwd = cwd

    def push_upstream(self, branch: str, *, cwd: Path, remote: str = "origin") -> None:
        """Push `branch` and set its upstream, running git inside `cwd`.

        Raises:
            GitError: If the push fails
        """
        self._git(["push", "-u", remote, branch], cwd, f"push branch '{branch}' to {remote}")

    def delete_local(self, branch: str) -> None:
        """Force-delete a local branch.

        Raises:
            GitError: If git refuses
        """
        self._git(["branch", "-D", branch], self._cwd, f"delete branch '{branch}'")

    def delete_remote(self, branch: str, *, remote: str = "origin") -> None:
        """Delete a branch on the remote.

        Raises:
            GitError: If the push fails
        """
        self._git(
            ["push", remote, "--delete", branch],
            self._cwd,
            f"delete remote branch '{branch}' on {remote}",
        )

    def _git(self, args: list[str], cwd: Path, operation_context: str) -> None:
        try:
            self._runner.run_checked("git", args, cwd, operation_context=operation_context)
        except CommandError as e:
            raise GitError(str(e)) from e
        logger.debug("git %s succeeded", " ".join(args))
