"""Remote and repository queries over git.

Derives the naming prefix from the origin URL and answers branch existence
questions. Existence checks map a non-zero git exit to False and never raise.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from kwt.core.runner import CommandRunner
from kwt.errors import CommandError, GitError

logger = logging.getLogger(__name__)

RemoteType = Literal["fetch", "push"]

_REMOTE_LINE = re.compile(r"^(\S+)\s+(\S+)\s+\((fetch|push)\)$")
_SSH_URL = re.compile(r"^[^@/\s]+@[^:/\s]+:(?P<path>[^\s]+)$")
_HTTP_URL = re.compile(r"^https?://[^/\s]+/(?P<path>[^\s]+)$")


@dataclass(frozen=True)
class Remote:
    """One line of `git remote -v` output."""

    name: str
    url: str
    type: RemoteType


def parse_remotes(output: str) -> list[Remote]:
    """Parse `git remote -v` output, skipping lines that do not match."""
    remotes: list[Remote] = []
    for line in output.splitlines():
        match = _REMOTE_LINE.match(line.strip())
        if match is None:
            continue
        name, url, remote_type = match.groups()
        remotes.append(Remote(name=name, url=url, type=remote_type))  # type: ignore[arg-type]
    return remotes


def extract_repo_name(url: str) -> str:
    """Extract the repository name from a git remote URL.

    Supports SSH-style (`git@github.com:user/repo.git`) and HTTP(S)-style
    (`https://gitlab.com/group/sub/repo.git/`) URLs. The name is the final
    path segment with an optional `.git` suffix removed.

    Args:
        url: Remote URL

    Returns:
        Repository name

    Raises:
        GitError: If the URL has another scheme or cannot be parsed

    Examples:
        >>> extract_repo_name("git@github.com:user/repo.git")
        'repo'
        >>> extract_repo_name("https://github.com/org/awesome-tool")
        'awesome-tool'
    """
    logger.debug("Extracting repo name from URL: %s", url)

    if url.startswith(("http://", "https://")):
        match = _HTTP_URL.match(url)
        kind = "HTTP(S)"
    elif "://" not in url and "@" in url:
        match = _SSH_URL.match(url)
        kind = "SSH"
    else:
        raise GitError(f"Unsupported git URL format: {url}")

    if match is None:
        raise GitError(f"Unable to parse {kind} git URL: {url}")

    segments = [segment for segment in match.group("path").split("/") if segment]
    if not segments:
        raise GitError(f"Unable to parse {kind} git URL: {url}")

    name = segments[-1].removesuffix(".git")
    if not name:
        raise GitError(f"Unable to parse {kind} git URL: {url}")

    logger.debug("Extracted repo name: %s", name)
    return name


class RemoteInspector:
    """Queries about remotes, branches and the repository itself."""

    def __init__(self, runner: CommandRunner, cwd: Path) -> None:
        self._runner = runner
        self._cwd = cwd

    def get_remotes(self) -> list[Remote]:
        """List remotes from `git remote -v`.

        Raises:
            GitError: If git exits non-zero
        """
        try:
            output = self._runner.run_checked(
                "git", ["remote", "-v"], self._cwd, operation_context="get git remotes"
            )
        except CommandError as e:
            raise GitError(str(e)) from e
        return parse_remotes(output)

    def get_origin_url(self) -> str:
        """Return the fetch URL of the `origin` remote.

        Raises:
            GitError: If there is no origin fetch remote
        """
        for remote in self.get_remotes():
            if remote.name == "origin" and remote.type == "fetch":
                return remote.url
        raise GitError("No origin remote found")

    def extract_repo_name(self, url: str) -> str:
        return extract_repo_name(url)

    def generate_prefix(self) -> str:
        """Build a `<repo-name>-` prefix from the origin URL."""
        return f"{extract_repo_name(self.get_origin_url())}-"

    def is_git_repo(self) -> bool:
        result = self._runner.run("git", ["rev-parse", "--git-dir"], self._cwd)
        return result.success

    def get_repo_root(self) -> Path | None:
        """Return the top-level directory of the current worktree, or None."""
        result = self._runner.run("git", ["rev-parse", "--show-toplevel"], self._cwd)
        if not result.success:
            return None
        top_level = result.stdout.strip()
        if not top_level:
            return None
        return Path(top_level)

    def get_current_branch(self) -> str:
        """Return the checked-out branch ("" when HEAD is detached).

        Raises:
            GitError: If git exits non-zero
        """
        try:
            output = self._runner.run_checked(
                "git",
                ["branch", "--show-current"],
                self._cwd,
                operation_context="get current branch",
            )
        except CommandError as e:
            raise GitError(str(e)) from e
        return output.strip()

    def branch_exists(self, branch_name: str) -> bool:
        result = self._runner.run(
            "git", ["show-ref", "--verify", "--quiet", f"refs/heads/{branch_name}"], self._cwd
        )
        return result.success

    def remote_branch_exists(self, branch_name: str, remote: str = "origin") -> bool:
        result = self._runner.run(
            "git",
            ["show-ref", "--verify", "--quiet", f"refs/remotes/{remote}/{branch_name}"],
            self._cwd,
        )
        return result.success
