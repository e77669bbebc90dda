"""Fake implementation of CommandRunner for testing.

This fake enables testing git/glab/gh orchestration without starting
any process.
"""

from collections.abc import Mapping, Sequence
from pathlib import Path

from kwt.core.runner import CommandResult, CommandRunner


def ok(stdout: str = "") -> CommandResult:
    return CommandResult(stdout=stdout, stderr="", exit_code=0)


def fail(stderr: str = "", exit_code: int = 1) -> CommandResult:
    return CommandResult(stdout="", stderr=stderr, exit_code=exit_code)


class FakeCommandRunner(CommandRunner):
    """In-memory fake that returns scripted results and records every call.

    Constructor Injection:
    - Results are keyed by the full command, `(program, *args)`
    - Commands without a scripted result return `default_result`
      (a successful run with empty output unless overridden)

    Examples:
        >>> runner = FakeCommandRunner(
        ...     responses={("git", "rev-parse", "--git-dir"): ok(".git")},
        ...     available_programs={"glab"},
        ... )
        >>> runner.run("git", ["rev-parse", "--git-dir"], Path("/repo")).stdout
        '.git'
        >>> runner.which("gh") is None
        True
    """

    def __init__(
        self,
        *,
        responses: Mapping[tuple[str, ...], CommandResult] | None = None,
        available_programs: set[str] | None = None,
        default_result: CommandResult | None = None,
    ) -> None:
        self._responses = dict(responses or {})
        self._available_programs = available_programs or set()
        self._default_result = default_result if default_result is not None else ok()
        self._calls: list[tuple[tuple[str, ...], Path]] = []

    def run(self, program: str, args: Sequence[str], cwd: Path) -> CommandResult:
        command = (program, *args)
        self._calls.append((command, cwd))
        return self._responses.get(command, self._default_result)

    def which(self, program: str) -> str | None:
        if program in self._available_programs:
            return f"/usr/bin/{program}"
        return None

    @property
    def calls(self) -> list[tuple[tuple[str, ...], Path]]:
        """Get the list of (command, cwd) pairs that were run.

        This property is for test assertions only.
        """
        return self._calls.copy()

    @property
    def commands(self) -> list[tuple[str, ...]]:
        """Get just the commands that were run, in order."""
        return [command for command, _ in self._calls]

    def ran(self, *command: str) -> bool:
        return command in self.commands


def porcelain(*entries: Mapping[str, str | bool]) -> str:
    """Render `git worktree list --porcelain` output.

    Each entry needs `path` and may carry `head`, `branch` (short name),
    `bare` or `detached`.
    """
    blocks: list[str] = []
    for entry in entries:
        lines = [f"worktree {entry['path']}"]
        if "head" in entry:
            lines.append(f"HEAD {entry['head']}")
        if "branch" in entry:
            lines.append(f"branch refs/heads/{entry['branch']}")
        if entry.get("bare"):
            lines.append("bare")
        if entry.get("detached"):
            lines.append("detached")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n"
