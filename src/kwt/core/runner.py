"""External command execution.

Architecture:
- CommandRunner: Abstract interface, run(program, args, cwd) -> CommandResult
- RealCommandRunner: Production implementation using subprocess

Everything that shells out to git, glab or gh goes through a CommandRunner,
so parsing and orchestration can be tested with a fake that never starts a
process.
"""

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from kwt.errors import CommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Captured output of a finished external command."""

    stdout: str
    stderr: str
    exit_code: int

    @property
    def success(self) -> bool:
        return self.exit_code == 0


def format_command(program: str, args: Sequence[str]) -> str:
    return " ".join([program, *args])


class CommandRunner(ABC):
    """Abstract interface for running external programs.

    All implementations (real and fake) must implement this interface.
    """

    @abstractmethod
    def run(self, program: str, args: Sequence[str], cwd: Path) -> CommandResult:
        """Run a program to completion and capture its output.

        Never raises for a non-zero exit code; callers inspect the result.

        Args:
            program: Executable name or path
            args: Arguments passed to the program
            cwd: Working directory for the process

        Returns:
            CommandResult with stdout, stderr and exit code
        """
        ...

    @abstractmethod
    def which(self, program: str) -> str | None:
        """Return the resolved path of a program on PATH, or None."""
        ...

    def run_checked(
        self,
        program: str,
        args: Sequence[str],
        cwd: Path,
        *,
        operation_context: str,
    ) -> str:
        """Run a program and return stdout, raising on failure.

        Args:
            program: Executable name or path
            args: Arguments passed to the program
            cwd: Working directory for the process
            operation_context: Human-readable description used in the error,
                e.g. "list worktrees"

        Returns:
            stdout of the command

        Raises:
            CommandError: If the command exits non-zero, with the command line,
                exit code and stderr in the message
        """
        result = self.run(program, args, cwd)
        if result.success:
            return result.stdout

        error_msg = f"Failed to {operation_context}"
        error_msg += f"\nCommand: {format_command(program, args)}"
        error_msg += f"\nExit code: {result.exit_code}"
        stderr_stripped = result.stderr.strip()
        if stderr_stripped:
            error_msg += f"\nstderr: {stderr_stripped}"
        raise CommandError(error_msg)


class RealCommandRunner(CommandRunner):
    """Production implementation using subprocess.

    Calls block until the process exits. There is no timeout. A program that
    cannot be started yields exit code 127 (not found) or 126 (any other
    OS error) instead of an exception.
    """

    def run(self, program: str, args: Sequence[str], cwd: Path) -> CommandResult:
        cmd = [program, *args]
        logger.debug("Executing: %s (cwd=%s)", format_command(program, args), cwd)
        try:
            completed = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                check=False,
            )
        except FileNotFoundError:
            logger.debug("Command not found: %s", program)
            return CommandResult(stdout="", stderr=f"Command not found: {program}", exit_code=127)
        except OSError as e:
            # Not executable, or cwd is not a directory
            logger.debug("Command could not be started: %s (%s)", program, e)
            return CommandResult(stdout="", stderr=f"{program}: {e.strerror}", exit_code=126)

        if completed.returncode != 0:
            logger.debug(
                "Command failed: %s (exit code: %d)",
                format_command(program, args),
                completed.returncode,
            )
        return CommandResult(
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            exit_code=completed.returncode,
        )

    def which(self, program: str) -> str | None:
        return shutil.which(program)
