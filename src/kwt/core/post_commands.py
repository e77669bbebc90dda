"""Post-creation commands run inside a new worktree."""

import logging
from pathlib import Path

from kwt.core.config import PostCommandGroup
from kwt.core.runner import CommandRunner, format_command
from kwt.errors import PostCommandError

logger = logging.getLogger(__name__)


def split_command_line(command: str) -> tuple[str, list[str]] | None:
    """Split a command line on whitespace into (program, args), or None if empty."""
    parts = command.split()
    if not parts:
        return None
    return parts[0], parts[1:]


def run_post_command_group(
    runner: CommandRunner, group: PostCommandGroup, worktree_path: Path
) -> None:
    """Run one group's commands in order, stopping at the first failure.

    Raises:
        PostCommandError: If a command exits non-zero
    """
    for command in group.commands:
        split = split_command_line(command)
        if split is None:
            logger.warning("Empty command in %s, skipping", group.label)
            continue

        program, args = split
        logger.debug("Executing post-command: %s", format_command(program, args))
        result = runner.run(program, args, worktree_path)
        if not result.success:
            error_text = result.stderr.strip() or result.stdout.strip()
            msg = f"Post-command failed in '{group.label}': {command}"
            if error_text:
                msg += f"\n{error_text}"
            raise PostCommandError(msg)

        logger.debug("Command completed successfully: %s", command)
