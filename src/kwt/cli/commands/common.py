"""Steps shared by the worktree commands."""

from pathlib import Path

from kwt.cli.output import success_output, user_output
from kwt.core.config import Configuration
from kwt.core.context import KwtContext
from kwt.core.post_commands import run_post_command_group
from kwt.errors import KwtError


def initialize(ctx: KwtContext) -> Configuration:
    """Load the merged configuration and require a git repository.

    Raises:
        ConfigError: If a configuration file is invalid
        KwtError: If the working directory is not inside a git repository
    """
    config = ctx.config_store.load()
    if not ctx.remotes.is_git_repo():
        raise KwtError("Not in a git repository")
    return config


def print_post_command_plan(config: Configuration) -> None:
    if not config.post_commands:
        return
    user_output("  Post-creation commands:")
    for group in config.post_commands:
        user_output(f"    - {group.label}")


def run_configured_post_commands(
    ctx: KwtContext, config: Configuration, worktree_path: Path
) -> None:
    """Run every post-command group inside the new worktree.

    Raises:
        PostCommandError: On the first failing command
    """
    if not config.post_commands:
        return

    user_output("Executing post-creation commands...")
    for group in config.post_commands:
        user_output(f"Running: {group.label}")
        run_post_command_group(ctx.runner, group, worktree_path)
        success_output(f"Completed: {group.label}")
