import logging
from pathlib import Path

import click

from kwt.cli.commands.common import (
    initialize,
    print_post_command_plan,
    run_configured_post_commands,
)
from kwt.cli.output import spinner, success_output, user_output, warning_output
from kwt.core.context import KwtContext
from kwt.core.naming import prefixed_name
from kwt.errors import GitError, KwtError

logger = logging.getLogger(__name__)


def create_worktree(
    ctx: KwtContext,
    name: str,
    *,
    branch: str | None = None,
    push: bool = True,
    dry_run: bool = False,
) -> Path:
    """Create a worktree on a new branch and return its path.

    The worktree directory is `<prefix><name>` under the configured
    worktree_dir. The branch defaults to the worktree name.

    Raises:
        KwtError: If the worktree or the branch already exists
        GitError: If git fails to create the worktree
        PostCommandError: If a post-creation command fails
    """
    config = initialize(ctx)

    worktree_name = prefixed_name(config, ctx.remotes, name)
    logger.debug("Generated worktree name: %s", worktree_name)

    worktree_path = ctx.worktrees.resolve_path(config.worktree_dir, worktree_name)
    logger.debug("Worktree path: %s", worktree_path)

    if ctx.worktrees.exists(worktree_path):
        raise KwtError(f"Worktree already exists at: {worktree_path}")

    branch_name = branch or worktree_name
    if ctx.remotes.branch_exists(branch_name):
        raise KwtError(f"Branch '{branch_name}' already exists")

    if dry_run:
        user_output("Dry run mode - would create:")
        user_output(f"  Worktree: {worktree_path}")
        user_output(f"  Branch: {branch_name}")
        print_post_command_plan(config)
        return worktree_path

    with spinner(f"Creating worktree '{worktree_name}'..."):
        ctx.worktrees.create(worktree_path, branch_name, create_branch=True)
    success_output(f"Worktree '{worktree_name}' created successfully")

    run_configured_post_commands(ctx, config, worktree_path)

    if push:
        try:
            with spinner(f"Pushing branch '{branch_name}' to origin..."):
                ctx.branches.push_upstream(branch_name, cwd=worktree_path)
        except GitError as e:
            warning_output(f"Failed to push branch: {e}")
            user_output("You may need to push the branch manually later")
        else:
            success_output(f"Branch '{branch_name}' pushed to origin")

    success_output(f"Worktree '{worktree_name}' is ready at: {worktree_path}")
    return worktree_path


@click.command("new")
@click.argument("name")
@click.option("-b", "--branch", help="Custom branch name (defaults to worktree name).")
@click.option("--no-push", is_flag=True, help="Do not push the new branch to origin.")
@click.option("--dry-run", is_flag=True, help="Show what would be created without doing it.")
@click.pass_obj
def new_cmd(ctx: KwtContext, name: str, branch: str | None, no_push: bool, dry_run: bool) -> None:
    """Create a new worktree named NAME on a new branch."""
    create_worktree(ctx, name, branch=branch, push=not no_push, dry_run=dry_run or ctx.dry_run)
