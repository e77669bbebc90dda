import logging

import click

from kwt.cli.commands.common import initialize
from kwt.cli.output import spinner, success_output, user_output, warning_output
from kwt.core.context import KwtContext
from kwt.core.naming import prefixed_name
from kwt.core.worktrees import WorktreeRecord
from kwt.errors import GitError, KwtError

logger = logging.getLogger(__name__)

TRUNK_BRANCHES = ("main", "master")


def _find_worktree(ctx: KwtContext, prefixed: str, name: str) -> WorktreeRecord | None:
    worktree = ctx.worktrees.find_by_name(prefixed)
    if worktree is None and prefixed != name:
        logger.debug("No worktree named %s, trying %s", prefixed, name)
        worktree = ctx.worktrees.find_by_name(name)
    return worktree


def _print_available_worktrees(ctx: KwtContext, name: str) -> None:
    candidates = [
        wt
        for wt in ctx.worktrees.list_worktrees()
        if not wt.bare and wt.branch not in TRUNK_BRANCHES
    ]
    if not candidates:
        user_output(f"Worktree '{name}' not found and no other worktrees available.")
        return

    user_output(f"Worktree '{name}' not found. Available worktrees:")
    for wt in candidates:
        user_output(f"  - {wt.name} ({wt.branch or 'detached'})")


def _delete_branch(ctx: KwtContext, branch: str) -> None:
    """Delete `branch` locally, then on origin. Failures only warn."""
    try:
        with spinner(f"Deleting branch '{branch}'..."):
            ctx.branches.delete_local(branch)
    except GitError as e:
        warning_output(f"Failed to delete branch: {e}")
        return

    try:
        with spinner(f"Deleting remote branch '{branch}'..."):
            ctx.branches.delete_remote(branch)
    except GitError as e:
        logger.debug("Remote branch deletion failed: %s", e)
        success_output(f"Branch '{branch}' deleted locally (remote deletion failed)")
        warning_output("You may need to delete the remote branch manually")
        return

    success_output(f"Branch '{branch}' deleted locally and remotely")


def remove_worktree(
    ctx: KwtContext, name: str, *, force: bool = False, dry_run: bool = False
) -> bool:
    """Remove the worktree called `<prefix><name>` (or plain `name`).

    Without `force`, asks for confirmation first and afterwards offers to
    delete the worktree's branch.

    Returns:
        True if the worktree was removed

    Raises:
        KwtError: If no worktree matches
        GitError: If git fails to remove the worktree
    """
    config = initialize(ctx)

    worktree_name = prefixed_name(config, ctx.remotes, name)
    logger.debug("Looking for worktree: %s", worktree_name)

    worktree = _find_worktree(ctx, worktree_name, name)
    if worktree is None:
        _print_available_worktrees(ctx, name)
        raise KwtError(f"Worktree '{name}' not found")

    branch = worktree.branch
    user_output(f"Found worktree: {worktree.path}")
    user_output(f"Branch: {branch or '(detached)'}")

    if dry_run:
        user_output("Dry run mode - would remove:")
        user_output(f"  Worktree: {worktree.path}")
        user_output(f"  Branch: {branch or '(detached)'}")
        return False

    if not force:
        prompt = f"Are you sure you want to remove worktree '{name}'"
        if branch:
            prompt += f" and branch '{branch}'"
        if not click.confirm(prompt + "?", default=False, err=True):
            user_output("Operation cancelled")
            return False

    with spinner(f"Removing worktree '{name}'..."):
        ctx.worktrees.remove(worktree.path, force=force)
    success_output(f"Worktree '{name}' removed successfully")

    if not force and branch:
        if click.confirm(
            f"Do you also want to delete the branch '{branch}'?", default=False, err=True
        ):
            _delete_branch(ctx, branch)

    success_output(f"Cleanup completed for '{name}'")
    return True


@click.command("rm")
@click.argument("name")
@click.option("-f", "--force", is_flag=True, help="Remove without confirmation.")
@click.option("--dry-run", is_flag=True, help="Show what would be removed without doing it.")
@click.pass_obj
def rm_cmd(ctx: KwtContext, name: str, force: bool, dry_run: bool) -> None:
    """Remove the worktree NAME."""
    remove_worktree(ctx, name, force=force, dry_run=dry_run or ctx.dry_run)
