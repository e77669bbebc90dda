"""Create a worktree from a merge request or pull request.

`mr` and `pr` differ only in the resolver they use; the flow is shared:
validate the number, fetch the change request, derive the worktree name
from its source branch, fetch that branch and check it out in a new worktree.
"""

import logging
from pathlib import Path

from kwt.cli.commands.common import (
    initialize,
    print_post_command_plan,
    run_configured_post_commands,
)
from kwt.cli.output import spinner, success_output, user_output
from kwt.core.context import KwtContext
from kwt.core.hosting import ChangeRequest, ChangeRequestResolver
from kwt.core.naming import prefixed_name
from kwt.errors import KwtError

logger = logging.getLogger(__name__)


def parse_change_request_number(value: str, noun: str) -> int:
    """Parse a positive change request number.

    Raises:
        KwtError: If `value` is not a positive integer
    """
    text = value.strip()
    if not text.isdigit() or int(text) <= 0:
        raise KwtError(f"Invalid {noun} number: {value}")
    return int(text)


def create_change_request_worktree(
    ctx: KwtContext,
    resolver: ChangeRequestResolver,
    number_text: str,
    *,
    checkout: bool = False,
    dry_run: bool = False,
    show_summary: bool = False,
) -> Path:
    """Materialize a change request's source branch as a worktree.

    With `checkout`, an existing worktree at the target path is reported and
    left untouched instead of being treated as an error.

    Returns:
        Path of the (new or existing) worktree

    Raises:
        KwtError: On an invalid number, a missing provider, or an existing worktree
        GitLabError / GitHubError: If the change request cannot be fetched
        GitError: If git fails to create the worktree
        PostCommandError: If a post-creation command fails
    """
    config = initialize(ctx)
    number = parse_change_request_number(number_text, resolver.noun)

    if not resolver.is_project_of_this_provider():
        raise KwtError(
            f"Not in a {resolver.provider_name} project or {resolver.binary} CLI not available"
        )

    with spinner(f"Checking {resolver.noun} {number}..."):
        change_request = resolver.get(number)
    success_output(f"Found {resolver.abbreviation} {number}: {change_request.title}")

    base_name = resolver.worktree_name_for(change_request)
    worktree_name = prefixed_name(config, ctx.remotes, base_name)
    logger.debug("Generated worktree name: %s", worktree_name)

    worktree_path = ctx.worktrees.resolve_path(config.worktree_dir, worktree_name)
    logger.debug("Worktree path: %s", worktree_path)

    if ctx.worktrees.exists(worktree_path):
        if not checkout:
            raise KwtError(f"Worktree already exists at: {worktree_path}")
        user_output(f"Worktree already exists at: {worktree_path}")
        # TODO: switch the caller's shell into the existing worktree
        user_output("Switching to existing worktree...")
        return worktree_path

    if show_summary:
        _print_summary(resolver, change_request, worktree_path)

    if dry_run:
        user_output("Dry run mode - would create:")
        user_output(f"  Worktree: {worktree_path}")
        user_output(f"  Branch: {change_request.source_branch}")
        user_output(f"  {resolver.abbreviation}: {change_request.title}")
        print_post_command_plan(config)
        return worktree_path

    branch = change_request.source_branch
    with spinner(f"Fetching branch '{branch}'..."):
        resolver.fetch_source_branch(change_request)
    success_output(f"Branch '{branch}' fetched")

    with spinner(f"Creating worktree '{worktree_name}'..."):
        ctx.worktrees.create(worktree_path, branch, create_branch=False, checkout=True)
    success_output(f"Worktree '{worktree_name}' created successfully")

    run_configured_post_commands(ctx, config, worktree_path)

    success_output(
        f"Worktree for {resolver.abbreviation} {number} is ready at: {worktree_path}"
    )
    user_output(f"{resolver.abbreviation}: {change_request.title}")
    user_output(f"Branch: {branch}")
    user_output(f"URL: {change_request.url}")
    return worktree_path


def _print_summary(
    resolver: ChangeRequestResolver, change_request: ChangeRequest, worktree_path: Path
) -> None:
    user_output(f"Creating worktree for {resolver.abbreviation} {change_request.id}:")
    user_output(f"  Title: {change_request.title}")
    user_output(f"  Branch: {change_request.source_branch}")
    user_output(f"  Target: {change_request.target_branch}")
    user_output(f"  State: {change_request.state}")
    user_output(f"  URL: {change_request.url}")
    user_output(f"  Worktree: {worktree_path}")
