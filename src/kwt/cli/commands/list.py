import click

from kwt.cli.output import machine_output, user_output
from kwt.core.context import KwtContext
from kwt.core.worktrees import WorktreeRecord


def format_worktree_row(worktree: WorktreeRecord) -> str:
    """Format one worktree as `<name> -> <branch or commit> [(bare)|(detached)]`."""
    target = worktree.branch or worktree.commit or ""
    if worktree.bare:
        status = " (bare)"
    elif worktree.detached:
        status = " (detached)"
    else:
        status = ""
    return f"{worktree.name} -> {target}{status}"


@click.command("list")
@click.pass_obj
def list_cmd(ctx: KwtContext) -> None:
    """List all worktrees."""
    worktrees = ctx.worktrees.list_worktrees()
    if not worktrees:
        user_output("No worktrees found")
        return

    user_output("Worktrees:")
    for worktree in worktrees:
        machine_output(f"  {format_worktree_row(worktree)}")
