import click

from kwt.cli.commands.change_request import create_change_request_worktree
from kwt.core.context import KwtContext


@click.command("pr")
@click.argument("number")
@click.option("--checkout", is_flag=True, help="Reuse the worktree if it already exists.")
@click.option("--dry-run", is_flag=True, help="Show what would be created without doing it.")
@click.pass_obj
def pr_cmd(ctx: KwtContext, number: str, checkout: bool, dry_run: bool) -> None:
    """Create a worktree from GitHub pull request NUMBER."""
    create_change_request_worktree(
        ctx,
        ctx.github,
        number,
        checkout=checkout,
        dry_run=dry_run or ctx.dry_run,
        show_summary=True,
    )
