import dataclasses
import logging
import os
from pathlib import Path
from typing import Any

import click

from kwt import __version__
from kwt.cli.commands.config import config_cmd
from kwt.cli.commands.list import list_cmd
from kwt.cli.commands.mr import mr_cmd
from kwt.cli.commands.new import new_cmd
from kwt.cli.commands.pr import pr_cmd
from kwt.cli.commands.remove import rm_cmd
from kwt.cli.output import error_output
from kwt.core.context import KwtContext, create_context
from kwt.errors import KwtError

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

DEBUG_ENV_VAR = "KWT_DEBUG"


def configure_logging(verbose: bool) -> None:
    """Enable debug logging for --verbose or when KWT_DEBUG is set."""
    if verbose or os.getenv(DEBUG_ENV_VAR):
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")
        logging.getLogger("kwt").setLevel(logging.DEBUG)


class KwtGroup(click.Group):
    """Click group that turns any KwtError into `Error: <message>` and exit code 1."""

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except KwtError as e:
            if e.cause is not None:
                logger.debug("Caused by:", exc_info=e.cause)
            error_output(str(e))
            raise SystemExit(1) from e


@click.group(cls=KwtGroup, context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__, prog_name="kwt")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to the local config file.",
)
@click.option("--dry-run", is_flag=True, help="Show what would be done without executing.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None, dry_run: bool) -> None:
    """Manage git worktrees with naming prefixes and post-creation commands."""
    configure_logging(verbose)

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context(dry_run=dry_run, config_path=config_path)
    elif dry_run:
        existing: KwtContext = ctx.obj
        ctx.obj = dataclasses.replace(existing, dry_run=True)


cli.add_command(new_cmd)
cli.add_command(mr_cmd)
cli.add_command(pr_cmd)
cli.add_command(rm_cmd)
cli.add_command(rm_cmd, name="remove")
cli.add_command(config_cmd)
cli.add_command(list_cmd)
cli.add_command(list_cmd, name="ls")


def main() -> None:
    """CLI entry point used by the `kwt` console script."""
    cli()
