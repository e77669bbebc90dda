"""Output utilities for CLI commands with clear intent.

- user_output: human-facing messages, written to stderr
- machine_output: data meant to be piped (list rows, config values), written to stdout
"""

from collections.abc import Iterator
from contextlib import contextmanager

import click
from rich.console import Console


def user_output(message: str = "", nl: bool = True) -> None:
    click.echo(message, err=True, nl=nl)


def machine_output(message: str = "", nl: bool = True) -> None:
    click.echo(message, nl=nl)


def success_output(message: str) -> None:
    user_output(click.style("✓ ", fg="green") + message)


def warning_output(message: str) -> None:
    user_output(click.style("Warning: ", fg="yellow") + message)


def error_output(message: str) -> None:
    user_output(click.style("Error: ", fg="red") + message)


@contextmanager
def spinner(message: str) -> Iterator[None]:
    """Show a transient spinner on stderr while the block runs.

    Nothing is drawn when stderr is not a terminal.
    """
    console = Console(stderr=True)
    with console.status(message):
        yield
