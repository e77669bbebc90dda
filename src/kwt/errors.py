"""Exception hierarchy for kwt.

Every error raised on purpose derives from KwtError. The CLI group catches
KwtError once, prints the message and exits with status 1. Underlying causes
are chained with ``raise ... from``.
"""


class KwtError(Exception):
    """Base error. Also used directly for precondition failures in commands."""

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__


class CommandError(KwtError):
    """An external program exited non-zero (or could not be started)."""


class ConfigError(KwtError):
    """Configuration could not be validated, read or written."""


class GitError(KwtError):
    """A git command whose result was needed failed."""


class GitLabError(KwtError):
    """glab is unavailable, failed, or returned unexpected output."""


class GitHubError(KwtError):
    """gh is unavailable, failed, or returned unexpected output."""


class PostCommandError(KwtError):
    """A configured post-creation command failed."""
