"""kwt - prefixed git worktrees with post-creation commands."""

__version__ = "0.3.0"
