"""Naming utilities for worktrees.

Pure functions, apart from `resolve_prefix`, which asks the remote inspector
for the origin repository name when the prefix type is `detect`.
"""

import re

from kwt.core.config import Configuration
from kwt.core.remotes import RemoteInspector

MIN_NAME_LENGTH = 2


def sanitize_change_request_branch(branch: str, fallback: str) -> str:
    """Turn a change request's source branch into a directory name.

    - Replaces characters outside `[A-Za-z0-9_-]` with `-`
    - Collapses consecutive `-`
    - Strips leading/trailing `-`
    Returns `fallback` if fewer than two characters remain.

    Examples:
        >>> sanitize_change_request_branch("feature/ABC-123_fix!!", "mr-7")
        'feature-ABC-123_fix'
        >>> sanitize_change_request_branch("!", "mr-7")
        'mr-7'
    """
    replaced = re.sub(r"[^A-Za-z0-9_-]", "-", branch)
    collapsed = re.sub(r"-+", "-", replaced)
    trimmed = collapsed.strip("-")
    if len(trimmed) < MIN_NAME_LENGTH:
        return fallback
    return trimmed


def resolve_prefix(config: Configuration, remotes: RemoteInspector) -> str:
    """Compute the worktree name prefix for the configured prefix type."""
    match config.prefix_type:
        case "none":
            return ""
        case "manual":
            return config.manual_prefix or ""
        case "detect":
            return remotes.generate_prefix()


def prefixed_name(config: Configuration, remotes: RemoteInspector, base_name: str) -> str:
    return f"{resolve_prefix(config, remotes)}{base_name}"
