"""Hosting integrations (GitLab merge requests, GitHub pull requests)."""

from kwt.core.hosting.abc import ChangeRequestResolver
from kwt.core.hosting.github import GitHubResolver
from kwt.core.hosting.gitlab import GitLabResolver
from kwt.core.hosting.types import ChangeRequest

__all__ = ["ChangeRequest", "ChangeRequestResolver", "GitHubResolver", "GitLabResolver"]
