"""Abstract change-request resolver.

Architecture:
- ChangeRequestResolver: shared behaviour over a hosting CLI
- GitLabResolver / GitHubResolver: provider-specific commands and payloads

Subclasses describe how to call their CLI and how to read its JSON; naming,
branch fetching and availability checks live here.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from kwt.core.hosting.types import ChangeRequest
from kwt.core.naming import sanitize_change_request_branch
from kwt.core.runner import CommandRunner
from kwt.errors import CommandError, KwtError

logger = logging.getLogger(__name__)


class ChangeRequestResolver(ABC):
    """Fetches change requests through a hosting CLI and materializes their branches."""

    binary: str
    """Name of the hosting CLI executable."""

    noun: str
    """Human-readable kind, e.g. "merge request"."""

    abbreviation: str
    """Short kind used in messages and fallback names, e.g. "MR"."""

    provider_name: str
    """Hosting provider, e.g. "GitLab"."""

    error_class: type[KwtError]

    def __init__(self, runner: CommandRunner, cwd: Path) -> None:
        self._runner = runner
        self._cwd = cwd

    @abstractmethod
    def _view_args(self, number: int) -> list[str]:
        """Arguments that print one change request as a JSON object."""
        ...

    @abstractmethod
    def _parse_payload(self, data: dict[str, Any]) -> ChangeRequest | None:
        """Build a ChangeRequest from the CLI's JSON, or None if keys are missing."""
        ...

    def is_available(self) -> bool:
        return self._runner.which(self.binary) is not None

    def get(self, number: int) -> ChangeRequest:
        """Fetch metadata for one change request.

        Raises:
            error_class: If the CLI is missing, fails, or returns unexpected output
        """
        if not self.is_available():
            raise self.error_class(f"{self.binary} CLI is not available. Please install it first.")

        failure = f"Failed to get {self.noun} {number}"
        try:
            output = self._runner.run_checked(
                self.binary,
                self._view_args(number),
                self._cwd,
                operation_context=f"view {self.noun} {number}",
            )
        except CommandError as e:
            raise self.error_class(f"{failure}: {e}") from e

        try:
            data = json.loads(output)
        except json.JSONDecodeError as e:
            raise self.error_class(f"{failure}: invalid JSON from {self.binary}: {e}") from e

        if not isinstance(data, dict):
            raise self.error_class(f"{failure}: expected a JSON object from {self.binary}")

        change_request = self._parse_payload(data)
        if change_request is None:
            raise self.error_class(f"{failure}: unexpected response shape from {self.binary}")

        logger.debug("Retrieved %s data: %s", self.abbreviation, change_request)
        return change_request

    def exists(self, number: int) -> bool:
        try:
            self.get(number)
        except KwtError:
            return False
        return True

    def fallback_name(self, number: int) -> str:
        return f"{self.abbreviation.lower()}-{number}"

    def worktree_name_for(self, change_request: ChangeRequest) -> str:
        """Filesystem-safe worktree name derived from the source branch."""
        name = sanitize_change_request_branch(
            change_request.source_branch, self.fallback_name(change_request.id)
        )
        logger.debug(
            "Generated worktree name for %s %d: %s", self.abbreviation, change_request.id, name
        )
        return name

    def derive_worktree_name(self, number: int) -> str:
        return self.worktree_name_for(self.get(number))

    def fetch_branch(self, number: int, remote: str = "origin") -> None:
        self.fetch_source_branch(self.get(number), remote)

    def fetch_source_branch(self, change_request: ChangeRequest, remote: str = "origin") -> None:
        """Fetch the source branch into a local branch of the same name.

        Falls back to a plain fetch when the local ref cannot be updated
        (for example, when the branch is already checked out).

        Raises:
            error_class: If both fetches fail
        """
        branch = change_request.source_branch
        result = self._runner.run("git", ["fetch", remote, f"{branch}:{branch}"], self._cwd)
        if result.success:
            logger.debug("Fetched branch %s from %s", branch, remote)
            return

        logger.debug("Refspec fetch failed for %s, retrying plain fetch", branch)
        try:
            self._runner.run_checked(
                "git",
                ["fetch", remote, branch],
                self._cwd,
                operation_context=f"fetch branch {branch}",
            )
        except CommandError as e:
            raise self.error_class(f"Failed to fetch branch {branch}: {e}") from e
        logger.debug("Updated existing branch %s from %s", branch, remote)

    def is_project_of_this_provider(self) -> bool:
        """Check that the CLI is installed and recognizes the current repository."""
        if not self.is_available():
            return False
        return self._runner.run(self.binary, ["repo", "view"], self._cwd).success
