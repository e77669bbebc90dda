"""GitLab merge requests via the glab CLI."""

from typing import Any

from kwt.core.hosting.abc import ChangeRequestResolver
from kwt.core.hosting.types import ChangeRequest
from kwt.errors import GitLabError

_REQUIRED_KEYS = ("iid", "title", "source_branch", "target_branch", "state", "web_url")


class GitLabResolver(ChangeRequestResolver):
    binary = "glab"
    noun = "merge request"
    abbreviation = "MR"
    provider_name = "GitLab"
    error_class = GitLabError

    def _view_args(self, number: int) -> list[str]:
        return ["mr", "view", str(number), "--output", "json"]

    def _parse_payload(self, data: dict[str, Any]) -> ChangeRequest | None:
        if not all(key in data for key in _REQUIRED_KEYS):
            return None
        if not isinstance(data["iid"], int):
            return None
        return ChangeRequest(
            id=data["iid"],
            title=str(data["title"]),
            source_branch=str(data["source_branch"]),
            target_branch=str(data["target_branch"]),
            state=str(data["state"]),
            url=str(data["web_url"]),
        )
