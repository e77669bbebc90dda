"""GitHub pull requests via the gh CLI."""

from typing import Any

from kwt.core.hosting.abc import ChangeRequestResolver
from kwt.core.hosting.types import ChangeRequest
from kwt.errors import GitHubError

_JSON_FIELDS = "number,title,headRefName,baseRefName,state,url"
_REQUIRED_KEYS = ("number", "title", "headRefName", "baseRefName", "state", "url")


class GitHubResolver(ChangeRequestResolver):
    binary = "gh"
    noun = "pull request"
    abbreviation = "PR"
    provider_name = "GitHub"
    error_class = GitHubError

    def _view_args(self, number: int) -> list[str]:
        return ["pr", "view", str(number), "--json", _JSON_FIELDS]

    def _parse_payload(self, data: dict[str, Any]) -> ChangeRequest | None:
        # LBYL: Validate required keys before accessing
        if not all(key in data for key in _REQUIRED_KEYS):
            return None
        if not isinstance(data["number"], int):
            return None
        return ChangeRequest(
            id=data["number"],
            title=str(data["title"]),
            source_branch=str(data["headRefName"]),
            target_branch=str(data["baseRefName"]),
            state=str(data["state"]),
            url=str(data["url"]),
        )
