"""Types shared by the hosting integrations."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ChangeRequest:
    """A merge request (GitLab) or pull request (GitHub)."""

    id: int
    title: str
    source_branch: str
    target_branch: str
    state: str
    url: str
