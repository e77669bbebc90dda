"""Tests for remote parsing, repository name extraction and branch queries."""

from pathlib import Path

import pytest

from kwt.core.remotes import Remote, RemoteInspector, extract_repo_name, parse_remotes
from kwt.errors import GitError
from tests.fakes.runner import FakeCommandRunner, fail, ok

REPO = Path("/repo")

REMOTE_OUTPUT = (
    "origin\tgit@gitlab.com:acme/platform/widgets.git (fetch)\n"
    "origin\tgit@gitlab.com:acme/platform/widgets.git (push)\n"
    "upstream\thttps://github.com/org/widgets (fetch)\n"
    "garbage line\n"
)


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("git@github.com:user/repo.git", "repo"),
        ("https://gitlab.com/user/awesome-project.git", "awesome-project"),
        ("https://github.com/org/awesome-tool", "awesome-tool"),
        ("https://gitlab.com/group/sub/deep-repo.git/", "deep-repo"),
        ("git@gitlab.example.com:group/sub/name", "name"),
        ("http://git.local/team/tool.git", "tool"),
    ],
)
def test_extract_repo_name(url: str, expected: str) -> None:
    assert extract_repo_name(url) == expected


@pytest.mark.parametrize(
    "url",
    ["ftp://example.com/repo", "/srv/git/repo.git", "https://github.com/", "git@github.com:"],
)
def test_extract_repo_name_rejects_unsupported_urls(url: str) -> None:
    with pytest.raises(GitError):
        extract_repo_name(url)


def test_parse_remotes_skips_unparseable_lines() -> None:
    remotes = parse_remotes(REMOTE_OUTPUT)

    assert remotes == [
        Remote(name="origin", url="git@gitlab.com:acme/platform/widgets.git", type="fetch"),
        Remote(name="origin", url="git@gitlab.com:acme/platform/widgets.git", type="push"),
        Remote(name="upstream", url="https://github.com/org/widgets", type="fetch"),
    ]


def test_generate_prefix_uses_origin_fetch_url() -> None:
    runner = FakeCommandRunner(responses={("git", "remote", "-v"): ok(REMOTE_OUTPUT)})
    inspector = RemoteInspector(runner, REPO)

    assert inspector.get_origin_url() == "git@gitlab.com:acme/platform/widgets.git"
    assert inspector.generate_prefix() == "widgets-"


def test_get_origin_url_without_origin_raises() -> None:
    runner = FakeCommandRunner(
        responses={("git", "remote", "-v"): ok("upstream\thttps://x.org/a/b (fetch)\n")}
    )

    with pytest.raises(GitError, match="No origin remote found"):
        RemoteInspector(runner, REPO).get_origin_url()


def test_get_remotes_failure_raises_git_error_with_stderr() -> None:
    runner = FakeCommandRunner(
        responses={("git", "remote", "-v"): fail("fatal: not a git repository", 128)}
    )

    with pytest.raises(GitError, match="fatal: not a git repository"):
        RemoteInspector(runner, REPO).get_remotes()


def test_branch_exists_maps_exit_code_to_bool() -> None:
    runner = FakeCommandRunner(
        responses={
            ("git", "show-ref", "--verify", "--quiet", "refs/heads/feature"): ok(),
            ("git", "show-ref", "--verify", "--quiet", "refs/heads/missing"): fail(),
        }
    )
    inspector = RemoteInspector(runner, REPO)

    assert inspector.branch_exists("feature")
    assert not inspector.branch_exists("missing")


def test_remote_branch_exists_checks_remote_ref() -> None:
    runner = FakeCommandRunner(
        responses={
            ("git", "show-ref", "--verify", "--quiet", "refs/remotes/origin/feature"): fail(),
        }
    )

    assert not RemoteInspector(runner, REPO).remote_branch_exists("feature")


def test_is_git_repo_false_outside_repository() -> None:
    runner = FakeCommandRunner(
        responses={("git", "rev-parse", "--git-dir"): fail("fatal: not a git repository")}
    )

    assert not RemoteInspector(runner, REPO).is_git_repo()


def test_get_repo_root_and_current_branch() -> None:
    runner = FakeCommandRunner(
        responses={
            ("git", "rev-parse", "--show-toplevel"): ok("/repo\n"),
            ("git", "branch", "--show-current"): ok("feature-x\n"),
        }
    )
    inspector = RemoteInspector(runner, REPO / "src")

    assert inspector.get_repo_root() == Path("/repo")
    assert inspector.get_current_branch() == "feature-x"


def test_get_repo_root_none_outside_repository() -> None:
    runner = FakeCommandRunner(responses={("git", "rev-parse", "--show-toplevel"): fail()})

    assert RemoteInspector(runner, REPO).get_repo_root() is None
