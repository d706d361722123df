"""Unit tests for GitHub remote URL parsing."""

from __future__ import annotations

import pytest

from forkwatch.github.models import GitHubRemote
from forkwatch.github.remote import parse_remote_url


@pytest.mark.parametrize(
    "url",
    [
        "git@github.com:octo/reef.git",
        "git@github.com:octo/reef",
        "https://github.com/octo/reef.git",
        "https://github.com/octo/reef",
        "https://github.com/octo/reef/",
        "ssh://git@github.com/octo/reef.git",
        "  https://github.com/octo/reef.git\n",
        "https://token@github.com/octo/reef",
    ],
)
def test_recognised_forms_yield_owner_and_repo(url: str) -> None:
    """Every GitHub remote form resolves to the same repository."""
    remote = parse_remote_url(url)

    assert remote == GitHubRemote(owner="octo", repo="reef")
    assert remote is not None
    assert remote.slug == "octo/reef"


def test_extra_path_segments_are_ignored() -> None:
    """Only the first two path segments are used."""
    assert parse_remote_url("https://github.com/octo/reef/tree/main") == (
        GitHubRemote(owner="octo", repo="reef")
    )


@pytest.mark.parametrize(
    "url",
    [
        "https://gitlab.com/octo/reef.git",
        "git@bitbucket.org:octo/reef.git",
        "/srv/git/reef.git",
        "",
        "https://github.com/octo",
        "https://github.com/",
        "git@github.com:octo",
        "git@github.com:octo/reef/extra",
        "git@github.com:/reef",
    ],
)
def test_unrecognised_urls_yield_none(url: str) -> None:
    """Non-GitHub or incomplete URLs are rejected."""
    assert parse_remote_url(url) is None
