"""GitHub REST payloads and the merged pull requests derived from them."""

from __future__ import annotations

import msgspec


class PullRequestHead(msgspec.Struct, frozen=True):
    """Source branch of a pull request."""

    ref: str


class PullRequestUser(msgspec.Struct, frozen=True):
    """Author of a pull request."""

    login: str
    avatar_url: str = ""


class PullRequestRaw(msgspec.Struct, frozen=True):
    """A pull request as listed by ``GET /repos/{owner}/{repo}/pulls``.

    Unknown fields are ignored. The merge fields are ``None`` for pull
    requests that were closed without being merged.
    """

    number: int
    title: str
    created_at: str
    head: PullRequestHead
    user: PullRequestUser | None = None
    state: str = "closed"
    merged_at: str | None = None
    merge_commit_sha: str | None = None
    commits: int | None = None


class PullRequestCommit(msgspec.Struct, frozen=True):
    """A commit listed by ``GET /repos/{owner}/{repo}/pulls/{n}/commits``."""

    sha: str


class PullRequest(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """A merged pull request.

    Attributes
    ----------
    number
        Pull request number, unique per repository.
    title
        Pull request title.
    branch_name
        Source (head) branch name.
    author_login
        Login of the author; empty for deleted accounts.
    author_avatar
        Avatar URL of the author.
    created_at
        ISO-8601 creation time, a rough proxy for the fork date.
    merged_at
        ISO-8601 time the pull request landed.
    merge_commit_sha
        Hash of the commit that merged the pull request.
    commit_count
        Number of commits in the pull request; 1 when GitHub omits it.

    """

    number: int
    title: str
    branch_name: str
    author_login: str
    author_avatar: str
    created_at: str
    merged_at: str
    merge_commit_sha: str
    commit_count: int = 1


class GitHubRemote(msgspec.Struct, kw_only=True, frozen=True):
    """Owner and repository name parsed from a git remote URL."""

    owner: str
    repo: str

    @property
    def slug(self) -> str:
        """Return the ``owner/repo`` identifier."""
        return f"{self.owner}/{self.repo}"
