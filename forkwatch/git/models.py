"""Branch and merge-commit records returned by the git analyzers."""

from __future__ import annotations

import enum

import msgspec


class BranchStatus(enum.StrEnum):
    """Freshness classification of a branch relative to its base."""

    FRESH = "fresh"
    STALE = "stale"
    CONFLICT_RISK = "conflict-risk"


class Branch(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Divergence summary for a single local branch.

    Attributes
    ----------
    name
        Short branch name, unique within the repository.
    commits_ahead
        Commits on the branch that are not on the base branch.
    commits_behind
        Commits on the base branch that are not on the branch.
    head_sha
        Full hash of the branch head.
    last_commit_date
        ISO-8601 author date of the head commit.
    last_commit_author
        Author name of the head commit.
    status
        Classification derived from ``commits_behind`` and
        ``last_commit_date``.
    diverged_from_sha
        Fork point (merge base with the base branch); ``None`` for disjoint
        histories.
    diverged_from_date
        ISO-8601 author date of the fork point; ``None`` when
        ``diverged_from_sha`` is.

    """

    name: str
    commits_ahead: int
    commits_behind: int
    head_sha: str
    last_commit_date: str
    last_commit_author: str
    status: BranchStatus
    diverged_from_sha: str | None = None
    diverged_from_date: str | None = None


class MergeRecord(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """A merge commit with the pull request its subject refers to, if any."""

    full_sha: str
    sha: str
    date: str
    pr_number: int | None = None
    pr_title: str | None = None


class MergeNodePage(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """One page of merge records and whether another page follows."""

    nodes: tuple[MergeRecord, ...]
    has_more: bool


class RepoInfo(msgspec.Struct, kw_only=True, frozen=True):
    """Name and absolute root path of a local repository."""

    name: str
    path: str
