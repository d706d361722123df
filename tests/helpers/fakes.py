"""In-memory collaborators for analyzer, correlator and service tests."""

from __future__ import annotations

import dataclasses
import typing as typ

from forkwatch.git.errors import GitCommandError, NotAGitRepositoryError
from forkwatch.git.gateway import CommitSummary, MergeHistoryEntry
from forkwatch.github.errors import GitHubAPIError

if typ.TYPE_CHECKING:
    from forkwatch.git.gateway import RepoPath
    from forkwatch.github.models import PullRequestRaw


@dataclasses.dataclass(slots=True)
class FakeBranchSpec:
    """Divergence facts the fake gateway reports for one branch."""

    sha: str
    date: str
    author: str = "Octo"
    behind: int = 0
    ahead: int = 1
    fork_sha: str | None = "f" * 40
    broken: bool = False


@dataclasses.dataclass(slots=True)
class FakeGitGateway:
    """Deterministic :class:`forkwatch.git.gateway.GitGateway` for tests."""

    branches: dict[str, FakeBranchSpec] = dataclasses.field(default_factory=dict)
    remote_head: str | None = None
    existing_refs: set[str] = dataclasses.field(default_factory=set)
    commits: dict[str, CommitSummary] = dataclasses.field(default_factory=dict)
    merges: dict[str, list[MergeHistoryEntry]] = dataclasses.field(
        default_factory=dict
    )
    root: str | None = "/work/reef"
    remotes: dict[str, str] = dataclasses.field(default_factory=dict)
    calls: list[tuple[typ.Any, ...]] = dataclasses.field(default_factory=list)

    def _branch(self, name: str) -> FakeBranchSpec:
        entry = self.branches.get(name)
        if entry is None or entry.broken:
            msg = f"fatal: bad revision '{name}'\n"
            raise GitCommandError(msg, exit_code=128)
        return entry

    def symbolic_remote_head(self, repo: RepoPath) -> str | None:
        self.calls.append(("symbolic_remote_head", str(repo)))
        return self.remote_head

    def ref_exists(self, repo: RepoPath, ref: str) -> bool:
        self.calls.append(("ref_exists", str(repo), ref))
        return ref in self.existing_refs

    def list_local_branch_names(self, repo: RepoPath) -> list[str]:
        self.calls.append(("list_local_branch_names", str(repo)))
        return list(self.branches)

    def revision_range(self, repo: RepoPath, base: str, branch: str) -> tuple[int, int]:
        self.calls.append(("revision_range", str(repo), base, branch))
        entry = self._branch(branch)
        return (entry.behind, entry.ahead)

    def last_commit(self, repo: RepoPath, ref: str) -> CommitSummary:
        self.calls.append(("last_commit", str(repo), ref))
        if ref in self.commits:
            return self.commits[ref]
        entry = self._branch(ref)
        return CommitSummary(sha=entry.sha, author=entry.author, date=entry.date)

    def common_ancestor(self, repo: RepoPath, a: str, b: str) -> str | None:
        self.calls.append(("common_ancestor", str(repo), a, b))
        return self._branch(b).fork_sha

    def merge_history(
        self, repo: RepoPath, branch: str, *, skip: int, limit: int
    ) -> list[MergeHistoryEntry]:
        self.calls.append(("merge_history", str(repo), branch, skip, limit))
        return self.merges.get(branch, [])[skip : skip + limit]

    def resolve_repository_root(self, repo: RepoPath) -> str:
        self.calls.append(("resolve_repository_root", str(repo)))
        if self.root is None:
            raise NotAGitRepositoryError(str(repo))
        return self.root

    def remote_url(self, repo: RepoPath, remote_name: str = "origin") -> str:
        self.calls.append(("remote_url", str(repo), remote_name))
        if remote_name not in self.remotes:
            msg = f"error: No such remote '{remote_name}'\n"
            raise GitCommandError(msg, exit_code=2)
        return self.remotes[remote_name]


def merge_entry(index: int, subject: str, date: str = "") -> MergeHistoryEntry:
    """Build a merge history entry with hashes derived from ``index``."""
    full_sha = f"{index:040x}"
    return MergeHistoryEntry(
        full_sha=full_sha,
        short_sha=full_sha[:7],
        subject=subject,
        date=date or f"2024-01-{index % 28 + 1:02d}T10:00:00+00:00",
    )


class FakePullRequestClient:
    """Deterministic :class:`forkwatch.github.client.PullRequestClient`."""

    def __init__(
        self,
        *,
        pull_requests: list[PullRequestRaw] | None = None,
        commits: dict[int, list[str]] | None = None,
        failing: set[int] | None = None,
    ) -> None:
        """Store canned responses; numbers in ``failing`` raise on lookup."""
        self._pull_requests = pull_requests or []
        self._commits = commits or {}
        self._failing = failing or set()
        self.list_calls: list[dict[str, typ.Any]] = []
        self.commit_calls: list[int] = []
        self.closed = False

    async def list_closed_pull_requests(
        self, owner: str, repo: str, *, base: str, per_page: int
    ) -> list[PullRequestRaw]:
        """Return the canned pull requests, truncated to ``per_page``."""
        self.list_calls.append(
            {"owner": owner, "repo": repo, "base": base, "per_page": per_page}
        )
        return self._pull_requests[:per_page]

    async def list_pull_request_commits(
        self, owner: str, repo: str, number: int
    ) -> list[str]:
        """Return canned commit hashes or raise for failing numbers."""
        del owner, repo
        self.commit_calls.append(number)
        if number in self._failing:
            raise GitHubAPIError.http_error(404, f"/pulls/{number}/commits")
        return self._commits.get(number, [])

    async def aclose(self) -> None:
        """Record that the client was closed."""
        self.closed = True

