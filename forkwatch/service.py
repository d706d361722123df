"""Operations exposed over a local repository path.

:class:`ForkwatchService` wires the git analyzers and the pull-request
correlator together. Every repository-scoped call resolves the working tree
root first, so a bad path fails once with a typed error instead of partway
through a listing.
"""

from __future__ import annotations

import typing as typ
from pathlib import PurePath

from forkwatch.common.time import utcnow
from forkwatch.git.divergence import BranchDivergenceAnalyzer
from forkwatch.git.merges import MergeCommitExtractor
from forkwatch.git.models import RepoInfo
from forkwatch.github.correlator import PullRequestCorrelator, match_merge_records
from forkwatch.github.errors import GitHubConfigError, UnsupportedRemoteError
from forkwatch.github.remote import parse_remote_url

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from forkwatch.config import StatusThresholds
    from forkwatch.git.gateway import GitGateway, RepoPath
    from forkwatch.git.models import Branch, MergeNodePage
    from forkwatch.github.client import PullRequestClient
    from forkwatch.github.models import GitHubRemote, PullRequest

_DEFAULT_REMOTE = "origin"
_UNKNOWN_REPO_NAME = "unknown"


class ForkwatchService:
    """Branch, merge and pull-request queries for local repositories."""

    def __init__(
        self,
        gateway: GitGateway,
        client: PullRequestClient | None = None,
        *,
        thresholds: StatusThresholds | None = None,
        clock: cabc.Callable[[], dt.datetime] = utcnow,
    ) -> None:
        """Initialise with a git gateway and an optional GitHub client."""
        self._gateway = gateway
        self._client = client
        self._analyzer = BranchDivergenceAnalyzer(
            gateway, thresholds=thresholds, clock=clock
        )
        self._merges = MergeCommitExtractor(gateway)

    def _root(self, repo_path: RepoPath) -> str:
        return self._gateway.resolve_repository_root(repo_path)

    def list_branches(self, repo_path: RepoPath) -> list[Branch]:
        """Return divergence records for every non-default local branch."""
        return self._analyzer.list_branches(self._root(repo_path))

    def get_default_branch(self, repo_path: RepoPath) -> str:
        """Return the repository's mainline branch name."""
        return self._analyzer.get_default_branch(self._root(repo_path))

    def get_merge_nodes(
        self, repo_path: RepoPath, branch: str, page: int, per_page: int
    ) -> MergeNodePage:
        """Return one zero-based page of merge commits on ``branch``."""
        return self._merges.get_merge_nodes(
            self._root(repo_path), branch, page, per_page
        )

    def get_repo_info(self, repo_path: RepoPath) -> RepoInfo:
        """Return the repository's directory name and absolute root path."""
        root = self._root(repo_path)
        return RepoInfo(name=PurePath(root).name or _UNKNOWN_REPO_NAME, path=root)

    def get_github_remote(self, repo_path: RepoPath) -> GitHubRemote:
        """Return the GitHub owner and repository behind ``origin``.

        Raises
        ------
        UnsupportedRemoteError
            If the ``origin`` URL does not point at GitHub.

        """
        url = self._gateway.remote_url(self._root(repo_path), _DEFAULT_REMOTE)
        remote = parse_remote_url(url)
        if remote is None:
            raise UnsupportedRemoteError(url.strip())
        return remote

    def _correlator(self) -> PullRequestCorrelator:
        if self._client is None:
            msg = "A GitHub client is required for pull request queries"
            raise GitHubConfigError(msg)
        return PullRequestCorrelator(self._client)

    async def get_merged_pull_requests(
        self, owner: str, repo: str, base_branch: str, limit: int = 50
    ) -> list[PullRequest]:
        """Return up to ``limit`` pull requests merged into ``base_branch``."""
        return await self._correlator().get_merged_pull_requests(
            owner, repo, base_branch, limit
        )

    async def get_pull_request_commit_shas(
        self, owner: str, repo: str, numbers: cabc.Iterable[int]
    ) -> dict[int, list[str]]:
        """Map pull request numbers to the short hashes of their commits."""
        return await self._correlator().get_pull_request_commit_shas(
            owner, repo, numbers
        )

    async def get_merge_pull_requests(  # noqa: PLR0913
        self,
        repo_path: RepoPath,
        owner: str,
        repo: str,
        branch: str,
        *,
        page: int = 0,
        per_page: int = 50,
        limit: int = 50,
    ) -> tuple[MergeNodePage, dict[str, PullRequest]]:
        """Return a page of merges on ``branch`` and the pull requests behind them.

        The pull requests are the most recent ``limit`` merged into
        ``branch``, keyed by the full hash of the merge commit they match.
        Merges older than that window stay unmatched.
        """
        merge_page = self.get_merge_nodes(repo_path, branch, page, per_page)
        pull_requests = await self.get_merged_pull_requests(
            owner, repo, branch, limit
        )
        return merge_page, match_merge_records(merge_page.nodes, pull_requests)
