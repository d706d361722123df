"""Command-line entry point printing branch and pull-request data as JSON.

Usage:
    forkwatch branches [REPO]
    forkwatch default-branch [REPO]
    forkwatch merges REPO BRANCH [--page N] [--per-page N]
    forkwatch info [REPO]
    forkwatch prs [REPO] [--base BRANCH] [--limit N] [--slug OWNER/NAME]
    forkwatch pr-commits REPO NUMBER... [--slug OWNER/NAME]
    forkwatch merge-prs REPO BRANCH [--page N] [--per-page N] [--limit N]
                        [--slug OWNER/NAME]

Environment variables:
    FORKWATCH_LOG_LEVEL     - Log level (default: INFO)
    FORKWATCH_GITHUB_TOKEN  - GitHub token (falls back to GITHUB_TOKEN)
    FORKWATCH_STALE_BEHIND, FORKWATCH_CONFLICT_BEHIND, FORKWATCH_STALE_DAYS
                            - Branch status thresholds
"""

from __future__ import annotations

import asyncio
import os
import sys
import typing as typ
from pathlib import Path

import msgspec
from cyclopts import App

from forkwatch import __version__
from forkwatch.common.slug import parse_repo_slug
from forkwatch.config import StatusThresholds
from forkwatch.git.errors import GitCommandError, GitError
from forkwatch.git.gateway import GitCommandGateway
from forkwatch.github.client import GitHubRestClient, GitHubRestConfig
from forkwatch.github.errors import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubResponseShapeError,
    UnsupportedRemoteError,
)
from forkwatch.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)
from forkwatch.service import ForkwatchService

if typ.TYPE_CHECKING:
    from forkwatch.git.gateway import GitGateway
    from forkwatch.github.client import PullRequestClient

logger = get_logger(__name__)

app = App(
    name="forkwatch",
    help="Branch divergence and pull-request correlation for git repositories",
    version=__version__,
)

_CLI_ERRORS: tuple[type[Exception], ...] = (
    GitError,
    GitHubAPIError,
    GitHubConfigError,
    GitHubResponseShapeError,
    ValueError,
)


def _make_gateway() -> GitGateway:
    return GitCommandGateway()


def _make_client() -> GitHubRestClient:
    return GitHubRestClient(GitHubRestConfig.from_env())


def _service(client: PullRequestClient | None = None) -> ForkwatchService:
    return ForkwatchService(
        _make_gateway(), client, thresholds=StatusThresholds.from_env()
    )


def _emit(payload: object) -> int:
    print(msgspec.json.encode(payload).decode("utf-8"))
    return 0


def _report_failure(command: str, exc: Exception) -> int:
    log_error(logger, "forkwatch %s failed: %s", command, exc)
    print(f"forkwatch {command}: {exc}", file=sys.stderr)
    return 1


def _owner_and_name(
    service: ForkwatchService, repo: Path, slug: str | None
) -> tuple[str, str]:
    if slug is not None:
        return parse_repo_slug(slug)
    remote = service.get_github_remote(repo)
    return remote.owner, remote.repo


async def _with_client[T](
    run: typ.Callable[[ForkwatchService], typ.Awaitable[T]],
) -> T:
    client = _make_client()
    try:
        return await run(_service(client))
    finally:
        await client.aclose()


@app.command
def branches(repo: Path = Path()) -> int:
    """List local branches with their divergence from the default branch.

    Args:
        repo: Path inside the repository.

    """
    log_info(logger, "Listing branches in %s", repo)
    try:
        result = _service().list_branches(repo)
    except _CLI_ERRORS as exc:
        return _report_failure("branches", exc)
    return _emit(result)


@app.command(name="default-branch")
def default_branch(repo: Path = Path()) -> int:
    """Print the default branch name.

    Args:
        repo: Path inside the repository.

    """
    try:
        result = _service().get_default_branch(repo)
    except _CLI_ERRORS as exc:
        return _report_failure("default-branch", exc)
    return _emit(result)


@app.command
def merges(repo: Path, branch: str, *, page: int = 0, per_page: int = 50) -> int:
    """List one page of merge commits on a branch.

    Args:
        repo: Path inside the repository.
        branch: Branch whose history is scanned.
        page: Zero-based page index.
        per_page: Number of merge commits per page.

    """
    log_info(logger, "Reading merge commits on %s (page=%d)", branch, page)
    try:
        result = _service().get_merge_nodes(repo, branch, page, per_page)
    except _CLI_ERRORS as exc:
        return _report_failure("merges", exc)
    return _emit(result)


@app.command
def info(repo: Path = Path()) -> int:
    """Print the repository name, root path and GitHub remote.

    ``github`` is null when ``origin`` is missing or not hosted on GitHub.

    Args:
        repo: Path inside the repository.

    """
    try:
        service = _service()
        repo_info = service.get_repo_info(repo)
    except _CLI_ERRORS as exc:
        return _report_failure("info", exc)
    try:
        remote = service.get_github_remote(repo)
    except (UnsupportedRemoteError, GitCommandError) as exc:
        log_info(logger, "No GitHub remote for %s: %s", repo_info.path, exc)
        remote = None
    except _CLI_ERRORS as exc:
        return _report_failure("info", exc)
    return _emit({"name": repo_info.name, "path": repo_info.path, "github": remote})


@app.command
def prs(
    repo: Path = Path(),
    *,
    base: str | None = None,
    limit: int = 50,
    slug: str | None = None,
) -> int:
    """List pull requests merged into the base branch.

    Args:
        repo: Path inside the repository.
        base: Base branch; defaults to the repository's default branch.
        limit: Maximum number of pull requests to return.
        slug: GitHub ``owner/name``; defaults to the ``origin`` remote.

    """

    async def _run(service: ForkwatchService) -> object:
        owner, name = _owner_and_name(service, repo, slug)
        base_branch = base or service.get_default_branch(repo)
        log_info(logger, "Fetching merged pull requests for %s/%s", owner, name)
        return await service.get_merged_pull_requests(owner, name, base_branch, limit)

    try:
        result = asyncio.run(_with_client(_run))
    except _CLI_ERRORS as exc:
        return _report_failure("prs", exc)
    return _emit(result)


@app.command(name="pr-commits")
def pr_commits(repo: Path, *numbers: int, slug: str | None = None) -> int:
    """Map pull request numbers to the short hashes of their commits.

    Args:
        repo: Path inside the repository.
        numbers: Pull request numbers to look up.
        slug: GitHub ``owner/name``; defaults to the ``origin`` remote.

    """

    async def _run(service: ForkwatchService) -> object:
        owner, name = _owner_and_name(service, repo, slug)
        return await service.get_pull_request_commit_shas(owner, name, numbers)

    try:
        result = asyncio.run(_with_client(_run))
    except _CLI_ERRORS as exc:
        return _report_failure("pr-commits", exc)
    return _emit(result)


@app.command(name="merge-prs")
def merge_prs(  # noqa: PLR0913
    repo: Path,
    branch: str,
    *,
    page: int = 0,
    per_page: int = 50,
    limit: int = 50,
    slug: str | None = None,
) -> int:
    """List one page of merge commits with the pull requests that made them.

    Args:
        repo: Path inside the repository.
        branch: Branch whose history is scanned and whose pull requests are read.
        page: Zero-based page index.
        per_page: Number of merge commits per page.
        limit: Maximum number of merged pull requests to match against.
        slug: GitHub ``owner/name``; defaults to the ``origin`` remote.

    """

    async def _run(service: ForkwatchService) -> object:
        owner, name = _owner_and_name(service, repo, slug)
        merge_page, matches = await service.get_merge_pull_requests(
            repo, owner, name, branch, page=page, per_page=per_page, limit=limit
        )
        return {
            "nodes": merge_page.nodes,
            "hasMore": merge_page.has_more,
            "pullRequests": matches,
        }

    log_info(logger, "Matching merge commits on %s (page=%d)", branch, page)
    try:
        result = asyncio.run(_with_client(_run))
    except _CLI_ERRORS as exc:
        return _report_failure("merge-prs", exc)
    return _emit(result)


def main() -> int:
    """Configure logging from ``FORKWATCH_LOG_LEVEL`` and run the CLI."""
    raw_level = os.environ.get("FORKWATCH_LOG_LEVEL", "INFO")
    normalized_level, invalid_level = configure_logging(raw_level)
    if invalid_level:
        log_warning(
            logger,
            "Invalid FORKWATCH_LOG_LEVEL %r, falling back to %s",
            raw_level,
            normalized_level,
        )
    return app()


if __name__ == "__main__":
    raise SystemExit(main())
