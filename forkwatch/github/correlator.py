"""Correlate GitHub pull requests with local merge history."""

from __future__ import annotations

import asyncio
import collections.abc as cabc
import typing as typ

from forkwatch.common.slug import repo_slug
from forkwatch.logging import get_logger, log_warning

from .models import PullRequest
from .observability import categorize_error

if typ.TYPE_CHECKING:
    from forkwatch.git.models import MergeRecord

    from .client import PullRequestClient
    from .models import PullRequestRaw

logger = get_logger(__name__)

SHORT_SHA_LENGTH = 7
# Merged pull requests are a subset of closed ones, so over-fetch. This is a
# best-effort bound: a page dominated by declined pull requests still comes
# back short.
OVERFETCH_FACTOR = 2
_MAX_CONCURRENT_LOOKUPS = 8


def short_sha(sha: str) -> str:
    """Return the first seven characters of ``sha`` (or all of a shorter one)."""
    return sha[:SHORT_SHA_LENGTH]


def merged_pull_request(raw: PullRequestRaw) -> PullRequest | None:
    """Reshape a raw pull request, or return ``None`` if it was never merged."""
    if raw.merged_at is None or raw.merge_commit_sha is None:
        return None
    return PullRequest(
        number=raw.number,
        title=raw.title,
        branch_name=raw.head.ref,
        author_login=raw.user.login if raw.user is not None else "",
        author_avatar=raw.user.avatar_url if raw.user is not None else "",
        created_at=raw.created_at,
        merged_at=raw.merged_at,
        merge_commit_sha=raw.merge_commit_sha,
        commit_count=raw.commits if raw.commits is not None else 1,
    )


def _collect_lookups(
    numbers: cabc.Sequence[int],
    gathered: cabc.Sequence[list[str] | BaseException],
    slug: str,
) -> dict[int, list[str]]:
    """Merge gathered lookup results, dropping and logging failed ones.

    Raises
    ------
    BaseException
        Re-raised for non-``Exception`` failures such as cancellation.

    """
    results: dict[int, list[str]] = {}
    for number, outcome in zip(numbers, gathered, strict=True):
        if isinstance(outcome, Exception):
            log_warning(
                logger,
                "Commit lookup failed for %s#%d (error_category=%s): %s",
                slug,
                number,
                categorize_error(outcome),
                outcome,
            )
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            results[number] = [short_sha(sha) for sha in outcome]
    return results


class PullRequestCorrelator:
    """Fetch merged pull requests and the commits that make them up."""

    def __init__(
        self,
        client: PullRequestClient,
        *,
        max_concurrency: int = _MAX_CONCURRENT_LOOKUPS,
    ) -> None:
        """Initialise with a remote client and a concurrency bound."""
        if max_concurrency < 1:
            msg = f"max_concurrency must be positive, got: {max_concurrency}"
            raise ValueError(msg)
        self._client = client
        self._max_concurrency = max_concurrency

    async def get_merged_pull_requests(
        self, owner: str, repo: str, base_branch: str, limit: int = 50
    ) -> list[PullRequest]:
        """Return up to ``limit`` pull requests merged into ``base_branch``.

        Results keep the remote ordering (most recently updated first).

        Raises
        ------
        ValueError
            If ``limit`` is not positive.
        GitHubAPIError
            If the listing request fails.
        GitHubResponseShapeError
            If the listing response cannot be decoded.

        """
        if limit < 1:
            msg = f"limit must be positive, got: {limit}"
            raise ValueError(msg)

        raw_pull_requests = await self._client.list_closed_pull_requests(
            owner, repo, base=base_branch, per_page=limit * OVERFETCH_FACTOR
        )
        merged: list[PullRequest] = []
        for raw in raw_pull_requests:
            pull_request = merged_pull_request(raw)
            if pull_request is None:
                continue
            merged.append(pull_request)
            if len(merged) == limit:
                break
        return merged

    async def get_pull_request_commit_shas(
        self, owner: str, repo: str, numbers: cabc.Iterable[int]
    ) -> dict[int, list[str]]:
        """Map each pull request number to the short hashes of its commits.

        Lookups run concurrently, one request per distinct number. A failed
        lookup is logged and its number is absent from the result; the call
        itself does not fail.
        """
        unique_numbers = list(dict.fromkeys(numbers))
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def bounded_lookup(number: int) -> list[str]:
            async with semaphore:
                return await self._client.list_pull_request_commits(
                    owner, repo, number
                )

        gathered = await asyncio.gather(
            *(bounded_lookup(number) for number in unique_numbers),
            return_exceptions=True,
        )
        return _collect_lookups(unique_numbers, gathered, repo_slug(owner, repo))


def match_merge_records(
    records: cabc.Iterable[MergeRecord],
    pull_requests: cabc.Iterable[PullRequest],
) -> dict[str, PullRequest]:
    """Associate local merge commits with the pull requests that made them.

    A record matches the pull request whose ``merge_commit_sha`` equals its
    full hash; failing that, the pull request numbered like the reference
    parsed from its subject. Unmatched records are absent from the result,
    which is keyed by the record's full hash.
    """
    by_sha: dict[str, PullRequest] = {}
    by_number: dict[int, PullRequest] = {}
    for pull_request in pull_requests:
        by_sha.setdefault(pull_request.merge_commit_sha, pull_request)
        by_number.setdefault(pull_request.number, pull_request)

    matches: dict[str, PullRequest] = {}
    for record in records:
        pull_request = by_sha.get(record.full_sha)
        if pull_request is None and record.pr_number is not None:
            pull_request = by_number.get(record.pr_number)
        if pull_request is not None:
            matches[record.full_sha] = pull_request
    return matches
