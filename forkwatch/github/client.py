"""GitHub REST client used by the pull-request correlator."""

from __future__ import annotations

import dataclasses
import os
import typing as typ

import httpx
import msgspec

from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .models import PullRequestCommit, PullRequestRaw

_COMMITS_PER_PAGE = 100
_TOKEN_ENV_VARS = ("FORKWATCH_GITHUB_TOKEN", "GITHUB_TOKEN")

_T = typ.TypeVar("_T")


class PullRequestClient(typ.Protocol):
    """Remote queries the correlator needs."""

    async def list_closed_pull_requests(
        self, owner: str, repo: str, *, base: str, per_page: int
    ) -> list[PullRequestRaw]:
        """Return one page of closed pull requests into ``base``."""
        ...

    async def list_pull_request_commits(
        self, owner: str, repo: str, number: int
    ) -> list[str]:
        """Return the full hashes of the commits in pull request ``number``."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubRestConfig:
    """Configuration for the GitHub REST API client.

    ``token`` is optional; anonymous requests work for public repositories
    within GitHub's unauthenticated rate limit.
    """

    token: str | None = None
    endpoint: str = "https://api.github.com"
    timeout_s: float = 20.0
    user_agent: str = "forkwatch/0.1"
    api_version: str = "2022-11-28"

    @classmethod
    def from_env(cls) -> GitHubRestConfig:
        """Build configuration from ``FORKWATCH_GITHUB_TOKEN`` or ``GITHUB_TOKEN``."""
        for name in _TOKEN_ENV_VARS:
            token = os.environ.get(name, "").strip()
            if token:
                return cls(token=token)
        return cls()

    def headers(self) -> dict[str, str]:
        """Return the default request headers."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.api_version,
            "User-Agent": self.user_agent,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers


class GitHubRestClient:
    """``httpx`` implementation of :class:`PullRequestClient`.

    Each query issues exactly one request; failures are not retried.
    """

    def __init__(
        self,
        config: GitHubRestConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with the provided API configuration."""
        if config.token is not None and not config.token.strip():
            raise GitHubConfigError.empty_token()

        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s,
            headers=config.headers(),
            follow_redirects=True,
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def list_closed_pull_requests(
        self, owner: str, repo: str, *, base: str, per_page: int
    ) -> list[PullRequestRaw]:
        """Return closed pull requests into ``base``, most recently updated first.

        Closed pull requests include merged and declined ones alike.
        """
        return await self._get(
            f"/repos/{owner}/{repo}/pulls",
            {
                "state": "closed",
                "base": base,
                "per_page": per_page,
                "sort": "updated",
                "direction": "desc",
            },
            list[PullRequestRaw],
        )

    async def list_pull_request_commits(
        self, owner: str, repo: str, number: int
    ) -> list[str]:
        """Return the full hashes of the commits in pull request ``number``."""
        commits = await self._get(
            f"/repos/{owner}/{repo}/pulls/{number}/commits",
            {"per_page": _COMMITS_PER_PAGE},
            list[PullRequestCommit],
        )
        return [commit.sha for commit in commits]

    async def _get(
        self, path: str, params: dict[str, typ.Any], response_type: type[_T]
    ) -> _T:
        """Issue a GET request and decode the JSON body as ``response_type``."""
        url = f"{self._config.endpoint.rstrip('/')}{path}"
        try:
            response = await self._client.get(
                url, params=params, headers=self._config.headers()
            )
        except httpx.RequestError as exc:
            raise GitHubAPIError.transport_error(path, exc) from exc
        if not response.is_success:
            raise GitHubAPIError.http_error(response.status_code, path)
        try:
            return msgspec.json.decode(response.content, type=response_type)
        except msgspec.DecodeError as exc:
            raise GitHubResponseShapeError.invalid_payload(path, str(exc)) from exc
