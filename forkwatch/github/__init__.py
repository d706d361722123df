"""GitHub pull-request retrieval and correlation with local history."""

from __future__ import annotations

from .client import GitHubRestClient, GitHubRestConfig, PullRequestClient
from .correlator import PullRequestCorrelator, match_merge_records
from .errors import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubResponseShapeError,
    UnsupportedRemoteError,
)
from .models import GitHubRemote, PullRequest, PullRequestRaw
from .observability import ErrorCategory, categorize_error
from .remote import parse_remote_url

__all__ = [
    "ErrorCategory",
    "GitHubAPIError",
    "GitHubConfigError",
    "GitHubRemote",
    "GitHubResponseShapeError",
    "GitHubRestClient",
    "GitHubRestConfig",
    "PullRequest",
    "PullRequestClient",
    "PullRequestCorrelator",
    "PullRequestRaw",
    "UnsupportedRemoteError",
    "categorize_error",
    "match_merge_records",
    "parse_remote_url",
]
