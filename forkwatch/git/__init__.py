"""Local git analysis: branch divergence and merge-commit discovery."""

from __future__ import annotations

from .divergence import (
    BranchDivergenceAnalyzer,
    classify_branch_status,
    select_default_branch,
)
from .errors import (
    GitCommandError,
    GitError,
    GitNotFoundError,
    GitOutputEncodingError,
    InvalidRepositoryPathError,
    NotAGitRepositoryError,
)
from .gateway import CommitSummary, GitCommandGateway, GitGateway, MergeHistoryEntry
from .merges import MergeCommitExtractor, parse_pull_request_reference
from .models import Branch, BranchStatus, MergeNodePage, MergeRecord, RepoInfo

__all__ = [
    "Branch",
    "BranchDivergenceAnalyzer",
    "BranchStatus",
    "CommitSummary",
    "GitCommandError",
    "GitCommandGateway",
    "GitError",
    "GitGateway",
    "GitNotFoundError",
    "GitOutputEncodingError",
    "InvalidRepositoryPathError",
    "MergeCommitExtractor",
    "MergeHistoryEntry",
    "MergeNodePage",
    "MergeRecord",
    "NotAGitRepositoryError",
    "RepoInfo",
    "classify_branch_status",
    "parse_pull_request_reference",
    "select_default_branch",
]
