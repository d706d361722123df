"""Command gateway between the analyzers and the git executable.

Everything that depends on git's command-line syntax or on the layout of its
text output lives here. The analyzers only see :class:`GitGateway`, so tests
can substitute an in-memory implementation without spawning processes.
"""

from __future__ import annotations

import dataclasses
import subprocess
import typing as typ
from pathlib import Path

from .errors import (
    GitCommandError,
    GitError,
    GitNotFoundError,
    GitOutputEncodingError,
    InvalidRepositoryPathError,
    NotAGitRepositoryError,
)

_REMOTE_HEAD_REF = "refs/remotes/origin/HEAD"
_REMOTE_HEAD_PREFIX = "refs/remotes/origin/"
_NOT_A_REPO_MARKER = "not a git repository"
_FIELD_SEPARATOR = "|"
_LAST_COMMIT_FORMAT = "--format=%H|%an|%aI"
_MERGE_HISTORY_FORMAT = "--format=%H|%h|%s|%aI"
_UNKNOWN_AUTHOR = "Unknown"
# `git merge-base` exits 1 without diagnostics when histories are disjoint.
_NO_MERGE_BASE_EXIT_CODE = 1


@dataclasses.dataclass(frozen=True, slots=True)
class CommitSummary:
    """Hash, author name and ISO-8601 author date of a single commit."""

    sha: str
    author: str
    date: str


@dataclasses.dataclass(frozen=True, slots=True)
class MergeHistoryEntry:
    """One merge commit from ``git log --merges``."""

    full_sha: str
    short_sha: str
    subject: str
    date: str


RepoPath = str | Path


class GitGateway(typ.Protocol):
    """Queries the analyzers issue against a local repository."""

    def symbolic_remote_head(self, repo: RepoPath) -> str | None:
        """Return the branch ``origin/HEAD`` points at, or ``None``."""
        ...

    def ref_exists(self, repo: RepoPath, ref: str) -> bool:
        """Return whether ``ref`` resolves to an object."""
        ...

    def list_local_branch_names(self, repo: RepoPath) -> list[str]:
        """Return the short names of all local branches."""
        ...

    def revision_range(self, repo: RepoPath, base: str, branch: str) -> tuple[int, int]:
        """Return ``(behind, ahead)`` counts for ``base...branch``."""
        ...

    def last_commit(self, repo: RepoPath, ref: str) -> CommitSummary:
        """Return the commit ``ref`` points at."""
        ...

    def common_ancestor(self, repo: RepoPath, a: str, b: str) -> str | None:
        """Return the best common ancestor of ``a`` and ``b``, if any."""
        ...

    def merge_history(
        self, repo: RepoPath, branch: str, *, skip: int, limit: int
    ) -> list[MergeHistoryEntry]:
        """Return up to ``limit`` merge commits on ``branch``, newest first."""
        ...

    def resolve_repository_root(self, repo: RepoPath) -> str:
        """Return the absolute path of the repository's working tree root."""
        ...

    def remote_url(self, repo: RepoPath, remote_name: str = "origin") -> str:
        """Return the fetch URL configured for ``remote_name``."""
        ...


def _parse_count(parts: list[str], index: int) -> int:
    try:
        value = int(parts[index])
    except (IndexError, ValueError):
        return 0
    return max(value, 0)


def _parse_commit_summary(line: str) -> CommitSummary:
    parts = line.split(_FIELD_SEPARATOR)
    sha = parts[0]
    if len(parts) >= 3:  # noqa: PLR2004 - hash|author|date
        # Author names may contain the separator; the date never does.
        author = _FIELD_SEPARATOR.join(parts[1:-1])
        return CommitSummary(sha=sha, author=author, date=parts[-1])
    if len(parts) == 2:  # noqa: PLR2004
        return CommitSummary(sha=sha, author=parts[1], date="")
    return CommitSummary(sha=sha, author=_UNKNOWN_AUTHOR, date="")


def _parse_merge_history_line(line: str) -> MergeHistoryEntry | None:
    full_sha, _, rest = line.partition(_FIELD_SEPARATOR)
    short_sha, _, rest = rest.partition(_FIELD_SEPARATOR)
    subject, sep, date = rest.rpartition(_FIELD_SEPARATOR)
    if not sep or not full_sha or not short_sha:
        return None
    return MergeHistoryEntry(
        full_sha=full_sha, short_sha=short_sha, subject=subject, date=date
    )


class GitCommandGateway:
    """:class:`GitGateway` backed by the ``git`` command-line tool."""

    def __init__(self, executable: str = "git") -> None:
        """Initialise with the git executable to invoke."""
        self._executable = executable

    def _repo_arg(self, repo: RepoPath) -> str:
        text = str(repo)
        if "\x00" in text:
            raise InvalidRepositoryPathError(text.replace("\x00", "\\0"))
        try:
            text.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise InvalidRepositoryPathError(
                text.encode("utf-8", "backslashreplace").decode("utf-8")
            ) from exc
        return text

    def _invoke(
        self, repo: RepoPath, *args: str
    ) -> subprocess.CompletedProcess[bytes]:
        repo_arg = self._repo_arg(repo)
        try:
            return subprocess.run(  # noqa: S603 - arguments are never shell-parsed
                [self._executable, "-C", repo_arg, *args],
                capture_output=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise GitNotFoundError(self._executable) from exc
        except OSError as exc:
            raise GitCommandError.from_os_error(exc) from exc

    def _check(
        self, repo: RepoPath, result: subprocess.CompletedProcess[bytes]
    ) -> str:
        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace")
            if _NOT_A_REPO_MARKER in stderr:
                raise NotAGitRepositoryError(str(repo))
            raise GitCommandError(stderr, exit_code=result.returncode)
        try:
            return result.stdout.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise GitOutputEncodingError from exc

    def run(self, repo: RepoPath, *args: str) -> str:
        """Run ``git -C repo <args>`` and return its standard output.

        Raises
        ------
        GitNotFoundError
            If the git executable cannot be started.
        NotAGitRepositoryError
            If git reports that ``repo`` is not a repository.
        GitCommandError
            For any other non-zero exit.
        GitOutputEncodingError
            If the output is not valid UTF-8.

        """
        return self._check(repo, self._invoke(repo, *args))

    def symbolic_remote_head(self, repo: RepoPath) -> str | None:
        """Return the branch ``origin/HEAD`` points at, or ``None``."""
        try:
            output = self.run(repo, "symbolic-ref", _REMOTE_HEAD_REF)
        except GitError:
            return None
        ref = output.strip()
        if not ref.startswith(_REMOTE_HEAD_PREFIX):
            return None
        return ref.removeprefix(_REMOTE_HEAD_PREFIX) or None

    def ref_exists(self, repo: RepoPath, ref: str) -> bool:
        """Return whether ``ref`` resolves to an object."""
        try:
            self.run(repo, "rev-parse", "--verify", "--quiet", ref)
        except GitError:
            return False
        return True

    def list_local_branch_names(self, repo: RepoPath) -> list[str]:
        """Return the short names of all local branches."""
        output = self.run(repo, "branch", "--format=%(refname:short)")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def revision_range(self, repo: RepoPath, base: str, branch: str) -> tuple[int, int]:
        """Return ``(behind, ahead)`` for ``base...branch``.

        ``--left-right --count`` prints the left (base) side first, so the
        first number is how far the branch is behind. Missing or garbled
        counts read as zero.
        """
        output = self.run(
            repo, "rev-list", "--left-right", "--count", f"{base}...{branch}"
        )
        parts = output.split()
        return (_parse_count(parts, 0), _parse_count(parts, 1))

    def last_commit(self, repo: RepoPath, ref: str) -> CommitSummary:
        """Return the hash, author and author date of ``ref``."""
        output = self.run(repo, "log", "-1", _LAST_COMMIT_FORMAT, ref)
        return _parse_commit_summary(output.strip())

    def common_ancestor(self, repo: RepoPath, a: str, b: str) -> str | None:
        """Return ``git merge-base a b``, or ``None`` for disjoint histories."""
        result = self._invoke(repo, "merge-base", a, b)
        if (
            result.returncode == _NO_MERGE_BASE_EXIT_CODE
            and not result.stderr.strip()
        ):
            return None
        sha = self._check(repo, result).strip()
        return sha or None

    def merge_history(
        self, repo: RepoPath, branch: str, *, skip: int, limit: int
    ) -> list[MergeHistoryEntry]:
        """Return up to ``limit`` merge commits on ``branch`` after ``skip``.

        Lines that do not carry all four fields are dropped.
        """
        output = self.run(
            repo,
            "log",
            "--merges",
            f"--max-count={limit}",
            f"--skip={skip}",
            _MERGE_HISTORY_FORMAT,
            branch,
        )
        entries: list[MergeHistoryEntry] = []
        for line in output.splitlines():
            if not line:
                continue
            entry = _parse_merge_history_line(line)
            if entry is not None:
                entries.append(entry)
        return entries

    def resolve_repository_root(self, repo: RepoPath) -> str:
        """Return ``git rev-parse --show-toplevel`` for ``repo``."""
        return self.run(repo, "rev-parse", "--show-toplevel").strip()

    def remote_url(self, repo: RepoPath, remote_name: str = "origin") -> str:
        """Return ``git remote get-url <remote_name>``."""
        return self.run(repo, "remote", "get-url", remote_name).strip()
