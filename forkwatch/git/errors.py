"""Errors raised by the git command gateway."""

from __future__ import annotations


class GitError(Exception):
    """Base class for git gateway errors."""


class GitNotFoundError(GitError):
    """Raised when the git executable cannot be found."""

    def __init__(self, executable: str = "git") -> None:
        """Initialise with the executable that could not be started."""
        self.executable = executable
        super().__init__(f"{executable} not found - is git installed?")


class NotAGitRepositoryError(GitError):
    """Raised when the target path is not inside a git repository."""

    def __init__(self, path: str) -> None:
        """Initialise with the offending path."""
        self.path = path
        super().__init__(f"not a git repository: {path}")


class GitCommandError(GitError):
    """Raised when git exits with a non-zero status."""

    def __init__(self, stderr: str, *, exit_code: int | None = None) -> None:
        """Initialise with git's diagnostic output and exit code."""
        self.stderr = stderr
        self.exit_code = exit_code
        super().__init__(f"git command failed: {stderr.strip()}")

    @classmethod
    def from_os_error(cls, exc: OSError) -> GitCommandError:
        """Return an error for a process that could not be spawned."""
        return cls(str(exc))


class GitOutputEncodingError(GitError):
    """Raised when git output is not valid UTF-8."""

    def __init__(self) -> None:
        """Initialise with a fixed message."""
        super().__init__("invalid utf-8 in git output")


class InvalidRepositoryPathError(GitError):
    """Raised when a repository path cannot be passed to git."""

    def __init__(self, path: str) -> None:
        """Initialise with a printable rendition of the path."""
        self.path = path
        super().__init__(f"path contains invalid characters: {path}")
