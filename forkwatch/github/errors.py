"""GitHub remote errors."""

from __future__ import annotations


class GitHubAPIError(RuntimeError):
    """Raised when a GitHub request fails or returns an error status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int, path: str) -> GitHubAPIError:
        """Return an error for non-2xx HTTP responses."""
        return cls(f"GitHub REST HTTP {status_code} for {path}", status_code=status_code)

    @classmethod
    def transport_error(cls, path: str, exc: BaseException) -> GitHubAPIError:
        """Return an error for requests that never produced a response."""
        return cls(f"GitHub REST request to {path} failed: {exc}")


class GitHubResponseShapeError(RuntimeError):
    """Raised when a GitHub response body does not have the expected shape."""

    @classmethod
    def invalid_payload(cls, path: str, detail: str) -> GitHubResponseShapeError:
        """Return an error for an undecodable or mistyped response body."""
        return cls(f"Failed to parse GitHub response from {path}: {detail}")


class GitHubConfigError(RuntimeError):
    """Raised when GitHub client configuration is invalid."""

    @classmethod
    def empty_token(cls) -> GitHubConfigError:
        """Return an error when an explicitly provided token is blank."""
        return cls("GitHub token must be non-empty when provided")


class UnsupportedRemoteError(ValueError):
    """Raised when a git remote URL does not point at a GitHub repository."""

    def __init__(self, url: str) -> None:
        """Initialise with the rejected URL."""
        self.url = url
        super().__init__(f"Could not parse GitHub info from remote URL: {url}")
